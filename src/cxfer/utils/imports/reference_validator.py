"""
Reference validator for import operations.

Checks every named reference of a package against a target configuration's
lookup snapshot. Pure: nothing is copied, loaded or modified.
"""

from cxfer.logging import get_logger
from cxfer.models.lookups import LookupSnapshot, NameMatchPolicy
from cxfer.models.manifest import ContentPackage
from cxfer.models.resolution import ResolutionEntry, ResolutionReport, ResolutionStatus

logger = get_logger("cxfer.utils.imports.reference_validator")


class ReferenceValidator:
    """Resolves exported reference names against a lookup snapshot"""

    def __init__(self, policy: NameMatchPolicy = NameMatchPolicy.EXACT):
        self.policy = policy

    def validate(self, package: ContentPackage, snapshot: LookupSnapshot) -> ResolutionReport:
        """
        Build the resolution report for a package.

        Only references the item actually has appear in the report. The
        positional cid is never consulted.
        """
        entries = []
        for index, item in enumerate(package.items):
            for category, name in item.references.present():
                found = snapshot.find(category, name, self.policy)
                entries.append(
                    ResolutionEntry(
                        item_index=index,
                        file_name=item.file_name,
                        category=category,
                        original_name=name,
                        status=ResolutionStatus.RESOLVED if found else ResolutionStatus.UNRESOLVED,
                        resolved_name=found,
                    )
                )

        report = ResolutionReport(entries)
        counts = report.counts()
        logger.info(
            f"Validated {len(package.items)} items ({self.policy.value}): "
            f"{counts[ResolutionStatus.RESOLVED]} resolved, "
            f"{counts[ResolutionStatus.UNRESOLVED]} unresolved"
        )
        return report

    @staticmethod
    def describe(entry: ResolutionEntry) -> str:
        """Operator-facing text for one report entry"""
        label = entry.category.label
        if entry.status is ResolutionStatus.OVERRIDDEN:
            return (
                f"{entry.file_name}: {label} '{entry.original_name}' "
                f"will be replaced by '{entry.override_name}'"
            )
        if entry.status is ResolutionStatus.RESOLVED:
            if entry.resolved_name and entry.resolved_name != entry.original_name:
                return (
                    f"{entry.file_name}: {label} '{entry.original_name}' "
                    f"matches '{entry.resolved_name}'"
                )
            return f"{entry.file_name}: {label} '{entry.original_name}' found"
        if not entry.overridable:
            return (
                f"{entry.file_name}: {label} '{entry.original_name}' not found in target "
                "config (report-only, cannot re-assign)"
            )
        return f"{entry.file_name}: {label} '{entry.original_name}' not found in target config"
