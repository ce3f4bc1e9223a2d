"""
Override resolver for import operations.

Merges operator-chosen replacement names into a resolution report.
"""

from dataclasses import dataclass, field, replace
from typing import List, Tuple

from cxfer.logging import get_logger
from cxfer.models.references import ReferenceCategory
from cxfer.models.resolution import (
    SKIP,
    OverrideSelections,
    ResolutionReport,
    ResolutionStatus,
)

logger = get_logger("cxfer.utils.imports.override_resolver")


@dataclass
class IgnoredOverride:
    item_index: int
    category: ReferenceCategory
    name: str
    reason: str


@dataclass
class OverrideOutcome:
    """Merged report plus what happened to each selection"""

    report: ResolutionReport
    applied: List[Tuple[int, ReferenceCategory, str]] = field(default_factory=list)
    ignored: List[IgnoredOverride] = field(default_factory=list)


class OverrideResolver:
    """Applies override selections to unresolved report entries"""

    @staticmethod
    def apply(report: ResolutionReport, selections: OverrideSelections) -> OverrideOutcome:
        """
        Mark unresolved, overridable entries with a selection as OVERRIDDEN.

        SKIP selections leave their entry unresolved. Selections for
        resolved entries or for references the item does not have are
        ignored and reported back.
        """
        outcome = OverrideOutcome(report=report)

        for (index, category), name in selections.items():
            if name is SKIP:
                continue

            entry = outcome.report.get(index, category)
            if entry is None:
                outcome.ignored.append(
                    IgnoredOverride(index, category, name, "item has no such reference")
                )
                continue
            if entry.status is ResolutionStatus.RESOLVED:
                outcome.ignored.append(
                    IgnoredOverride(index, category, name, "reference already resolves")
                )
                continue
            if not entry.overridable:
                outcome.ignored.append(
                    IgnoredOverride(index, category, name, "reference is read-only")
                )
                continue

            outcome.report = outcome.report.with_entry(
                replace(entry, status=ResolutionStatus.OVERRIDDEN, override_name=name)
            )
            outcome.applied.append((index, category, name))

        for ignored in outcome.ignored:
            logger.info(
                f"Ignored override for item {ignored.item_index} "
                f"{ignored.category.override_key}='{ignored.name}': {ignored.reason}"
            )
        logger.debug(f"Applied {len(outcome.applied)} overrides")
        return outcome
