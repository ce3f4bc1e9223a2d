"""
Item import commands.

This module provides 'cxfer import preview' and 'cxfer import items'.
"""

import json
import signal
from pathlib import Path
from typing import List, Optional

import typer
from tqdm import tqdm

from cxfer.constants import (
    DUPLICATE_PREVIEW_LIMIT,
    ERROR_PREVIEW_LIMIT,
    WARNING_PREVIEW_LIMIT,
)
from cxfer.exceptions import ContentTransferError, EmptyPackageError, PackageNotFoundError
from cxfer.logging import log_application_event
from cxfer.models.lookups import NameMatchPolicy
from cxfer.models.manifest import ContentPackage
from cxfer.models.resolution import (
    BatchStatus,
    DuplicateConflict,
    ImportSummary,
    OverrideSelections,
    ResolutionReport,
    ResolutionStatus,
)
from cxfer.runtime.file_runtime import FileConfigurationRuntime
from cxfer.utils.console import (
    console,
    create_table,
    display_capped,
    display_package_header,
    error,
    info,
    resolution_label,
    success,
    warning,
)
from cxfer.utils.imports import (
    DuplicateChecker,
    OverrideResolver,
    PackageLoader,
    ReferenceValidator,
    ResultAggregator,
)
from ..shared.base_command import BaseCommand
from ..shared.cli_options import CommonOptions, parse_index_list
from .content_importer import ContentImporter

class ItemsImportCommand(BaseCommand):
    """Validates and imports a content package into a configuration"""

    def __init__(self, config_store=None):
        super().__init__(config_store)
        self._cancel_requested = False

    def get_item_type(self) -> str:
        return "items"

    # ==================== Shared steps ====================

    def load_package(self, package_dir: str) -> ContentPackage:
        try:
            return PackageLoader.load_package(package_dir)
        except (PackageNotFoundError, EmptyPackageError, ValueError) as e:
            self.logger.error(f"Failed to load package {package_dir}: {e}")
            error(str(e))
            raise typer.Exit(1)

    def validate(
        self,
        package: ContentPackage,
        runtime: FileConfigurationRuntime,
        policy: NameMatchPolicy,
    ) -> ResolutionReport:
        snapshot = runtime.snapshot()
        return ReferenceValidator(policy).validate(package, snapshot)

    def target_folder(self, runtime: FileConfigurationRuntime, target: Optional[str]) -> Path:
        if target:
            return Path(target).expanduser()
        return runtime.items_root or runtime.root

    def load_selections(
        self,
        overrides: Optional[List[str]],
        overrides_file: Optional[str],
    ) -> OverrideSelections:
        """Overrides from --overrides-file, then --override (which wins)"""
        selections = OverrideSelections()
        try:
            if overrides_file:
                with open(overrides_file, "r", encoding="utf-8") as f:
                    selections = OverrideSelections.from_mapping(json.load(f))
            if overrides:
                selections = selections.merge(OverrideSelections.parse(overrides))
        except (OSError, ValueError) as e:
            error(f"Invalid overrides: {e}")
            raise typer.Exit(1)
        return selections

    # ==================== Preview ====================

    def preview(
        self,
        package_dir: str,
        target: Optional[str] = None,
        config_name: Optional[str] = None,
        config_path: Optional[str] = None,
        ignore_case: bool = False,
        overrides: Optional[List[str]] = None,
        overrides_file: Optional[str] = None,
    ) -> ResolutionReport:
        """Show what an import would do, without touching the target"""
        package = self.load_package(package_dir)
        runtime = self.open_runtime(config_name, config_path)
        report = self.validate(package, runtime, self.name_match_policy(ignore_case))

        selections = self.load_selections(overrides, overrides_file)
        if len(selections):
            outcome = OverrideResolver.apply(report, selections)
            report = outcome.report
            for ignored in outcome.ignored:
                warning(
                    f"Override for item {ignored.item_index} "
                    f"{ignored.category.override_key} ignored: {ignored.reason}"
                )

        display_package_header(package)
        self.display_report(package, report)
        self.display_choices(report, runtime)

        missing = PackageLoader.missing_payloads(package, package_dir)
        for name in missing:
            warning(f"Payload missing from package folder: {name}")

        target_folder = self.target_folder(runtime, target)
        conflicts = DuplicateChecker.check(package, target_folder, runtime)
        self.display_conflicts(conflicts)
        if not conflicts:
            info(f"No duplicate databaseIds in {target_folder}")

        return report

    def display_report(self, package: ContentPackage, report: ResolutionReport) -> None:
        table = create_table(
            "References", ["#", "Item", "Reference", "Name", "Status", "Applied"]
        )
        for index, item in enumerate(package.items):
            entries = report.entries_for(index)
            if not entries:
                table.add_row(str(index), item.file_name, "-", "-", "no references", "")
                continue
            for entry in entries:
                applied = entry.applied_name or ""
                if applied == entry.original_name:
                    applied = ""
                table.add_row(
                    str(index),
                    item.file_name,
                    entry.category.label,
                    entry.original_name,
                    resolution_label(entry.status, entry.overridable),
                    applied,
                )
        console.print(table)

        counts = report.counts()
        info(
            f"{counts[ResolutionStatus.RESOLVED]} resolved, "
            f"{counts[ResolutionStatus.OVERRIDDEN]} overridden, "
            f"{counts[ResolutionStatus.UNRESOLVED]} unresolved"
        )

    def display_conflicts(self, conflicts: List[DuplicateConflict]) -> None:
        if not conflicts:
            return
        limit = self.setting("duplicate_preview_limit") or DUPLICATE_PREVIEW_LIMIT
        warning(f"{len(conflicts)} item(s) already exist in the target folder:")
        display_capped(
            [
                f"{c.import_file_name} (databaseId {c.database_id}) matches {c.existing_file_path}"
                for c in conflicts
            ],
            limit,
        )

    def display_unresolved(self, report: ResolutionReport) -> None:
        unresolved = report.unresolved()
        limit = self.setting("warning_preview_limit") or WARNING_PREVIEW_LIMIT
        warning(f"{len(unresolved)} reference(s) do not resolve in the target configuration")
        display_capped([ReferenceValidator.describe(entry) for entry in unresolved], limit)

    def display_choices(
        self, report: ResolutionReport, runtime: FileConfigurationRuntime
    ) -> None:
        """List the target's names for categories that still need an override"""
        categories = []
        for entry in report.overridable_unresolved():
            if entry.category not in categories:
                categories.append(entry.category)
        if not categories:
            return

        snapshot = runtime.snapshot()
        for category in categories:
            names = snapshot.sorted_names(category)
            info(
                f"Available {category.label} names: "
                f"{', '.join(names) if names else '(none)'}"
            )

    # ==================== Import ====================

    def run(
        self,
        package_dir: str,
        target: Optional[str] = None,
        select: Optional[str] = None,
        overrides: Optional[List[str]] = None,
        overrides_file: Optional[str] = None,
        yes: bool = False,
        strict: bool = False,
        config_name: Optional[str] = None,
        config_path: Optional[str] = None,
        ignore_case: bool = False,
    ) -> ImportSummary:
        package = self.load_package(package_dir)
        runtime = self.open_runtime(config_name, config_path)
        report = self.validate(package, runtime, self.name_match_policy(ignore_case))

        selections = self.load_selections(overrides, overrides_file)
        outcome = OverrideResolver.apply(report, selections)
        for ignored in outcome.ignored:
            warning(
                f"Override for item {ignored.item_index} "
                f"{ignored.category.override_key} ignored: {ignored.reason}"
            )
        report = outcome.report

        indices = parse_index_list(select) if select else None
        target_folder = self.target_folder(runtime, target)

        for name in PackageLoader.missing_payloads(package, package_dir):
            warning(f"Payload missing from package folder: {name}")

        if report.has_unresolved:
            self.display_unresolved(report)

        conflicts = DuplicateChecker.check(package, target_folder, runtime, indices)
        if conflicts:
            self.display_conflicts(conflicts)
            if not yes and not typer.confirm("Continue and overwrite/duplicate these items?"):
                info("Import cancelled")
                raise typer.Exit(1)

        summary = self.execute(package, package_dir, report, target_folder, indices, runtime, strict)
        self.print_summary(summary)
        return summary

    def execute(
        self,
        package: ContentPackage,
        package_dir: str,
        report: ResolutionReport,
        target_folder: Path,
        indices: Optional[List[int]],
        runtime: FileConfigurationRuntime,
        strict: bool,
    ) -> ImportSummary:
        """Run the batch with a progress bar; Ctrl+C stops before the next item"""
        total = len(indices) if indices is not None else len(package.items)
        info(f"Importing {total} {self.get_item_type()} into {target_folder}...")

        self._cancel_requested = False
        previous_handler = signal.signal(signal.SIGINT, self._request_cancel)
        try:
            with tqdm(
                total=total,
                desc="📥 Importing",
                bar_format="{l_bar}{bar:40}{r_bar}{bar:-40b}",
                colour="green",
                ncols=100,
                leave=True,
            ) as pbar:

                def progress(current: int, count: int, message: str) -> None:
                    pbar.set_description(f"📥 {message}")
                    pbar.update(1)

                importer = ContentImporter(
                    runtime,
                    progress=progress,
                    cancel=lambda: self._cancel_requested,
                    strict=strict,
                )
                batch = importer.import_items(
                    package, package_dir, report, target_folder, indices
                )
        except (ContentTransferError, OSError) as e:
            self.logger.error(f"Import failed: {e}")
            error(f"Import failed: {e}")
            raise typer.Exit(1)
        finally:
            signal.signal(signal.SIGINT, previous_handler)

        error_limit = self.setting("error_preview_limit") or ERROR_PREVIEW_LIMIT
        summary = ResultAggregator.aggregate(batch, error_limit)
        log_application_event(
            f"import {summary.status.value}",
            level="warning" if summary.failure_count else "info",
            details={
                "target": str(target_folder),
                "succeeded": summary.success_count,
                "failed": summary.failure_count,
            },
        )
        return summary

    def _request_cancel(self, signum, frame) -> None:
        self._cancel_requested = True
        self.logger.warning("Cancellation requested")

    def print_summary(self, summary: ImportSummary) -> None:
        """Print the import summary and exit 1 on failures or cancellation"""
        item_type = self.get_item_type()

        if summary.success_count:
            success(f"Successfully imported {summary.success_count} {item_type}")
        if summary.failure_count:
            error(f"Failed to import {summary.failure_count} {item_type}")

        warning_limit = self.setting("warning_preview_limit") or WARNING_PREVIEW_LIMIT
        if summary.warnings:
            warning(f"{len(summary.warnings)} warning(s):")
            display_capped(
                summary.warning_preview(warning_limit),
                prefix="  • ",
                more=summary.hidden_warning_count(warning_limit),
            )

        if summary.errors:
            error(f"{summary.total_errors} error(s):")
            display_capped(summary.errors, prefix="  • ", more=summary.hidden_error_count)

        if summary.skipped_count and summary.status is BatchStatus.CANCELLED:
            warning(
                f"Import cancelled: {summary.skipped_count} selected {item_type} not processed"
            )

        if summary.failure_count or summary.status is BatchStatus.CANCELLED:
            raise typer.Exit(1)
        if summary.success_count == 0:
            warning(f"No {item_type} were imported")
            raise typer.Exit(1)


def create_preview_command():
    """Create the import preview command function"""

    def preview_import(
        package_dir: str = CommonOptions.package_folder(),
        target: Optional[str] = typer.Option(
            None, "--target", "-t",
            help="Target item folder for the duplicate check (default: configuration items)",
        ),
        overrides: Optional[List[str]] = typer.Option(
            None, "--override",
            help="Replacement name as INDEX:CATEGORY=NAME (repeatable)",
        ),
        overrides_file: Optional[str] = typer.Option(
            None, "--overrides-file", help="JSON file of overrides keyed by item index"
        ),
        config_name: Optional[str] = CommonOptions.config_name(),
        config_path: Optional[str] = CommonOptions.config_path(),
        ignore_case: bool = CommonOptions.ignore_case(),
    ):
        """Show how a package's references resolve in a configuration"""
        command = ItemsImportCommand()
        command.preview(
            package_dir=package_dir,
            target=target,
            config_name=config_name,
            config_path=config_path,
            ignore_case=ignore_case,
            overrides=overrides,
            overrides_file=overrides_file,
        )

    return preview_import


def create_items_import_command():
    """Create the items import command function"""

    def import_items(
        package_dir: str = CommonOptions.package_folder(),
        target: Optional[str] = typer.Option(
            None, "--target", "-t",
            help="Folder to import items into (default: configuration items)",
        ),
        select: Optional[str] = typer.Option(
            None, "--select", "-s",
            help="Item indices to import, e.g. '0,2,5-7' (default: all)",
        ),
        overrides: Optional[List[str]] = typer.Option(
            None, "--override",
            help="Replacement name as INDEX:CATEGORY=NAME (repeatable, '-' to skip)",
        ),
        overrides_file: Optional[str] = typer.Option(
            None, "--overrides-file", help="JSON file of overrides keyed by item index"
        ),
        yes: bool = typer.Option(
            False, "--yes", "-y", help="Continue without asking when duplicates exist"
        ),
        strict: bool = typer.Option(
            False, "--strict",
            help="Only import items whose references all re-bind",
        ),
        config_name: Optional[str] = CommonOptions.config_name(),
        config_path: Optional[str] = CommonOptions.config_path(),
        ignore_case: bool = CommonOptions.ignore_case(),
    ):
        """Import a content package, re-binding references by name"""
        command = ItemsImportCommand()
        command.run(
            package_dir=package_dir,
            target=target,
            select=select,
            overrides=overrides,
            overrides_file=overrides_file,
            yes=yes,
            strict=strict,
            config_name=config_name,
            config_path=config_path,
            ignore_case=ignore_case,
        )

    return import_items
