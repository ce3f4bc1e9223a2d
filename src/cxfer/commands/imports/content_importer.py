"""
Content importer.

Copies package items into a target folder and re-binds every reference to
the target configuration's own entities, one item at a time. Problems with
one item (or one reference) are recorded on that item's result and never
stop the batch.
"""

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from cxfer.exceptions import ContentTransferError, ItemSaveError
from cxfer.logging import get_logger, log_transaction
from cxfer.models.manifest import ContentPackage, ExportedItem
from cxfer.models.references import ReferenceCategory
from cxfer.models.resolution import (
    BatchResult,
    BatchStatus,
    ItemImportResult,
    ResolutionReport,
    ResolutionStatus,
)
from cxfer.runtime.base import ConfigurationRuntime, ItemHandle, RebindOutcome
from cxfer.utils.filesystem import (
    copy_file,
    copy_payload_with_thumbnail,
    ensure_directory,
    thumbnail_path,
)

logger = get_logger("cxfer.commands.imports.content_importer")

ProgressCallback = Callable[[int, int, str], None]
CancelCheck = Callable[[], bool]
PathLike = Union[str, Path]


def unbound_warning(category: ReferenceCategory, name: str) -> str:
    return f"{category.label} '{name}' not found in target configuration; left unbound."


def service_warning(name: str) -> str:
    return f"Service '{name}' not found in target config (report-only, cannot re-assign)."


class ContentImporter:
    """
    Imports package items into a target folder of a configuration.

    Args:
        runtime: Target configuration runtime
        progress: Called after each item with (processed, selected, file name)
        cancel: Checked before each item; True stops the batch
        strict: Only save items whose references all re-bind. In strict mode
            nothing is written to the target folder for an item that fails.
    """

    def __init__(
        self,
        runtime: ConfigurationRuntime,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelCheck] = None,
        strict: bool = False,
    ):
        self.runtime = runtime
        self.progress = progress
        self.cancel = cancel
        self.strict = strict

    def import_items(
        self,
        package: ContentPackage,
        package_folder: PathLike,
        report: ResolutionReport,
        target_folder: PathLike,
        selected_indices: Optional[Iterable[int]] = None,
    ) -> BatchResult:
        """
        Import the selected items (all of them, in manifest order, when None).

        ``report`` should already carry the operator's overrides.
        """
        package_folder = Path(package_folder)
        target_folder = Path(target_folder)
        indices = (
            list(range(len(package.items)))
            if selected_indices is None
            else list(selected_indices)
        )
        batch = BatchResult(status=BatchStatus.COMPLETED, selected_count=len(indices))

        logger.info(
            f"Importing {len(indices)} items into {target_folder} "
            f"({'strict' if self.strict else 'best effort'})"
        )
        ensure_directory(target_folder)

        for position, index in enumerate(indices, start=1):
            if self._cancel_requested():
                batch.status = BatchStatus.CANCELLED
                logger.warning(
                    f"Import cancelled after {len(batch.results)} of {len(indices)} items"
                )
                break

            if not 0 <= index < len(package.items):
                result = ItemImportResult(file_name=f"#{index}")
                result.fail(
                    f"Invalid item index {index} (package has {len(package.items)} items)"
                )
            else:
                item = package.items[index]
                try:
                    result = self.import_item(index, item, package_folder, report, target_folder)
                except Exception as e:
                    logger.exception(f"Unexpected error importing {item.file_name}")
                    result = ItemImportResult(file_name=item.file_name)
                    result.fail(f"Unexpected error: {e}")

            batch.results.append(result.finish())
            self._log_result(result)
            self._report(position, len(indices), result.file_name)

        return batch

    def import_item(
        self,
        index: int,
        item: ExportedItem,
        package_folder: Path,
        report: ResolutionReport,
        target_folder: Path,
    ) -> ItemImportResult:
        """Import one package item"""
        result = ItemImportResult(file_name=item.file_name)
        source = package_folder / item.file_name
        destination = target_folder / item.file_name

        if not source.is_file():
            result.fail(f"Payload file '{item.file_name}' not found in package folder")
            return result

        if self.strict:
            # Stage from the package copy; the target is only written on commit
            handle = self._load(source, result)
        else:
            try:
                copy_payload_with_thumbnail(source, target_folder)
            except ContentTransferError as e:
                result.fail(f"Failed to copy item: {e}")
                return result
            handle = self._load(destination, result)
        if handle is None:
            return result

        service = report.get(index, ReferenceCategory.SERVICE)
        if service is not None and service.status is ResolutionStatus.UNRESOLVED:
            result.warn(service_warning(service.original_name))

        plan, skipped = self._plan_rebinds(index, item, report, result)
        if self.strict and skipped:
            result.fail(
                f"{len(skipped)} reference(s) would be left unbound; item not imported (strict)"
            )
            return result
        for category in skipped:
            self._unbind(handle, category, result)

        not_bound = self._rebind(handle, plan, result)
        if self.strict and not_bound:
            result.fail(
                f"{not_bound} reference(s) could not be re-bound; item not imported (strict)"
            )
            return result

        if self.strict:
            self._commit(handle, source, target_folder, item, result)
        else:
            self._save(handle, target_folder, item, result)
        return result

    def _load(self, path: Path, result: ItemImportResult) -> Optional[ItemHandle]:
        try:
            return self.runtime.load_item(path)
        except ContentTransferError as e:
            result.fail(f"Failed to load item: {e}")
            return None

    @staticmethod
    def _plan_rebinds(
        index: int,
        item: ExportedItem,
        report: ResolutionReport,
        result: ItemImportResult,
    ) -> Tuple[List[Tuple[ReferenceCategory, str]], List[ReferenceCategory]]:
        """
        Pick the name to bind for each rebindable reference.

        Override wins, then the resolved name. Anything else is left unbound
        with a warning.
        """
        plan = []
        skipped = []
        for category in ReferenceCategory.rebindable():
            original = item.references.get(category)
            if original is None:
                continue
            entry = report.get(index, category)
            name = entry.applied_name if entry is not None else None
            if name is None:
                result.warn(unbound_warning(category, original))
                skipped.append(category)
            else:
                plan.append((category, name))
        return plan, skipped

    def _rebind(
        self,
        handle: ItemHandle,
        plan: List[Tuple[ReferenceCategory, str]],
        result: ItemImportResult,
    ) -> int:
        """Apply the planned names. Returns how many could not be bound."""
        failed = 0
        for category, name in plan:
            try:
                outcome = handle.rebind(category, name)
            except Exception as e:
                result.warn(f"Failed to set {category.label} '{name}': {e}")
                self._unbind(handle, category, result)
                failed += 1
                continue
            if outcome is RebindOutcome.NOT_FOUND:
                result.warn(unbound_warning(category, name))
                self._unbind(handle, category, result)
                failed += 1
        return failed

    @staticmethod
    def _unbind(handle: ItemHandle, category: ReferenceCategory, result: ItemImportResult) -> None:
        try:
            handle.unbind(category)
        except Exception as e:
            result.warn(f"Failed to clear {category.label}: {e}")

    def _save(
        self,
        handle: ItemHandle,
        target_folder: Path,
        item: ExportedItem,
        result: ItemImportResult,
    ) -> None:
        """Save in place, falling back to save-as in the target folder"""
        try:
            handle.save()
            return
        except ItemSaveError as e:
            result.warn(f"Save failed ({e}); retrying with save-as")

        try:
            handle.save_as(target_folder, Path(item.file_name).stem)
        except ItemSaveError as e:
            result.fail(f"Failed to save item: {e}")

    def _commit(
        self,
        handle: ItemHandle,
        source: Path,
        target_folder: Path,
        item: ExportedItem,
        result: ItemImportResult,
    ) -> None:
        """Write a staged item into the target folder"""
        try:
            handle.save_as(target_folder, Path(item.file_name).stem)
        except ItemSaveError as e:
            result.fail(f"Failed to save item: {e}")
            return

        thumbnail = thumbnail_path(source)
        if thumbnail.is_file():
            try:
                copy_file(thumbnail, target_folder / thumbnail.name)
            except ContentTransferError as e:
                result.warn(f"Failed to copy thumbnail: {e}")

    def _cancel_requested(self) -> bool:
        if self.cancel is None:
            return False
        try:
            return bool(self.cancel())
        except Exception as e:
            logger.warning(f"Cancel check failed: {e}")
            return False

    def _report(self, current: int, total: int, message: str) -> None:
        if self.progress is None:
            return
        try:
            self.progress(current, total, message)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")

    @staticmethod
    def _log_result(result: ItemImportResult) -> None:
        if result.success:
            logger.info(f"Imported {result.file_name} ({len(result.warnings)} warnings)")
        else:
            logger.error(f"Failed to import {result.file_name}: {'; '.join(result.errors)}")
        for message in result.warnings:
            logger.warning(f"{result.file_name}: {message}")
        log_transaction(
            "import item",
            {"file": result.file_name, "success": result.success,
             "warnings": len(result.warnings), "errors": len(result.errors)},
        )
