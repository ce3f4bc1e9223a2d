"""
Content exporter.

Copies item payloads out of a source configuration into a package folder
and writes manifest.json describing every reference by name.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from cxfer.exceptions import ContentTransferError
from cxfer.logging import get_logger, log_transaction
from cxfer.models.manifest import ContentPackage
from cxfer.runtime.base import ConfigurationRuntime
from cxfer.utils.export import FileSaver, MetadataBuilder
from cxfer.utils.filesystem import copy_payload_with_thumbnail, list_item_files

logger = get_logger("cxfer.commands.export.content_exporter")

ProgressCallback = Callable[[int, int, str], None]
PathLike = Union[str, Path]


@dataclass
class ExportResult:
    package: ContentPackage
    manifest_path: Path
    failures: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def exported_count(self) -> int:
        return len(self.package.items)


def collect_item_paths(paths: Iterable[PathLike], recursive: bool = False) -> List[Path]:
    """
    Expand folders to their item payloads.

    Files are kept as given (even if they do not exist, so the export can
    report them). Order is preserved and repeats are dropped.
    """
    collected: List[Path] = []
    seen = set()
    for raw in paths:
        path = Path(raw).expanduser()
        candidates = list_item_files(path, recursive) if path.is_dir() else [path]
        for candidate in candidates:
            key = str(candidate.resolve()) if candidate.exists() else str(candidate)
            if key not in seen:
                seen.add(key)
                collected.append(candidate)
    return collected


class ContentExporter:
    """Exports items from a source configuration into a package folder"""

    def __init__(
        self,
        runtime: ConfigurationRuntime,
        progress: Optional[ProgressCallback] = None,
        exported_by: Optional[str] = None,
    ):
        self.runtime = runtime
        self.progress = progress
        self.exported_by = exported_by

    def export_items(self, item_paths: Iterable[PathLike], output_folder: PathLike) -> ExportResult:
        """
        Export items in the given order.

        Items that cannot be found, loaded or copied are left out of the
        manifest and listed in ``failures``; the rest are still exported.

        Raises:
            ExportError: If the output folder cannot be created or written
        """
        paths = [Path(p) for p in item_paths]
        folder = FileSaver.prepare_output_folder(Path(output_folder).expanduser())

        configuration_name = MetadataBuilder.detect_configuration_name(self.runtime)
        exported_by = MetadataBuilder.detect_exported_by(self.exported_by)
        exported_at = MetadataBuilder.export_timestamp()
        items_root = self.runtime.items_root

        logger.info(
            f"Exporting {len(paths)} items from '{configuration_name}' to {folder}"
        )

        items = []
        failures: List[Tuple[str, str]] = []
        # Package payloads share one folder, keyed by file name
        written: Dict[str, Path] = {}
        for position, path in enumerate(paths, start=1):
            try:
                if not path.is_file():
                    raise FileNotFoundError(f"File not found: {path}")
                earlier = written.get(path.name.lower())
                if earlier is not None:
                    raise ValueError(
                        f"Duplicate file name '{path.name}' (already exported from {earlier})"
                    )
                item = self.runtime.load_item(path)
                exported = MetadataBuilder.build_item(path, item, items_root)
                copy_payload_with_thumbnail(path, folder)
            except (ContentTransferError, OSError, ValueError) as e:
                logger.warning(f"Skipping {path.name}: {e}")
                failures.append((str(path), str(e)))
            else:
                items.append(exported)
                written[path.name.lower()] = path
                log_transaction(
                    "export item",
                    {"file": path.name, "references": exported.references.to_dict()},
                )
            self._report(position, len(paths), path.name)

        package = ContentPackage(
            configuration_name=configuration_name,
            exported_by=exported_by,
            exported_at=exported_at,
            items=tuple(items),
        )
        manifest_path = FileSaver.save_manifest(package, folder)

        logger.info(
            f"Exported {len(items)} items to {manifest_path} ({len(failures)} skipped)"
        )
        return ExportResult(package=package, manifest_path=manifest_path, failures=failures)

    def _report(self, current: int, total: int, message: str) -> None:
        if self.progress is None:
            return
        try:
            self.progress(current, total, message)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")
