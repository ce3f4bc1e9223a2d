"""
Duplicate identity checker for import operations.

Finds items in the target folder that already carry the databaseId of an
incoming item. Advisory only: the caller decides whether to continue.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from cxfer.exceptions import ItemLoadError
from cxfer.logging import get_logger
from cxfer.models.manifest import ContentPackage
from cxfer.models.resolution import DuplicateConflict
from cxfer.runtime.base import ConfigurationRuntime
from cxfer.utils.filesystem import list_item_files

logger = get_logger("cxfer.utils.imports.duplicate_checker")


class DuplicateChecker:
    """Detects databaseId collisions between a package and a target folder"""

    @staticmethod
    def check(
        package: ContentPackage,
        target_folder: Union[str, Path],
        runtime: ConfigurationRuntime,
        item_indices: Optional[Iterable[int]] = None,
    ) -> List[DuplicateConflict]:
        """
        One conflict per existing target file whose databaseId matches an
        incoming item. Ids compare case-insensitively.

        Args:
            package: Package being imported
            target_folder: Folder the items will be copied into
            runtime: Runtime used to read the existing items
            item_indices: Restrict the check to these package items
        """
        indices = range(len(package.items)) if item_indices is None else item_indices

        # Lower-cased id -> incoming file name (first item wins)
        incoming: Dict[str, str] = {}
        for index in indices:
            if not 0 <= index < len(package.items):
                continue
            item = package.items[index]
            if item.database_id and item.database_id.strip():
                incoming.setdefault(item.database_id.strip().lower(), item.file_name)

        if not incoming:
            return []

        conflicts = []
        for existing_path in list_item_files(target_folder):
            try:
                existing = runtime.load_item(existing_path)
            except ItemLoadError as e:
                logger.warning(f"Skipping unreadable item {existing_path.name}: {e}")
                continue

            existing_id = (existing.database_id or "").strip()
            match = incoming.get(existing_id.lower()) if existing_id else None
            if match:
                conflicts.append(
                    DuplicateConflict(
                        import_file_name=match,
                        database_id=existing_id,
                        existing_file_path=str(existing_path),
                    )
                )

        if conflicts:
            logger.warning(f"Found {len(conflicts)} duplicate databaseId conflicts in {target_folder}")
        return conflicts
