"""
Metadata builder for export operations.

Builds the package header and the per-item manifest entries.
"""

import getpass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from cxfer.constants import UNKNOWN_CONFIGURATION_NAME
from cxfer.models.manifest import ExportedItem
from cxfer.runtime.base import ConfigurationRuntime, ItemHandle
from cxfer.utils.filesystem import relative_folder


class MetadataBuilder:
    """Builds manifest metadata for exported items"""

    @staticmethod
    def detect_exported_by(override: Optional[str] = None) -> str:
        """
        Operator name for the package header.

        Args:
            override: Explicit name (CLI option or settings)

        Returns:
            The override, else the OS user name
        """
        if override and override.strip():
            return override.strip()
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            # No passwd entry and no USER/LOGNAME variables
            return "unknown"

    @staticmethod
    def detect_configuration_name(runtime: ConfigurationRuntime) -> str:
        name = runtime.configuration_name
        return name or UNKNOWN_CONFIGURATION_NAME

    @staticmethod
    def export_timestamp() -> datetime:
        return datetime.now(timezone.utc).replace(microsecond=0)

    @staticmethod
    def build_item(path: Path, item: ItemHandle, items_root: Optional[Path]) -> ExportedItem:
        """
        Build the manifest entry for one loaded item.

        References are captured by name; the product list only for
        product-list items.
        """
        is_product_list = item.is_product_list
        return ExportedItem(
            file_name=path.name,
            source_folder=relative_folder(path, items_root),
            cid=item.cid,
            database_id=item.database_id,
            is_product_list=is_product_list,
            references=item.reference_names(),
            product_list=item.product_list if is_product_list else None,
        )
