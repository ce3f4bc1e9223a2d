"""
Package loader for import operations.

Reads a package folder's manifest into a ContentPackage.
"""

import json
from pathlib import Path
from typing import List, Optional, Union

from cxfer.constants import MANIFEST_FILE_NAME
from cxfer.exceptions import EmptyPackageError, ManifestFormatError, PackageNotFoundError
from cxfer.logging import get_logger
from cxfer.models.manifest import ContentPackage

logger = get_logger("cxfer.utils.imports.package_loader")


class PackageLoader:
    """Loads content packages from disk"""

    @staticmethod
    def load_package(folder: Union[str, Path]) -> ContentPackage:
        """
        Load and validate a package folder.

        Args:
            folder: Folder holding manifest.json and the item payloads

        Returns:
            The parsed package

        Raises:
            PackageNotFoundError: If there is no manifest in the folder
            EmptyPackageError: If the manifest lists no items
            ManifestFormatError: If the manifest is not valid JSON or has the wrong shape
        """
        folder = Path(folder).expanduser()
        manifest_path = folder / MANIFEST_FILE_NAME
        if not manifest_path.is_file():
            raise PackageNotFoundError(folder)

        try:
            with open(manifest_path, "r", encoding="utf-8-sig") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestFormatError(f"Invalid JSON format: {str(e)}")
        except OSError as e:
            raise ManifestFormatError(f"Cannot read {MANIFEST_FILE_NAME}: {str(e)}")

        package = ContentPackage.from_dict(data)
        if package.is_empty:
            raise EmptyPackageError(folder)

        logger.info(
            f"Loaded package from {folder}: {len(package.items)} items exported from "
            f"'{package.configuration_name}' by {package.exported_by}"
        )
        return package

    @staticmethod
    def try_load(folder: Union[str, Path]) -> Optional[ContentPackage]:
        """Like load_package, but None when the folder holds no manifest"""
        try:
            return PackageLoader.load_package(folder)
        except PackageNotFoundError:
            return None

    @staticmethod
    def missing_payloads(package: ContentPackage, folder: Union[str, Path]) -> List[str]:
        """File names listed in the manifest whose payload is not in the folder"""
        folder = Path(folder)
        return [name for name in package.file_names() if not (folder / name).is_file()]
