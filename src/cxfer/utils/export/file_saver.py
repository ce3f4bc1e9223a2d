"""
Manifest writer for export operations.
"""

import json
import os
from pathlib import Path

from cxfer.constants import MANIFEST_FILE_NAME
from cxfer.exceptions import ExportError
from cxfer.models.manifest import ContentPackage
from cxfer.utils.filesystem import ensure_directory


class FileSaver:
    """Handles the package folder and its manifest"""

    @staticmethod
    def prepare_output_folder(output_folder: Path) -> Path:
        """
        Create the package folder and check it can be written to.

        Raises:
            ExportError: If the folder cannot be created or written
        """
        try:
            folder = ensure_directory(output_folder)
        except OSError as e:
            raise ExportError(f"Cannot create output folder '{output_folder}': {e}")
        if not folder.is_dir():
            raise ExportError(f"Output path '{output_folder}' is not a folder")
        if not os.access(folder, os.W_OK):
            raise ExportError(f"Output folder '{output_folder}' is not writable")
        return folder

    @staticmethod
    def save_manifest(package: ContentPackage, output_folder: Path) -> Path:
        """
        Write manifest.json (UTF-8, 2-space indent).

        Raises:
            ExportError: If the manifest cannot be written
        """
        manifest_path = Path(output_folder) / MANIFEST_FILE_NAME
        try:
            with open(manifest_path, "w", encoding="utf-8") as f:
                json.dump(package.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ExportError(f"Failed to write {MANIFEST_FILE_NAME}: {e}")
        return manifest_path
