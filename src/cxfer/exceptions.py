"""
Exception classes for content transfer.

Package-level failures are raised; item-level and field-level problems are
recorded on ItemImportResult instead and never cross the batch boundary.
"""

from pathlib import Path
from typing import Optional, Union


class ContentTransferError(Exception):
    """Base exception for all content transfer errors."""


class PackageNotFoundError(ContentTransferError):
    """No manifest.json in the chosen package folder."""

    def __init__(self, folder: Union[str, Path]):
        self.folder = str(folder)
        super().__init__(
            f"No manifest.json found in '{self.folder}'. "
            "Select a folder created by 'cxfer export items'."
        )


class EmptyPackageError(ContentTransferError):
    """The manifest exists but lists no items."""

    def __init__(self, folder: Union[str, Path]):
        self.folder = str(folder)
        super().__init__(f"The package in '{self.folder}' contains no items.")


class ManifestFormatError(ContentTransferError, ValueError):
    """The manifest could not be parsed into a package."""


class ExportError(ContentTransferError):
    """The export could not start (e.g. output folder is not writable)."""


class ConfigurationNotFoundError(ContentTransferError):
    """No configuration database at the given location."""


class RuntimeCapabilityError(ContentTransferError):
    """A call into a configuration runtime failed."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = str(path) if path is not None else None
        super().__init__(message)


class ItemLoadError(RuntimeCapabilityError):
    """An item payload could not be loaded through the runtime."""


class ItemSaveError(RuntimeCapabilityError):
    """A loaded item could not be saved through the runtime."""


class PayloadCopyError(RuntimeCapabilityError):
    """An item payload could not be copied."""
