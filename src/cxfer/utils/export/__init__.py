"""
Export utilities package.

Provides focused utility modules for export operations.
"""

from .metadata_builder import MetadataBuilder
from .file_saver import FileSaver

__all__ = [
    "MetadataBuilder",
    "FileSaver",
]
