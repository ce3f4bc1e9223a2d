"""
Configuration runtimes.

The transfer logic is written against the abstract runtime in ``base``;
``file_runtime`` implements it over a configuration directory on disk.
"""

from .base import ConfigurationRuntime, ItemHandle, RebindOutcome
from .file_runtime import FileConfigurationRuntime, FileItemHandle

__all__ = [
    "ConfigurationRuntime",
    "ItemHandle",
    "RebindOutcome",
    "FileConfigurationRuntime",
    "FileItemHandle",
]
