"""
Import commands module.

The importer engine lives in content_importer; CLI commands are registered
in manager.
"""

from .manager import app

__all__ = ["app"]
