"""
Export commands module.

The exporter engine lives in content_exporter; CLI commands are registered
in manager.
"""

from .manager import app

__all__ = ["app"]
