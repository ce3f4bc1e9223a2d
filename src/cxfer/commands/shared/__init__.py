"""
Shared utilities for import and export commands.
"""

from .base_command import BaseCommand
from .cli_options import CommonOptions

__all__ = ["BaseCommand", "CommonOptions"]
