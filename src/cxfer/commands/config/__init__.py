"""
Configuration management module.

- config_manager: typer commands for configurations and settings
- settings: display helpers

Usage:
    from cxfer.commands.config import app
"""

from .config_manager import app
from .settings import display_configuration, display_settings

__all__ = [
    "app",
    "display_configuration",
    "display_settings",
]
