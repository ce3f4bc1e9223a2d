"""
User settings display and update.
"""

from typing import Any, Dict

from cxfer.utils.config_store import DEFAULT_SETTINGS
from cxfer.utils.console import display_panel, warning


def display_configuration(name: str, configuration: Dict, active: bool) -> None:
    """Display one registered configuration"""
    if not configuration:
        warning(f"No configuration found named '{name}'")
        return

    lines = [
        f"path: {configuration.get('path')}",
        f"description: {configuration.get('description') or '-'}",
        f"active: {'yes' if active else 'no'}",
        f"created_at: {configuration.get('created_at', 'Unknown')}",
        f"updated_at: {configuration.get('updated_at', 'Unknown')}",
    ]
    display_panel("\n".join(lines), f"Configuration '{name}'", "blue")


def display_settings(settings: Dict[str, Any]) -> None:
    """Display user settings, marking values that differ from the defaults"""
    lines = []
    for key, default in DEFAULT_SETTINGS.items():
        value = settings.get(key, default)
        marker = "" if value == default else "  (custom)"
        lines.append(f"{key}: {value if value is not None else '-'}{marker}")
    display_panel("\n".join(lines), "Settings", "blue")
