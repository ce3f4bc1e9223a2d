import os
import json
import platform
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime
from cxfer.constants import (
    DEFAULT_NAME_MATCHING,
    DUPLICATE_PREVIEW_LIMIT,
    ERROR_PREVIEW_LIMIT,
    NAME_MATCHING_EXACT,
    NAME_MATCHING_IGNORE_CASE,
    WARNING_PREVIEW_LIMIT,
)

DEFAULT_SETTINGS: Dict[str, Any] = {
    "log_level": "INFO",
    "name_matching": DEFAULT_NAME_MATCHING,
    "warning_preview_limit": WARNING_PREVIEW_LIMIT,
    "error_preview_limit": ERROR_PREVIEW_LIMIT,
    "duplicate_preview_limit": DUPLICATE_PREVIEW_LIMIT,
    "exported_by": None,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
NAME_MATCHING_VALUES = (NAME_MATCHING_EXACT, NAME_MATCHING_IGNORE_CASE)


class ConfigStore:
    def __init__(self):
        self.base_dir = self._get_config_dir()
        self.configurations_file = self.base_dir / "configurations.json"
        self.current_configuration_file = self.base_dir / "current_configuration"
        self.settings_file = self.base_dir / "settings.json"
        self._ensure_config_dir()

    def _get_config_dir(self) -> Path:
        """Get platform-specific config directory"""
        system = platform.system()
        if system == "Windows":
            base_dir = os.environ.get("APPDATA", "")
            return Path(base_dir) / "cxfer"
        elif system == "Darwin":  # macOS
            return Path.home() / "Library" / "Application Support" / "cxfer"
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
            if xdg_config:
                return Path(xdg_config) / "cxfer"
            return Path.home() / ".cxfer"

    def _ensure_config_dir(self):
        """Ensure config directory exists"""
        os.makedirs(self.base_dir, exist_ok=True)

    # ==================== Registered configurations ====================

    def save_configuration(
        self, name: str, path: str, description: Optional[str] = None
    ) -> None:
        """Register (or update) a named configuration directory"""
        configurations = self.get_configurations()
        now = datetime.now().isoformat()
        existing = configurations.get(name, {})
        configurations[name] = {
            "name": name,
            "path": str(Path(path).expanduser().resolve()),
            "description": description or existing.get("description", ""),
            "created_at": existing.get("created_at", now),
            "updated_at": now,
        }

        with open(self.configurations_file, "w", encoding="utf-8") as f:
            json.dump(configurations, f, indent=2)

    def get_configurations(self) -> Dict:
        """Get all registered configurations"""
        if not self.configurations_file.exists():
            return {}
        try:
            with open(self.configurations_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            return {}

    def get_configuration(self, name: str) -> Optional[Dict]:
        """Get a single registered configuration"""
        return self.get_configurations().get(name)

    def delete_configuration(self, name: str) -> bool:
        """Remove a registered configuration. Returns False if unknown."""
        configurations = self.get_configurations()
        if name not in configurations:
            return False

        del configurations[name]
        with open(self.configurations_file, "w", encoding="utf-8") as f:
            json.dump(configurations, f, indent=2)

        if self.get_current_configuration() == name:
            self.current_configuration_file.unlink(missing_ok=True)
        return True

    def set_current_configuration(self, name: str) -> None:
        """Set current active configuration"""
        with open(self.current_configuration_file, "w", encoding="utf-8") as f:
            f.write(name)

    def get_current_configuration(self) -> Optional[str]:
        """Get current active configuration"""
        if not self.current_configuration_file.exists():
            return None
        try:
            with open(self.current_configuration_file, "r", encoding="utf-8") as f:
                return f.read().strip() or None
        except IOError:
            return None

    # ==================== Settings ====================

    def get_settings(self) -> Dict[str, Any]:
        """Get user settings merged over defaults"""
        settings = dict(DEFAULT_SETTINGS)
        if not self.settings_file.exists():
            return settings
        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (json.JSONDecodeError, IOError):
            return settings
        if isinstance(stored, dict):
            settings.update(stored)
        return settings

    def get_setting(self, key: str) -> Any:
        return self.get_settings().get(key)

    def set_setting(self, key: str, value: Any) -> Any:
        """
        Validate and persist a single setting.

        Returns:
            The normalized value that was stored

        Raises:
            KeyError: If the key is not a known setting
            ValueError: If the value is invalid for the key
        """
        normalized = normalize_setting(key, value)

        stored: Dict[str, Any] = {}
        if self.settings_file.exists():
            try:
                with open(self.settings_file, "r", encoding="utf-8") as f:
                    stored = json.load(f)
            except (json.JSONDecodeError, IOError):
                stored = {}

        stored[key] = normalized
        with open(self.settings_file, "w", encoding="utf-8") as f:
            json.dump(stored, f, indent=2)
        return normalized


def normalize_setting(key: str, value: Any) -> Any:
    """Validate a setting value and convert it to its stored type"""
    if key not in DEFAULT_SETTINGS:
        raise KeyError(f"Unknown setting '{key}'")

    if key == "log_level":
        level = str(value).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    if key == "name_matching":
        policy = str(value).lower().replace("-", "_")
        if policy not in NAME_MATCHING_VALUES:
            raise ValueError(
                f"name_matching must be one of {', '.join(NAME_MATCHING_VALUES)}"
            )
        return policy

    if key.endswith("_preview_limit"):
        try:
            limit = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"{key} must be an integer")
        if limit < 1:
            raise ValueError(f"{key} must be at least 1")
        return limit

    # exported_by: empty clears the override
    return str(value).strip() or None
