"""
Base command class providing common functionality.

This module provides the base class that contains common functionality
used by both import and export commands: settings, configuration lookup
and runtime construction.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import typer

from cxfer.exceptions import ConfigurationNotFoundError
from cxfer.logging import get_logger
from cxfer.models.lookups import NameMatchPolicy
from cxfer.runtime.file_runtime import FileConfigurationRuntime
from cxfer.utils.config_store import ConfigStore
from cxfer.utils.console import error, info


class BaseCommand(ABC):
    """Base class for import and export commands"""

    def __init__(self, config_store: Optional[ConfigStore] = None):
        self.config_store = config_store or ConfigStore()
        self.settings = self.config_store.get_settings()

        self.logger = get_logger(
            f"cxfer.{self.__class__.__module__}.{self.__class__.__name__}"
        )

    def setting(self, key: str) -> Any:
        return self.settings.get(key)

    def resolve_configuration_path(
        self,
        config_name: Optional[str] = None,
        config_path: Optional[str] = None,
    ) -> Path:
        """
        Pick the configuration directory to work against.

        Priority: --config-path, then --config, then the active configuration.
        Exits with code 1 when nothing usable is given.
        """
        if config_path:
            return Path(config_path).expanduser()

        name = config_name or self.config_store.get_current_configuration()
        if not name:
            error(
                "No configuration selected. Use --config-path, --config, "
                "or run 'cxfer config use <name>'"
            )
            raise typer.Exit(1)

        configuration = self.config_store.get_configuration(name)
        if not configuration:
            error(f"Configuration '{name}' not found. Run 'cxfer config list'")
            raise typer.Exit(1)

        return Path(configuration["path"])

    def open_runtime(
        self,
        config_name: Optional[str] = None,
        config_path: Optional[str] = None,
    ) -> FileConfigurationRuntime:
        """Open the chosen configuration, exiting with code 1 if it cannot be opened"""
        path = self.resolve_configuration_path(config_name, config_path)
        try:
            runtime = FileConfigurationRuntime(path)
        except ConfigurationNotFoundError as e:
            self.logger.error(str(e))
            error(str(e))
            raise typer.Exit(1)

        info(f"Configuration: [bold]{runtime.configuration_name}[/bold] ({runtime.root})")
        self.logger.info(f"Opened configuration '{runtime.configuration_name}' at {runtime.root}")
        return runtime

    def name_match_policy(self, ignore_case: bool = False) -> NameMatchPolicy:
        """--ignore-case wins over the name_matching setting"""
        if ignore_case:
            return NameMatchPolicy.IGNORE_CASE
        try:
            return NameMatchPolicy.from_setting(self.setting("name_matching"))
        except ValueError:
            self.logger.warning(
                f"Invalid name_matching setting '{self.setting('name_matching')}', using exact"
            )
            return NameMatchPolicy.EXACT

    @abstractmethod
    def get_item_type(self) -> str:
        """Return the type of items being processed (for messages)"""
        pass
