"""
Configuration management commands.

This module contains the typer commands for registering configuration
folders and changing user settings.
"""

from typing import Optional

import typer

from cxfer.exceptions import ConfigurationNotFoundError
from cxfer.logging import get_logger, setup_logging
from cxfer.runtime.file_runtime import FileConfigurationRuntime
from cxfer.utils.config_store import ConfigStore
from cxfer.utils.console import console, create_table, error, info, success
from .settings import display_configuration, display_settings

app = typer.Typer(help="Manage configurations and settings")
config_store = ConfigStore()


@app.command("add")
def add_configuration(
    name: str = typer.Argument(..., help="Name to register the configuration under"),
    path: str = typer.Argument(..., help="Configuration folder containing database.json"),
    description: Optional[str] = typer.Option(None, help="Configuration description"),
    use: bool = typer.Option(False, "--use", help="Make it the active configuration"),
):
    """Register a configuration folder"""
    try:
        runtime = FileConfigurationRuntime(path)
    except ConfigurationNotFoundError as e:
        error(str(e))
        raise typer.Exit(1)

    config_store.save_configuration(name, str(runtime.root), description)
    success(f"Configuration '{name}' registered ({runtime.configuration_name})")

    if use or not config_store.get_current_configuration():
        config_store.set_current_configuration(name)
        info(f"Active configuration: {name}")


@app.command("list")
def list_configurations():
    """List registered configurations"""
    configurations = config_store.get_configurations()
    current = config_store.get_current_configuration()

    if not configurations:
        info("No configurations registered. Add one with 'cxfer config add <name> <path>'")
        return

    table = create_table("Configurations", ["Name", "Path", "Description", "Status", "Created"])
    for name, configuration in configurations.items():
        status = "🟢 Active" if name == current else "⚪ Inactive"
        created = configuration.get("created_at", "Unknown")[:10]
        table.add_row(
            name,
            configuration.get("path", ""),
            configuration.get("description") or "",
            status,
            created,
        )
    console.print(table)


@app.command("use")
def use_configuration(name: str = typer.Argument(..., help="Configuration to activate")):
    """Switch the active configuration"""
    if not config_store.get_configuration(name):
        error(f"Configuration '{name}' not found")
        raise typer.Exit(1)

    config_store.set_current_configuration(name)
    success(f"Switched to configuration '{name}'")


@app.command("remove")
def remove_configuration(
    name: str = typer.Argument(..., help="Configuration to forget"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Forget a registered configuration (its folder is not touched)"""
    if not config_store.get_configuration(name):
        error(f"Configuration '{name}' not found")
        raise typer.Exit(1)

    if not yes and not typer.confirm(f"Remove configuration '{name}'?"):
        info("Cancelled")
        return

    config_store.delete_configuration(name)
    success(f"Configuration '{name}' removed")


@app.command("show")
def show(
    name: Optional[str] = typer.Argument(
        None, help="Configuration to show (default: active configuration)"
    ),
):
    """Show a configuration and the user settings"""
    current = config_store.get_current_configuration()
    name = name or current

    if name:
        configuration = config_store.get_configuration(name)
        if not configuration:
            error(f"Configuration '{name}' not found")
            raise typer.Exit(1)
        display_configuration(name, configuration, name == current)
    else:
        info("No active configuration")

    display_settings(config_store.get_settings())


@app.command("set")
def set_setting(
    key: str = typer.Argument(
        ...,
        help=(
            "Setting name: log_level, name_matching, warning_preview_limit, "
            "error_preview_limit, duplicate_preview_limit, exported_by"
        ),
    ),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change a user setting"""
    setup_logging()
    logger = get_logger("cxfer.config.settings")

    try:
        stored = config_store.set_setting(key, value)
    except KeyError as e:
        error(str(e).strip("'\""))
        raise typer.Exit(1)
    except ValueError as e:
        error(str(e))
        raise typer.Exit(1)

    success(f"{key} set to {stored}")
    if key == "log_level":
        info("The new log level will take effect on the next CXFER command execution.")
    logger.info(f"Setting {key} changed to {stored}")
