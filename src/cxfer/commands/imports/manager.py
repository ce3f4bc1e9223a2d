"""
Import commands manager.

This module provides the main import CLI application that registers
all import commands from the modular command files.
"""

import typer

from .items import create_items_import_command, create_preview_command


app = typer.Typer(help="Import content packages")


@app.callback()
def import_callback():
    """Validate and import content packages into a configuration"""


app.command("items")(create_items_import_command())
app.command("preview")(create_preview_command())
