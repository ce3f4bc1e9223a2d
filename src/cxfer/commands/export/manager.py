"""
Export commands manager.

This module provides the main export CLI application that registers
all export commands from the modular command files.
"""

import typer

from .items import create_items_export_command


app = typer.Typer(help="Export content packages")


@app.callback()
def export_callback():
    """Export items from a configuration into a content package"""


app.command("items")(create_items_export_command())
