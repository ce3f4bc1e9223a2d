"""
Console output for the CXFER CLI.

Status lines, tables and panels, plus the package and resolution views the
export and import commands share.
"""

from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cxfer.models.manifest import ContentPackage
from cxfer.models.resolution import ResolutionStatus

console = Console()

RESOLUTION_LABELS = {
    ResolutionStatus.RESOLVED: "[green]✔ resolved[/green]",
    ResolutionStatus.OVERRIDDEN: "[blue]↻ overridden[/blue]",
    ResolutionStatus.UNRESOLVED: "[red]✖ unresolved[/red]",
}


def success(message: str):
    """Display success message"""
    console.print(f"✔ {message}", style="bold green")


def error(message: str):
    """Display error message"""
    console.print(f"✖ {message}", style="bold red")


def warning(message: str):
    """Display warning message"""
    console.print(f"⚠  {message}", style="bold yellow")


def info(message: str):
    """Display info message"""
    console.print(f"{message}", style="cyan")


def create_table(title: str, columns: List[str]) -> Table:
    """Create a rich table"""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for column in columns:
        table.add_column(column)
    return table


def display_panel(content: str, title: str, style: str = "blue"):
    """Display content in a panel"""
    console.print(Panel(content, title=title, border_style=style))


def display_rows(title: str, columns: List[str], rows: Iterable[Sequence[str]]) -> None:
    table = create_table(title, columns)
    for row in rows:
        table.add_row(*[str(value) for value in row])
    console.print(table)


def display_capped(
    messages: Sequence[str],
    limit: Optional[int] = None,
    prefix: str = "  ",
    more: int = 0,
) -> None:
    """
    Print messages one per line, at most ``limit`` of them.

    ``more`` counts messages the caller already dropped; they are added to
    the trailing "... and N more" line.
    """
    shown = list(messages if limit is None else messages[:limit])
    for message in shown:
        info(f"{prefix}{message}")
    hidden = len(messages) - len(shown) + more
    if hidden > 0:
        info(f"  ... and {hidden} more")


def resolution_label(status: ResolutionStatus, overridable: bool = True) -> str:
    label = RESOLUTION_LABELS[status]
    if status is ResolutionStatus.UNRESOLVED and not overridable:
        label += " (report-only)"
    return label


def display_package_header(package: ContentPackage) -> None:
    """Show where a package came from and how many items it holds"""
    header = "\n".join(
        [
            f"Configuration: {package.configuration_name}",
            f"Exported by:   {package.exported_by}",
            f"Exported at:   {package.exported_at.strftime('%Y-%m-%d %H:%M:%S')} UTC",
            f"Items:         {len(package.items)}",
        ]
    )
    display_panel(header, "Content Package", "blue")
