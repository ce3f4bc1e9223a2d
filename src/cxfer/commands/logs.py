"""
Log management commands for CXFER CLI.

This module provides commands for viewing and managing CXFER application
logs. Every load, rebind, unbind and save a runtime performs is logged on
its own line, so ``logs show --item Bend.itm --runtime`` traces what one
transfer did to one item.
"""

import re
import time
from collections import Counter
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from cxfer.constants import LOG_APP_NAME, LOG_FILE_NAME, LOG_LINES_TO_SHOW
from cxfer.logging import get_logger, setup_logging
from cxfer.logging.config import LogConfig, get_log_directory, get_log_file_path
from cxfer.logging.utils import format_size
from cxfer.utils.console import error, info, success, warning

app = typer.Typer(help="Manage CXFER logs")
console = Console()

RUNTIME_LOGGER_TAG = "[cxfer.runtime]"
# <timestamp> <LEVEL> [cxfer.runtime] <operation> <target> -> <outcome> (<ms>ms)
RUNTIME_LINE = re.compile(r"\[cxfer\.runtime\] (?P<operation>\S+) .* -> (?P<outcome>\S+) \(")


def line_matches(
    line: str,
    level: Optional[str] = None,
    item: Optional[str] = None,
    runtime_only: bool = False,
) -> bool:
    if level and level.upper() not in line:
        return False
    if item and item.lower() not in line.lower():
        return False
    if runtime_only and RUNTIME_LOGGER_TAG not in line:
        return False
    return True


def count_runtime_calls(lines: Iterable[str]) -> Dict[str, Counter]:
    """Runtime calls per operation, split by outcome"""
    counts: Dict[str, Counter] = {}
    for line in lines:
        match = RUNTIME_LINE.search(line)
        if match:
            counts.setdefault(match.group("operation"), Counter())[match.group("outcome")] += 1
    return counts


def describe_runtime_calls(counts: Dict[str, Counter]) -> str:
    if not counts:
        return "None"
    parts: List[str] = []
    for operation in sorted(counts):
        outcomes = counts[operation]
        text = f"{operation} {sum(outcomes.values())}"
        misses = [f"{n} {outcome}" for outcome, n in sorted(outcomes.items()) if outcome != "ok"]
        if misses:
            text += f" ({', '.join(misses)})"
        parts.append(text)
    return ", ".join(parts)


@app.command("show")
def show_logs(
    lines: int = typer.Option(
        LOG_LINES_TO_SHOW, "--lines", "-n", help="Number of lines to show"
    ),
    follow: bool = typer.Option(False, "--follow", "-f", help="Follow log output"),
    level: Optional[str] = typer.Option(
        None, "--level", help="Filter by log level (DEBUG, INFO, WARNING, ERROR)"
    ),
    item: Optional[str] = typer.Option(
        None, "--item", help="Only lines mentioning this item file name"
    ),
    runtime_only: bool = typer.Option(
        False, "--runtime", help="Only configuration runtime calls (load, rebind, save)"
    ),
) -> None:
    """Show recent log entries"""
    setup_logging()
    logger = get_logger("cxfer.commands.logs")

    try:
        log_file = get_log_file_path()

        if not log_file.exists():
            warning(
                f"No log file found. Run some {LOG_APP_NAME} commands to generate logs."
            )
            return

        with open(log_file, "r", encoding="utf-8") as f:
            matching = [
                line for line in f if line_matches(line, level, item, runtime_only)
            ]
        display_lines = matching[-lines:]

        if not display_lines:
            info("No log entries found matching the criteria.")
            return

        syntax = Syntax("".join(display_lines), "log", theme="monokai", line_numbers=False)
        console.print(syntax)

        if follow:
            info("Following log file... (Press Ctrl+C to stop)")
            try:
                with open(log_file, "r", encoding="utf-8") as f:
                    f.seek(0, 2)
                    while True:
                        line = f.readline()
                        if not line:
                            time.sleep(0.1)
                        elif line_matches(line, level, item, runtime_only):
                            console.print(line.rstrip())
            except KeyboardInterrupt:
                info("\nStopped following logs.")

    except OSError as e:
        logger.error(f"Failed to show logs: {str(e)}")
        error(f"Failed to show logs: {str(e)}")
        raise typer.Exit(1)


@app.command("info")
def log_info() -> None:
    """Show log settings, file details and runtime call counts"""
    setup_logging()
    logger = get_logger("cxfer.commands.logs")

    try:
        config = LogConfig()
        log_file = get_log_file_path(config)
        log_dir = get_log_directory()

        table = Table(
            title=f"{LOG_APP_NAME} Log Information",
            show_header=True,
            header_style="bold blue",
        )
        table.add_column("Setting", style="cyan", no_wrap=True)
        table.add_column("Value", style="white")

        table.add_row("Log Directory", str(log_dir))
        table.add_row("Log File", str(log_file))
        table.add_row("Log Level", config.default_level.value)
        table.add_row("Runtime Calls Logged", "Yes" if config.log_runtime_calls else "No")
        table.add_row("Retention Days", str(config.log_retention_days))

        if log_file.exists():
            stat = log_file.stat()
            modified = datetime.fromtimestamp(stat.st_mtime)
            with open(log_file, "r", encoding="utf-8") as f:
                calls = describe_runtime_calls(count_runtime_calls(f))
            table.add_row("Current Size", format_size(stat.st_size))
            table.add_row("Last Modified", modified.strftime("%Y-%m-%d %H:%M:%S"))
            table.add_row("Runtime Calls", calls)
        else:
            table.add_row("Current Size", "File not found")
            table.add_row("Last Modified", "N/A")
            table.add_row("Runtime Calls", "N/A")

        rotated_files = list(log_dir.glob(f"{LOG_FILE_NAME}.log.*"))
        table.add_row("Rotated Files", str(len(rotated_files)))

        console.print(table)
        logger.info("Displayed log information")

    except OSError as e:
        logger.error(f"Failed to show log info: {str(e)}")
        error(f"Failed to show log info: {str(e)}")
        raise typer.Exit(1)


@app.command("path")
def log_path() -> None:
    """Print the current log file path"""
    console.print(str(get_log_file_path()))


@app.command("clear")
def clear_logs(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete rotated log files and empty the current one"""
    setup_logging()
    logger = get_logger("cxfer.commands.logs")

    log_dir = get_log_directory()
    rotated_files = list(log_dir.glob(f"{LOG_FILE_NAME}.log.*"))

    if not yes and not typer.confirm(
        f"Delete {len(rotated_files)} rotated log file(s) and clear the current log?"
    ):
        info("Cancelled")
        return

    removed = 0
    try:
        for log_file in rotated_files:
            log_file.unlink()
            removed += 1

        current = get_log_file_path()
        if current.exists():
            with open(current, "w", encoding="utf-8"):
                pass
    except OSError as e:
        logger.error(f"Failed to clear logs: {str(e)}")
        error(f"Failed to clear logs: {str(e)}")
        raise typer.Exit(1)

    success(f"Cleared logs ({removed} rotated file(s) removed)")
