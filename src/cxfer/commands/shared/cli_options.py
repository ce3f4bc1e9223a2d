"""
Common CLI options for import and export commands.

This module provides standardized CLI options that are used across
multiple command types to ensure consistency.
"""

import typer


class CommonOptions:
    """Common CLI options for import and export commands"""

    @staticmethod
    def config_name():
        return typer.Option(
            None, "--config", "-c",
            help="Registered configuration name (default: active configuration)",
        )

    @staticmethod
    def config_path():
        return typer.Option(
            None, "--config-path",
            help="Configuration folder containing database.json (overrides --config)",
        )

    @staticmethod
    def ignore_case():
        return typer.Option(
            False, "--ignore-case",
            help="Match reference names case-insensitively",
        )

    @staticmethod
    def package_folder():
        return typer.Argument(
            ..., help="Package folder created by 'cxfer export items'"
        )


def parse_index_list(value: str) -> list:
    """
    Parse '0,2,5-7' into [0, 2, 5, 6, 7], keeping order and dropping repeats.

    Raises:
        typer.BadParameter: On anything that is not an index or range
    """
    indices = []
    for part in (value or "").split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start_text, end_text = part.split("-", 1)
                start, end = int(start_text), int(end_text)
                if end < start:
                    raise ValueError(part)
                candidates = range(start, end + 1)
            else:
                candidates = [int(part)]
        except ValueError:
            raise typer.BadParameter(f"Invalid item index or range '{part}'")
        for index in candidates:
            if index not in indices:
                indices.append(index)
    return indices
