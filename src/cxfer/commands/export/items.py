"""
Item export command.

This module provides the 'cxfer export items' command.
"""

from typing import List, Optional

import typer
from tqdm import tqdm

from cxfer.exceptions import ExportError
from cxfer.logging import log_application_event
from cxfer.utils.console import display_rows, error, info, success, warning
from ..shared.base_command import BaseCommand
from ..shared.cli_options import CommonOptions
from .content_exporter import ContentExporter, ExportResult, collect_item_paths


class ItemsExportCommand(BaseCommand):
    """Exports items from a configuration into a package folder"""

    def get_item_type(self) -> str:
        return "items"

    def run(
        self,
        paths: List[str],
        output_dir: str,
        recursive: bool = False,
        config_name: Optional[str] = None,
        config_path: Optional[str] = None,
        exported_by: Optional[str] = None,
    ) -> ExportResult:
        runtime = self.open_runtime(config_name, config_path)

        item_paths = collect_item_paths(paths, recursive)
        if not item_paths:
            warning("No item files found to export")
            raise typer.Exit(1)

        info(f"Exporting {len(item_paths)} {self.get_item_type()}...")
        with tqdm(
            total=len(item_paths),
            desc="📦 Exporting",
            bar_format="{l_bar}{bar:40}{r_bar}{bar:-40b}",
            colour="green",
            ncols=100,
            leave=True,
        ) as pbar:

            def progress(current: int, total: int, message: str) -> None:
                pbar.set_description(f"📦 {message}")
                pbar.update(1)

            exporter = ContentExporter(
                runtime,
                progress=progress,
                exported_by=exported_by or self.setting("exported_by"),
            )
            try:
                result = exporter.export_items(item_paths, output_dir)
            except ExportError as e:
                self.logger.error(str(e))
                error(str(e))
                raise typer.Exit(1)

        log_application_event(
            "export finished",
            details={
                "configuration": result.package.configuration_name,
                "exported": result.exported_count,
                "skipped": len(result.failures),
            },
        )
        self.print_summary(result)
        return result

    def print_summary(self, result: ExportResult) -> None:
        """Print the export outcome and exit 1 if nothing was exported"""
        if result.failures:
            display_rows("Skipped items", ["File", "Reason"], result.failures)

        if result.exported_count:
            success(
                f"Exported {result.exported_count} {self.get_item_type()} "
                f"from '{result.package.configuration_name}'"
            )
            info(f"📁 Manifest: {result.manifest_path.resolve()}")
        else:
            error(f"No {self.get_item_type()} were exported")
            raise typer.Exit(1)


def create_items_export_command():
    """Create the items export command function"""

    def export_items(
        paths: List[str] = typer.Argument(
            ..., help="Item files (.itm) or folders of items to export"
        ),
        output_dir: str = typer.Option(
            ..., "--out", "-o", help="Package folder to write (created if missing)"
        ),
        recursive: bool = typer.Option(
            False, "--recursive", "-r", help="Include items in sub-folders"
        ),
        config_name: Optional[str] = CommonOptions.config_name(),
        config_path: Optional[str] = CommonOptions.config_path(),
        exported_by: Optional[str] = typer.Option(
            None, "--exported-by", help="Name recorded in the manifest (default: OS user)"
        ),
    ):
        """Export items and their references to a package folder"""
        command = ItemsExportCommand()
        command.run(
            paths=paths,
            output_dir=output_dir,
            recursive=recursive,
            config_name=config_name,
            config_path=config_path,
            exported_by=exported_by,
        )

    return export_items
