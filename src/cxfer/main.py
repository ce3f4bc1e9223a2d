import typer
from cxfer.commands import config, logs
from cxfer.commands.imports import app as import_app
from cxfer.commands.export import app as export_app
from cxfer.logging import setup_logging, get_logger

app = typer.Typer(
    help="[bold blue]CXFER[/bold blue] - Content transfer between configuration databases",
    rich_markup_mode="rich",
)

# Add command groups
app.add_typer(config.app, name="config")
app.add_typer(export_app, name="export")
app.add_typer(import_app, name="import")
app.add_typer(logs.app, name="logs")


@app.callback(invoke_without_command=True)
def callback(ctx: typer.Context):
    """
    [bold blue]CXFER[/bold blue] - Content transfer between configuration databases

    Export items with their references captured by name, then import them
    into another configuration and re-bind every reference there.
    """
    if not ctx.invoked_subcommand:
        print(
            "Welcome to the CXFER CLI! Move content between configurations. "
            "To proceed type cxfer --help"
        )


def main():
    # Initialize logging early
    setup_logging()
    logger = get_logger("cxfer.main")
    logger.info("CXFER CLI started")

    try:
        app()
    except Exception as e:
        logger.error(f"Unhandled exception in main: {str(e)}")
        raise
    finally:
        logger.info("CXFER CLI finished")


if __name__ == "__main__":
    main()
