"""weakassoc - Main entry point."""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .commands import analyze
from .config import settings

app = typer.Typer(
    name="weakassoc",
    help="Infer undeclared foreign key relationships from naming conventions",
    add_completion=False,
)

# Add subcommands
app.add_typer(analyze.app, name="analyze")

console = Console()


def configure_logging(level_name: str) -> None:
    """Send log records to stderr through rich, at the given level."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"unknown log level '{level_name}'", param_hint="--log-level")

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("weakassoc").setLevel(level)


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Log level: {settings.log_level}")
    console.print(f"  Unique index candidates: {'Yes' if settings.include_unique_indexes else 'No'}")
    console.print(f"  Data type check: {'Yes' if settings.check_data_types else 'No'}")
    console.print(f"  Name prefix: {settings.foreign_key_name_prefix}")
    console.print(f"  Table name prefixes: {settings.max_table_prefixes}")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
):
    """
    weakassoc - Find probable relationships a database designer never declared.

    Columns are paired by naming convention (BOOKS.AUTHOR_ID with AUTHORS.ID)
    whenever no declared foreign key already connects them.

    Examples:

        weakassoc analyze from-json ./schema.json

        weakassoc analyze from-duckdb ./library.duckdb --format json

        weakassoc --log-level DEBUG analyze from-json ./schema.json
    """
    configure_logging(log_level or settings.log_level)


if __name__ == "__main__":
    app()
