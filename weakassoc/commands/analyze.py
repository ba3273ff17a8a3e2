"""Weak association commands - infer undeclared relationships from a schema."""

import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..analysis import AnalysisOptions, WeakAssociationForeignKey, analyze_weak_associations
from ..config import settings
from ..database import Database, DuckDBIntrospector, load_schema_json
from ..errors import SchemaLoadError, WeakAssocError

app = typer.Typer(help="Infer weak associations (undeclared foreign keys) from database schemas")
console = Console()

OUTPUT_FORMATS = ("table", "json")


def build_options(unique_indexes: Optional[bool], type_check: Optional[bool]) -> AnalysisOptions:
    """Analysis options from settings, with command line overrides."""
    options = AnalysisOptions.from_settings(settings)
    if unique_indexes is not None:
        options.include_unique_indexes = unique_indexes
    if type_check is not None:
        options.check_data_types = type_check
    return options


def _check_format(output_format: str) -> str:
    output_format = output_format.lower()
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"must be one of: {', '.join(OUTPUT_FORMATS)}", param_hint="--format"
        )
    return output_format


def print_weak_associations(
    db: Database,
    weak_associations: List[WeakAssociationForeignKey],
    output_format: str,
) -> None:
    """Print weak associations as a rich table or as JSON."""
    if output_format == "json":
        typer.echo(json.dumps([weak_fk.to_dict() for weak_fk in weak_associations], indent=2))
        return

    total_tables = len(db.get_all_tables())
    console.print(f"\n[bold]Analyzed {total_tables} tables in {db.name}[/bold]")

    if not weak_associations:
        console.print("[yellow]No weak associations found[/yellow]")
        return

    display = Table(title="Weak Associations")
    display.add_column("Name", style="magenta")
    display.add_column("Primary Key Column", style="green")
    display.add_column("Foreign Key Column", style="cyan")

    for weak_fk in weak_associations:
        for i, reference in enumerate(weak_fk.column_references):
            display.add_row(
                weak_fk.name if i == 0 else "",
                reference.primary_key_column.full_name,
                reference.foreign_key_column.full_name,
            )

    console.print(display)
    console.print(f"\n[green]Found {len(weak_associations)} weak associations[/green]")


@app.command("from-json")
def analyze_from_json(
    schema_path: str = typer.Argument(..., help="Path to a JSON schema document"),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: table or json"),
    unique_indexes: Optional[bool] = typer.Option(None, "--unique-indexes/--no-unique-indexes", help="Treat single-column unique indexes as parent keys"),
    type_check: Optional[bool] = typer.Option(None, "--type-check/--no-type-check", help="Only pair columns with matching data types"),
):
    """
    Infer weak associations from a JSON schema document.

    Examples:
        weakassoc analyze from-json ./schema.json
        weakassoc analyze from-json ./schema.json --format json --no-type-check
    """
    output_format = _check_format(output_format)

    try:
        db = load_schema_json(schema_path)
    except SchemaLoadError as e:
        console.print(f"[red]{e.get_user_friendly_message()}[/red]")
        raise typer.Exit(1)

    weak_associations = analyze_weak_associations(db, build_options(unique_indexes, type_check))
    print_weak_associations(db, weak_associations, output_format)


@app.command("from-duckdb")
def analyze_from_duckdb(
    database_path: str = typer.Argument(..., help="Path to DuckDB database file"),
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="Specific schema to introspect (default: all schemas)"),
    database_name: Optional[str] = typer.Option(None, "--name", "-n", help="Name for the database model (defaults to filename)"),
    output_format: str = typer.Option("table", "--format", "-f", help="Output format: table or json"),
    unique_indexes: Optional[bool] = typer.Option(None, "--unique-indexes/--no-unique-indexes", help="Treat single-column unique indexes as parent keys"),
    type_check: Optional[bool] = typer.Option(None, "--type-check/--no-type-check", help="Only pair columns with matching data types"),
):
    """
    Infer weak associations from a DuckDB database.

    Examples:
        weakassoc analyze from-duckdb ./my_database.duckdb
        weakassoc analyze from-duckdb ./analytics.duckdb --schema main --format json
    """
    output_format = _check_format(output_format)

    if output_format == "table":
        console.print(Panel(
            f"[bold blue]Finding Weak Associations in DuckDB[/bold blue]\n"
            f"Database: {database_path}\n"
            f"Schema: {schema or 'All schemas'}",
            title="weakassoc"
        ))

    try:
        with DuckDBIntrospector(database_path=database_path, read_only=True) as introspector:
            db = introspector.introspect_database(
                database=database_name,
                schema_filter=schema,
                options=build_options(unique_indexes, type_check),
            )
    except ImportError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except WeakAssocError as e:
        console.print(f"[red]Error reading DuckDB database: {e.message}[/red]")
        raise typer.Exit(1)

    print_weak_associations(db, db.weak_associations, output_format)
