"""Schema commands - build the enriched schema from a live database."""

import json
from dataclasses import asdict
from typing import Optional, List

import typer
from rich.console import Console
from rich.table import Table as RichTable

from ..config import settings, Settings
from ..database import (
    SchemaAccessor,
    SchemaBuilder,
    SchemaResult,
    PostgresAccessor,
    DuckDBAccessor,
    SnowflakeAccessor,
)
from ..errors import SchemaError

app = typer.Typer(help="Inspect database schemas")
console = Console()


def create_accessor(driver: str, config: Settings, schema: Optional[str] = None) -> SchemaAccessor:
    """Create the schema accessor for a driver from settings.

    Raises:
        typer.BadParameter: For drivers without an accessor
    """
    schema = schema or config.schema_name

    if driver == "postgres":
        return PostgresAccessor(
            dbname=config.postgres_dbname,
            host=config.postgres_host,
            port=config.postgres_port,
            user=config.postgres_user,
            password=config.postgres_password,
            sslmode=config.postgres_sslmode,
            schema=schema or "public",
        )
    elif driver == "duckdb":
        return DuckDBAccessor(
            database_path=config.duckdb_path,
            schema=schema or "main",
        )
    elif driver == "snowflake":
        return SnowflakeAccessor(
            database=config.snowflake_database,
            schema=schema,
            account=config.snowflake_account,
            user=config.snowflake_user,
            password=config.snowflake_password,
            warehouse=config.snowflake_warehouse,
            role=config.snowflake_role,
        )
    raise typer.BadParameter(f"Unsupported driver: {driver}")


def _build(
    driver: Optional[str],
    schema: Optional[str],
    only: Optional[List[str]],
    skip: Optional[List[str]],
    strict: Optional[bool],
    workers: Optional[int],
) -> SchemaResult:
    accessor = create_accessor(driver or settings.driver, settings, schema)
    builder = SchemaBuilder(
        accessor,
        whitelist=only or settings.whitelist,
        blacklist=skip or settings.blacklist,
        strict=settings.strict if strict is None else strict,
        max_workers=workers or settings.fetch_workers,
    )
    try:
        return builder.build()
    except SchemaError as e:
        console.print(f"[red]{e.message}[/red]")
        for detail in e.details.get("errors", []):
            console.print(f"  [red]{detail['message']}[/red]")
        for detail in e.details.get("inconsistencies", []):
            console.print(f"  [yellow]{detail}[/yellow]")
        raise typer.Exit(1)


def _print_tables(result: SchemaResult):
    for table in result.tables:
        title = f"{table.name} [dim](join table)[/dim]" if table.is_join_table else table.name
        grid = RichTable(title=title, title_justify="left")
        grid.add_column("Column", style="cyan")
        grid.add_column("Type", style="green")
        grid.add_column("DB Type")
        grid.add_column("Key")
        grid.add_column("References")

        pkey_columns = set(table.pkey.columns) if table.pkey else set()
        fkeys = {fkey.column: fkey for fkey in table.fkeys}
        for column in table.columns:
            key = []
            if column.name in pkey_columns:
                key.append("PK")
            if column.unique:
                key.append("UQ")
            fkey = fkeys.get(column.name)
            reference = f"{fkey.foreign_table}.{fkey.foreign_column}" if fkey else ""
            grid.add_row(column.name, column.type, column.db_type, " ".join(key), reference)

        console.print(grid)
        for rel in table.to_many_relationships:
            marker = " [dim](via join table)[/dim]" if rel.to_join_table else ""
            console.print(f"  to-many: {rel.column} <- {rel.foreign_table}.{rel.foreign_column}{marker}")
        for rel in table.to_one_relationships:
            console.print(f"  to-one:  {rel.column} <- {rel.foreign_table}.{rel.foreign_column}")
        console.print()


@app.command("inspect")
def inspect(
    driver: Optional[str] = typer.Option(None, "--driver", "-d", help="Database driver"),
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="Schema to read"),
    only: Optional[List[str]] = typer.Option(None, "--only", help="Only include these tables"),
    skip: Optional[List[str]] = typer.Option(None, "--skip", help="Skip these tables"),
    strict: Optional[bool] = typer.Option(None, "--strict/--lenient", help="Fail on inconsistent foreign keys"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Fetch threads"),
    as_json: bool = typer.Option(False, "--json", help="Print the enriched schema as JSON"),
):
    """Build the enriched schema and print it."""
    result = _build(driver, schema, only, skip, strict, workers)

    if as_json:
        payload = {
            "tables": [asdict(t) for t in result.tables],
            "inconsistencies": [asdict(i) for i in result.inconsistencies],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    _print_tables(result)
    for inconsistency in result.inconsistencies:
        console.print(f"[yellow]Warning: {inconsistency}[/yellow]")


@app.command("check")
def check(
    driver: Optional[str] = typer.Option(None, "--driver", "-d", help="Database driver"),
    schema: Optional[str] = typer.Option(None, "--schema", "-s", help="Schema to read"),
):
    """Report foreign keys that reference missing columns."""
    result = _build(driver, schema, None, None, False, None)

    if not result.inconsistencies:
        console.print(f"[green]{len(result.tables)} tables, no inconsistencies[/green]")
        return

    for inconsistency in result.inconsistencies:
        console.print(f"[yellow]{inconsistency}[/yellow]")
    raise typer.Exit(1)
