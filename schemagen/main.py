"""schemagen - Main entry point."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .commands import schema
from .config import settings
from .database import driver_uses_last_insert_id, supported_drivers

app = typer.Typer(
    name="schemagen",
    help="Read database schemas into an enriched model for code generation",
    add_completion=False,
)

# Add subcommands
app.add_typer(schema.app, name="schema")

console = Console()


@app.command()
def config():
    """Show current configuration."""
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Driver: {settings.driver}")
    console.print(f"  Schema: {settings.schema_name or 'driver default'}")
    console.print(f"  PostgreSQL: {settings.postgres_host}:{settings.postgres_port}/{settings.postgres_dbname or 'Not set'}")
    console.print(f"  DuckDB path: {settings.duckdb_path or 'Not set'}")
    console.print(f"  Snowflake account: {settings.snowflake_account or 'Not set'}")
    console.print(f"  Whitelist: {', '.join(settings.whitelist) or 'none'}")
    console.print(f"  Blacklist: {', '.join(settings.blacklist) or 'none'}")
    console.print(f"  Strict: {'Yes' if settings.strict else 'No'}")
    console.print(f"  Fetch workers: {settings.fetch_workers}")


@app.command()
def drivers():
    """Show known drivers and how they return generated keys."""
    table = Table(title="Drivers")
    table.add_column("Driver", style="cyan")
    table.add_column("Generated keys via", style="green")

    for driver in supported_drivers():
        how = "last insert id" if driver_uses_last_insert_id(driver) else "RETURNING / OUTPUT"
        table.add_row(driver, how)

    console.print(table)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    schemagen - Read database schemas for code generation.

    Examples:

        schemagen schema inspect --driver postgres

        schemagen schema inspect --driver duckdb --json

        schemagen schema check
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


if __name__ == "__main__":
    app()
