"""
StateKeeper CLI - inspect persisted tracking records.

Lists, shows and clears the JSON records written by trackers.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from statekeeper import __version__
from statekeeper.core.exceptions import ConfigurationError, format_exception
from statekeeper.settings import get_settings
from statekeeper.storage.json_file import JsonFileStoreFactory

app = typer.Typer(
    name="statekeeper",
    help="StateKeeper - persisted object state inspection",
    no_args_is_help=True,
)
console = Console()


def _factory(directory: Optional[Path]) -> JsonFileStoreFactory:
    if directory is not None:
        return JsonFileStoreFactory(directory)
    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]{format_exception(e)}[/red]")
        raise typer.Exit(1)
    return JsonFileStoreFactory(settings.store_dir / "default")


@app.command()
def stores(
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", help="Store directory"),
):
    """List persisted records."""
    factory = _factory(directory)
    keys = factory.list_keys()

    table = Table(title=f"Persisted Records ({len(keys)})")
    table.add_column("Key", style="cyan")
    table.add_column("Properties", style="green")
    table.add_column("Updated")

    for key in keys:
        record = factory.read(key)
        if record is None:
            continue
        table.add_row(key, str(len(record.values)), record.updated_at)

    console.print(table)


@app.command()
def show(
    key: str = typer.Argument(..., help="Tracking key"),
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", help="Store directory"),
):
    """Show the persisted values for a key."""
    factory = _factory(directory)
    record = factory.read(key)
    if record is None:
        console.print(f"[red]No record for key '{key}'[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Record: {key}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    for name, value in record.values.items():
        table.add_row(name, json.dumps(value))

    console.print(table)
    console.print(f"[dim]Updated: {record.updated_at}[/dim]")


@app.command()
def clear(
    key: str = typer.Argument(..., help="Tracking key"),
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", help="Store directory"),
):
    """Delete the persisted record for a key."""
    factory = _factory(directory)
    if not factory.delete(key):
        console.print(f"[red]No record for key '{key}'[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Cleared record '{key}'[/green]")


@app.command()
def version():
    """Show version information."""
    console.print(
        Panel.fit(
            f"[bold blue]StateKeeper[/bold blue]\n"
            f"Version: {__version__}",
        )
    )


if __name__ == "__main__":
    app()
