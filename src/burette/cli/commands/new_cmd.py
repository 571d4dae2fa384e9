# ABOUTME: The `burette new` command for creating an empty library.
# ABOUTME: Writes the version stamp, an empty index, and the documents directory.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import fail, library_option
from burette.core.library import DEFAULT_LIBRARY_PATH, Library
from burette.errors import LibraryError

console = Console()


@click.command("new")
@library_option
def new(library_path: Path | None) -> None:
    """Create a new, empty document library."""
    path = library_path or DEFAULT_LIBRARY_PATH
    try:
        Library.create(path)
    except LibraryError as exc:
        fail(console, exc)

    console.print(f"Created library at [bold]{escape(str(path))}[/bold]")
