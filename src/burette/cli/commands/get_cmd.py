# ABOUTME: The `burette get` command for copying a document out of the library.
# ABOUTME: Never overwrites; the default output name is derived from the title.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import fail, library_option, open_library_or_fail
from burette.errors import LibraryError

console = Console()


@click.command("get")
@click.argument("identifier")
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: title-based name in the current directory).",
)
@library_option
def get(identifier: str, output: Path | None, library_path: Path | None) -> None:
    """Retrieve a document by ISBN, DOI, or hash prefix."""
    library = open_library_or_fail(console, library_path)
    try:
        destination = library.retrieve(identifier, output)
    except LibraryError as exc:
        fail(console, exc)

    console.print(f"Retrieved to [bold]{escape(str(destination))}[/bold]")
