# ABOUTME: The `burette info` command for displaying one document's metadata.
# ABOUTME: Resolves an ISBN, DOI, or hash prefix and shows every field.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from burette.cli.options import fail, library_option, open_library_or_fail
from burette.errors import LibraryError

console = Console()


@click.command("info")
@click.argument("identifier")
@library_option
def info(identifier: str, library_path: Path | None) -> None:
    """Show detailed metadata for a document by ISBN, DOI, or hash prefix."""
    library = open_library_or_fail(console, library_path)
    try:
        entry = library.find(identifier)
    except LibraryError as exc:
        fail(console, exc)

    meta = entry.metadata
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=8)
    table.add_column("Value", overflow="fold")

    table.add_row("Title", escape(meta.title))
    table.add_row("Authors", escape(meta.author) or "unknown")
    if meta.isbns:
        table.add_row("ISBNs", ", ".join(str(isbn) for isbn in meta.isbns))
    if meta.doi:
        table.add_row("DOI", escape(meta.doi))
    table.add_row("Format", meta.file_format.mime_type)
    table.add_row("Hash", entry.digest.hex)
    table.add_row("File", escape(str(library.content_path(entry.digest))))

    console.print(table)
