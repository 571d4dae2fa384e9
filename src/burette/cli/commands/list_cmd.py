# ABOUTME: The `burette list` command for listing stored documents.
# ABOUTME: Displays a Rich table of every entry in the library index.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from burette.cli.options import fail, library_option, open_library_or_fail
from burette.errors import LibraryError

console = Console()


@click.command("list")
@library_option
def list_documents(library_path: Path | None) -> None:
    """List all documents in the library."""
    library = open_library_or_fail(console, library_path)
    try:
        entries = library.documents()
    except LibraryError as exc:
        fail(console, exc)

    if not entries:
        console.print("[yellow]No documents in the library.[/yellow]")
        return

    table = Table()
    table.add_column("Hash", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Authors")
    table.add_column("Format", width=5)
    table.add_column("ISBN / DOI", style="dim")

    for entry in entries:
        meta = entry.metadata
        identifiers = [str(isbn) for isbn in meta.isbns]
        if meta.doi:
            identifiers.append(meta.doi)
        table.add_row(
            entry.digest.short,
            escape(meta.title),
            escape(meta.author) or "[dim]unknown[/dim]",
            meta.file_format.extension,
            escape("\n".join(identifiers)),
        )

    console.print(table)
    console.print(f"\n[dim]{len(entries)} document(s)[/dim]")
