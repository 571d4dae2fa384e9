# ABOUTME: The `burette validate` command for checking library integrity.
# ABOUTME: Reports missing files, unindexed files, misnamed files, and non-file entries.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from burette.cli.options import fail, library_option, open_library_or_fail
from burette.errors import LibraryError

console = Console()


@click.command("validate")
@library_option
def validate(library_path: Path | None) -> None:
    """Validate library integrity: compare stored files with the index."""
    library = open_library_or_fail(console, library_path)
    try:
        result = library.validate()
    except LibraryError as exc:
        fail(console, exc)

    if not result.is_valid():
        table = Table()
        table.add_column("Issue", style="red")
        table.add_column("Detail", overflow="fold")

        for digest in result.missing_files:
            table.add_row("Missing file", digest.hex)
        for digest in result.missing_index_entries:
            table.add_row("Missing index entry", digest.hex)
        for mismatch in result.hash_mismatches:
            table.add_row("Hash mismatch", escape(str(mismatch)))
        for not_a_file in result.invalid_file_types:
            table.add_row("Invalid file type", escape(str(not_a_file)))

        console.print(table)
        console.print(f"\n[red]{result.total_issues} issue(s) found.[/red]")
        raise SystemExit(1)

    console.print(
        f"[green]Library is valid: {result.entries_checked} document(s) verified.[/green]"
    )
