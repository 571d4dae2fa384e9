# ABOUTME: The `burette remove` command for deleting documents by hash prefix.
# ABOUTME: Reports removed, not found, ambiguous, and failed prefixes; exits 1 unless all succeed.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import fail, library_option, open_library_or_fail
from burette.errors import LibraryError

console = Console()


@click.command("remove")
@click.argument("hash_prefixes", nargs=-1, required=True)
@library_option
def remove(hash_prefixes: tuple[str, ...], library_path: Path | None) -> None:
    """Remove one or more documents identified by hash prefixes."""
    library = open_library_or_fail(console, library_path)
    try:
        result = library.remove(hash_prefixes)
    except LibraryError as exc:
        fail(console, exc)

    for entry in result.removed:
        console.print(
            f"[green]Removed[/green] [cyan]{entry.digest.short}[/cyan] {escape(entry.title)}"
        )

    for prefix in result.not_found:
        console.print(f"[red]Not found:[/red] {escape(prefix)}")

    for match in result.ambiguous:
        console.print(
            f"[yellow]Ambiguous:[/yellow] {escape(match.prefix)} matches "
            f"{len(match.matches)} documents"
        )
        for entry in match.matches:
            console.print(f"  [cyan]{entry.digest.short}[/cyan] {escape(entry.title)}")

    for failure in result.errors:
        console.print(
            f"[red]Failed:[/red] [cyan]{failure.entry.digest.short}[/cyan] "
            f"{escape(str(failure.error))}"
        )

    console.print(f"\n[dim]{len(result.removed)} document(s) removed[/dim]")
    if not result.success:
        raise SystemExit(1)
