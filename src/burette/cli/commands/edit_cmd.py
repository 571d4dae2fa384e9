# ABOUTME: The `burette edit` command for changing one metadata field of a document.
# ABOUTME: Takes new values from --value or prompts with the current value as default.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import fail, library_option, open_library_or_fail
from burette.cli.prompts import MetadataPrompter
from burette.core.library import EditFn
from burette.errors import InvalidInputError, LibraryError
from burette.metadata.isbn import Isbn13
from burette.store.mapping import IndexEntry

console = Console()

FIELDS = ("title", "authors", "isbns", "doi")


def _build_edit(
    field: str, values: tuple[str, ...], clear: bool, prompter: MetadataPrompter
) -> EditFn:
    """Return a callback that sets one field of an entry's metadata."""

    def apply(entry: IndexEntry) -> None:
        meta = entry.metadata
        if field == "title":
            if clear or len(values) > 1:
                raise InvalidInputError("A document has exactly one title")
            meta.title = values[0].strip() if values else prompter.prompt_title(meta.title)
        elif field == "authors":
            if clear:
                meta.authors = []
            elif values:
                meta.authors = [v.strip() for v in values if v.strip()]
            else:
                meta.authors = prompter.prompt_authors(meta.authors)
        elif field == "isbns":
            if clear:
                meta.isbns = []
            elif values:
                meta.isbns = list(dict.fromkeys(Isbn13.parse(v) for v in values))
            else:
                meta.isbns = prompter.prompt_isbns(meta.isbns)
        else:
            if len(values) > 1:
                raise InvalidInputError("A document has at most one DOI")
            if clear:
                meta.doi = None
            elif values:
                meta.doi = values[0].strip() or None
            else:
                meta.doi = prompter.prompt_doi(meta.doi)

    return apply


@click.command("edit")
@click.argument("hash_prefix")
@click.argument("field", type=click.Choice(FIELDS, case_sensitive=False))
@click.option(
    "--value", "values",
    multiple=True,
    help="New value; repeat for authors or ISBNs. Prompts when omitted.",
)
@click.option(
    "--clear",
    is_flag=True,
    default=False,
    help="Remove all authors, ISBNs, or the DOI.",
)
@library_option
def edit(
    hash_prefix: str,
    field: str,
    values: tuple[str, ...],
    clear: bool,
    library_path: Path | None,
) -> None:
    """Edit the title, authors, ISBNs, or DOI of a document."""
    library = open_library_or_fail(console, library_path)
    prompter = MetadataPrompter(console=console)
    try:
        entry = library.edit(hash_prefix, _build_edit(field.lower(), values, clear, prompter))
    except LibraryError as exc:
        fail(console, exc)

    console.print(
        f"Updated {field.lower()} of [bold]{escape(entry.title)}[/bold] "
        f"([cyan]{entry.digest.short}[/cyan])"
    )
