# ABOUTME: The `burette add` command for storing a PDF or EPUB in the library.
# ABOUTME: Detects the format, collects metadata (options, EPUB hints, prompts), and adds it.

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import ISBN, fail, library_option, open_library_or_fail
from burette.cli.prompts import MetadataPrompter
from burette.errors import LibraryError
from burette.formats.detect import detect_file_format
from burette.formats.epub import EpubHints, EpubReadError, read_epub_hints
from burette.metadata.isbn import Isbn13
from burette.metadata.types import FileFormat

logger = logging.getLogger(__name__)

console = Console()


def _read_hints(path: Path, file_format: FileFormat) -> EpubHints:
    """Read EPUB metadata to pre-fill prompts; other formats have no hints."""
    if file_format is not FileFormat.EPUB:
        return EpubHints()
    try:
        return read_epub_hints(path)
    except EpubReadError as exc:
        logger.warning("Could not read EPUB metadata: %s", exc)
        return EpubHints()


@click.command("add")
@click.argument(
    "path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@library_option
@click.option("-t", "--title", default=None, help="Document title.")
@click.option(
    "-a", "--author", "authors",
    multiple=True,
    help="Author name; repeat for several authors.",
)
@click.option(
    "-i", "--isbn", "isbns",
    type=ISBN,
    multiple=True,
    help="ISBN-13; repeat for several ISBNs.",
)
@click.option("-d", "--doi", default=None, help="Digital Object Identifier.")
@click.option(
    "--no-prompt",
    is_flag=True,
    default=False,
    help="Do not ask for missing fields; use what the file provides.",
)
def add(
    path: Path,
    library_path: Path | None,
    title: str | None,
    authors: tuple[str, ...],
    isbns: tuple[Isbn13, ...],
    doi: str | None,
    no_prompt: bool,
) -> None:
    """Add a PDF or EPUB document to the library."""
    library = open_library_or_fail(console, library_path)

    try:
        file_format = detect_file_format(path)
    except LibraryError as exc:
        fail(console, exc)

    prompter = MetadataPrompter(console=console, interactive=not no_prompt)
    metadata = prompter.collect(
        file_format,
        fallback_title=path.stem,
        hints=_read_hints(path, file_format),
        title=title,
        authors=list(authors) if authors else None,
        isbns=list(isbns) if isbns else None,
        doi=doi,
    )

    try:
        entry = library.add(path, metadata)
    except LibraryError as exc:
        fail(console, exc)

    console.print(
        f"Added [bold]{escape(entry.title)}[/bold] ([cyan]{entry.digest.short}[/cyan])"
    )
