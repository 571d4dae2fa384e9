# ABOUTME: Interactive collection of document metadata for the add and edit commands.
# ABOUTME: Prompts for title, authors, ISBNs, and DOI, offering current values as defaults.

import click
from rich.console import Console
from rich.markup import escape

from burette.formats.epub import EpubHints
from burette.metadata.isbn import Isbn13
from burette.metadata.types import DocMetadata, FileFormat


class MetadataPrompter:
    """Asks the user for metadata fields one at a time.

    Every prompt starts from a current value (what the document already has,
    or what was found inside the file) so pressing enter keeps it. With
    interactive=False no prompts are shown and the current values are used
    as they are.
    """

    def __init__(self, *, console: Console | None = None, interactive: bool = True) -> None:
        self._console = console or Console()
        self._interactive = interactive

    def collect(
        self,
        file_format: FileFormat,
        *,
        fallback_title: str,
        hints: EpubHints | None = None,
        title: str | None = None,
        authors: list[str] | None = None,
        isbns: list[Isbn13] | None = None,
        doi: str | None = None,
    ) -> DocMetadata:
        """Build a DocMetadata, prompting only for fields not given explicitly.

        Args:
            file_format: The detected format of the document.
            fallback_title: Title to offer when the file has none (e.g. its stem).
            hints: Metadata read from the file, used as prompt defaults.
            title, authors, isbns, doi: Values supplied on the command line.
        """
        hints = hints or EpubHints()

        if title is None:
            title = self.prompt_title(hints.title or fallback_title)
        if authors is None:
            authors = self.prompt_authors(hints.authors)
        if isbns is None:
            isbns = self.prompt_isbns(hints.isbns)
        if doi is None:
            doi = self.prompt_doi(None)

        return DocMetadata(
            title=title,
            file_format=file_format,
            authors=authors,
            isbns=isbns,
            doi=doi or None,
        )

    def prompt_title(self, current: str) -> str:
        if not self._interactive:
            return current
        while True:
            title = click.prompt("Title", default=current or None, type=str).strip()
            if title:
                return title
            self._console.print("[red]The title cannot be empty.[/red]")

    def prompt_authors(self, current: list[str]) -> list[str]:
        """Keep the current authors, or enter new ones until a blank line."""
        if not self._interactive:
            return list(current)
        if current:
            self._console.print(f"Authors: [bold]{escape(', '.join(current))}[/bold]")
            if click.confirm("Keep these authors?", default=True):
                return list(current)

        authors: list[str] = []
        while True:
            name = click.prompt(
                "Author (blank to finish)", default="", show_default=False
            ).strip()
            if not name:
                return authors
            authors.append(name)

    def prompt_isbns(self, current: list[Isbn13]) -> list[Isbn13]:
        """Keep the current ISBNs, or enter new ones until a blank line."""
        if not self._interactive:
            return list(current)
        if current:
            shown = ", ".join(str(isbn) for isbn in current)
            self._console.print(f"ISBNs: [bold]{shown}[/bold]")
            if click.confirm("Keep these ISBNs?", default=True):
                return list(current)

        isbns: list[Isbn13] = []
        while True:
            text = click.prompt(
                "ISBN-13 (blank to finish)", default="", show_default=False
            ).strip()
            if not text:
                return isbns
            isbn = Isbn13.try_parse(text)
            if isbn is None:
                self._console.print(f"[red]'{escape(text)}' is not a valid ISBN-13.[/red]")
            elif isbn in isbns:
                self._console.print(f"[yellow]{isbn} was already entered.[/yellow]")
            else:
                isbns.append(isbn)

    def prompt_doi(self, current: str | None) -> str | None:
        """Ask for a DOI; a blank answer means none."""
        if not self._interactive:
            return current
        doi = click.prompt(
            "DOI (blank for none)",
            default=current or "",
            show_default=bool(current),
        ).strip()
        return doi or None
