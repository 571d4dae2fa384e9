# ABOUTME: EPUB metadata extraction using ebooklib.
# ABOUTME: Supplies title, author, and ISBN hints used as defaults when adding a book.

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ebooklib import epub

from burette.metadata.isbn import Isbn13

logger = logging.getLogger(__name__)


class EpubReadError(Exception):
    """Raised when an EPUB file cannot be read or parsed."""


@dataclass
class EpubHints:
    """Metadata found inside an EPUB, used to pre-fill prompts."""

    title: str | None = None
    authors: list[str] = field(default_factory=list)
    isbns: list[Isbn13] = field(default_factory=list)


def _get_metadata_value(book: epub.EpubBook, namespace: str, name: str) -> str | None:
    """Extract a single metadata value from an EpubBook, or None if missing."""
    values = book.get_metadata(namespace, name)
    if not values:
        return None
    # Metadata entries are tuples of (value, attributes)
    value = values[0][0]
    return str(value).strip() if value else None


def _get_authors(book: epub.EpubBook) -> list[str]:
    """Extract all author names from an EpubBook."""
    creators = book.get_metadata("DC", "creator")
    if not creators:
        return []
    return [str(entry[0]).strip() for entry in creators if entry[0]]


def _get_isbns(book: epub.EpubBook) -> list[Isbn13]:
    """Collect every DC identifier that parses as a valid ISBN-13."""
    isbns: list[Isbn13] = []
    for value, _attrs in book.get_metadata("DC", "identifier"):
        if not value:
            continue
        # Identifiers are often written as "urn:isbn:978..." or "isbn:978..."
        candidate = str(value).strip().rsplit(":", 1)[-1].replace(" ", "")
        isbn = Isbn13.try_parse(candidate)
        if isbn is not None and isbn not in isbns:
            isbns.append(isbn)
    return isbns


def read_epub_hints(path: Path) -> EpubHints:
    """Extract title, authors, and ISBNs from an EPUB file.

    Args:
        path: Path to the EPUB file.

    Returns:
        EpubHints with whatever fields the file provides.

    Raises:
        EpubReadError: If the file cannot be read or parsed.
    """
    if not path.exists():
        raise EpubReadError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path), options={"ignore_ncx": True})
    except Exception as exc:
        raise EpubReadError(f"Failed to read EPUB: {path}: {exc}") from exc

    hints = EpubHints(
        title=_get_metadata_value(book, "DC", "title"),
        authors=_get_authors(book),
        isbns=_get_isbns(book),
    )
    logger.debug("EPUB hints for %s: %s", path, hints)
    return hints
