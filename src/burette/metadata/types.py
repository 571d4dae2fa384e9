# ABOUTME: Core metadata data structures for documents stored in the library.
# ABOUTME: DocMetadata is the record the CLI builds and the index persists.

from dataclasses import dataclass, field
from enum import Enum

from burette.metadata.isbn import Isbn13


class FileFormat(Enum):
    """Supported document formats, valued by their MIME type."""

    PDF = "application/pdf"
    EPUB = "application/epub+zip"

    @property
    def mime_type(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        """Canonical file extension, without the leading dot."""
        return self.name.lower()

    @classmethod
    def from_mime_type(cls, mime_type: str) -> "FileFormat":
        """Look up a format by MIME string.

        Raises:
            ValueError: If the MIME type is not a supported format.
        """
        try:
            return cls(mime_type)
        except ValueError:
            raise ValueError(f"Unknown file format: {mime_type}") from None

    def __str__(self) -> str:
        return self.mime_type


@dataclass
class DocMetadata:
    """Bibliographic metadata for one document.

    Only the title and format are required. ISBNs and the DOI must be unique
    across a library; the library checks that when documents are added.
    """

    title: str
    file_format: FileFormat
    authors: list[str] = field(default_factory=list)
    isbns: list[Isbn13] = field(default_factory=list)
    doi: str | None = None

    def __post_init__(self) -> None:
        # ISBNs form a set; keep the first occurrence of each
        self.isbns = list(dict.fromkeys(self.isbns))

    @property
    def author(self) -> str:
        """Convenience property: joined author string for display."""
        return ", ".join(self.authors) if self.authors else ""

    def shares_isbn_with(self, other: "DocMetadata") -> Isbn13 | None:
        """Return the first ISBN this record has in common with another, if any."""
        theirs = set(other.isbns)
        for isbn in self.isbns:
            if isbn in theirs:
                return isbn
        return None

    def shares_doi_with(self, other: "DocMetadata") -> bool:
        """Whether both records carry the same non-empty DOI."""
        return bool(self.doi) and self.doi == other.doi
