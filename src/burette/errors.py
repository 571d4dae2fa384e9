# ABOUTME: Error taxonomy shared by the Burette library engine and CLI.
# ABOUTME: Every failure surfaced by the store derives from LibraryError.

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from burette.store.mapping import IndexEntry


class LibraryError(Exception):
    """Base class for all errors raised by the document library."""


class InvalidInputError(LibraryError, ValueError):
    """Raised for malformed caller input such as an empty hash prefix."""


class InvalidIsbnError(InvalidInputError):
    """Raised when a string is not a valid ISBN-13."""


class NotFoundError(LibraryError):
    """Raised when a library or document cannot be found."""


class AmbiguousMatchError(LibraryError):
    """Raised when a hash prefix matches more than one document."""

    def __init__(self, prefix: str, matches: list[IndexEntry]) -> None:
        self.prefix = prefix
        self.matches = matches
        super().__init__(
            f"Hash prefix '{prefix}' is ambiguous: {len(matches)} documents match"
        )


class AlreadyExistsError(LibraryError):
    """Raised when creating something at a path that is already taken."""


class DestinationExistsError(AlreadyExistsError):
    """Raised when retrieving a document would overwrite an existing file."""


class DuplicateError(LibraryError):
    """Raised when a new or edited document collides with an existing entry."""

    def __init__(self, message: str, existing: IndexEntry) -> None:
        self.existing = existing
        super().__init__(message)


class DuplicateDocumentError(DuplicateError):
    """Raised when a document with the same content hash is already stored."""


class DuplicateIsbnError(DuplicateError):
    """Raised when an ISBN is already assigned to another document."""


class DuplicateDoiError(DuplicateError):
    """Raised when a DOI is already assigned to another document."""


class VersionMismatchError(LibraryError):
    """Raised when the library's version stamp is not supported by this build."""


class CorruptIndexError(LibraryError):
    """Raised when the index file is missing, unreadable, or malformed."""


class UnsupportedFormatError(LibraryError):
    """Raised when a file is neither a PDF nor an EPUB."""


class LibraryIOError(LibraryError):
    """Raised when a filesystem operation fails.

    Always carries the operation that was attempted and the path involved,
    and is chained to the underlying OSError.
    """

    def __init__(self, operation: str, path: Path, reason: str | None = None) -> None:
        self.operation = operation
        self.path = path
        message = f"Failed to {operation} {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
