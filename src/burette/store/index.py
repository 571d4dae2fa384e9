# ABOUTME: The library index: an ordered list of (digest, metadata) entries in index.json.
# ABOUTME: Handles atomic load/save, identifier resolution, and hash-prefix matching.

import json
import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from burette.errors import (
    AmbiguousMatchError,
    CorruptIndexError,
    DuplicateDocumentError,
    DuplicateDoiError,
    DuplicateIsbnError,
    InvalidInputError,
    LibraryIOError,
    NotFoundError,
)
from burette.metadata.isbn import Isbn13
from burette.metadata.types import DocMetadata
from burette.store.digest import ContentDigest
from burette.store.mapping import EntrySchemaError, IndexEntry, dict_to_entry, entry_to_dict

logger = logging.getLogger(__name__)


class MatchKind(Enum):
    """Outcome of resolving a single hash prefix."""

    NOT_FOUND = "not_found"
    FOUND = "found"
    AMBIGUOUS = "ambiguous"


@dataclass
class PrefixMatch:
    """All index entries whose digest starts with a given prefix."""

    prefix: str
    matches: list[IndexEntry] = field(default_factory=list)

    @property
    def kind(self) -> MatchKind:
        if not self.matches:
            return MatchKind.NOT_FOUND
        if len(self.matches) == 1:
            return MatchKind.FOUND
        return MatchKind.AMBIGUOUS

    def unique(self) -> IndexEntry:
        """Return the single matching entry.

        Raises:
            NotFoundError: If nothing matched.
            AmbiguousMatchError: If two or more entries matched.
        """
        kind = self.kind
        if kind is MatchKind.NOT_FOUND:
            raise NotFoundError(f"No document found with hash prefix '{self.prefix}'")
        if kind is MatchKind.AMBIGUOUS:
            raise AmbiguousMatchError(self.prefix, self.matches)
        return self.matches[0]


@dataclass
class BatchMatch:
    """Classification of a batch of hash prefixes.

    Not-found and ambiguous prefixes are listed as given. A unique prefix
    contributes its entry to found, once per entry, unless an ambiguous
    prefix in the same batch also matches that entry; the ambiguous report
    then covers it and it is left out of found.
    """

    found: list[IndexEntry] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    ambiguous: list[PrefixMatch] = field(default_factory=list)


def _dedupe_prefixes(prefixes: Iterable[str]) -> list[str]:
    """Drop repeated prefixes, keeping first occurrence order.

    Raises:
        InvalidInputError: If any prefix is empty.
    """
    distinct: dict[str, None] = {}
    for prefix in prefixes:
        if not prefix:
            raise InvalidInputError("Hash prefix cannot be an empty string")
        distinct.setdefault(prefix, None)
    return list(distinct)


class LibraryIndex:
    """In-memory view of index.json.

    Insertion order carries no meaning but is preserved across save/load so
    listings stay stable. The index is re-read for every library operation;
    nothing is cached between operations.
    """

    def __init__(self, entries: list[IndexEntry] | None = None) -> None:
        self.entries: list[IndexEntry] = entries if entries is not None else []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self.entries)

    # --- Persistence ---

    @classmethod
    def load(cls, path: Path) -> "LibraryIndex":
        """Read and validate the index file.

        Raises:
            CorruptIndexError: If the file is missing, unreadable, not JSON,
                or any entry does not match the schema.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise CorruptIndexError(f"Library index file not found at {path}") from exc
        except OSError as exc:
            raise CorruptIndexError(f"Failed to read library index at {path}: {exc}") from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CorruptIndexError(f"Library index at {path} is not valid JSON: {exc}") from exc

        if not isinstance(data, list):
            raise CorruptIndexError(f"Library index at {path} must be a JSON array")

        entries = []
        for position, item in enumerate(data):
            try:
                entries.append(dict_to_entry(item))
            except EntrySchemaError as exc:
                raise CorruptIndexError(
                    f"Library index at {path} has an invalid entry #{position}: {exc}"
                ) from exc

        return cls(entries)

    def save(self, path: Path) -> None:
        """Write the index atomically.

        The JSON is written to a temporary sibling file, flushed to disk, and
        renamed over the old index, so a failed save leaves the previous
        index intact.

        Raises:
            LibraryIOError: If the write or rename fails.
        """
        payload = json.dumps(
            [entry_to_dict(entry) for entry in self.entries],
            ensure_ascii=False,
            indent=2,
        )
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise LibraryIOError("write library index", path, exc.strerror) from exc
        logger.debug("Saved %d index entries to %s", len(self.entries), path)

    # --- Lookup ---

    def find_by_digest(self, digest: ContentDigest) -> IndexEntry | None:
        for entry in self.entries:
            if entry.digest == digest:
                return entry
        return None

    def find_by_isbn(self, isbn: Isbn13) -> IndexEntry | None:
        for entry in self.entries:
            if isbn in entry.metadata.isbns:
                return entry
        return None

    def find_by_doi(self, doi: str) -> IndexEntry | None:
        for entry in self.entries:
            if entry.metadata.doi is not None and entry.metadata.doi == doi:
                return entry
        return None

    def find_by_hash_prefix(self, prefix: str) -> PrefixMatch:
        """Collect every entry whose hex digest starts with prefix.

        Raises:
            InvalidInputError: If prefix is empty.
        """
        if not prefix:
            raise InvalidInputError("Hash prefix cannot be an empty string")
        return PrefixMatch(
            prefix=prefix,
            matches=[entry for entry in self.entries if entry.digest.starts_with(prefix)],
        )

    def find_by_identifier(self, identifier: str) -> IndexEntry:
        """Resolve an ISBN, DOI, or hash prefix to a single entry.

        Precedence:
        1. If identifier parses as an ISBN-13, only an ISBN match counts.
           A valid ISBN that matches nothing is not tried as a DOI or prefix.
        2. Otherwise an exact DOI match.
        3. Otherwise a hash prefix, which must match exactly one entry.

        Raises:
            NotFoundError: If nothing matches.
            AmbiguousMatchError: If a hash prefix matches several entries.
            InvalidInputError: If identifier is empty.
        """
        if not identifier:
            raise InvalidInputError("Identifier cannot be an empty string")

        isbn = Isbn13.try_parse(identifier)
        if isbn is not None:
            entry = self.find_by_isbn(isbn)
            if entry is None:
                raise NotFoundError(f"No document found with ISBN {isbn}")
            return entry

        entry = self.find_by_doi(identifier)
        if entry is not None:
            return entry

        return self.find_by_hash_prefix(identifier).unique()

    def find_all_by_hash_prefixes(self, prefixes: Iterable[str]) -> BatchMatch:
        """Classify a batch of hash prefixes for bulk operations.

        Duplicate prefixes are collapsed first. An entry matched uniquely by
        more than one prefix (e.g. "ab" and "abc") is reported once. An entry
        that any ambiguous prefix also matches is withheld from found, so a
        bulk removal never deletes it.

        Raises:
            InvalidInputError: If any prefix is empty.
        """
        result = BatchMatch()
        found_digests: set[ContentDigest] = set()
        ambiguous_digests: set[ContentDigest] = set()

        for prefix in _dedupe_prefixes(prefixes):
            match = self.find_by_hash_prefix(prefix)
            kind = match.kind
            if kind is MatchKind.NOT_FOUND:
                result.not_found.append(prefix)
            elif kind is MatchKind.AMBIGUOUS:
                result.ambiguous.append(match)
                ambiguous_digests.update(entry.digest for entry in match.matches)
            elif match.matches[0].digest not in found_digests:
                found_digests.add(match.matches[0].digest)
                result.found.append(match.matches[0])

        if ambiguous_digests:
            result.found = [e for e in result.found if e.digest not in ambiguous_digests]
        return result

    # --- Uniqueness ---

    def check_unique(
        self,
        metadata: DocMetadata,
        digest: ContentDigest | None = None,
        *,
        exclude: IndexEntry | None = None,
    ) -> None:
        """Reject metadata that collides with an existing entry.

        Entries are checked in index order; for each one the ISBNs are
        compared first, then the digest, then the DOI. The first conflict
        found is raised.

        Args:
            metadata: Metadata of the new or edited document.
            digest: Digest of a new document; None skips the digest check.
            exclude: An entry to ignore (the one being edited).

        Raises:
            DuplicateIsbnError, DuplicateDocumentError, DuplicateDoiError
        """
        for entry in self.entries:
            if entry is exclude:
                continue
            shared = metadata.shares_isbn_with(entry.metadata)
            if shared is not None:
                raise DuplicateIsbnError(
                    f"Document with ISBN {shared} already exists ({entry.digest.short})",
                    entry,
                )
            if digest is not None and entry.digest == digest:
                raise DuplicateDocumentError(
                    f"Document is already in the library ({entry.digest.short})",
                    entry,
                )
            if metadata.shares_doi_with(entry.metadata):
                raise DuplicateDoiError(
                    f"Document with DOI {metadata.doi} already exists ({entry.digest.short})",
                    entry,
                )

    # --- Mutation ---

    def append(self, entry: IndexEntry) -> None:
        self.entries.append(entry)

    def remove_digests(self, digests: set[ContentDigest]) -> list[IndexEntry]:
        """Drop every entry whose digest is in digests and return the dropped ones."""
        kept: list[IndexEntry] = []
        removed: list[IndexEntry] = []
        for entry in self.entries:
            if entry.digest in digests:
                removed.append(entry)
            else:
                kept.append(entry)
        self.entries = kept
        return removed
