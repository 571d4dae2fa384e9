# ABOUTME: Library integrity validation: reconciles the documents directory with the index.
# ABOUTME: Reports non-file entries, misnamed files, missing files, and unindexed files.

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path

from burette.errors import LibraryIOError
from burette.store.digest import ContentDigest, compute_file_digest
from burette.store.index import LibraryIndex

logger = logging.getLogger(__name__)


@dataclass
class HashMismatch:
    """A stored file whose name is not the hex digest of its contents."""

    expected: ContentDigest
    actual: str

    def __str__(self) -> str:
        return f"{self.expected.short} has name {self.actual}"


@dataclass
class NotAFile:
    """An entry in the documents directory that is not a regular file."""

    file_name: str
    kind: str

    def __str__(self) -> str:
        return f"{self.file_name} is not a regular file (type: {self.kind})"


@dataclass
class ValidationResult:
    """Aggregated discrepancies from a validation run.

    Digest lists are sorted so reports are deterministic.
    """

    missing_files: list[ContentDigest] = field(default_factory=list)
    missing_index_entries: list[ContentDigest] = field(default_factory=list)
    hash_mismatches: list[HashMismatch] = field(default_factory=list)
    invalid_file_types: list[NotAFile] = field(default_factory=list)
    files_checked: int = 0
    entries_checked: int = 0

    @property
    def total_issues(self) -> int:
        """Total number of discrepancies across all categories."""
        return (
            len(self.missing_files)
            + len(self.missing_index_entries)
            + len(self.hash_mismatches)
            + len(self.invalid_file_types)
        )

    def is_valid(self) -> bool:
        """True when the store and the index agree completely."""
        return self.total_issues == 0


def _describe_file_type(mode: int) -> str:
    if stat.S_ISDIR(mode):
        return "directory"
    if stat.S_ISLNK(mode):
        return "symlink"
    return "unknown"


def _scan_documents_dir(documents_dir: Path) -> list[os.DirEntry[str]]:
    """List the documents directory sorted by name; a missing directory is empty."""
    try:
        with os.scandir(documents_dir) as it:
            return sorted(it, key=lambda e: e.name)
    except FileNotFoundError:
        logger.debug("Documents directory %s does not exist", documents_dir)
        return []
    except OSError as exc:
        raise LibraryIOError("read documents directory", documents_dir, exc.strerror) from exc


def validate_library(documents_dir: Path, index_path: Path) -> ValidationResult:
    """Check that the documents directory and the index describe the same documents.

    1. Every entry in documents_dir must be a regular file (symlinks are not).
    2. Every file must be named by the hex digest of its own contents.
    3. Every index entry must have a stored file, and every stored file an
       index entry. Stored files are identified by their recomputed digest.

    Args:
        documents_dir: The content directory of the library.
        index_path: The library's index.json.

    Returns:
        A ValidationResult listing every discrepancy found.

    Raises:
        LibraryIOError: If the directory or a stored file cannot be read.
        CorruptIndexError: If the index cannot be loaded.
    """
    result = ValidationResult()
    stored: set[ContentDigest] = set()

    for dir_entry in _scan_documents_dir(documents_dir):
        path = Path(dir_entry.path)
        try:
            mode = dir_entry.stat(follow_symlinks=False).st_mode
        except OSError as exc:
            raise LibraryIOError("determine file type of", path, exc.strerror) from exc

        if not stat.S_ISREG(mode):
            result.invalid_file_types.append(
                NotAFile(file_name=dir_entry.name, kind=_describe_file_type(mode))
            )
            continue

        try:
            digest = compute_file_digest(path)
        except OSError as exc:
            raise LibraryIOError("hash stored document", path, exc.strerror) from exc

        result.files_checked += 1
        if dir_entry.name != digest.hex:
            result.hash_mismatches.append(HashMismatch(expected=digest, actual=dir_entry.name))
        stored.add(digest)

    index = LibraryIndex.load(index_path)
    indexed = {entry.digest for entry in index}
    result.entries_checked = len(index)

    result.missing_files = sorted(indexed - stored)
    result.missing_index_entries = sorted(stored - indexed)

    if not result.is_valid():
        logger.warning("Library validation found %d issue(s)", result.total_issues)
    return result
