# ABOUTME: Storage primitives for Burette: content digests, the JSON index, and versioning.
# ABOUTME: Exports the index types and digest helpers used by the Library.

from burette.store.digest import ContentDigest, compute_file_digest
from burette.store.index import BatchMatch, LibraryIndex, MatchKind, PrefixMatch
from burette.store.mapping import IndexEntry
from burette.store.undo import UndoLog

__all__ = [
    "BatchMatch",
    "ContentDigest",
    "IndexEntry",
    "LibraryIndex",
    "MatchKind",
    "PrefixMatch",
    "UndoLog",
    "compute_file_digest",
]
