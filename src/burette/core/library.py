# ABOUTME: The Library: owner of a library directory's version stamp, index, and documents.
# ABOUTME: Implements create, open, add, retrieve, edit, bulk remove, and validate.

import logging
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from burette.core.validator import ValidationResult, validate_library
from burette.errors import (
    AlreadyExistsError,
    DestinationExistsError,
    InvalidInputError,
    LibraryIOError,
    NotFoundError,
    VersionMismatchError,
)
from burette.metadata.types import DocMetadata
from burette.store.compat import (
    COMPATIBLE_VERSIONS,
    LIBRARY_FORMAT_VERSION,
    is_compatible,
    normalize_stamp,
)
from burette.store.digest import ContentDigest, compute_file_digest
from burette.store.index import LibraryIndex, PrefixMatch
from burette.store.mapping import IndexEntry
from burette.store.undo import UndoLog

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY_PATH = Path.home() / ".book-store"

# Fixed members of a library directory
DOCUMENT_STORE_DIR = "documents"
INDEX_FILE = "index.json"
VERSION_FILE = "burette_version"

# Callback used by Library.edit to change an entry in place
EditFn = Callable[[IndexEntry], None]


@dataclass
class RemovalError:
    """A document that matched uniquely but whose file could not be deleted."""

    entry: IndexEntry
    error: LibraryIOError


@dataclass
class RemovalResult:
    """Outcome of Library.remove, split into four disjoint buckets."""

    removed: list[IndexEntry] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    ambiguous: list[PrefixMatch] = field(default_factory=list)
    errors: list[RemovalError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True only if every prefix resolved and every file was deleted."""
        return not (self.not_found or self.ambiguous or self.errors)


class Library:
    """Handle to a document library directory.

    Layout:
        <root>/
            burette_version   version stamp
            index.json        JSON array of index entries
            documents/
                <sha256 hex>  one file per document

    The handle holds no index state: every operation re-reads index.json,
    and mutating operations write the whole index back. There is no locking,
    so concurrent processes working on one library are unsafe.
    """

    def __init__(self, path: Path, version: str) -> None:
        self.path = path
        self.version = version

    @property
    def documents_dir(self) -> Path:
        return self.path / DOCUMENT_STORE_DIR

    @property
    def index_path(self) -> Path:
        return self.path / INDEX_FILE

    @property
    def version_path(self) -> Path:
        return self.path / VERSION_FILE

    def content_path(self, digest: ContentDigest) -> Path:
        """Location of a document's stored file."""
        return self.documents_dir / digest.hex

    def _load_index(self) -> LibraryIndex:
        return LibraryIndex.load(self.index_path)

    # --- Lifecycle ---

    @classmethod
    def create(cls, path: Path) -> "Library":
        """Create a new, empty library.

        If any step after the directory is created fails, the directory and
        any parent directories created for it are removed again before the
        error propagates.

        Raises:
            AlreadyExistsError: If anything exists at path.
            LibraryIOError: If the directory or its files cannot be written.
        """
        path = Path(path)
        if path.exists() or path.is_symlink():
            raise AlreadyExistsError(f"Directory {path} already exists")

        # Topmost directory this call creates; undo removes from there
        created_root = path
        while not created_root.parent.exists() and created_root.parent != created_root:
            created_root = created_root.parent

        library = cls(path, LIBRARY_FORMAT_VERSION)
        with UndoLog() as undo:
            try:
                path.mkdir(parents=True)
            except FileExistsError as exc:
                raise AlreadyExistsError(f"Directory {path} already exists") from exc
            except OSError as exc:
                raise LibraryIOError("create library directory", path, exc.strerror) from exc
            undo.record(
                f"remove library directory {created_root}",
                lambda: shutil.rmtree(created_root),
            )

            try:
                library.documents_dir.mkdir()
            except OSError as exc:
                raise LibraryIOError(
                    "create documents directory", library.documents_dir, exc.strerror
                ) from exc

            LibraryIndex().save(library.index_path)

            try:
                library.version_path.write_text(LIBRARY_FORMAT_VERSION, encoding="utf-8")
            except OSError as exc:
                raise LibraryIOError(
                    "write version file", library.version_path, exc.strerror
                ) from exc

        logger.info("Created library at %s (format %s)", path, LIBRARY_FORMAT_VERSION)
        return library

    @classmethod
    def open(cls, path: Path) -> "Library":
        """Open an existing library.

        Checks the version stamp against the compatibility table and parses
        the index. Does not check that stored files match the index; use
        validate() for that.

        Raises:
            NotFoundError: If the library directory does not exist.
            VersionMismatchError: If the version stamp is missing or unsupported.
            CorruptIndexError: If the index cannot be parsed.
            LibraryIOError: If the version stamp cannot be read.
        """
        path = Path(path)
        if not path.is_dir():
            raise NotFoundError(f"Library directory {path} does not exist")

        version_path = path / VERSION_FILE
        try:
            raw_stamp = version_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise VersionMismatchError(f"Version file {version_path} is missing") from exc
        except UnicodeDecodeError as exc:
            raise VersionMismatchError(
                f"Version file {version_path} does not hold a readable version stamp"
            ) from exc
        except OSError as exc:
            raise LibraryIOError("read version file", version_path, exc.strerror) from exc

        stamp = normalize_stamp(raw_stamp)
        if not is_compatible(stamp):
            supported = ", ".join(sorted(COMPATIBLE_VERSIONS))
            raise VersionMismatchError(
                f"Document library version ({stamp}) is incompatible with this "
                f"software (supported: {supported})"
            )

        library = cls(path, stamp)
        # Parse once so a corrupt index is reported at open time
        library._load_index()
        return library

    # --- Queries ---

    def documents(self) -> list[IndexEntry]:
        """Return all index entries in stored order."""
        return self._load_index().entries

    def find(self, identifier: str) -> IndexEntry:
        """Resolve an ISBN, DOI, or hash prefix to one entry.

        Raises:
            NotFoundError, AmbiguousMatchError, InvalidInputError
        """
        return self._load_index().find_by_identifier(identifier)

    # --- Mutations ---

    def add(self, source: Path, metadata: DocMetadata) -> IndexEntry:
        """Copy a document into the store and record it in the index.

        Either both the stored file and the index entry exist afterwards, or
        neither does: if saving the index fails, the copied file is deleted.

        Args:
            source: Path of the document to add.
            metadata: Complete metadata for the document.

        Returns:
            The new IndexEntry.

        Raises:
            DuplicateIsbnError: If an existing entry shares an ISBN.
            DuplicateDocumentError: If the same content is already stored.
            DuplicateDoiError: If an existing entry has the same DOI.
            InvalidInputError: If the title is empty.
            LibraryIOError: If the source cannot be read or copied, or the
                index cannot be saved.
        """
        source = Path(source)
        if not metadata.title.strip():
            raise InvalidInputError("Title cannot be empty")

        try:
            digest = compute_file_digest(source)
        except OSError as exc:
            raise LibraryIOError("read document", source, exc.strerror) from exc

        index = self._load_index()
        index.check_unique(metadata, digest)

        store_path = self.content_path(digest)
        entry = IndexEntry(digest=digest, metadata=metadata)

        with UndoLog() as undo:
            try:
                self.documents_dir.mkdir(exist_ok=True)
            except OSError as exc:
                raise LibraryIOError(
                    "create documents directory", self.documents_dir, exc.strerror
                ) from exc

            undo.record(
                f"delete stored copy {store_path}",
                lambda: store_path.unlink(missing_ok=True),
            )
            try:
                shutil.copyfile(source, store_path)
            except OSError as exc:
                raise LibraryIOError("copy document to", store_path, exc.strerror) from exc

            index.append(entry)
            index.save(self.index_path)

        logger.info("Added %s (%s)", entry.title, digest.short)
        return entry

    def retrieve(self, identifier: str, destination: Path | None = None) -> Path:
        """Copy a stored document out of the library.

        Args:
            identifier: ISBN, DOI, or hash prefix.
            destination: Output path. Defaults to a name derived from the
                title, in the current working directory.

        Returns:
            The path the document was written to.

        Raises:
            NotFoundError, AmbiguousMatchError: If the identifier does not
                resolve to exactly one document.
            DestinationExistsError: If the output path already exists.
            LibraryIOError: If the stored file cannot be read or the copy fails.
        """
        entry = self._load_index().find_by_identifier(identifier)

        if destination is None:
            destination = Path.cwd() / entry.default_file_name()
        destination = Path(destination)
        if destination.exists() or destination.is_symlink():
            raise DestinationExistsError(f"Output file {destination} already exists")

        store_path = self.content_path(entry.digest)
        try:
            src = open(store_path, "rb")
        except OSError as exc:
            raise LibraryIOError("read stored document", store_path, exc.strerror) from exc

        with src, UndoLog() as undo:
            # Exclusive create: never overwrite, even if the file appeared meanwhile
            try:
                dst = open(destination, "xb")
            except FileExistsError as exc:
                raise DestinationExistsError(
                    f"Output file {destination} already exists"
                ) from exc
            except OSError as exc:
                raise LibraryIOError("create output file", destination, exc.strerror) from exc
            undo.record(f"delete partial copy {destination}", destination.unlink)

            try:
                with dst:
                    shutil.copyfileobj(src, dst)
            except OSError as exc:
                raise LibraryIOError("copy document to", destination, exc.strerror) from exc

        logger.info("Retrieved %s to %s", entry.digest.short, destination)
        return destination

    def edit(
        self,
        hash_prefix: str,
        edit_fn: EditFn,
        *,
        enforce_unique: bool = True,
    ) -> IndexEntry:
        """Change a document's metadata in place and save the index.

        edit_fn receives the matched entry and may read and modify its
        metadata freely. Nothing is saved if it raises.

        Args:
            hash_prefix: Must match exactly one document.
            edit_fn: Callback that mutates the entry.
            enforce_unique: Re-check ISBN and DOI uniqueness against the
                other entries before saving. Pass False to allow duplicates.

        Returns:
            The edited entry.

        Raises:
            NotFoundError, AmbiguousMatchError, InvalidInputError: If the
                prefix does not match exactly one document.
            InvalidInputError: If the edit leaves the title empty.
            DuplicateIsbnError, DuplicateDoiError: If enforce_unique is set
                and the edit introduced a collision.
            LibraryIOError: If the index cannot be saved.
        """
        index = self._load_index()
        entry = index.find_by_hash_prefix(hash_prefix).unique()
        digest = entry.digest

        edit_fn(entry)

        if entry.digest != digest:
            raise InvalidInputError("Editing a document cannot change its content hash")
        if not entry.metadata.title.strip():
            raise InvalidInputError("Title cannot be empty")
        if enforce_unique:
            index.check_unique(entry.metadata, exclude=entry)

        index.save(self.index_path)
        logger.info("Edited metadata of %s", digest.short)
        return entry

    def remove(self, hash_prefixes: Iterable[str]) -> RemovalResult:
        """Remove every document matched uniquely by one of the prefixes.

        A prefix matching several documents removes none of them. A document
        whose file cannot be deleted keeps its index entry and is reported in
        errors; other removals still go ahead. All successful removals are
        written to the index in one save.

        Raises:
            InvalidInputError: If no prefixes are given or any is empty.
            LibraryIOError: If the index cannot be saved. Files deleted
                before the failure stay deleted; validate() will report them.
        """
        prefixes = list(hash_prefixes)
        if not prefixes:
            raise InvalidInputError("At least one hash prefix is required")

        index = self._load_index()
        batch = index.find_all_by_hash_prefixes(prefixes)
        result = RemovalResult(not_found=batch.not_found, ambiguous=batch.ambiguous)

        deleted: set[ContentDigest] = set()
        for entry in batch.found:
            path = self.content_path(entry.digest)
            try:
                path.unlink()
            except OSError as exc:
                error = LibraryIOError("remove document", path, exc.strerror)
                error.__cause__ = exc
                logger.warning("Could not remove %s: %s", entry.digest.short, exc)
                result.errors.append(RemovalError(entry=entry, error=error))
                continue
            deleted.add(entry.digest)

        if deleted:
            result.removed = index.remove_digests(deleted)
            try:
                index.save(self.index_path)
            except LibraryIOError:
                logger.error(
                    "Deleted %d document file(s) but could not update the index", len(deleted)
                )
                raise

        for entry in result.removed:
            logger.info("Removed %s (%s)", entry.title, entry.digest.short)
        return result

    # --- Integrity ---

    def validate(self) -> ValidationResult:
        """Cross-check stored files against the index.

        Raises:
            LibraryIOError: If the documents directory or a file cannot be read.
            CorruptIndexError: If the index cannot be loaded.
        """
        return validate_library(self.documents_dir, self.index_path)
