# ABOUTME: Converts between IndexEntry objects and index.json dictionaries.
# ABOUTME: Validates the entry schema on the way in; unknown shapes are corrupt.

from dataclasses import dataclass
from typing import Any

from burette.errors import InvalidIsbnError
from burette.metadata.isbn import Isbn13
from burette.metadata.naming import format_as_file_name
from burette.metadata.types import DocMetadata, FileFormat
from burette.store.digest import ContentDigest


@dataclass
class IndexEntry:
    """A stored document: its content digest plus its metadata."""

    digest: ContentDigest
    metadata: DocMetadata

    @property
    def title(self) -> str:
        return self.metadata.title

    def default_file_name(self) -> str:
        """File name used when retrieving without an explicit destination."""
        stem = format_as_file_name(self.metadata.title)
        return f"{stem}.{self.metadata.file_format.extension}"


class EntrySchemaError(ValueError):
    """Raised when a serialized entry does not match the index schema."""


def entry_to_dict(entry: IndexEntry) -> dict[str, Any]:
    """Convert an IndexEntry to a JSON-ready dict with a stable field order.

    The doi key is only written when the document has one.
    """
    meta = entry.metadata
    data: dict[str, Any] = {
        "hash": entry.digest.hex,
        "title": meta.title,
        "authors": list(meta.authors),
        "isbns": [str(isbn) for isbn in meta.isbns],
        "file_format": meta.file_format.mime_type,
    }
    if meta.doi is not None:
        data["doi"] = meta.doi
    return data


def _require(data: dict[str, Any], key: str, kind: type) -> Any:
    """Fetch a required key and check its JSON type."""
    if key not in data:
        raise EntrySchemaError(f"missing field '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise EntrySchemaError(f"field '{key}' must be {kind.__name__}")
    return value


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    values = _require(data, key, list)
    if not all(isinstance(v, str) for v in values):
        raise EntrySchemaError(f"field '{key}' must contain only strings")
    return values


def dict_to_entry(data: Any) -> IndexEntry:
    """Convert one decoded index.json element back to an IndexEntry.

    Raises:
        EntrySchemaError: If any field is missing, mistyped, or invalid.
    """
    if not isinstance(data, dict):
        raise EntrySchemaError("entry must be an object")

    try:
        digest = ContentDigest.from_hex(_require(data, "hash", str))
        file_format = FileFormat.from_mime_type(_require(data, "file_format", str))
        isbns = [Isbn13.parse(value) for value in _string_list(data, "isbns")]
    except InvalidIsbnError as exc:
        raise EntrySchemaError(f"invalid ISBN: {exc}") from exc
    except EntrySchemaError:
        raise
    except ValueError as exc:
        raise EntrySchemaError(str(exc)) from exc

    doi = data.get("doi")
    if doi is not None and not isinstance(doi, str):
        raise EntrySchemaError("field 'doi' must be str")

    metadata = DocMetadata(
        title=_require(data, "title", str),
        file_format=file_format,
        authors=_string_list(data, "authors"),
        isbns=isbns,
        doi=doi,
    )
    return IndexEntry(digest=digest, metadata=metadata)
