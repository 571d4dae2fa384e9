# ABOUTME: Unit tests for IndexEntry serialization to and from index.json dicts.
# ABOUTME: Validates field order, optional DOI handling, and schema rejection.

import pytest

from burette.metadata import DocMetadata, FileFormat, Isbn13
from burette.store.digest import ContentDigest
from burette.store.mapping import EntrySchemaError, IndexEntry, dict_to_entry, entry_to_dict

HEX = "dffd6021bb2bd5b0af676290809ec3a53191dd81c7f70a4b28688a362182986f"


def _entry(**kwargs) -> IndexEntry:
    metadata = DocMetadata(
        title=kwargs.pop("title", "Moby Dick; Or, The Whale"),
        file_format=kwargs.pop("file_format", FileFormat.EPUB),
        **kwargs,
    )
    return IndexEntry(digest=ContentDigest.from_hex(HEX), metadata=metadata)


class TestEntryToDict:
    """Tests for entry_to_dict."""

    def test_field_order(self) -> None:
        entry = _entry(authors=["Herman Melville"], isbns=[Isbn13.parse("9780198853695")])
        assert list(entry_to_dict(entry)) == ["hash", "title", "authors", "isbns", "file_format"]

    def test_values(self) -> None:
        entry = _entry(authors=["Herman Melville"], isbns=[Isbn13.parse("978-0198853695")])
        data = entry_to_dict(entry)
        assert data["hash"] == HEX
        assert data["authors"] == ["Herman Melville"]
        assert data["isbns"] == ["9780198853695"]
        assert data["file_format"] == "application/epub+zip"

    def test_doi_written_when_present(self) -> None:
        data = entry_to_dict(_entry(doi="10.5962/bhl.title.59991"))
        assert data["doi"] == "10.5962/bhl.title.59991"

    def test_doi_omitted_when_absent(self) -> None:
        assert "doi" not in entry_to_dict(_entry())


class TestDictToEntry:
    """Tests for dict_to_entry."""

    def test_roundtrip(self) -> None:
        entry = _entry(
            authors=["Herman Melville"],
            isbns=[Isbn13.parse("9780198853695"), Isbn13.parse("9788417517212")],
            doi="10.5962/bhl.title.59991",
        )
        assert dict_to_entry(entry_to_dict(entry)) == entry

    def test_missing_doi_is_none(self) -> None:
        data = {
            "hash": HEX,
            "title": "Foo",
            "authors": [],
            "isbns": [],
            "file_format": "application/pdf",
        }
        entry = dict_to_entry(data)
        assert entry.metadata.doi is None
        assert entry.metadata.file_format is FileFormat.PDF

    @pytest.mark.parametrize(
        "field",
        ["hash", "title", "authors", "isbns", "file_format"],
    )
    def test_missing_required_field(self, field: str) -> None:
        data = entry_to_dict(_entry())
        del data[field]
        with pytest.raises(EntrySchemaError):
            dict_to_entry(data)

    def test_not_an_object(self) -> None:
        with pytest.raises(EntrySchemaError, match="object"):
            dict_to_entry(["not", "a", "dict"])

    def test_bad_hash(self) -> None:
        data = entry_to_dict(_entry())
        data["hash"] = "abc"
        with pytest.raises(EntrySchemaError):
            dict_to_entry(data)

    def test_bad_isbn(self) -> None:
        data = entry_to_dict(_entry())
        data["isbns"] = ["9780375826695"]
        with pytest.raises(EntrySchemaError, match="invalid ISBN"):
            dict_to_entry(data)

    def test_unknown_format(self) -> None:
        data = entry_to_dict(_entry())
        data["file_format"] = "text/plain"
        with pytest.raises(EntrySchemaError):
            dict_to_entry(data)

    def test_authors_must_be_strings(self) -> None:
        data = entry_to_dict(_entry())
        data["authors"] = ["Herman Melville", 42]
        with pytest.raises(EntrySchemaError, match="only strings"):
            dict_to_entry(data)

    def test_doi_must_be_string(self) -> None:
        data = entry_to_dict(_entry())
        data["doi"] = 10
        with pytest.raises(EntrySchemaError, match="doi"):
            dict_to_entry(data)


class TestDefaultFileName:
    """Tests for IndexEntry.default_file_name."""

    def test_uses_title_and_extension(self) -> None:
        assert _entry().default_file_name() == "moby_dick_or_the_whale.epub"

    def test_pdf(self) -> None:
        assert _entry(title="Foo", file_format=FileFormat.PDF).default_file_name() == "foo.pdf"
