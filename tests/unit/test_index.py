# ABOUTME: Unit tests for LibraryIndex persistence, lookup, and uniqueness checks.
# ABOUTME: Exercises identifier precedence, batch prefix classification, and corrupt indexes.

import json
from pathlib import Path
from unittest.mock import patch

import pytest

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
from burette.metadata import Isbn13
from burette.store.digest import ContentDigest
from burette.store.index import LibraryIndex, MatchKind
from burette.store.mapping import IndexEntry
from tests.helpers import MOBY_ISBN, MOBY_ISBN_ALT, ROSE_ISBN, pdf_metadata

# Digests chosen so that prefixes overlap in predictable ways
AB1 = ContentDigest.from_hex("ab1" + "0" * 61)
AB2 = ContentDigest.from_hex("ab2" + "0" * 61)
CD = ContentDigest.from_hex("cd" + "0" * 62)


@pytest.fixture()
def index() -> LibraryIndex:
    return LibraryIndex(
        [
            IndexEntry(AB1, pdf_metadata("Rose", isbns=[ROSE_ISBN])),
            IndexEntry(AB2, pdf_metadata("Moby", isbns=[MOBY_ISBN], doi="10.5962/bhl.title.59991")),
            IndexEntry(CD, pdf_metadata("Paper", doi="10.1000/182")),
        ]
    )


class TestPersistence:
    """Tests for LibraryIndex.load and save."""

    def test_save_then_load(self, tmp_path: Path, index: LibraryIndex) -> None:
        path = tmp_path / "index.json"
        index.save(path)
        loaded = LibraryIndex.load(path)
        assert loaded.entries == index.entries

    def test_preserves_order(self, tmp_path: Path, index: LibraryIndex) -> None:
        path = tmp_path / "index.json"
        index.save(path)
        assert [e.title for e in LibraryIndex.load(path)] == ["Rose", "Moby", "Paper"]

    def test_empty_index_is_empty_array(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        LibraryIndex().save(path)
        assert json.loads(path.read_text()) == []

    def test_no_temp_file_left(self, tmp_path: Path, index: LibraryIndex) -> None:
        path = tmp_path / "index.json"
        index.save(path)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["index.json"]

    def test_failed_save_keeps_old_index(self, tmp_path: Path, index: LibraryIndex) -> None:
        path = tmp_path / "index.json"
        LibraryIndex().save(path)

        with patch("burette.store.index.os.replace", side_effect=OSError(28, "No space left")):
            with pytest.raises(LibraryIOError, match="write library index"):
                index.save(path)

        assert json.loads(path.read_text()) == []
        assert not (tmp_path / "index.json.tmp").exists()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CorruptIndexError, match="not found"):
            LibraryIndex.load(tmp_path / "index.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text("[{")
        with pytest.raises(CorruptIndexError, match="not valid JSON"):
            LibraryIndex.load(path)

    def test_not_an_array(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text("{}")
        with pytest.raises(CorruptIndexError, match="array"):
            LibraryIndex.load(path)

    def test_bad_entry(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text(json.dumps([{"hash": "nope"}]))
        with pytest.raises(CorruptIndexError, match="#0"):
            LibraryIndex.load(path)


class TestFindByIdentifier:
    """Tests for identifier resolution precedence."""

    def test_isbn(self, index: LibraryIndex) -> None:
        assert index.find_by_identifier(ROSE_ISBN).digest == AB1

    def test_hyphenated_isbn(self, index: LibraryIndex) -> None:
        assert index.find_by_identifier("978-0-15-600131-1").digest == AB1

    def test_unknown_isbn_is_not_tried_as_prefix(self, index: LibraryIndex) -> None:
        """A valid ISBN that matches nothing is reported as not found."""
        with pytest.raises(NotFoundError, match="ISBN"):
            index.find_by_identifier(MOBY_ISBN_ALT)

    def test_doi(self, index: LibraryIndex) -> None:
        assert index.find_by_identifier("10.1000/182").digest == CD

    def test_unique_prefix(self, index: LibraryIndex) -> None:
        assert index.find_by_identifier("ab2").digest == AB2

    def test_full_hash(self, index: LibraryIndex) -> None:
        assert index.find_by_identifier(CD.hex).digest == CD

    def test_ambiguous_prefix(self, index: LibraryIndex) -> None:
        with pytest.raises(AmbiguousMatchError) as exc_info:
            index.find_by_identifier("ab")
        assert exc_info.value.prefix == "ab"
        assert {e.digest for e in exc_info.value.matches} == {AB1, AB2}

    def test_no_match(self, index: LibraryIndex) -> None:
        with pytest.raises(NotFoundError):
            index.find_by_identifier("ef")

    def test_empty_identifier(self, index: LibraryIndex) -> None:
        with pytest.raises(InvalidInputError):
            index.find_by_identifier("")


class TestHashPrefixes:
    """Tests for single and batched prefix matching."""

    def test_match_kinds(self, index: LibraryIndex) -> None:
        assert index.find_by_hash_prefix("ef").kind is MatchKind.NOT_FOUND
        assert index.find_by_hash_prefix("cd").kind is MatchKind.FOUND
        assert index.find_by_hash_prefix("ab").kind is MatchKind.AMBIGUOUS

    def test_empty_prefix(self, index: LibraryIndex) -> None:
        with pytest.raises(InvalidInputError):
            index.find_by_hash_prefix("")

    def test_batch_classification(self, index: LibraryIndex) -> None:
        batch = index.find_all_by_hash_prefixes(["cd", "ab", "ef"])
        assert [e.digest for e in batch.found] == [CD]
        assert batch.not_found == ["ef"]
        assert [m.prefix for m in batch.ambiguous] == ["ab"]

    def test_batch_duplicates_collapsed(self, index: LibraryIndex) -> None:
        batch = index.find_all_by_hash_prefixes(["ef", "ef", "cd", "cd"])
        assert batch.not_found == ["ef"]
        assert len(batch.found) == 1

    def test_batch_nested_prefixes_count_once(self, index: LibraryIndex) -> None:
        batch = index.find_all_by_hash_prefixes(["ab1", "ab10", AB1.hex])
        assert [e.digest for e in batch.found] == [AB1]

    def test_batch_ambiguous_withholds_unique_match(self, index: LibraryIndex) -> None:
        """A full hash whose entry an ambiguous prefix also covers is not found."""
        batch = index.find_all_by_hash_prefixes(["ab", AB1.hex, "cd"])
        assert [e.digest for e in batch.found] == [CD]
        assert [m.prefix for m in batch.ambiguous] == ["ab"]
        assert batch.not_found == []

    def test_batch_empty_prefix(self, index: LibraryIndex) -> None:
        with pytest.raises(InvalidInputError):
            index.find_all_by_hash_prefixes(["cd", ""])


class TestCheckUnique:
    """Tests for duplicate detection on add and edit."""

    def test_accepts_new_document(self, index: LibraryIndex) -> None:
        digest = ContentDigest.from_hex("ef" + "0" * 62)
        index.check_unique(pdf_metadata("New", isbns=[MOBY_ISBN_ALT]), digest)

    def test_duplicate_isbn(self, index: LibraryIndex) -> None:
        with pytest.raises(DuplicateIsbnError) as exc_info:
            index.check_unique(pdf_metadata("Other", isbns=[MOBY_ISBN_ALT, MOBY_ISBN]))
        assert exc_info.value.existing.digest == AB2

    def test_duplicate_content(self, index: LibraryIndex) -> None:
        with pytest.raises(DuplicateDocumentError):
            index.check_unique(pdf_metadata("Copy"), CD)

    def test_duplicate_doi(self, index: LibraryIndex) -> None:
        with pytest.raises(DuplicateDoiError):
            index.check_unique(pdf_metadata("Other", doi="10.1000/182"))

    def test_isbn_checked_before_digest_per_entry(self, index: LibraryIndex) -> None:
        """Both collide with the first entry; the ISBN conflict is reported."""
        with pytest.raises(DuplicateIsbnError):
            index.check_unique(pdf_metadata("Copy", isbns=[ROSE_ISBN]), AB1)

    def test_earlier_entry_wins(self, index: LibraryIndex) -> None:
        """A DOI clash with entry 2 is found before a content clash with entry 3."""
        with pytest.raises(DuplicateDoiError):
            index.check_unique(pdf_metadata("Copy", doi="10.5962/bhl.title.59991"), CD)

    def test_exclude_skips_entry(self, index: LibraryIndex) -> None:
        rose = index.entries[0]
        index.check_unique(rose.metadata, exclude=rose)


class TestMutation:
    """Tests for append and remove_digests."""

    def test_remove_digests(self, index: LibraryIndex) -> None:
        removed = index.remove_digests({AB1, CD})
        assert [e.digest for e in removed] == [AB1, CD]
        assert [e.digest for e in index] == [AB2]

    def test_append(self, index: LibraryIndex) -> None:
        digest = ContentDigest.from_hex("ef" + "0" * 62)
        index.append(IndexEntry(digest, pdf_metadata("New", isbns=[MOBY_ISBN_ALT])))
        assert len(index) == 4
        assert index.find_by_isbn(Isbn13.parse(MOBY_ISBN_ALT)).digest == digest
