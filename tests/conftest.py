# ABOUTME: Shared pytest fixtures for Burette tests.
# ABOUTME: Provides sample PDF/EPUB files, a document factory, and an empty library.

from collections.abc import Callable
from pathlib import Path

import pytest
from ebooklib import epub

from burette.core.library import Library
from tests.helpers import ROSE_ISBN, pdf_bytes


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing a distinct fake PDF per call."""
    source_dir = tmp_path / "sources"
    source_dir.mkdir(exist_ok=True)

    def _make(text: str) -> Path:
        path = source_dir / f"{len(list(source_dir.iterdir()))}.pdf"
        path.write_bytes(pdf_bytes(text))
        return path

    return _make


@pytest.fixture
def sample_pdf(make_pdf: Callable[[str], Path]) -> Path:
    """A fake PDF titled 'Foo' in its content."""
    return make_pdf("Foo")


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """Create a minimal valid EPUB file with known metadata."""
    book = epub.EpubBook()

    book.set_identifier(f"urn:isbn:{ROSE_ISBN}")
    book.set_title("The Name of the Rose")
    book.set_language("en")
    book.add_author("Umberto Eco")

    # Add a minimal chapter so the EPUB is structurally valid
    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter.content = b"<html><body><h1>Chapter 1</h1><p>Content.</p></body></html>"
    book.add_item(chapter)

    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    filepath = tmp_path / "name_of_the_rose.epub"
    epub.write_epub(str(filepath), book)
    return filepath


@pytest.fixture
def library(tmp_path: Path) -> Library:
    """An empty library in a temporary directory."""
    return Library.create(tmp_path / "library")
