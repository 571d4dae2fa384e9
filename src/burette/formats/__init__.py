# ABOUTME: Format support: detecting PDF/EPUB files and reading EPUB metadata.
# ABOUTME: Exports detect_file_format and read_epub_hints.

from burette.formats.detect import detect_file_format
from burette.formats.epub import EpubHints, EpubReadError, read_epub_hints

__all__ = [
    "EpubHints",
    "EpubReadError",
    "detect_file_format",
    "read_epub_hints",
]
