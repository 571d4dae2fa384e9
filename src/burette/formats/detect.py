# ABOUTME: File-format sniffing for documents offered to the library.
# ABOUTME: Recognizes PDFs by magic bytes and EPUBs by their ZIP mimetype member.

import zipfile
from pathlib import Path

from burette.errors import LibraryIOError, UnsupportedFormatError
from burette.metadata.types import FileFormat

_PDF_MAGIC = b"%PDF-"
_EPUB_MIMETYPE_MEMBER = "mimetype"


def _is_epub(path: Path) -> bool:
    """Check for an OCF container: a ZIP whose mimetype member names EPUB."""
    if not zipfile.is_zipfile(path):
        return False
    try:
        with zipfile.ZipFile(path) as archive:
            mimetype = archive.read(_EPUB_MIMETYPE_MEMBER)
    except (KeyError, zipfile.BadZipFile):
        return False
    return mimetype.strip() == FileFormat.EPUB.mime_type.encode("ascii")


def detect_file_format(path: Path) -> FileFormat:
    """Determine whether a file is a PDF or an EPUB from its contents.

    Args:
        path: Path to the file to inspect.

    Returns:
        The detected FileFormat.

    Raises:
        LibraryIOError: If the file cannot be read.
        UnsupportedFormatError: If the file is neither a PDF nor an EPUB.
    """
    try:
        with open(path, "rb") as f:
            header = f.read(len(_PDF_MAGIC))
        if header == _PDF_MAGIC:
            return FileFormat.PDF
        if _is_epub(path):
            return FileFormat.EPUB
    except OSError as exc:
        raise LibraryIOError("read", path, exc.strerror) from exc

    raise UnsupportedFormatError(f"Unsupported file format: {path}")
