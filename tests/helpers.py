# ABOUTME: Plain helper functions shared by Burette tests.
# ABOUTME: Builds fake PDF bytes and DocMetadata records with minimal boilerplate.

from burette.metadata.isbn import Isbn13
from burette.metadata.types import DocMetadata, FileFormat

ROSE_ISBN = "9780156001311"
MOBY_ISBN = "9780198853695"
MOBY_ISBN_ALT = "9788417517212"


def pdf_bytes(text: str) -> bytes:
    """A tiny file with a PDF header; the body makes each document unique."""
    return b"%PDF-1.4\n" + text.encode("utf-8") + b"\n%%EOF\n"


def pdf_metadata(title: str, **kwargs) -> DocMetadata:
    """DocMetadata for a PDF; isbns may be given as strings."""
    isbns = [Isbn13.parse(i) for i in kwargs.pop("isbns", [])]
    return DocMetadata(title=title, file_format=FileFormat.PDF, isbns=isbns, **kwargs)
