# ABOUTME: Metadata package: the bibliographic record attached to each document.
# ABOUTME: Exports DocMetadata, FileFormat, Isbn13, and file naming helpers.

from burette.metadata.isbn import Isbn13
from burette.metadata.naming import format_as_file_name
from burette.metadata.types import DocMetadata, FileFormat

__all__ = [
    "DocMetadata",
    "FileFormat",
    "Isbn13",
    "format_as_file_name",
]
