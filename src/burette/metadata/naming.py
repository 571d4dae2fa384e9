# ABOUTME: Derives file-system friendly names from document titles.
# ABOUTME: Used when a retrieved document has no explicit destination.

import re

# Any run of characters that are not ASCII letters or digits
_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")

_FALLBACK_NAME = "document"


def format_as_file_name(title: str) -> str:
    """Turn a title into a lower-case, underscore separated file stem.

    Runs of non-alphanumeric characters collapse into a single underscore and
    separators at either end are trimmed, so "The Name of the Rose!" becomes
    "the_name_of_the_rose". A title with no usable characters falls back to
    "document".
    """
    stem = _SEPARATOR_RE.sub("_", title.lower()).strip("_")
    return stem or _FALLBACK_NAME
