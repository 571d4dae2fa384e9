# ABOUTME: Library format versioning: the stamp written on create and the stamps we can open.
# ABOUTME: Kept as data so compatibility is decided here, not by the package version.

# Stamp written into burette_version for newly created libraries
LIBRARY_FORMAT_VERSION = "0.1.0"

# Every stamp this build can read. Add an entry when a new release keeps the
# on-disk layout and index schema unchanged.
COMPATIBLE_VERSIONS: frozenset[str] = frozenset({"0.1.0"})


def normalize_stamp(raw: str) -> str:
    """Strip trailing whitespace (e.g. a newline added by an editor)."""
    return raw.rstrip()


def is_compatible(stamp: str) -> bool:
    """Whether a library with this version stamp can be opened."""
    return normalize_stamp(stamp) in COMPATIBLE_VERSIONS
