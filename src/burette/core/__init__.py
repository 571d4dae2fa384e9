# ABOUTME: Library orchestration and integrity validation.
# ABOUTME: Exports the Library handle and the validation result types.

from burette.core.library import DEFAULT_LIBRARY_PATH, Library, RemovalError, RemovalResult
from burette.core.validator import HashMismatch, NotAFile, ValidationResult, validate_library

__all__ = [
    "DEFAULT_LIBRARY_PATH",
    "HashMismatch",
    "Library",
    "NotAFile",
    "RemovalError",
    "RemovalResult",
    "ValidationResult",
    "validate_library",
]
