# ABOUTME: SHA-256 content digests that name every document in the store.
# ABOUTME: Provides hex/short renderings, prefix matching, and chunked file hashing.

import hashlib
import re
from dataclasses import dataclass
from pathlib import Path

from burette.errors import InvalidInputError

_CHUNK_SIZE = 65536  # 64 KB
_DIGEST_SIZE = 32
_SHORT_SIZE = 6  # bytes, i.e. 12 hex characters

_HEX_RE = re.compile(r"[0-9a-fA-F]{64}")


@dataclass(frozen=True, order=True)
class ContentDigest:
    """A 256-bit content hash.

    Ordered by its raw bytes so listings of digests sort deterministically.
    The lowercase hex encoding is the canonical form: it names the stored
    file and is what hash prefixes are matched against.
    """

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != _DIGEST_SIZE:
            raise ValueError(f"SHA-256 digest must be {_DIGEST_SIZE} bytes, got {len(self.raw)}")

    @classmethod
    def from_hex(cls, text: str) -> "ContentDigest":
        """Parse a 64-character hex string (either case).

        Raises:
            ValueError: If the text is not exactly 64 hex digits.
        """
        if not _HEX_RE.fullmatch(text):
            raise ValueError(f"Invalid SHA-256 hash: {text!r}")
        return cls(bytes.fromhex(text))

    @property
    def hex(self) -> str:
        """Lowercase 64-character hex encoding."""
        return self.raw.hex()

    @property
    def short(self) -> str:
        """First 12 hex characters, for display only."""
        return self.raw[:_SHORT_SIZE].hex()

    def starts_with(self, prefix: str) -> bool:
        """Whether the hex encoding begins with prefix.

        Raises:
            InvalidInputError: If prefix is empty, since it would match everything.
        """
        if not prefix:
            raise InvalidInputError("Hash prefix cannot be an empty string")
        return self.hex.startswith(prefix)

    def __str__(self) -> str:
        return self.hex

    def __repr__(self) -> str:
        return f"ContentDigest({self.short})"


def compute_file_digest(path: Path) -> ContentDigest:
    """Compute the SHA-256 digest of a file.

    Reads the file in 64KB chunks to avoid loading large documents entirely
    into memory.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    hasher = hashlib.sha256()
    with open(path, "rb") as f:
        while True:
            chunk = f.read(_CHUNK_SIZE)
            if not chunk:
                break
            hasher.update(chunk)
    return ContentDigest(hasher.digest())
