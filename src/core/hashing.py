"""Content digests for stable media identity."""

from __future__ import annotations

import hashlib
from pathlib import Path

from core.constants import HASH_ALGORITHM, HASH_CHUNK_SIZE


def digest_bytes(data: bytes) -> str:
    """Return the lower-case hex digest of a byte sequence."""
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(data)
    return hasher.hexdigest()


def digest_file(file_path: Path) -> str:
    """Return the hex digest of a file's content, read in chunks.

    Raises:
        OSError: If the file cannot be read.
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    with file_path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(HASH_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()
