"""Content hashing stage for bundled media."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Sequence

from core.errors import MediaHashError
from core.hashing import digest_file
from core.logging_config import TransferLogger
from core.task_pool import run_parallel
from core.types import Bundle


def hash_media_file(media_path: Path) -> str:
    """Digest one media file.

    Raises:
        MediaHashError: If the file cannot be read.
    """
    try:
        return digest_file(media_path)
    except OSError as error:
        raise MediaHashError(f"Failed to read media {media_path}: {error}") from error


def hash_bundles(
    bundles: Sequence[Bundle],
    logger: TransferLogger,
    max_workers: int,
) -> tuple[list[Bundle], int]:
    """Attach content digests to every media entry.

    Each distinct path is read once. An unreadable file is logged and its
    entries keep no digest, so they are materialized under their original
    name.

    Returns:
        Bundles with digests populated and the number of unreadable files.
    """
    unique_paths = list(dict.fromkeys(entry.path for bundle in bundles for entry in bundle.media))
    digests: dict[Path, str] = {}
    failures = 0
    for result in run_parallel(unique_paths, hash_media_file, max_workers):
        if result.ok and result.value is not None:
            digests[result.item] = result.value
            continue
        failures += 1
        logger.error("media_hash_failed", path=str(result.item), error=result.error)
    hashed = [
        replace(
            bundle,
            media=tuple(
                replace(entry, digest=digests[entry.path]) if entry.path in digests else entry
                for entry in bundle.media
            ),
        )
        for bundle in bundles
    ]
    return hashed, failures
