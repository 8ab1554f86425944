"""Media discovery by extension allow-list."""

from __future__ import annotations

from pathlib import Path

from core.constants import MEDIA_EXTENSIONS
from core.logging_config import TransferLogger
from discovery.tree_walker import extension_matcher, walk_files


def discover_media(root: Path, logger: TransferLogger) -> list[Path]:
    """Find media files at any depth under ``root``.

    Membership is decided by extension only, case-insensitively; file
    contents are never sniffed.
    """
    return walk_files(root, extension_matcher(MEDIA_EXTENSIONS), logger)
