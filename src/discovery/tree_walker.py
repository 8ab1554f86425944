"""File-system enumeration for discovery stages.

Enumeration failures never propagate: an unreadable directory is logged
and contributes nothing, so discovery degrades to "nothing found here".
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Callable, Iterable

from core.logging_config import TransferLogger

PathMatcher = Callable[[Path], bool]


def glob_matcher(pattern: str) -> PathMatcher:
    """Build a case-insensitive filename glob matcher such as ``*.xml``."""
    lowered_pattern = pattern.lower()
    return lambda file_path: fnmatch.fnmatchcase(file_path.name.lower(), lowered_pattern)


def extension_matcher(extensions: Iterable[str]) -> PathMatcher:
    """Build a case-insensitive matcher over bare extensions such as ``jpg``."""
    suffixes = frozenset(f".{extension.lower().lstrip('.')}" for extension in extensions)
    return lambda file_path: file_path.suffix.lower() in suffixes


def walk_files(root: Path, matcher: PathMatcher, logger: TransferLogger) -> list[Path]:
    """Enumerate files at any depth under ``root`` accepted by ``matcher``.

    Args:
        root: Directory to walk.
        matcher: Predicate over candidate file paths.
        logger: Run logger receiving enumeration errors.

    Returns:
        Sorted absolute file paths; empty when the root cannot be read.
    """
    root_path = Path(root).expanduser().resolve()
    if not root_path.is_dir():
        logger.error("walk_failed", root=str(root_path), error="root is not a directory")
        return []

    def _on_error(error: OSError) -> None:
        logger.error("walk_failed", root=str(root_path), path=error.filename, error=str(error))

    matches: list[Path] = []
    for directory, _, file_names in os.walk(root_path, onerror=_on_error):
        for file_name in file_names:
            file_path = Path(directory) / file_name
            if matcher(file_path):
                matches.append(file_path)
    return sorted(matches)
