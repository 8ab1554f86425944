"""Append-only file operations for the destination tree.

Nothing here overwrites or deletes an existing destination file. An
existing target is reported as skipped so re-runs leave prior output as
it was.
"""

from __future__ import annotations

import contextlib
import json
import shutil
from pathlib import Path
from typing import Any

from core.constants import JSON_INDENT
from core.errors import MaterializeError


def ensure_directory(directory: Path) -> None:
    """Create a directory and its parents; an existing directory is fine.

    Raises:
        MaterializeError: If the directory cannot be created.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise MaterializeError(f"Failed to create directory {directory}: {error}") from error


def copy_if_absent(source: Path, destination: Path) -> bool:
    """Copy ``source`` to ``destination`` unless the destination exists.

    Returns:
        True when the file was copied, False when it already existed.

    Raises:
        MaterializeError: If reading or writing fails. A partially written
            destination file is removed.
    """
    created = False
    try:
        with source.open("rb") as source_handle:
            with destination.open("xb") as target_handle:
                created = True
                shutil.copyfileobj(source_handle, target_handle)
        shutil.copystat(source, destination)
    except FileExistsError:
        return False
    except OSError as error:
        if created:
            _remove_partial(destination)
        raise MaterializeError(f"Failed to copy {source} to {destination}: {error}") from error
    return True


def write_json_if_absent(destination: Path, payload: Any) -> bool:
    """Write ``payload`` as indented JSON unless the destination exists.

    Returns:
        True when the file was written, False when it already existed.

    Raises:
        MaterializeError: If serialization or writing fails.
    """
    try:
        text = json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as error:
        raise MaterializeError(f"Failed to serialize {destination}: {error}") from error
    try:
        with destination.open("x", encoding="utf-8") as handle:
            handle.write(text)
    except FileExistsError:
        return False
    except OSError as error:
        raise MaterializeError(f"Failed to write {destination}: {error}") from error
    return True


def _remove_partial(destination: Path) -> None:
    with contextlib.suppress(OSError):
        destination.unlink()
