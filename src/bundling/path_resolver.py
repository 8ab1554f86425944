"""Resolution of referenced filenames to discovered media paths.

Resolution is a heuristic. Candidates are the discovered paths ending
with the referenced filename, compared case-insensitively. A candidate in
the form's own directory wins; otherwise the first candidate in discovery
order is used. Discovery order is sorted path order, so the fallback is a
stable best effort rather than a guarantee of the intended file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from core.logging_config import TransferLogger
from core.types import MediaFile


def matches_suffix(candidate: Path, suffix: str) -> bool:
    """Return whether a candidate path ends with ``suffix``, ignoring case."""
    return str(candidate).lower().endswith(suffix.lower())


def is_in_directory(candidate: Path, directory: Path) -> bool:
    """Return whether a candidate's parent directory is ``directory``, ignoring case."""
    return str(candidate.parent).lower() == str(directory).lower()


def resolve_media(
    filename: str,
    media_paths: Sequence[Path],
    form_directory: Path,
    logger: TransferLogger,
) -> MediaFile | None:
    """Resolve one referenced filename to a concrete media file.

    Args:
        filename: Name as it appears in the form.
        media_paths: Paths produced by media discovery for the root.
        form_directory: Directory holding the referencing form.
        logger: Run logger for misses and out-of-directory matches.

    Returns:
        Resolved media entry, or None when nothing matches.
    """
    candidates = [path for path in media_paths if matches_suffix(path, filename)]
    in_directory = [path for path in candidates if is_in_directory(path, form_directory)]
    elsewhere = [path for path in candidates if not is_in_directory(path, form_directory)]

    if in_directory:
        return MediaFile(name=filename, path=in_directory[0])
    if not elsewhere:
        logger.warning("media_not_found", name=filename, form_directory=str(form_directory))
        return None
    logger.warning(
        "media_outside_form_directory",
        name=filename,
        path=str(elsewhere[0]),
        form_directory=str(form_directory),
        candidate_count=len(elsewhere),
    )
    return MediaFile(name=filename, path=elsewhere[0])
