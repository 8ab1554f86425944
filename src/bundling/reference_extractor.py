"""Media reference extraction from parsed forms."""

from __future__ import annotations

import re

from core.constants import MEDIA_EXTENSIONS
from core.form_tree import iter_scalars
from core.types import FormValue

MEDIA_FILE_PATTERN = re.compile(
    r".+\.(?:" + "|".join(MEDIA_EXTENSIONS) + r")\Z",
    re.IGNORECASE,
)


def match_media_filename(value: object) -> str | None:
    """Return the media filename carried by a scalar, if any.

    Matching follows ``MEDIA_FILE_PATTERN``: the last line of a string
    value that ends in a media extension.
    """
    if not isinstance(value, str):
        return None
    match = MEDIA_FILE_PATTERN.search(value)
    return match.group(0) if match else None


def extract_references(form: FormValue) -> list[str]:
    """Collect media filenames referenced anywhere in a form.

    Args:
        form: Parsed form value of any nesting depth.

    Returns:
        Filenames in document order, duplicates included.
    """
    references: list[str] = []
    for value in iter_scalars(form):
        filename = match_media_filename(value)
        if filename is not None:
            references.append(filename)
    return references
