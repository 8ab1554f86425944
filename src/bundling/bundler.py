"""Bundling of parsed forms with their resolved media."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from bundling.path_resolver import resolve_media
from bundling.reference_extractor import extract_references
from bundling.xform_conversion import original_path
from core.logging_config import TransferLogger
from core.types import Bundle, FormDocument, MediaFile


def bundle_form(
    form: FormDocument,
    media_paths: Sequence[Path],
    logger: TransferLogger,
) -> Bundle:
    """Pair a form with every media file it references.

    Each extracted reference is resolved on its own, so a filename that
    appears twice yields two entries. References that do not resolve are
    dropped.

    Args:
        form: Annotated form JSON value.
        media_paths: All media discovered under the form's root.
        logger: Run logger.

    Returns:
        Bundle holding the form and its resolved media in reference order.
    """
    form_directory = original_path(form).parent
    media: list[MediaFile] = []
    for filename in extract_references(form):
        resolved = resolve_media(filename, media_paths, form_directory, logger)
        if resolved is not None:
            media.append(resolved)
    logger.info(
        "bundle_resolved",
        form=str(original_path(form)),
        media=[str(entry.path) for entry in media],
    )
    return Bundle(form=form, media=tuple(media))
