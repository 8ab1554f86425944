"""Materialization of bundles into the destination tree.

Each bundle becomes ``<destination>/<form-name>/`` holding the rewritten
form JSON, a copy of the original form file, and its media renamed to
``<digest><extension>``. Steps run in order and fail independently: a
failed write or copy is logged and the remaining files still proceed.
"""

from __future__ import annotations

from pathlib import Path

from bundling.xform_conversion import original_path
from core.constants import FORM_JSON_SUFFIX
from core.errors import MaterializeError
from core.form_tree import rewrite_scalars
from core.logging_config import TransferLogger
from core.types import Bundle, MaterializeResult, MediaFile
from transfer.file_ops import copy_if_absent, ensure_directory, write_json_if_absent


def hashed_name(media: MediaFile) -> str:
    """Return ``digest + extension`` for a hashed media entry.

    Raises:
        ValueError: If the entry has no digest.
    """
    if media.digest is None:
        raise ValueError(f"Media {media.name} has no digest")
    return media.digest + Path(media.name).suffix


def destination_name(media: MediaFile) -> str:
    """Return the filename a media entry is copied to.

    Unhashed entries keep the basename of their original reference.
    """
    if media.digest is None:
        return Path(media.name).name
    return hashed_name(media)


def rewrite_media_references(bundle: Bundle) -> int:
    """Replace scalars equal to a hashed media name with the hashed name.

    The bundle's form is mutated in place.

    Returns:
        Number of scalars replaced.
    """
    renames = {media.name: hashed_name(media) for media in bundle.media if media.digest}
    if not renames:
        return 0
    return rewrite_scalars(
        bundle.form,
        lambda value: renames.get(value, value) if isinstance(value, str) else value,
    )


def materialize_bundle(
    bundle: Bundle,
    destination_root: Path,
    logger: TransferLogger,
) -> MaterializeResult:
    """Write one bundle to its destination directory.

    Args:
        bundle: Hashed bundle to write.
        destination_root: Root directory receiving bundle directories.
        logger: Run logger.

    Returns:
        Files written, skipped because they existed, and failures.
    """
    source_form = original_path(bundle.form)
    form_name = source_form.stem
    bundle_dir = destination_root / form_name
    written: list[Path] = []
    skipped: list[Path] = []
    failed: list[str] = []

    replaced = rewrite_media_references(bundle)
    logger.debug("media_references_rewritten", form=str(source_form), count=replaced)

    try:
        ensure_directory(bundle_dir)
    except MaterializeError as error:
        logger.error("bundle_directory_failed", destination=str(bundle_dir), error=str(error))
        return MaterializeResult(bundle_dir=bundle_dir, failed=(str(error),))

    json_path = bundle_dir / f"{form_name}{FORM_JSON_SUFFIX}"
    try:
        outcome = write_json_if_absent(json_path, bundle.form)
    except MaterializeError as error:
        logger.error("form_json_write_failed", destination=str(json_path), error=str(error))
        failed.append(str(error))
    else:
        _track(outcome, json_path, written, skipped, logger, source=None)

    copies = [(source_form, bundle_dir / source_form.name)]
    copies.extend((media.path, bundle_dir / destination_name(media)) for media in bundle.media)
    for source, target in copies:
        logger.info("copying_file", source=str(source), destination=str(target))
        try:
            outcome = copy_if_absent(source, target)
        except MaterializeError as error:
            logger.error(
                "copy_failed", source=str(source), destination=str(target), error=str(error)
            )
            failed.append(str(error))
            continue
        _track(outcome, target, written, skipped, logger, source=source)

    return MaterializeResult(
        bundle_dir=bundle_dir,
        written=tuple(written),
        skipped=tuple(skipped),
        failed=tuple(failed),
    )


def _track(
    created: bool,
    target: Path,
    written: list[Path],
    skipped: list[Path],
    logger: TransferLogger,
    source: Path | None,
) -> None:
    """Record a write outcome and log skips of existing files."""
    if created:
        written.append(target)
        return
    if target in skipped:
        return
    skipped.append(target)
    logger.info(
        "copy_skipped_existing",
        source=str(source) if source else None,
        destination=str(target),
    )
