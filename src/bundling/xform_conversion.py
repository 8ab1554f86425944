"""XForm instance to JSON conversion.

This module converts an ODK instance document into the JSON value that
is bundled and written to the destination. Repeated elements become
lists, leaves become strings, and the ``meta`` block is normalized to
lower-camel keys. The source path is recorded under ``meta.transfer``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any
from xml.etree import ElementTree

from core.constants import ORIGINAL_PATH_KEY, TRANSFER_META_KEY
from core.errors import FormConversionError
from core.logging_config import TransferLogger
from core.task_pool import run_parallel
from core.types import FormDocument
from discovery.xml_reader import local_name

META_KEY = "meta"
_ACRONYM_SUFFIX = re.compile(r"ID$")


def xform_to_json(text: bytes | str) -> FormDocument:
    """Convert XForm instance XML into a form JSON value.

    Args:
        text: Full XML document as bytes or text.

    Returns:
        Mapping of the root's children with ``formId``, ``formVersion``
        (when the root declares them) and a ``meta`` mapping.

    Raises:
        FormConversionError: If the XML is malformed.
    """
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as error:
        raise FormConversionError(f"Malformed XForm: {error}") from error
    form: FormDocument = {}
    form_id = root.attrib.get("id")
    form_version = root.attrib.get("version")
    if form_id is not None:
        form["formId"] = form_id
    if form_version is not None:
        form["formVersion"] = form_version
    form.update(_children_to_mapping(root))
    form[META_KEY] = _normalize_meta(form.get(META_KEY))
    return form


def annotate_transfer_metadata(form: FormDocument, form_path: Path) -> FormDocument:
    """Record the form's absolute source path under ``meta.transfer``."""
    meta = form.setdefault(META_KEY, {})
    meta[TRANSFER_META_KEY] = {ORIGINAL_PATH_KEY: str(Path(form_path).resolve())}
    return form


def original_path(form: FormDocument) -> Path:
    """Return the source path recorded by ``annotate_transfer_metadata``."""
    return Path(form[META_KEY][TRANSFER_META_KEY][ORIGINAL_PATH_KEY])


def convert_form(form_path: Path) -> FormDocument:
    """Read one form file and return its annotated JSON value.

    Raises:
        FormConversionError: If the file cannot be read or converted.
    """
    try:
        data = form_path.read_bytes()
    except OSError as error:
        raise FormConversionError(f"Failed to read form {form_path}: {error}") from error
    return annotate_transfer_metadata(xform_to_json(data), form_path)


def convert_forms(
    form_paths: list[Path],
    logger: TransferLogger,
    max_workers: int,
) -> tuple[list[FormDocument], int]:
    """Convert forms concurrently, dropping and logging failures.

    Returns:
        Converted forms in input order and the number of failures.
    """
    converted: list[FormDocument] = []
    failures = 0
    for result in run_parallel(form_paths, convert_form, max_workers):
        if result.ok and result.value is not None:
            converted.append(result.value)
            continue
        failures += 1
        logger.error("form_conversion_failed", path=str(result.item), error=result.error)
    return converted, failures


def _children_to_mapping(element: ElementTree.Element) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    stack: list[tuple[ElementTree.Element, dict[str, Any]]] = [(element, mapping)]
    while stack:
        current, target = stack.pop()
        for child in current:
            key = local_name(child.tag)
            if len(child) == 0:
                value: Any = (child.text or "").strip()
            else:
                value = {}
                stack.append((child, value))
            _add_child(target, key, value)
    return mapping


def _add_child(target: dict[str, Any], key: str, value: Any) -> None:
    if key not in target:
        target[key] = value
    elif isinstance(target[key], list):
        target[key].append(value)
    else:
        target[key] = [target[key], value]


def _normalize_meta(raw_meta: Any) -> dict[str, Any]:
    if isinstance(raw_meta, list):
        raw_meta = next((entry for entry in raw_meta if isinstance(entry, dict)), None)
    if not isinstance(raw_meta, dict):
        return {}
    return {_lower_camel(key): value for key, value in raw_meta.items()}


def _lower_camel(key: str) -> str:
    key = _ACRONYM_SUFFIX.sub("Id", key)
    return key[:1].lower() + key[1:]
