"""Heuristic ODK form classifier.

A document is treated as a form when a ``meta`` element directly under
its root carries both a non-empty ``instanceID`` and ``instanceName``.
This accepts unrelated XML that happens to carry both fields.
"""

from __future__ import annotations

from typing import Any, Mapping

from discovery.xml_reader import TEXT_KEY

META_ELEMENT = "meta"
INSTANCE_ID_ELEMENT = "instanceID"
INSTANCE_NAME_ELEMENT = "instanceName"


def is_form(parsed_xml: Mapping[str, Any]) -> bool:
    """Return whether a parsed XML document looks like an ODK form.

    Args:
        parsed_xml: Mapping of root tag to parsed root node.

    Returns:
        True when any root-level ``meta`` node has both instance fields.
    """
    for root_node in parsed_xml.values():
        if not isinstance(root_node, Mapping):
            continue
        for meta_node in _as_list(root_node.get(META_ELEMENT)):
            if _is_instance_meta(meta_node):
                return True
    return False


def _is_instance_meta(meta_node: Any) -> bool:
    if not isinstance(meta_node, Mapping):
        return False
    return _has_value(meta_node.get(INSTANCE_ID_ELEMENT)) and _has_value(
        meta_node.get(INSTANCE_NAME_ELEMENT)
    )


def _has_value(field_nodes: Any) -> bool:
    """Return whether any occurrence of a field carries text."""
    for node in _as_list(field_nodes):
        if isinstance(node, str) and node.strip():
            return True
        if isinstance(node, Mapping) and str(node.get(TEXT_KEY, "")).strip():
            return True
    return False


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
