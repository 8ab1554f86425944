"""Generic XML-to-mapping reader.

Documents become ``{root_tag: node}``. An element with attributes or
children becomes a mapping of child tag to a list of child nodes, with
attributes under ``"$"`` and text under ``"_"``. A bare element becomes
its text. Namespaces are stripped from tags and attribute names.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from xml.etree import ElementTree

from core.errors import FormParseError

ATTRIBUTES_KEY = "$"
TEXT_KEY = "_"


def parse_xml(data: bytes | str) -> dict[str, Any]:
    """Parse raw XML into a generic nested mapping.

    Args:
        data: XML document bytes or text.

    Returns:
        Single-key mapping of root tag to root node.

    Raises:
        FormParseError: If the document is not well-formed.
    """
    try:
        root = ElementTree.fromstring(data)
    except ElementTree.ParseError as error:
        raise FormParseError(f"Malformed XML: {error}") from error
    return {local_name(root.tag): element_to_node(root)}


def read_xml_file(file_path: Path) -> dict[str, Any]:
    """Read and parse one XML file.

    Raises:
        FormParseError: If the file cannot be read or parsed.
    """
    try:
        data = file_path.read_bytes()
    except OSError as error:
        raise FormParseError(f"Failed to read {file_path}: {error}") from error
    try:
        return parse_xml(data)
    except FormParseError as error:
        raise FormParseError(f"Failed to parse {file_path}: {error}") from error


def element_to_node(element: ElementTree.Element) -> Any:
    """Convert one element to a string or mapping node.

    Conversion is iterative so deeply nested documents are supported.
    """
    root_node = _empty_node(element)
    stack: list[tuple[ElementTree.Element, Any]] = [(element, root_node)]
    while stack:
        current, node = stack.pop()
        if not isinstance(node, dict):
            continue
        for child in current:
            child_node = _empty_node(child)
            node.setdefault(local_name(child.tag), []).append(child_node)
            stack.append((child, child_node))
    return root_node


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from a tag or attribute name."""
    return tag.rsplit("}", 1)[-1]


def _empty_node(element: ElementTree.Element) -> Any:
    text = (element.text or "").strip()
    if len(element) == 0 and not element.attrib:
        return text
    node: dict[str, Any] = {}
    if element.attrib:
        node[ATTRIBUTES_KEY] = {
            local_name(name): value for name, value in element.attrib.items()
        }
    if text:
        node[TEXT_KEY] = text
    return node
