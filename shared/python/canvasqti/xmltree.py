"""Generic XML tree and path accessor.

The tree mirrors the ``xmlize`` layout the Canvas importer was designed
around: every element is a dict with ``"@"`` (attributes) and ``"#"``
(either the raw text of a leaf, or a map of child tag to the ordered list of
child nodes). ``"$"`` holds the element's position in document order, which
the per-tag grouping loses. Paths walk this structure with tag names, ``"#"``,
``"@"`` and integer indexes.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from itertools import count
from typing import Any
from xml.etree import ElementTree as ET

from canvasqti.errors import DocumentParseError

Node = dict[str, Any]
PathItem = str | int


def _local_tag(tag: str) -> str:
    return tag.split("}", 1)[-1] if "}" in tag else tag


def _element_to_node(element: ET.Element, positions: Iterator[int]) -> Node:
    attributes = {_local_tag(key): value for key, value in element.attrib.items()}
    position = next(positions)
    children = list(element)
    if not children:
        return {"@": attributes, "#": element.text or "", "$": position}

    content: dict[str, list[Node]] = {}
    for child in children:
        if not isinstance(child.tag, str):
            # Comments and processing instructions.
            continue
        content.setdefault(_local_tag(child.tag), []).append(_element_to_node(child, positions))
    return {"@": attributes, "#": content, "$": position}


def parse_xml(xml_content: str | bytes) -> Node:
    """Parse a document into ``{root_tag: node}``.

    Raises ``DocumentParseError`` for malformed input.
    """

    if isinstance(xml_content, str):
        xml_content = xml_content.encode("utf-8")
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as exc:
        raise DocumentParseError(f"Invalid QTI XML: {exc}") from exc
    return {_local_tag(root.tag): _element_to_node(root, count())}


def get_path(
    tree: Any,
    path: Sequence[PathItem],
    default: Any = None,
    flatten: bool = False,
) -> Any:
    """Return the value found at ``path`` or ``default`` when any step is missing.

    With ``flatten`` a single-element list is replaced by its element and text
    is stripped, for grammar positions that hold at most one value.
    """

    current = tree
    for key in path:
        if isinstance(current, dict):
            if key not in current:
                return default
            current = current[key]
        elif isinstance(current, list) and isinstance(key, int):
            if not 0 <= key < len(current):
                return default
            current = current[key]
        else:
            return default
        if current is None:
            return default

    if flatten:
        if isinstance(current, list) and len(current) == 1:
            current = current[0]
        if isinstance(current, str):
            current = current.strip()
    return current
