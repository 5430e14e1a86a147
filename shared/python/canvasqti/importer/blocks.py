"""Reduction of presentation and feedback blocks to flat text."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from canvasqti.schemas import Block
from canvasqti.xmltree import PathItem, get_path

MATTEXT_PATH: list[PathItem] = ["#", "material", 0, "#", "mattext"]
FORMATTED_TEXT_PATH: list[PathItem] = [
    "#", "material", 0, "#", "mat_extension", 0, "#", "mat_formattedtext",
]


def text_at(node: Any, path: Sequence[PathItem]) -> str:
    """Stripped text found at ``path``; elements with children count as empty."""

    value = get_path(node, path, "", True)
    return value if isinstance(value, str) else ""


def _append_text(block: Block, text: str) -> None:
    block.text = f"{block.text}{text}" if block.text else text


def reduce_block(node: Any, block: Block) -> Block:
    """Accumulate the text (and first response label ident) of ``node`` into ``block``.

    Recognized shapes, in priority order: ``material/mattext``,
    ``material/mat_extension/mat_formattedtext``, a ``response_label``
    wrapper, then ``flow_mat``/``flow`` containers. Anything else adds nothing.
    """

    if get_path(node, MATTEXT_PATH, False):
        _append_text(block, text_at(node, [*MATTEXT_PATH, 0, "#"]))
    elif get_path(node, FORMATTED_TEXT_PATH, False):
        _append_text(block, text_at(node, [*FORMATTED_TEXT_PATH, 0, "#"]))
    elif get_path(node, ["#", "response_label"], False):
        label = get_path(node, ["#", "response_label", 0], {})
        if not block.ident:
            ident = text_at(label, ["@", "ident"])
            if ident:
                block.ident = ident
        for subblock in get_path(label, ["#", "flow_mat"], []):
            reduce_block(subblock, block)
    else:
        subblocks = get_path(node, ["#", "flow_mat"], []) or get_path(node, ["#", "flow"], [])
        for subblock in subblocks:
            reduce_block(subblock, block)
    return block
