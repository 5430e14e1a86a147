from canvasqti.importer.blocks import reduce_block, text_at
from canvasqti.schemas import Block
from canvasqti.xmltree import parse_xml


def _node(xml: str) -> dict:
    (node,) = parse_xml(xml).values()
    return node


def test_reduce_block_reads_mattext() -> None:
    node = _node("<presentation><material><mattext> Hello </mattext></material></presentation>")
    assert reduce_block(node, Block()).text == "Hello"


def test_reduce_block_reads_formatted_text() -> None:
    node = _node(
        "<presentation><material><mat_extension>"
        "<mat_formattedtext>Rich</mat_formattedtext>"
        "</mat_extension></material></presentation>"
    )
    assert reduce_block(node, Block()).text == "Rich"


def test_reduce_block_captures_first_label_ident_only() -> None:
    node = _node(
        '<wrapper><response_label ident="L1"><flow_mat><material><mattext>A</mattext>'
        "</material></flow_mat></response_label></wrapper>"
    )

    fresh = reduce_block(node, Block())
    assert fresh.text == "A"
    assert fresh.ident == "L1"

    kept = reduce_block(node, Block(ident="existing"))
    assert kept.ident == "existing"


def test_reduce_block_concatenates_sibling_flows() -> None:
    node = _node(
        "<itemfeedback><flow_mat><material><mattext>One</mattext></material></flow_mat>"
        "<flow_mat><material><mattext>Two</mattext></material></flow_mat></itemfeedback>"
    )
    assert reduce_block(node, Block()).text == "OneTwo"


def test_reduce_block_falls_back_to_flow() -> None:
    node = _node(
        "<presentation><flow><material><mattext>F</mattext></material></flow></presentation>"
    )
    assert reduce_block(node, Block()).text == "F"


def test_reduce_block_ignores_unknown_shapes() -> None:
    node = _node("<presentation><other>z</other></presentation>")
    assert reduce_block(node, Block(text="kept")).text == "kept"


def test_text_at_treats_elements_with_children_as_empty() -> None:
    node = _node("<node><child><inner>x</inner></child></node>")
    assert text_at(node, ["#", "child", 0, "#"]) == ""
    assert text_at(node, ["#", "child", 0, "#", "inner", 0, "#"]) == "x"
