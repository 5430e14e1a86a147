"""Extraction of one ``<item>`` subtree into a ``RawQuestion``.

Raw questions are not output questions: they keep the Canvas vocabulary
(source type, choice idents, condition titles) and are discarded once
encoded.
"""

from __future__ import annotations

from typing import Any

from canvasqti.enums import SourceQuestionType
from canvasqti.importer.blocks import reduce_block, text_at
from canvasqti.importer.responses import get_response_processor
from canvasqti.schemas import (
    Block,
    BlankLayout,
    Choice,
    ChoiceLayout,
    EmptyLayout,
    Feedback,
    MatchingLayout,
    RawQuestion,
    SubQuestion,
)
from canvasqti.text import clean_input, to_float
from canvasqti.xmltree import get_path

CHOICE_TYPES = {
    SourceQuestionType.MULTIPLE_CHOICE,
    SourceQuestionType.MULTIPLE_ANSWERS,
    SourceQuestionType.TRUE_FALSE,
}
BLANK_TYPES = {
    SourceQuestionType.FILL_IN_MULTIPLE_BLANKS,
    SourceQuestionType.MULTIPLE_DROPDOWNS,
}
NO_RESPONSE_TYPES = {
    SourceQuestionType.TEXT_ONLY,
    SourceQuestionType.ESSAY,
    SourceQuestionType.FILE_UPLOAD,
}
METADATA_PATH = ["#", "itemmetadata", 0, "#", "qtimetadata", 0, "#", "qtimetadatafield"]
DECVAR_PATH = ["#", "outcomes", 0, "#", "decvar", 0, "@"]


def find_metadata(fields: Any, label: str, default: str = "") -> str:
    """Value of the first metadata field whose label equals ``label`` exactly."""

    for field in fields or []:
        if get_path(field, ["#", "fieldlabel", 0, "#"], False) == label:
            return text_at(field, ["#", "fieldentry", 0, "#"])
    return default


def process_choices(raw_choices: list[Any]) -> dict[str, Choice]:
    """Map ``response_label`` nodes to choices keyed by ident."""

    choices: dict[str, Choice] = {}
    for node in raw_choices:
        ident = text_at(node, ["@", "ident"])
        if not ident:
            # Nested label, as found in some multiple answers exports.
            ident = text_at(node, ["#", "response_label", 0, "@", "ident"])
        choice = Choice(ident=ident)
        flow = get_path(node, ["#", "flow_mat", 0], False)
        reduce_block(flow if flow else node, choice)
        choices[choice.ident] = choice
    return choices


def process_subquestions(raw_subquestions: list[Any]) -> list[SubQuestion]:
    subquestions: list[SubQuestion] = []
    for node in raw_subquestions:
        subquestion = SubQuestion(ident=text_at(node, ["@", "ident"]))
        reduce_block(node, subquestion)
        subquestion.choices = process_choices(
            get_path(node, ["#", "render_choice", 0, "#", "response_label"], [])
        )
        subquestions.append(subquestion)
    return subquestions


def process_feedback(feedback_nodes: list[Any]) -> dict[str, Feedback]:
    """Reduce ``itemfeedback`` nodes; a repeated ident replaces the earlier entry."""

    feedbacks: dict[str, Feedback] = {}
    for node in feedback_nodes:
        feedback = Feedback(ident=text_at(node, ["@", "ident"]))
        flow = get_path(node, ["#", "flow_mat", 0], False) or get_path(
            node, ["#", "solution", 0, "#", "solutionmaterial", 0, "#", "flow_mat", 0], False
        )
        if flow:
            reduce_block(flow, feedback)
        feedbacks[feedback.ident] = feedback
    return feedbacks


def _build_layout(
    qtype: str, presentation: Any
) -> ChoiceLayout | BlankLayout | MatchingLayout | EmptyLayout:
    if qtype in CHOICE_TYPES:
        return ChoiceLayout(
            choices=process_choices(
                get_path(
                    presentation,
                    ["#", "response_lid", 0, "#", "render_choice", 0, "#", "response_label"],
                    [],
                )
            )
        )
    if qtype in BLANK_TYPES:
        blanks: dict[str, dict[str, Choice]] = {}
        for part in get_path(presentation, ["#", "response_lid"], []):
            # Canvas labels each blank's response_lid with the blank name.
            label = reduce_block(part, Block())
            blanks[label.text] = process_choices(
                get_path(part, ["#", "render_choice", 0, "#", "response_label"], [])
            )
        return BlankLayout(blanks=blanks)
    if qtype == SourceQuestionType.MATCHING:
        return MatchingLayout(
            subquestions=process_subquestions(get_path(presentation, ["#", "response_lid"], []))
        )
    return EmptyLayout()


def build_raw_question(item: Any) -> RawQuestion:
    """Assemble the raw question for one ``<item>`` node."""

    metadata = get_path(item, METADATA_PATH, [])
    qtype = find_metadata(metadata, "question_type")
    points = find_metadata(metadata, "points_possible")
    raw = RawQuestion(
        qtype=qtype,
        id=text_at(item, ["@", "ident"]),
        title=clean_input(text_at(item, ["@", "title"])),
        default_mark=to_float(points, 1.0) if points else 1.0,
        layout=_build_layout(qtype, {}),
    )

    for presentation in get_path(item, ["#", "presentation"], []):
        raw.question = reduce_block(presentation, Block())
        raw.layout = _build_layout(qtype, presentation)

    if qtype not in NO_RESPONSE_TYPES:
        resprocessing = get_path(item, ["#", "resprocessing", 0], {})
        raw.maxmark = to_float(get_path(resprocessing, [*DECVAR_PATH, "maxvalue"], ""))
        raw.minmark = to_float(get_path(resprocessing, [*DECVAR_PATH, "minvalue"], ""))
        raw.varname = text_at(resprocessing, [*DECVAR_PATH, "varname"])
        conditions = get_path(resprocessing, ["#", "respcondition"], [])
        raw.responses = get_response_processor(qtype).process(conditions)

    raw.feedback = process_feedback(get_path(item, ["#", "itemfeedback"], []))
    return raw
