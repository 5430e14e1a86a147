"""Embedded-answer (cloze) syntax materializer.

Turns text holding ``{1:MULTICHOICE:%100%red~blue}`` style clauses into a
question text with ``{#1}`` placeholders plus one subquestion per clause.
"""

from __future__ import annotations

import re

from canvasqti.schemas import EmbeddedQuestion, EmbeddedSubquestion
from canvasqti.text import unescape_cloze_text

SHORTANSWER_TYPES = {"SHORTANSWER", "SA", "MW"}
SHORTANSWER_CASE_TYPES = {"SHORTANSWER_C", "SAC", "MWC"}
NUMERICAL_TYPES = {"NUMERICAL", "NM"}
MULTICHOICE_LAYOUTS = {
    "MULTICHOICE": "dropdown",
    "MC": "dropdown",
    "MULTICHOICE_S": "dropdown",
    "MCS": "dropdown",
    "MULTICHOICE_V": "vertical",
    "MCV": "vertical",
    "MULTICHOICE_VS": "vertical",
    "MCVS": "vertical",
    "MULTICHOICE_H": "horizontal",
    "MCH": "horizontal",
    "MULTICHOICE_HS": "horizontal",
    "MCHS": "horizontal",
}
MULTIRESPONSE_LAYOUTS = {
    "MULTIRESPONSE": "vertical",
    "MR": "vertical",
    "MULTIRESPONSE_S": "vertical",
    "MRS": "vertical",
    "MULTIRESPONSE_H": "horizontal",
    "MRH": "horizontal",
    "MULTIRESPONSE_HS": "horizontal",
    "MRHS": "horizontal",
}
ALL_TYPES = sorted(
    SHORTANSWER_TYPES
    | SHORTANSWER_CASE_TYPES
    | NUMERICAL_TYPES
    | set(MULTICHOICE_LAYOUTS)
    | set(MULTIRESPONSE_LAYOUTS),
    key=len,
    reverse=True,
)
CLAUSE_PATTERN = re.compile(
    r"\{(\d*):(" + "|".join(ALL_TYPES) + r"):((?:\\.|[^}\\])*)\}",
    flags=re.DOTALL,
)
ALTERNATIVE_SPLIT_PATTERN = re.compile(r"(?<!\\)~")
FEEDBACK_SPLIT_PATTERN = re.compile(r"(?<!\\)#")
WEIGHT_PATTERN = re.compile(r"^(?:%(-?\d+(?:\.\d+)?)%|(=))?(.*)$", flags=re.DOTALL)


def _parse_alternatives(body: str) -> list[tuple[float, str, str]]:
    parsed: list[tuple[float, str, str]] = []
    for alternative in ALTERNATIVE_SPLIT_PATTERN.split(body):
        match = WEIGHT_PATTERN.match(alternative)
        if match is None:
            continue
        percent, equals, rest = match.groups()
        if percent is not None:
            fraction = float(percent) / 100
        elif equals:
            fraction = 1.0
        else:
            fraction = 0.0
        chunks = FEEDBACK_SPLIT_PATTERN.split(rest, maxsplit=1)
        answer, feedback = (chunks[0], chunks[1]) if len(chunks) == 2 else (rest, "")
        parsed.append((fraction, unescape_cloze_text(answer), unescape_cloze_text(feedback)))
    return parsed


def _build_subquestion(
    weight: str, clause_type: str, body: str, source: str
) -> EmbeddedSubquestion:
    subquestion = EmbeddedSubquestion(
        qtype="shortanswer",
        defaultmark=float(weight) if weight else 1.0,
        source=source,
    )
    if clause_type in SHORTANSWER_CASE_TYPES:
        subquestion.usecase = 1
    elif clause_type in NUMERICAL_TYPES:
        subquestion.qtype = "numerical"
    elif clause_type in MULTICHOICE_LAYOUTS:
        subquestion.qtype = "multichoice"
        subquestion.layout = MULTICHOICE_LAYOUTS[clause_type]
    elif clause_type in MULTIRESPONSE_LAYOUTS:
        subquestion.qtype = "multichoice"
        subquestion.single = False
        subquestion.layout = MULTIRESPONSE_LAYOUTS[clause_type]

    for fraction, answer, feedback in _parse_alternatives(body):
        if subquestion.qtype == "numerical":
            value, _, tolerance = answer.partition(":")
            subquestion.answer.append(value.strip())
            try:
                subquestion.tolerance.append(float(tolerance))
            except ValueError:
                subquestion.tolerance.append(0.0)
        else:
            subquestion.answer.append(answer)
        subquestion.fraction.append(fraction)
        subquestion.feedback.append(feedback)
    return subquestion


def parse_embedded(text: str) -> EmbeddedQuestion:
    """Extract embedded-answer clauses from ``text``.

    Each clause is replaced with ``{#k}`` (1-based, in document order).
    """

    subquestions: list[EmbeddedSubquestion] = []

    def replace(match: re.Match[str]) -> str:
        weight, clause_type, body = match.groups()
        subquestions.append(_build_subquestion(weight, clause_type, body, match.group(0)))
        return "{#" + str(len(subquestions)) + "}"

    questiontext = CLAUSE_PATTERN.sub(replace, text or "")
    return EmbeddedQuestion(questiontext=questiontext, subquestions=subquestions)
