"""Moodle XML exporter plugin."""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path
import re
from xml.sax.saxutils import escape

from canvasqti.config import get_settings
from canvasqti.enums import ExportFormat, TextFormat
from canvasqti.exporters.base import BaseExporter, artifact_filename
from canvasqti.schemas import (
    CombinedFeedbackMixin,
    DescriptionQuestion,
    EssayQuestion,
    ExportArtifact,
    ImportResult,
    MatchQuestion,
    MultianswerQuestion,
    MultichoiceQuestion,
    NumericalQuestion,
    QuestionBase,
    ShortAnswerQuestion,
    TextField,
    TrueFalseQuestion,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{#(\d+)\}")


def _cdata(value: str) -> str:
    safe = (value or "").replace("]]>", "]]]]><![CDATA[>")
    return f"<![CDATA[{safe}]]>"


def _percent(fraction: float) -> str:
    return f"{fraction * 100:.7g}"


def _number(value: float) -> str:
    return f"{value:.7g}"


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _text_element(tag: str, field: TextField, indent: str = "  ") -> str:
    return f'{indent}<{tag} format="{field.format}"><text>{_cdata(field.text)}</text></{tag}>'


def _feedback(field: TextField | str, indent: str = "    ") -> str:
    text = field.text if isinstance(field, TextField) else field
    return f"{indent}<feedback><text>{_cdata(text)}</text></feedback>"


def _open_question(rows: list[str], question: QuestionBase, moodle_type: str) -> None:
    rows.extend(
        [
            f'<question type="{moodle_type}">',
            f"  <name><text>{escape(question.name)}</text></name>",
            f'  <questiontext format="{question.questiontextformat}">',
            f"    <text>{_cdata(question.questiontext)}</text>",
            "  </questiontext>",
            f'  <generalfeedback format="{question.generalfeedbackformat}">',
            f"    <text>{_cdata(question.generalfeedback)}</text>",
            "  </generalfeedback>",
            f"  <defaultgrade>{_number(question.defaultmark)}</defaultgrade>",
            f"  <penalty>{_number(question.penalty)}</penalty>",
            "  <hidden>0</hidden>",
        ]
    )
    if question.source_ident:
        rows.append(f"  <idnumber>{escape(question.source_ident)}</idnumber>")


def _append_combined_feedback(rows: list[str], question: CombinedFeedbackMixin) -> None:
    rows.extend(
        [
            _text_element("correctfeedback", question.correctfeedback),
            _text_element("partiallycorrectfeedback", question.partiallycorrectfeedback),
            _text_element("incorrectfeedback", question.incorrectfeedback),
        ]
    )
    if question.shownumcorrect:
        rows.append("  <shownumcorrect/>")


def _append_multichoice(rows: list[str], question: MultichoiceQuestion) -> None:
    _open_question(rows, question, "multichoice")
    rows.extend(
        [
            f"  <single>{_bool(question.single)}</single>",
            f"  <shuffleanswers>{_bool(question.shuffleanswers)}</shuffleanswers>",
            f"  <answernumbering>{escape(question.answernumbering)}</answernumbering>",
        ]
    )
    _append_combined_feedback(rows, question)
    for answer, fraction, feedback in zip(question.answer, question.fraction, question.feedback):
        rows.extend(
            [
                f'  <answer fraction="{_percent(fraction)}" format="{answer.format}">',
                f"    <text>{_cdata(answer.text)}</text>",
                _feedback(feedback),
                "  </answer>",
            ]
        )
    rows.append("</question>")


def _append_truefalse(rows: list[str], question: TrueFalseQuestion) -> None:
    _open_question(rows, question, "truefalse")
    true_fraction = "100" if question.answer == 1 else "0"
    false_fraction = "0" if question.answer == 1 else "100"
    rows.extend(
        [
            f'  <answer fraction="{true_fraction}" format="{TextFormat.MOODLE}">',
            "    <text>true</text>",
            _feedback(question.feedbacktrue),
            "  </answer>",
            f'  <answer fraction="{false_fraction}" format="{TextFormat.MOODLE}">',
            "    <text>false</text>",
            _feedback(question.feedbackfalse),
            "  </answer>",
            "</question>",
        ]
    )


def _append_shortanswer(rows: list[str], question: ShortAnswerQuestion) -> None:
    _open_question(rows, question, "shortanswer")
    rows.append(f"  <usecase>{question.usecase}</usecase>")
    for answer, fraction, feedback in zip(question.answer, question.fraction, question.feedback):
        rows.extend(
            [
                f'  <answer fraction="{_percent(fraction)}" format="{TextFormat.MOODLE}">',
                f"    <text>{escape(answer)}</text>",
                _feedback(feedback),
                "  </answer>",
            ]
        )
    rows.append("</question>")


def _append_matching(rows: list[str], question: MatchQuestion) -> None:
    _open_question(rows, question, "matching")
    rows.append(f"  <shuffleanswers>{_bool(question.shuffleanswers)}</shuffleanswers>")
    _append_combined_feedback(rows, question)
    for subquestion, subanswer in zip(question.subquestions, question.subanswers):
        rows.extend(
            [
                f'  <subquestion format="{subquestion.format}">',
                f"    <text>{_cdata(subquestion.text)}</text>",
                "    <answer>",
                f"      <text>{escape(subanswer)}</text>",
                "    </answer>",
                "  </subquestion>",
            ]
        )
    rows.append("</question>")


def _append_numerical(rows: list[str], question: NumericalQuestion) -> None:
    _open_question(rows, question, "numerical")
    for answer, tolerance, fraction, feedback in zip(
        question.answer, question.tolerance, question.fraction, question.feedback
    ):
        rows.extend(
            [
                f'  <answer fraction="{_percent(fraction)}" format="{TextFormat.MOODLE}">',
                f"    <text>{_number(answer)}</text>",
                f"    <tolerance>{_number(tolerance)}</tolerance>",
                _feedback(feedback),
                "  </answer>",
            ]
        )
    rows.append("</question>")


def cloze_text(question: MultianswerQuestion) -> str:
    """Question text with each ``{#n}`` placeholder put back to its clause."""

    def restore(match: re.Match[str]) -> str:
        index = int(match.group(1)) - 1
        if 0 <= index < len(question.subquestions):
            return question.subquestions[index].source
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(restore, question.questiontext)


def _append_cloze(rows: list[str], question: MultianswerQuestion) -> None:
    restored = question.model_copy(update={"questiontext": cloze_text(question)})
    _open_question(rows, restored, "cloze")
    rows.append("</question>")


def _append_essay(rows: list[str], question: EssayQuestion) -> None:
    _open_question(rows, question, "essay")
    rows.extend(
        [
            f"  <responseformat>{escape(question.responseformat)}</responseformat>",
            f"  <responserequired>{question.responserequired}</responserequired>",
            f"  <responsefieldlines>{question.responsefieldlines}</responsefieldlines>",
            f"  <attachments>{question.attachments}</attachments>",
            f"  <attachmentsrequired>{question.attachmentsrequired}</attachmentsrequired>",
            _text_element("graderinfo", question.graderinfo),
            _text_element("responsetemplate", question.responsetemplate),
            "</question>",
        ]
    )


def _append_description(rows: list[str], question: DescriptionQuestion) -> None:
    _open_question(rows, question, "description")
    rows.append("</question>")


APPENDERS: dict[type[QuestionBase], Callable[[list[str], QuestionBase], None]] = {
    MultichoiceQuestion: _append_multichoice,
    TrueFalseQuestion: _append_truefalse,
    ShortAnswerQuestion: _append_shortanswer,
    MatchQuestion: _append_matching,
    NumericalQuestion: _append_numerical,
    MultianswerQuestion: _append_cloze,
    EssayQuestion: _append_essay,
    DescriptionQuestion: _append_description,
}


class MoodleXmlExporter(BaseExporter):
    format_name = ExportFormat.MOODLE_XML.value

    def export(self, result: ImportResult, options: dict, output_dir: Path) -> ExportArtifact:
        if not result.questions:
            raise ValueError("No exportable question in the Canvas export.")
        filename = artifact_filename(options, "canvas_questions_moodle.xml")
        output_dir.mkdir(parents=True, exist_ok=True)
        file_path = output_dir / filename

        rows = ['<?xml version="1.0" encoding="UTF-8"?>', "<quiz>"]
        category = options.get("category", get_settings().moodle_category)
        rows.extend(
            [
                '<question type="category">',
                "  <category>",
                f"    <text>{escape(category)}</text>",
                "  </category>",
                "</question>",
            ]
        )

        for question in result.questions:
            APPENDERS[type(question)](rows, question)
        rows.append("</quiz>")

        file_path.write_text("\n".join(rows), encoding="utf-8")
        logger.info(
            "questions exported",
            extra={"format_name": self.format_name, "question_count": len(result.questions)},
        )
        return ExportArtifact(
            artifact_path=str(file_path), mime="application/xml", filename=filename
        )
