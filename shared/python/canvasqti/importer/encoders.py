"""Encoders mapping raw questions to output question records."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from canvasqti.cloze import parse_embedded
from canvasqti.enums import SourceQuestionType
from canvasqti.errors import QuestionRejectedError
from canvasqti.grading import match_grade_options
from canvasqti.schemas import (
    BlankLayout,
    Choice,
    ChoiceLayout,
    CombinedFeedbackMixin,
    DescriptionQuestion,
    EssayQuestion,
    MatchingLayout,
    MatchQuestion,
    MultianswerQuestion,
    MultichoiceQuestion,
    NumericalQuestion,
    QuestionBase,
    RawQuestion,
    Response,
    ShortAnswerQuestion,
    TextField,
    TrueFalseQuestion,
)
from canvasqti.strings import get_string
from canvasqti.text import clean_input, escape_cloze_text, html_to_text, to_float

QuestionT = TypeVar("QuestionT", bound=QuestionBase)
LayoutT = TypeVar("LayoutT")

FALSE_LITERALS = ("false", "faux")
MATCHING_MIN_SUBQUESTIONS = 2
MATCHING_MIN_ANSWERS = 3
CLOZE_PENALTY = 0.3333333


def _layout(raw: RawQuestion, expected: type[LayoutT]) -> LayoutT:
    if not isinstance(raw.layout, expected):
        raise TypeError(f"{raw.qtype} question {raw.id!r} has a {raw.layout.kind} layout")
    return raw.layout


def question_name(raw: RawQuestion, locale: str | None = None) -> str:
    if raw.title:
        return clean_input(raw.title)
    return get_string("defaultname", locale, a=raw.id)


def process_common(
    raw: RawQuestion, model: type[QuestionT], locale: str | None = None
) -> QuestionT:
    """Fields shared by every question type."""

    return model(
        name=question_name(raw, locale),
        questiontext=clean_input(raw.question.text),
        generalfeedback="",
        source_ident=raw.id,
    )


def process_qfeedbacks(raw: RawQuestion, question: QuestionBase, addcombined: bool = True) -> None:
    """Copy general and combined feedback; absent entries leave fields untouched."""

    feedback = {fb.ident: fb.text.strip() for fb in raw.feedback.values()}
    if "general_fb" in feedback:
        question.generalfeedback = feedback["general_fb"]
    if addcombined and isinstance(question, CombinedFeedbackMixin):
        if "correct_fb" in feedback:
            question.correctfeedback.text = feedback["correct_fb"]
        if "general_incorrect_fb" in feedback:
            question.incorrectfeedback.text = feedback["general_incorrect_fb"]


def answer_feedback(raw: RawQuestion, ident: str | None) -> TextField:
    if ident is not None and ident in raw.feedback:
        return TextField(text=clean_input(raw.feedback[ident].text))
    return TextField(text="")


def correct_idents(responses: list[Response]) -> dict[str, int]:
    """Idents named by ``correct`` responses, each counted once."""

    correct: dict[str, int] = {}
    for response in responses:
        if response.title == "correct":
            for ident in response.ident:
                correct[ident] = 1
    return correct


def _choice_answers(
    raw: RawQuestion, question: MultichoiceQuestion, fraction: Callable[[Choice], float]
) -> None:
    for choice in _layout(raw, ChoiceLayout).choices.values():
        question.answer.append(TextField(text=clean_input(choice.text.strip())))
        question.fraction.append(fraction(choice))
        question.feedback.append(answer_feedback(raw, f"{choice.ident}_fb"))


def encode_multichoice(raw: RawQuestion, locale: str | None = None) -> MultichoiceQuestion:
    question = process_common(raw, MultichoiceQuestion, locale)
    question.single = True
    correct = correct_idents(raw.responses)
    process_qfeedbacks(raw, question, True)
    _choice_answers(raw, question, lambda choice: 1.0 if choice.ident in correct else 0.0)
    return question


def encode_multiple_answers(raw: RawQuestion, locale: str | None = None) -> MultichoiceQuestion:
    question = process_common(raw, MultichoiceQuestion, locale)
    question.single = False
    correct = correct_idents(raw.responses)
    process_qfeedbacks(raw, question, True)

    total = sum(correct.values())

    def fraction(choice: Choice) -> float:
        if choice.ident not in correct:
            return 0.0
        return match_grade_options(correct[choice.ident] / total)

    _choice_answers(raw, question, fraction)
    return question


def is_false_literal(text: str, locale: str | None = None) -> bool:
    lowered = text.lower()
    return lowered in FALSE_LITERALS or lowered == get_string("false", locale).lower()


def encode_truefalse(raw: RawQuestion, locale: str | None = None) -> TrueFalseQuestion:
    question = process_common(raw, TrueFalseQuestion, locale)
    process_qfeedbacks(raw, question, False)

    choices = _layout(raw, ChoiceLayout).choices
    correct_id: str | None = None
    incorrect_id: str | None = None
    correct_text = ""
    for response in raw.responses:
        if response.title == "correct" and response.ident:
            correct_id = response.ident[0]
            for cid, choice in choices.items():
                if cid == correct_id:
                    correct_text = choice.text
                else:
                    incorrect_id = cid

    correct_suffix = f"{correct_id}_fb" if correct_id is not None else None
    incorrect_suffix = f"{incorrect_id}_fb" if incorrect_id is not None else None
    if not is_false_literal(correct_text, locale):
        question.answer = 1
        question.feedbacktrue = answer_feedback(raw, correct_suffix)
        question.feedbackfalse = answer_feedback(raw, incorrect_suffix)
    else:
        question.answer = 0
        question.feedbacktrue = answer_feedback(raw, incorrect_suffix)
        question.feedbackfalse = answer_feedback(raw, correct_suffix)
    question.correctanswer = question.answer
    return question


def encode_shortanswer(raw: RawQuestion, locale: str | None = None) -> ShortAnswerQuestion:
    question = process_common(raw, ShortAnswerQuestion, locale)
    question.usecase = 0
    process_qfeedbacks(raw, question, False)

    for response in raw.responses:
        if response.title == "correct":
            for literal in response.ident:
                if literal != "":
                    question.answer.append(literal)
                    question.fraction.append(1.0)
                    question.feedback.append(TextField(text=""))

    for response in raw.responses:
        if response.title == "correct":
            continue
        for literal in response.ident:
            if literal == "":
                continue
            for index, answer in enumerate(question.answer):
                if answer == literal:
                    question.feedback[index] = answer_feedback(raw, response.title)

    # Catch-all so that any other entry is graded (and can carry feedback).
    question.answer.append("*")
    question.fraction.append(0.0)
    question.feedback.append(TextField(text=""))
    return question


def encode_essay(raw: RawQuestion, locale: str | None = None) -> EssayQuestion:
    question = process_common(raw, EssayQuestion, locale)
    question.fraction = [1.0]
    question.defaultmark = 1.0
    question.responseformat = "editor"
    question.responsefieldlines = 15
    if raw.qtype == SourceQuestionType.FILE_UPLOAD:
        question.attachments = 1
        question.attachmentsrequired = 1
        question.responserequired = 0
    else:
        question.attachments = 0
        question.attachmentsrequired = 0
        question.responserequired = 1
    question.graderinfo = TextField(text="")
    question.responsetemplate = TextField(text="")
    return question


def encode_matching(raw: RawQuestion, locale: str | None = None) -> MatchQuestion:
    question = process_common(raw, MatchQuestion, locale)
    process_qfeedbacks(raw, question, True)
    subquestions = _layout(raw, MatchingLayout).subquestions

    correct_choices: dict[str, str | None] = {}
    all_choices: list[str] = []
    for subquestion in subquestions:
        correct: str | None = None
        for response in raw.responses:
            if response.respident is not None and response.respident == subquestion.ident:
                correct = response.correct
        choice = subquestion.choices.get(correct) if correct is not None else None
        correct_choices[subquestion.ident] = choice.text if choice is not None else None
        for candidate in subquestion.choices.values():
            if candidate.text not in all_choices:
                all_choices.append(candidate.text)

    for choice_text in all_choices:
        if choice_text == "":
            continue
        subanswer = html_to_text(clean_input(choice_text))
        subquestion_text = ""
        for ident, correct_text in correct_choices.items():
            if correct_text != choice_text:
                continue
            for subquestion in subquestions:
                if subquestion.ident == ident:
                    subquestion_text = subquestion.text
                    break
            question.subquestions.append(TextField(text=clean_input(subquestion_text)))
            question.subanswers.append(subanswer)
        if subquestion_text == "":
            # Choice is nobody's answer: keep it as a distractor.
            question.subquestions.append(TextField(text=""))
            question.subanswers.append(subanswer)

    subquestion_count = sum(1 for subquestion in question.subquestions if subquestion.text != "")
    answer_count = len(question.subanswers)
    if subquestion_count < MATCHING_MIN_SUBQUESTIONS or answer_count < MATCHING_MIN_ANSWERS:
        raise QuestionRejectedError(
            get_string("notenoughtsubans", locale, a=question.questiontext),
            item_ident=raw.id,
            qtype=raw.qtype,
        )
    return question


def encode_description(raw: RawQuestion, locale: str | None = None) -> DescriptionQuestion:
    question = process_common(raw, DescriptionQuestion, locale)
    question.defaultmark = 0.0
    question.length = 0
    return question


def _blank_correct_idents(key: str, responses: list[Response]) -> list[str]:
    target = f"response_{key}"
    correct: list[str] = []
    for response in responses:
        if response.title != "correct":
            continue
        if isinstance(response.respident, list):
            correct.extend(
                ident
                for ident, respident in zip(response.ident, response.respident)
                if respident == target
            )
        elif response.respident == target:
            correct.extend(response.ident)
    return correct


def build_blank_clause(
    key: str, choices: dict[str, Choice], responses: list[Response], qtype: str
) -> str:
    """Embedded-answer clause for one blank of a dropdown/fill-in question."""

    accept_all = qtype == SourceQuestionType.FILL_IN_MULTIPLE_BLANKS
    correct = _blank_correct_idents(key, responses)
    alternatives: list[str] = []
    for cid, choice in choices.items():
        prefix = "%100%" if accept_all or cid in correct else ""
        alternatives.append(prefix + escape_cloze_text(choice.text))
    clause_type = "SHORTANSWER" if accept_all else "MULTICHOICE"
    return "{1:" + clause_type + ":" + "~".join(alternatives) + "}"


def encode_multianswer(raw: RawQuestion, locale: str | None = None) -> MultianswerQuestion:
    text = clean_input(raw.question.text)
    for key, choices in _layout(raw, BlankLayout).blanks.items():
        text = text.replace(f"[{key}]", build_blank_clause(key, choices, raw.responses, raw.qtype))

    embedded = parse_embedded(text)
    question = MultianswerQuestion(
        name=question_name(raw, locale),
        questiontext=embedded.questiontext,
        subquestions=embedded.subquestions,
        generalfeedback="",
        source_ident=raw.id,
    )
    process_qfeedbacks(raw, question, False)
    question.length = 1
    question.penalty = CLOZE_PENALTY
    return question


def encode_numerical(raw: RawQuestion, locale: str | None = None) -> NumericalQuestion:
    question = process_common(raw, NumericalQuestion, locale)
    process_qfeedbacks(raw, question, False)

    for response in raw.responses:
        if response.title != "correct":
            continue
        for minimum, maximum in zip(response.minvalue, response.maxvalue):
            if response.mark is None or response.mark <= 0:
                continue
            low = to_float(minimum)
            high = to_float(maximum)
            answer = (high + low) / 2
            question.answer.append(answer)
            question.tolerance.append(high - answer)
            question.fraction.append(match_grade_options(response.mark / 100))
            question.feedback.append(answer_feedback(raw, response.feedback))
    return question


Encoder = Callable[[RawQuestion, str | None], QuestionBase]

ENCODERS: dict[str, Encoder] = {
    SourceQuestionType.MULTIPLE_CHOICE.value: encode_multichoice,
    SourceQuestionType.MULTIPLE_ANSWERS.value: encode_multiple_answers,
    SourceQuestionType.TRUE_FALSE.value: encode_truefalse,
    SourceQuestionType.SHORT_ANSWER.value: encode_shortanswer,
    SourceQuestionType.ESSAY.value: encode_essay,
    SourceQuestionType.FILE_UPLOAD.value: encode_essay,
    SourceQuestionType.MATCHING.value: encode_matching,
    SourceQuestionType.MULTIPLE_DROPDOWNS.value: encode_multianswer,
    SourceQuestionType.FILL_IN_MULTIPLE_BLANKS.value: encode_multianswer,
    SourceQuestionType.NUMERICAL.value: encode_numerical,
    SourceQuestionType.TEXT_ONLY.value: encode_description,
}
