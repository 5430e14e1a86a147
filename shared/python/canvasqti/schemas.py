"""Pydantic schemas for raw questions, output questions and API contracts."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from canvasqti.enums import DiagnosticKind, ExportFormat, TextFormat


class TextField(BaseModel):
    text: str = ""
    format: TextFormat = TextFormat.HTML


# --- Raw (pre-encoding) model ---


class Block(BaseModel):
    """Accumulator for reduced presentation/feedback content."""

    text: str = ""
    ident: str | None = None


class Choice(Block):
    ident: str = ""


class SubQuestion(Block):
    ident: str = ""
    choices: dict[str, Choice] = Field(default_factory=dict)


class Feedback(Block):
    ident: str = ""


class Response(BaseModel):
    """One scored condition branch of ``resprocessing``."""

    title: str = ""
    ident: list[str] = Field(default_factory=list)
    # Scalar for ``and`` groups, parallel to ``ident`` for sibling groups.
    respident: str | list[str] | None = None
    mark: float | None = None
    feedback: str | None = None
    correct: str | None = None
    # Exact numerical answers, informational; grading reads the bounds.
    value: list[str] = Field(default_factory=list)
    minvalue: list[str] = Field(default_factory=list)
    maxvalue: list[str] = Field(default_factory=list)


class ChoiceLayout(BaseModel):
    kind: Literal["choices"] = "choices"
    choices: dict[str, Choice] = Field(default_factory=dict)


class BlankLayout(BaseModel):
    kind: Literal["blanks"] = "blanks"
    blanks: dict[str, dict[str, Choice]] = Field(default_factory=dict)


class MatchingLayout(BaseModel):
    kind: Literal["matching"] = "matching"
    subquestions: list[SubQuestion] = Field(default_factory=list)


class EmptyLayout(BaseModel):
    kind: Literal["none"] = "none"


RawLayout = Annotated[
    ChoiceLayout | BlankLayout | MatchingLayout | EmptyLayout,
    Field(discriminator="kind"),
]


class RawQuestion(BaseModel):
    qtype: str = ""
    id: str = ""
    title: str = ""
    default_mark: float = 1.0
    question: Block = Field(default_factory=Block)
    layout: RawLayout = Field(default_factory=EmptyLayout)
    responses: list[Response] = Field(default_factory=list)
    feedback: dict[str, Feedback] = Field(default_factory=dict)
    maxmark: float = 0.0
    minmark: float = 0.0
    varname: str = ""


# --- Output questions ---


class QuestionBase(BaseModel):
    name: str = ""
    questiontext: str = ""
    questiontextformat: TextFormat = TextFormat.HTML
    generalfeedback: str = ""
    generalfeedbackformat: TextFormat = TextFormat.HTML
    defaultmark: float = 1.0
    penalty: float = 0.3333333
    length: int = 1
    source_ident: str = ""


class CombinedFeedbackMixin(BaseModel):
    correctfeedback: TextField = Field(default_factory=TextField)
    partiallycorrectfeedback: TextField = Field(default_factory=TextField)
    incorrectfeedback: TextField = Field(default_factory=TextField)
    shownumcorrect: bool = False


class MultichoiceQuestion(CombinedFeedbackMixin, QuestionBase):
    qtype: Literal["multichoice"] = "multichoice"
    single: bool = True
    shuffleanswers: bool = True
    answernumbering: str = "abc"
    answer: list[TextField] = Field(default_factory=list)
    fraction: list[float] = Field(default_factory=list)
    feedback: list[TextField] = Field(default_factory=list)


class TrueFalseQuestion(QuestionBase):
    qtype: Literal["truefalse"] = "truefalse"
    penalty: float = 1.0
    answer: int = 1
    correctanswer: int = 1
    feedbacktrue: TextField = Field(default_factory=TextField)
    feedbackfalse: TextField = Field(default_factory=TextField)


class ShortAnswerQuestion(QuestionBase):
    qtype: Literal["shortanswer"] = "shortanswer"
    usecase: int = 0
    answer: list[str] = Field(default_factory=list)
    fraction: list[float] = Field(default_factory=list)
    feedback: list[TextField] = Field(default_factory=list)


class MatchQuestion(CombinedFeedbackMixin, QuestionBase):
    qtype: Literal["match"] = "match"
    shuffleanswers: bool = True
    subquestions: list[TextField] = Field(default_factory=list)
    subanswers: list[str] = Field(default_factory=list)


class NumericalQuestion(QuestionBase):
    qtype: Literal["numerical"] = "numerical"
    answer: list[float] = Field(default_factory=list)
    tolerance: list[float] = Field(default_factory=list)
    fraction: list[float] = Field(default_factory=list)
    feedback: list[TextField] = Field(default_factory=list)


class EmbeddedSubquestion(BaseModel):
    """One ``{n:TYPE:...}`` clause of a cloze question text."""

    qtype: str
    defaultmark: float = 1.0
    usecase: int = 0
    single: bool = True
    layout: str = ""
    answer: list[str] = Field(default_factory=list)
    fraction: list[float] = Field(default_factory=list)
    feedback: list[str] = Field(default_factory=list)
    tolerance: list[float] = Field(default_factory=list)
    source: str = ""


class EmbeddedQuestion(BaseModel):
    questiontext: str
    subquestions: list[EmbeddedSubquestion] = Field(default_factory=list)


class MultianswerQuestion(QuestionBase):
    qtype: Literal["multianswer"] = "multianswer"
    subquestions: list[EmbeddedSubquestion] = Field(default_factory=list)


class EssayQuestion(QuestionBase):
    qtype: Literal["essay"] = "essay"
    fraction: list[float] = Field(default_factory=lambda: [1.0])
    responseformat: str = "editor"
    responserequired: int = 1
    responsefieldlines: int = 15
    attachments: int = 0
    attachmentsrequired: int = 0
    graderinfo: TextField = Field(default_factory=TextField)
    responsetemplate: TextField = Field(default_factory=TextField)


class DescriptionQuestion(QuestionBase):
    qtype: Literal["description"] = "description"
    defaultmark: float = 0.0
    length: int = 0


Question = Annotated[
    MultichoiceQuestion
    | TrueFalseQuestion
    | ShortAnswerQuestion
    | MatchQuestion
    | NumericalQuestion
    | MultianswerQuestion
    | EssayQuestion
    | DescriptionQuestion,
    Field(discriminator="qtype"),
]


# --- Conversion results and API contracts ---


class Diagnostic(BaseModel):
    kind: DiagnosticKind
    message: str
    item_ident: str | None = None
    qtype: str | None = None


class ImportResult(BaseModel):
    questions: list[Question] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    type_breakdown: dict[str, int] = Field(default_factory=dict)


class CanvasImportRequest(BaseModel):
    xml_content: str = Field(min_length=1)
    source_filename: str | None = None
    locale: str | None = None


class CanvasImportResponse(BaseModel):
    source_filename: str | None = None
    imported_questions_count: int
    skipped_items_count: int
    type_breakdown: dict[str, int] = Field(default_factory=dict)
    questions: list[Question] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class CanvasExportRequest(BaseModel):
    xml_content: str = Field(min_length=1)
    format: str = ExportFormat.MOODLE_XML.value
    locale: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)


class ExportArtifact(BaseModel):
    artifact_path: str
    mime: str
    filename: str
