"""Domain enumerations."""

from enum import StrEnum


class SourceQuestionType(StrEnum):
    """Question types declared in Canvas ``question_type`` metadata."""

    MULTIPLE_CHOICE = "multiple_choice_question"
    MULTIPLE_ANSWERS = "multiple_answers_question"
    TRUE_FALSE = "true_false_question"
    SHORT_ANSWER = "short_answer_question"
    ESSAY = "essay_question"
    FILE_UPLOAD = "file_upload_question"
    MATCHING = "matching_question"
    MULTIPLE_DROPDOWNS = "multiple_dropdowns_question"
    FILL_IN_MULTIPLE_BLANKS = "fill_in_multiple_blanks_question"
    NUMERICAL = "numerical_question"
    TEXT_ONLY = "text_only_question"
    CALCULATED = "calculated_question"


class TextFormat(StrEnum):
    HTML = "html"
    PLAIN = "plain_text"
    MOODLE = "moodle_auto_format"


class DiagnosticKind(StrEnum):
    UNKNOWN_TYPE = "unknown_type"
    UNSUPPORTED_TYPE = "unsupported_type"
    STRUCTURAL_REJECTION = "structural_rejection"
    ITEM_FAILED = "item_failed"


class ExportFormat(StrEnum):
    MOODLE_XML = "moodle_xml"
    JSON = "json"
