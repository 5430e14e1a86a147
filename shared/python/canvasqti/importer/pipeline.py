"""Canvas QTI document to question list conversion."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
import logging
from typing import Any

from canvasqti.config import Settings, get_settings
from canvasqti.correlation import conversion_scope
from canvasqti.enums import DiagnosticKind, SourceQuestionType
from canvasqti.errors import ImportItemError, QuestionRejectedError, UnsupportedQuestionTypeError
from canvasqti.importer.encoders import ENCODERS, process_common
from canvasqti.importer.raw import build_raw_question
from canvasqti.schemas import (
    DescriptionQuestion,
    Diagnostic,
    ImportResult,
    QuestionBase,
    RawQuestion,
)
from canvasqti.strings import get_string
from canvasqti.text import html_to_text
from canvasqti.xmltree import get_path, parse_xml

logger = logging.getLogger(__name__)

ROOT_SECTION_PATH = ["questestinterop", "#", "assessment", 0, "#", "section", 0]


def _section_items(section: Any) -> Iterator[Any]:
    yield from get_path(section, ["#", "item"], [])
    for subsection in get_path(section, ["#", "section"], []):
        yield from _section_items(subsection)


def iter_items(section: Any) -> list[Any]:
    """Items of a section and of its nested sections (question groups), in document order."""

    return sorted(_section_items(section), key=lambda item: get_path(item, ["$"], 0))


def encode_question(raw: RawQuestion, locale: str | None = None) -> QuestionBase:
    """Dispatch a raw question to the encoder for its declared type."""

    if raw.qtype == SourceQuestionType.CALCULATED:
        # Only used to render the stem in the message.
        stem = process_common(raw, DescriptionQuestion, locale).questiontext
        raise UnsupportedQuestionTypeError(
            get_string("calculatedskipped", locale, a=html_to_text(stem)),
            item_ident=raw.id,
            qtype=raw.qtype,
        )
    encoder = ENCODERS.get(raw.qtype)
    if encoder is None:
        raise UnsupportedQuestionTypeError(
            get_string("unknownorunhandledtype", locale, a=raw.qtype),
            item_ident=raw.id,
            qtype=raw.qtype,
        )
    return encoder(raw, locale)


def _diagnostic_kind(exc: ImportItemError) -> DiagnosticKind:
    if isinstance(exc, QuestionRejectedError):
        return DiagnosticKind.STRUCTURAL_REJECTION
    if exc.qtype == SourceQuestionType.CALCULATED:
        return DiagnosticKind.UNSUPPORTED_TYPE
    return DiagnosticKind.UNKNOWN_TYPE


def import_tree(tree: Any, *, locale: str | None = None) -> ImportResult:
    """Convert every item of a parsed export; item failures become diagnostics."""

    result = ImportResult()
    breakdown: Counter[str] = Counter()
    for item in iter_items(get_path(tree, ROOT_SECTION_PATH, {})):
        item_ident = get_path(item, ["@", "ident"], "", True)
        try:
            raw = build_raw_question(item)
            question = encode_question(raw, locale)
        except ImportItemError as exc:
            diagnostic = Diagnostic(
                kind=_diagnostic_kind(exc),
                message=exc.message,
                item_ident=exc.item_ident or item_ident,
                qtype=exc.qtype or None,
            )
            logger.warning(
                "question skipped",
                extra={
                    "item_ident": diagnostic.item_ident,
                    "qtype": diagnostic.qtype,
                    "diagnostic": diagnostic.message,
                },
            )
            result.diagnostics.append(diagnostic)
            continue
        except Exception:
            logger.exception("question conversion failed", extra={"item_ident": item_ident})
            result.diagnostics.append(
                Diagnostic(
                    kind=DiagnosticKind.ITEM_FAILED,
                    message=get_string("itemfailed", locale, a=item_ident),
                    item_ident=item_ident,
                )
            )
            continue
        result.questions.append(question)
        breakdown[question.qtype] += 1

    result.type_breakdown = dict(breakdown)
    return result


def import_questions(
    xml_content: str | bytes,
    *,
    settings: Settings | None = None,
    locale: str | None = None,
) -> ImportResult:
    """Parse a Canvas QTI export and convert its items.

    Raises ``DocumentParseError`` when the document is not well-formed; no
    item is converted in that case.
    """

    settings = settings or get_settings()
    with conversion_scope():
        tree = parse_xml(xml_content)
        result = import_tree(tree, locale=locale or settings.question_locale)
        logger.info(
            "canvas export converted",
            extra={"question_count": len(result.questions)},
        )
    return result
