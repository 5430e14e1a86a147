"""Response-processing extractors for ``resprocessing/respcondition`` lists."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from canvasqti.enums import SourceQuestionType
from canvasqti.importer.blocks import text_at
from canvasqti.schemas import Response
from canvasqti.text import to_float
from canvasqti.xmltree import get_path

CONDITION_VAR = ["#", "conditionvar", 0, "#"]


def _condition_title(condition: Any) -> str:
    title = text_at(condition, ["@", "title"])
    if title:
        return title
    return text_at(condition, ["#", "displayfeedback", 0, "@", "linkrefid"])


def _apply_feedback_and_mark(condition: Any, response: Response) -> None:
    linkrefid = text_at(condition, ["#", "displayfeedback", 0, "@", "linkrefid"])
    if linkrefid:
        response.feedback = linkrefid

    setvar = text_at(condition, ["#", "setvar", 0, "#"])
    if setvar:
        response.mark = to_float(setvar)
        response.title = "correct" if response.mark > 0.0 else "incorrect"


class BaseResponseProcessor(ABC):
    """Turns condition nodes into ``Response`` records."""

    def process(self, conditions: list[Any]) -> list[Response]:
        return [self.process_condition(condition) for condition in conditions]

    @abstractmethod
    def process_condition(self, condition: Any) -> Response:
        """Build the response for a single ``respcondition`` node."""


class ConditionResponseProcessor(BaseResponseProcessor):
    """Choice, short answer and multi-blank questions."""

    def process_condition(self, condition: Any) -> Response:
        response = Response(title=_condition_title(condition))

        other = text_at(condition, [*CONDITION_VAR, "other", 0, "#"])
        if other:
            response.ident = [other]
        elif get_path(condition, [*CONDITION_VAR, "and"], False):
            group = get_path(condition, [*CONDITION_VAR, "and", 0, "#"], {})
            if isinstance(group, dict):
                for tag, children in group.items():
                    for child in children:
                        if tag == "varequal":
                            response.ident.append(text_at(child, ["#"]))
                        if response.respident is None:
                            respident = text_at(child, ["@", "respident"])
                            if respident:
                                response.respident = respident
        else:
            respidents: list[str] = []
            for group in get_path(condition, ["#", "conditionvar"], []):
                for equal in get_path(group, ["#", "varequal"], []):
                    response.ident.append(text_at(equal, ["#"]))
                    respidents.append(text_at(equal, ["@", "respident"]))
            if respidents:
                response.respident = respidents

        _apply_feedback_and_mark(condition, response)
        return response


class MatchingResponseProcessor(BaseResponseProcessor):
    """One equality test per sub-question; other conditions stay inert."""

    def process_condition(self, condition: Any) -> Response:
        response = Response()
        if get_path(condition, [*CONDITION_VAR, "varequal"], False):
            response.correct = text_at(condition, [*CONDITION_VAR, "varequal", 0, "#"])
            respident = text_at(condition, [*CONDITION_VAR, "varequal", 0, "@", "respident"])
            response.ident = [respident]
            response.respident = respident
        return response


def _collect_bounds(group: Any, response: Response) -> None:
    for bound in get_path(group, ["varlte"], []):
        response.maxvalue.append(text_at(bound, ["#"]))
    for bound in get_path(group, ["vargte"], []):
        response.minvalue.append(text_at(bound, ["#"]))


class NumericalResponseProcessor(BaseResponseProcessor):
    """Exact values and ``[vargte, varlte]`` intervals."""

    def process_condition(self, condition: Any) -> Response:
        response = Response(title=_condition_title(condition))

        other = text_at(condition, [*CONDITION_VAR, "other", 0, "#"])
        if other:
            response.ident = [other]
        elif get_path(condition, [*CONDITION_VAR, "or"], False):
            group = get_path(condition, [*CONDITION_VAR, "or", 0, "#"], {})
            for equal in get_path(group, ["varequal"], []):
                response.value.append(text_at(equal, ["#"]))
            _collect_bounds(group, response)
            for conjunction in get_path(group, ["and"], []):
                _collect_bounds(get_path(conjunction, ["#"], {}), response)
        else:
            _collect_bounds(get_path(condition, CONDITION_VAR, {}), response)

        _apply_feedback_and_mark(condition, response)
        return response


RESPONSE_PROCESSORS: dict[str, BaseResponseProcessor] = {
    SourceQuestionType.MATCHING.value: MatchingResponseProcessor(),
    SourceQuestionType.NUMERICAL.value: NumericalResponseProcessor(),
}
DEFAULT_RESPONSE_PROCESSOR = ConditionResponseProcessor()


def get_response_processor(qtype: str) -> BaseResponseProcessor:
    """Return the processor registered for a declared question type."""

    return RESPONSE_PROCESSORS.get(qtype, DEFAULT_RESPONSE_PROCESSOR)
