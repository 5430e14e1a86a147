from canvasqti.enums import SourceQuestionType
from canvasqti.importer.responses import (
    ConditionResponseProcessor,
    MatchingResponseProcessor,
    NumericalResponseProcessor,
    get_response_processor,
)
from canvasqti.xmltree import parse_xml


def _conditions(*xml: str) -> list[dict]:
    return [parse_xml(fragment)["respcondition"] for fragment in xml]


def test_and_group_collects_idents_with_scalar_respident() -> None:
    (response,) = ConditionResponseProcessor().process(
        _conditions(
            '<respcondition continue="No"><conditionvar><and>'
            '<varequal respident="response1">a1</varequal>'
            '<varequal respident="response1">a3</varequal>'
            '<not><varequal respident="response1">a2</varequal></not>'
            "</and></conditionvar>"
            '<setvar action="Set" varname="SCORE">100</setvar></respcondition>'
        )
    )

    assert response.ident == ["a1", "a3"]
    assert response.respident == "response1"
    assert response.mark == 100.0
    assert response.title == "correct"


def test_sibling_groups_keep_respidents_parallel() -> None:
    (response,) = ConditionResponseProcessor().process(
        _conditions(
            "<respcondition><conditionvar>"
            '<varequal respident="response_color1">1</varequal>'
            '<varequal respident="response_color2">4</varequal>'
            "</conditionvar>"
            '<setvar action="Add" varname="SCORE">50</setvar></respcondition>'
        )
    )

    assert response.ident == ["1", "4"]
    assert response.respident == ["response_color1", "response_color2"]


def test_zero_setvar_marks_incorrect() -> None:
    (response,) = ConditionResponseProcessor().process(
        _conditions(
            '<respcondition title="correct"><conditionvar>'
            '<varequal respident="response1">b</varequal></conditionvar>'
            '<setvar action="Set" varname="SCORE">0</setvar></respcondition>'
        )
    )

    assert response.mark == 0.0
    assert response.title == "incorrect"


def test_title_falls_back_to_feedback_link() -> None:
    first, second = ConditionResponseProcessor().process(
        _conditions(
            "<respcondition><conditionvar><other/></conditionvar>"
            '<displayfeedback feedbacktype="Response" linkrefid="general_fb"/></respcondition>',
            '<respcondition title="correct"><conditionvar><other>x</other></conditionvar>'
            "</respcondition>",
        )
    )

    assert first.title == "general_fb"
    assert first.feedback == "general_fb"
    assert first.ident == []
    assert first.mark is None

    assert second.title == "correct"
    assert second.ident == ["x"]


def test_matching_processor_reads_single_equality() -> None:
    matched, inert = MatchingResponseProcessor().process(
        _conditions(
            '<respcondition><conditionvar><varequal respident="response_s1">c1</varequal>'
            '</conditionvar><setvar action="Add" varname="SCORE">50.00</setvar></respcondition>',
            "<respcondition><conditionvar><other/></conditionvar></respcondition>",
        )
    )

    assert matched.correct == "c1"
    assert matched.respident == "response_s1"
    assert matched.ident == ["response_s1"]
    assert inert.correct is None
    assert inert.ident == []


def test_numerical_processor_reads_exact_and_interval() -> None:
    exact, interval = NumericalResponseProcessor().process(
        _conditions(
            '<respcondition continue="No"><conditionvar><or>'
            '<varequal respident="response1">5.0</varequal>'
            '<and><vargte respident="response1">4.5</vargte>'
            '<varlte respident="response1">5.5</varlte></and>'
            "</or></conditionvar>"
            '<setvar action="Set" varname="SCORE">100</setvar></respcondition>',
            '<respcondition continue="No"><conditionvar>'
            '<vargte respident="response1">1</vargte><varlte respident="response1">3</varlte>'
            '</conditionvar><setvar action="Set" varname="SCORE">100</setvar></respcondition>',
        )
    )

    assert exact.value == ["5.0"]
    assert exact.minvalue == ["4.5"]
    assert exact.maxvalue == ["5.5"]
    assert exact.title == "correct"
    assert interval.minvalue == ["1"]
    assert interval.maxvalue == ["3"]


def test_processor_registry_defaults_to_condition_processor() -> None:
    assert isinstance(
        get_response_processor(SourceQuestionType.MATCHING), MatchingResponseProcessor
    )
    assert isinstance(
        get_response_processor(SourceQuestionType.NUMERICAL), NumericalResponseProcessor
    )
    assert isinstance(get_response_processor("anything_else"), ConditionResponseProcessor)
