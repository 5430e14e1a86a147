import json
from pathlib import Path
import xml.etree.ElementTree as ET

import pytest

from canvasqti.exporters.base import artifact_filename
from canvasqti.exporters.json_exporter import JsonExporter
from canvasqti.exporters.moodle_xml_exporter import MoodleXmlExporter, cloze_text
from canvasqti.exporters.registry import get_exporters
from canvasqti.schemas import (
    DescriptionQuestion,
    EmbeddedSubquestion,
    EssayQuestion,
    ImportResult,
    MatchQuestion,
    MultianswerQuestion,
    MultichoiceQuestion,
    NumericalQuestion,
    ShortAnswerQuestion,
    TextField,
    TrueFalseQuestion,
)


def _result() -> ImportResult:
    return ImportResult(
        questions=[
            MultichoiceQuestion(
                name="Capital",
                questiontext="<p>Capital of France?</p>",
                answer=[TextField(text="Paris"), TextField(text="Lyon")],
                fraction=[1.0, 0.0],
                feedback=[TextField(text="Yes"), TextField(text="")],
            ),
            TrueFalseQuestion(name="Sky", questiontext="Blue?", answer=0, correctanswer=0),
            ShortAnswerQuestion(
                name="City",
                questiontext="City?",
                answer=["Paris", "*"],
                fraction=[1.0, 0.0],
                feedback=[TextField(), TextField()],
            ),
            MatchQuestion(
                name="Pairs",
                questiontext="Match",
                subquestions=[TextField(text="France"), TextField(text="Italy"), TextField()],
                subanswers=["Paris", "Rome", "Oslo"],
            ),
            NumericalQuestion(
                name="Five",
                questiontext="x?",
                answer=[5.0],
                tolerance=[0.5],
                fraction=[1.0],
                feedback=[TextField()],
            ),
            MultianswerQuestion(
                name="Roses",
                questiontext="Roses are {#1}.",
                subquestions=[
                    EmbeddedSubquestion(
                        qtype="shortanswer",
                        answer=["red"],
                        fraction=[1.0],
                        feedback=[""],
                        source="{1:SHORTANSWER:%100%red}",
                    )
                ],
            ),
            EssayQuestion(name="Essay", questiontext="Discuss ]]> this"),
            DescriptionQuestion(name="Intro", questiontext="Read"),
        ]
    )


def test_registry_lists_formats() -> None:
    assert sorted(get_exporters()) == ["json", "moodle_xml"]


def test_moodle_export_writes_every_question_type(tmp_path: Path) -> None:
    artifact = MoodleXmlExporter().export(_result(), options={}, output_dir=tmp_path)

    assert artifact.mime == "application/xml"
    root = ET.fromstring(Path(artifact.artifact_path).read_text(encoding="utf-8"))
    assert root.tag == "quiz"
    types = [question.get("type") for question in root.findall("question")]
    assert types == [
        "category",
        "multichoice",
        "truefalse",
        "shortanswer",
        "matching",
        "numerical",
        "cloze",
        "essay",
        "description",
    ]
    assert root.find("question/category/text").text == "$course$/Canvas import"

    multichoice = root.findall("question")[1]
    assert [answer.get("fraction") for answer in multichoice.findall("answer")] == ["100", "0"]
    assert multichoice.find("single").text == "true"

    truefalse = root.findall("question")[2]
    answers = {
        answer.findtext("text"): answer.get("fraction") for answer in truefalse.findall("answer")
    }
    assert answers == {"true": "0", "false": "100"}

    matching = root.findall("question")[4]
    assert [sub.findtext("answer/text") for sub in matching.findall("subquestion")] == [
        "Paris",
        "Rome",
        "Oslo",
    ]

    numerical = root.findall("question")[5]
    assert numerical.findtext("answer/tolerance") == "0.5"

    cloze = root.findall("question")[6]
    assert cloze.findtext("questiontext/text") == "Roses are {1:SHORTANSWER:%100%red}."

    essay = root.findall("question")[7]
    assert essay.findtext("questiontext/text") == "Discuss ]]> this"
    assert essay.findtext("responsefieldlines") == "15"


def test_moodle_export_uses_category_option(tmp_path: Path) -> None:
    artifact = MoodleXmlExporter().export(
        _result(),
        options={"category": "$course$/Week 1", "filename": "week1.xml"},
        output_dir=tmp_path,
    )

    assert artifact.filename == "week1.xml"
    root = ET.parse(artifact.artifact_path).getroot()
    assert root.find("question/category/text").text == "$course$/Week 1"


def test_exporters_reject_empty_result(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        MoodleXmlExporter().export(ImportResult(), options={}, output_dir=tmp_path)
    with pytest.raises(ValueError):
        JsonExporter().export(ImportResult(), options={}, output_dir=tmp_path)


def test_cloze_text_keeps_unknown_placeholders() -> None:
    question = MultianswerQuestion(
        questiontext="{#1} {#2}",
        subquestions=[EmbeddedSubquestion(qtype="shortanswer", source="{1:SA:=a}")],
    )

    assert cloze_text(question) == "{1:SA:=a} {#2}"


def test_json_export_dumps_questions(tmp_path: Path) -> None:
    artifact = JsonExporter().export(_result(), options={}, output_dir=tmp_path)

    payload = json.loads(Path(artifact.artifact_path).read_text(encoding="utf-8"))
    assert artifact.mime == "application/json"
    assert len(payload["questions"]) == 8
    assert payload["questions"][0]["qtype"] == "multichoice"


def test_artifact_filename_keeps_bare_names_only() -> None:
    assert artifact_filename({}, "default.xml") == "default.xml"
    assert artifact_filename({"filename": "bank.xml"}, "default.xml") == "bank.xml"
    for filename in ("/etc/passwd", "../x", "a/b.xml", "..", "."):
        with pytest.raises(ValueError):
            artifact_filename({"filename": filename}, "default.xml")
