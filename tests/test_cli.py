import json

import pytest
from typer.testing import CliRunner

from conftest import make_ordering_question
from qtype_ordering.cli import app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("QTYPE_ORDERING_CONFIG", raising=False)
    monkeypatch.delenv("QTYPE_ORDERING_LANG", raising=False)
    path = tmp_path / "questions.json"
    path.write_text(json.dumps([make_ordering_question(category_path="$course$/Words").to_dict()]),
                    encoding="utf-8")
    return tmp_path


def test_privacy(workdir):
    result = runner.invoke(app, ["privacy"])

    assert result.exit_code == 0
    assert "does not store any personal data" in result.output


def test_privacy_in_vietnamese(workdir):
    result = runner.invoke(app, ["--lang", "vi", "privacy"])

    assert result.exit_code == 0
    assert "không lưu" in result.output


def test_build_and_import_xml(workdir):
    result = runner.invoke(app, ["build", "questions.json", "--xml-out", "out/moodle.xml"])
    assert result.exit_code == 0, result.output
    xml = (workdir / "out" / "moodle.xml").read_text(encoding="utf-8")
    assert '<question type="category">' in xml
    assert "<gradingtype>ABSOLUTE_POSITION</gradingtype>" in xml

    result = runner.invoke(app, ["import-xml", "out/moodle.xml", "--json-out", "out/questions.json"])
    assert result.exit_code == 0, result.output
    data = json.loads((workdir / "out" / "questions.json").read_text(encoding="utf-8"))
    assert data[0]["name"] == "Moodle"
    assert data[0]["category_path"] == "$course$/Words"
    assert [a["answer"] for a in data[0]["answers"]][:2] == ["Modular", "Object"]


def test_build_missing_file(workdir):
    result = runner.invoke(app, ["build", "nope.json"])

    assert result.exit_code == 1


def test_grade(workdir):
    result = runner.invoke(app, [
        "grade", "questions.json", "-q", "Moodle",
        "-r", "Object|Modular|Oriented|Dynamic|Learning|Environment", "--html",
    ])

    assert result.exit_code == 0, result.output
    assert "Fraction: 0.6667  State: gradedpartial" in result.output
    assert "4 / 0 / 2" in result.output
    assert "Grade details: 4 / 6 = 67%" in result.output


def test_grade_unknown_item(workdir):
    result = runner.invoke(app, ["grade", "questions.json", "-q", "Moodle", "-r", "Modular|Procedural"])

    assert result.exit_code == 1


def test_grade_repeated_item(workdir):
    result = runner.invoke(app, [
        "grade", "questions.json", "-q", "Moodle",
        "-r", "Modular|Object|Oriented|Dynamic|Learning|Environment|Modular",
    ])

    assert result.exit_code == 1
    assert "Repeated item 'Modular'" in result.output


def test_grade_batch(workdir):
    (workdir / "responses.csv").write_text(
        "student,question,response\n"
        "an,Moodle,Modular|Object|Oriented|Dynamic|Learning|Environment\n"
        "binh,Other,Modular\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["grade-batch", "questions.json", "responses.csv", "--report-out", "report.csv"])

    assert result.exit_code == 0, result.output
    assert "2 row(s), 1 error(s)" in result.output
    assert (workdir / "report.csv").exists()


def test_validate(workdir):
    form = {
        "name": "Words",
        "layouttype": 0, "selecttype": 0, "selectcount": 0, "gradingtype": 7,
        "showgrading": 1, "numberingstyle": "none",
        "answer": ["one", "two", "three"],
    }
    (workdir / "form.json").write_text(json.dumps(form), encoding="utf-8")

    result = runner.invoke(app, ["validate", "form.json", "--save-to", "saved.json"])

    assert result.exit_code == 0, result.output
    saved = json.loads((workdir / "saved.json").read_text(encoding="utf-8"))
    assert saved[0]["gradingtype"] == 7
    prefs = json.loads((workdir / "configs" / "preferences.json").read_text(encoding="utf-8"))
    assert prefs["qtype_ordering_gradingtype"] == 7


def test_validate_reports_errors(workdir):
    (workdir / "form.json").write_text(json.dumps({"answer": ["same", "same"]}), encoding="utf-8")

    result = runner.invoke(app, ["validate", "form.json"])

    assert result.exit_code == 1
    assert "answer[1]" in result.output
