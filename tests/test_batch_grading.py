import json

import pandas as pd
import pytest

from conftest import make_ordering_question
from qtype_ordering.core.question import OrderingQuestion
from qtype_ordering.services.batch_grading import (
    grade_batch,
    grade_texts,
    load_questions,
    read_responses,
    run_batch_grading,
    split_response,
)

CORRECT = "Modular|Object|Oriented|Dynamic|Learning|Environment"
SWAPPED = "Object|Modular|Oriented|Dynamic|Learning|Environment"


@pytest.fixture
def questions_json(tmp_path):
    path = tmp_path / "questions.json"
    question = make_ordering_question(id=11)
    path.write_text(json.dumps([question.to_dict()]), encoding="utf-8")
    return path


def test_split_response():
    assert split_response(" a | b ||c ") == ["a", "b", "c"]
    assert split_response("") == []


def test_load_questions_by_name_and_id(questions_json):
    questions = load_questions(str(questions_json))

    assert set(questions) == {"Moodle", "11"}
    assert questions["Moodle"] is questions["11"]


def test_grade_texts():
    question = make_ordering_question()

    result = grade_texts(question, split_response(SWAPPED))

    assert result == {
        "fraction": pytest.approx(4 / 6),
        "state": "gradedpartial",
        "percentage": 67,
        "numright": 4,
        "numpartial": 0,
        "numwrong": 2,
    }


def test_grade_texts_rejects_empty_response():
    with pytest.raises(ValueError):
        grade_texts(make_ordering_question(), [])


def test_grade_texts_rejects_extra_repeated_item():
    question = make_ordering_question()

    with pytest.raises(ValueError, match="Repeated item 'Modular'"):
        grade_texts(question, split_response(CORRECT + "|Modular"))


def test_grade_texts_rejects_one_item_repeated():
    question = make_ordering_question(gradingtype=OrderingQuestion.GRADING_RELATIVE_TO_CORRECT)

    with pytest.raises(ValueError, match="Repeated item 'Learning'"):
        grade_texts(question, ["Learning"] * 6)


def test_grade_batch_reports_repeated_items():
    questions = {"Moodle": make_ordering_question()}
    responses = pd.DataFrame([
        {"student": "an", "question": "Moodle", "response": CORRECT + "|Modular"},
        {"student": "binh", "question": "Moodle", "response": "|".join(["Learning"] * 6)},
        {"student": "chi", "question": "Moodle", "response": CORRECT},
    ])

    report = grade_batch(questions, responses)

    assert list(report["state"]) == ["", "", "gradedright"]
    assert "Repeated item 'Modular'" in report["error"][0]
    assert "Repeated item 'Learning'" in report["error"][1]
    assert report["error"][2] == ""


def test_grade_batch_reports_bad_rows():
    questions = {"Moodle": make_ordering_question(gradingtype=OrderingQuestion.GRADING_ALL_OR_NOTHING)}
    responses = pd.DataFrame([
        {"student": "an", "question": "Moodle", "response": CORRECT},
        {"student": "binh", "question": "Moodle", "response": SWAPPED},
        {"student": "chi", "question": "Nope", "response": CORRECT},
        {"student": "dung", "question": "Moodle", "response": "Modular|Procedural"},
    ])
    seen = []

    report = grade_batch(questions, responses, lambda i, total, msg: seen.append((i, total)))

    assert list(report["state"]) == ["gradedright", "gradedwrong", "", ""]
    assert list(report["percentage"][:2]) == [100, 0]
    assert report["error"][2] == "Unknown question 'Nope'"
    assert "Procedural" in report["error"][3]
    assert seen[-1] == (4, 4)


def test_run_batch_grading_csv(tmp_path, questions_json):
    responses = tmp_path / "responses.csv"
    pd.DataFrame({"Question": ["Moodle", "11"], "Response": [CORRECT, SWAPPED]}).to_csv(responses, index=False)
    out = tmp_path / "out" / "report.xlsx"

    report = run_batch_grading(str(questions_json), str(responses), str(out))

    assert out.exists()
    assert list(report["student"]) == ["", ""]
    assert list(report["numright"]) == [6, 4]
    saved = pd.read_excel(out)
    assert list(saved["state"]) == ["gradedright", "gradedpartial"]


def test_read_responses_requires_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("student,answer\nan,x\n", encoding="utf-8")

    with pytest.raises(ValueError):
        read_responses(str(path))
    with pytest.raises(FileNotFoundError):
        read_responses(str(tmp_path / "missing.csv"))
