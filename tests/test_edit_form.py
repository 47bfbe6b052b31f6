import pytest

from conftest import make_ordering_question
from qtype_ordering.core.config import Preferences
from qtype_ordering.core.question import OrderingQuestion
from qtype_ordering.core.utils import FORMAT_HTML, FORMAT_MOODLE
from qtype_ordering.forms.edit_form import OrderingEditForm


def _form_data(**kwargs):
    data = {
        "id": None,
        "name": "Moodle",
        "questiontext": {"text": "Put these words in order", "format": FORMAT_HTML},
        "layouttype": OrderingQuestion.LAYOUT_VERTICAL,
        "selecttype": OrderingQuestion.SELECT_ALL,
        "selectcount": 0,
        "gradingtype": OrderingQuestion.GRADING_RELATIVE_NEXT_INCLUDE_LAST,
        "showgrading": 1,
        "numberingstyle": "abc",
        "answer": ["Modular", "Object", "Oriented", "Dynamic", "", ""],
        "correctfeedback": {"text": "Well done!", "format": FORMAT_HTML},
        "partiallycorrectfeedback": {"text": "Nearly.", "format": FORMAT_HTML},
        "incorrectfeedback": {"text": "No.", "format": FORMAT_HTML},
        "shownumcorrect": 1,
        "hint": [{"text": "Think of OOP", "format": FORMAT_HTML}, {"text": "", "format": FORMAT_HTML}],
        "hintshownumcorrect": [1, 0],
        "hintoptions": [1, 0],
    }
    data.update(kwargs)
    return data


@pytest.fixture
def form():
    return OrderingEditForm(preferences=Preferences())


def test_qtype(form):
    assert form.qtype() == "ordering"
    assert form.plugin_name() == "qtype_ordering"


def test_get_answer_repeats(form):
    assert form.get_answer_repeats(None) == 6
    assert form.get_answer_repeats(make_ordering_question(answers=["a", "b"])) == 3
    assert form.get_answer_repeats(make_ordering_question(answers=list("abcdefgh"))) == 8


def test_get_addcount_options(form):
    assert form.get_addcount_options("answer", 3) == {
        1: "Add 1 more item",
        2: "Add 2 more items",
        3: "Add 3 more items",
    }
    assert len(form.get_addcount_options("answer")) == 10


def test_definition(form):
    fields = {f.name: f for f in form.definition()}

    for name in OrderingEditForm.OPTION_FIELDS:
        assert name in fields
    assert fields["selectcount"].hide_if == ("selecttype", "eq", OrderingQuestion.SELECT_ALL)
    assert fields["selectcount"].rules == ["numeric"]
    assert fields["showgrading"].options == {0: "Hide", 1: "Show"}
    assert [f"answer[{i}]" in fields for i in range(7)] == [True] * 6 + [False]
    assert fields["answer[2]"].label == "Draggable item 3"
    assert fields["answer[0]"].attributes == {"rows": 2, "cols": 60, "format": FORMAT_MOODLE}
    assert fields["hint[1]"].label == "Hint 2"
    assert fields["correctfeedback"].default == "Your answer is correct."


def test_definition_adds_answer_fields():
    form = OrderingEditForm(submitted={"addanswers": 1, "addanswerscount": 2})
    names = [f.name for f in form.definition()]

    assert "answer[7]" in names
    assert "answer[8]" not in names


def test_removing_editor_switches_to_moodle_format():
    question = make_ordering_question(id=4)
    form = OrderingEditForm(question, submitted={"answerremoveeditor_1": 1})
    fields = {f.name: f for f in form.definition()}

    assert fields["answer[0]"].attributes["format"] == FORMAT_HTML
    assert fields["answer[1]"].attributes["format"] == FORMAT_MOODLE


def test_defaults_come_from_preferences():
    prefs = Preferences()
    prefs.set("qtype_ordering_gradingtype", OrderingQuestion.GRADING_LONGEST_ORDERED_SUBSET)
    form = OrderingEditForm(preferences=prefs)

    fields = {f.name: f for f in form.definition()}
    data = form.data_preprocessing(None)

    assert fields["gradingtype"].default == OrderingQuestion.GRADING_LONGEST_ORDERED_SUBSET
    assert data["gradingtype"] == OrderingQuestion.GRADING_LONGEST_ORDERED_SUBSET
    assert data["layouttype"] == OrderingQuestion.LAYOUT_VERTICAL
    assert data["answer"] == [""] * 6
    assert data["fraction"] == [1, 2, 3, 4, 5, 6]


def test_data_preprocessing_existing_question(form):
    question = make_ordering_question(id=9, answers=["x", "y"], showgrading=False,
                                      gradingtype=OrderingQuestion.GRADING_RELATIVE_TO_CORRECT)

    data = form.data_preprocessing(question)

    assert data["id"] == 9
    assert data["answer"] == [
        {"text": "x", "format": FORMAT_HTML},
        {"text": "y", "format": FORMAT_HTML},
        {"text": "", "format": FORMAT_MOODLE},
    ]
    assert data["fraction"] == [1, 2, 3]
    assert data["showgrading"] == 0
    assert data["gradingtype"] == OrderingQuestion.GRADING_RELATIVE_TO_CORRECT
    assert data["correctfeedback"]["text"] == "Well done!"


def test_validation_ok_saves_defaults(form):
    assert form.validation(_form_data()) == {}
    assert form.get_default_value("gradingtype", None) == OrderingQuestion.GRADING_RELATIVE_NEXT_INCLUDE_LAST
    assert form.get_default_value("numberingstyle", None) == "abc"


def test_validation_existing_question_keeps_defaults(form):
    assert form.validation(_form_data(id=5)) == {}
    assert form.get_default_value("numberingstyle", "none") == "none"


def test_validation_duplicates(form):
    errors = form.validation(_form_data(answer=["Modular", {"text": " Object ", "format": 1}, "Modular", "Object"]))

    assert errors == {
        "answer[2]": 'Duplication of draggable items are not allowed. The string "Modular" is already used in '
                     '<a href="#id_answer_0">Draggable item 1</a>.',
        "answer[3]": 'Duplication of draggable items are not allowed. The string "Object" is already used in '
                     '<a href="#id_answer_1">Draggable item 2</a>.',
    }
    assert form.get_default_value("numberingstyle", "none") == "none"


def test_validation_not_enough_answers(form):
    assert form.validation(_form_data(answer=["", "  "])) == {
        "answer[0]": "Ordering questions must have more than 2 answers.",
        "answer[1]": "Ordering questions must have more than 2 answers.",
    }
    assert form.validation(_form_data(answer=["only one"])) == {
        "answer[1]": "Ordering questions must have more than 2 answers.",
    }


def test_validation_selectcount(form):
    errors = form.validation(_form_data(selecttype=OrderingQuestion.SELECT_RANDOM, selectcount=1))
    assert errors == {"selectcount": "A subset must have at least 2 items."}

    errors = form.validation(_form_data(selecttype=OrderingQuestion.SELECT_RANDOM, selectcount="many"))
    assert errors == {"selectcount": "You must enter a number here."}

    # không kiểm tra khi chọn tất cả
    assert form.validation(_form_data(selecttype=OrderingQuestion.SELECT_ALL, selectcount=1)) == {}


def test_validation_requires_name(form):
    assert form.validation(_form_data(name="  ")) == {"name": "You must supply a question name."}


def test_save_question(form):
    question = form.save_question(_form_data())

    assert question.name == "Moodle"
    assert [a.answer for a in question.answers.values()] == ["Modular", "Object", "Oriented", "Dynamic"]
    assert [a.fraction for a in question.answers.values()] == [1, 2, 3, 4]
    assert question.gradingtype == OrderingQuestion.GRADING_RELATIVE_NEXT_INCLUDE_LAST
    assert question.numberingstyle == "abc"
    assert question.showgrading is True
    assert question.feedback.partiallycorrectfeedback == "Nearly."
    assert len(question.hints) == 1
    assert question.hints[0].shownumcorrect is True


def test_save_question_rejects_invalid_data(form):
    with pytest.raises(ValueError):
        form.save_question(_form_data(answer=["one"]))


def test_general_feedback_format_round_trip(form):
    question = form.save_question(_form_data(generalfeedback={"text": "Good", "format": FORMAT_MOODLE}))

    assert question.questiontextformat == FORMAT_HTML
    assert question.generalfeedbackformat == FORMAT_MOODLE
    assert form.data_preprocessing(question)["generalfeedback"] == {"text": "Good", "format": FORMAT_MOODLE}
