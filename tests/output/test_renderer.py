import pytest

from conftest import make_ordering_question, start_and_grade
from qtype_ordering.core.models import DisplayOptions
from qtype_ordering.core.question import OrderingQuestion
from qtype_ordering.core.strings import set_language
from qtype_ordering.core.utils import FORMAT_PLAIN
from qtype_ordering.output.renderer import OrderingRenderer

SWAPPED = ["Modular", "Object", "Oriented", "Learning", "Dynamic", "Environment"]


@pytest.fixture
def renderer():
    return OrderingRenderer()


def test_feedback_image(renderer):
    assert renderer.feedback_image(1.0) == (
        '<i class="icon fa fa-check text-success fa-fw "  title="Correct" role="img" aria-label="Correct"></i>'
    )
    assert 'fa-remove text-danger' in renderer.feedback_image(0.0)
    assert 'title="Partially correct"' in renderer.feedback_image(0.5)


def test_feedback_image_follows_language(renderer):
    set_language("vi")
    assert 'title="Chính xác"' in renderer.feedback_image(1.0)


@pytest.mark.parametrize("texts,expected", [
    (["Modular", "Object", "Oriented", "Dynamic", "Learning", "Environment"], "correct"),
    (["Environment", "Learning", "Dynamic", "Oriented", "Object", "Modular"], "incorrect"),
    (["Learning", "Modular", "Object", "Oriented", "Dynamic", "Environment"], "partial00"),
    (["Object", "Modular", "Oriented", "Dynamic", "Learning", "Environment"], "partial66"),
])
def test_relative_to_correct_classes(renderer, texts, expected):
    # vị trí 0 của response
    question = make_ordering_question(gradingtype=OrderingQuestion.GRADING_RELATIVE_TO_CORRECT)
    start_and_grade(question, texts)

    score, maxscore, fraction, percent, scoreclass, img = \
        renderer.get_ordering_item_score(question, 0, question.currentresponse[0])

    assert maxscore == 5
    assert scoreclass == expected
    assert img


def test_relative_to_correct_partial33(renderer):
    question = make_ordering_question(gradingtype=OrderingQuestion.GRADING_RELATIVE_TO_CORRECT)
    start_and_grade(question, ["Dynamic", "Modular", "Object", "Oriented", "Learning", "Environment"])

    # Dynamic: vị trí đúng 3, đang ở 0 -> 5 - 3 = 2 / 5
    score, maxscore, fraction, percent, scoreclass, img = renderer.get_ordering_item_score(question, 0, 16)

    assert (score, maxscore, percent, scoreclass) == (2, 5, 40, "partial33")


def test_unscored_item(renderer):
    question = make_ordering_question(gradingtype=OrderingQuestion.GRADING_RELATIVE_NEXT_EXCLUDE_LAST)
    start_and_grade(question, SWAPPED)

    assert renderer.get_ordering_item_score(question, 5, 18) == (0, None, 0.0, 0, "unscored", "")


def test_all_or_nothing_item_score(renderer):
    question = make_ordering_question(gradingtype=OrderingQuestion.GRADING_ALL_OR_NOTHING)
    start_and_grade(question, SWAPPED)

    score, maxscore, fraction, percent, scoreclass, img = renderer.get_ordering_item_score(question, 0, 13)
    assert (score, maxscore, percent, scoreclass) == (0, 0, 0, "correct")
    score, maxscore, fraction, percent, scoreclass, img = renderer.get_ordering_item_score(question, 3, 17)
    assert scoreclass == "incorrect"


def test_render_partial_attempt(renderer):
    question = make_ordering_question(gradingtype=OrderingQuestion.GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT,
                                      generalfeedback="Object Oriented Dynamic Learning Environment")
    qa = start_and_grade(question, SWAPPED)

    out = renderer.render(qa, DisplayOptions())

    assert 'class="partial66"' in out["formulation"]
    assert 'name="q0:_response_0"' in out["formulation"]
    assert "Parts, but only parts, of your response are correct." in out["specificfeedback"]
    assert "Grade details: 28 / 30 = 93%" in out["specificfeedback"]
    assert "Correct items: 4" in out["specificfeedback"]
    assert "<li>Dynamic</li><li>Learning</li>" in out["rightanswer"]
    assert out["generalfeedback"] == "Object Oriented Dynamic Learning Environment"


def test_render_general_feedback_uses_its_own_format(renderer):
    question = make_ordering_question(generalfeedback="a < b", generalfeedbackformat=FORMAT_PLAIN)
    qa = start_and_grade(question, SWAPPED)

    out = renderer.render(qa, DisplayOptions())

    assert out["generalfeedback"] == "a &lt; b"


def test_render_hides_right_answer_when_option_off(renderer, question):
    qa = start_and_grade(question, SWAPPED)

    out = renderer.render(qa, DisplayOptions(rightanswer=DisplayOptions.HIDDEN, feedback=DisplayOptions.HIDDEN))

    assert out["rightanswer"] == ""
    assert out["specificfeedback"] == ""
