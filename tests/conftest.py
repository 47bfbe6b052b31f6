import random

import pytest

from qtype_ordering.core.attempt import QuestionAttempt, QuestionAttemptStep
from qtype_ordering.core.models import Answer, CombinedFeedback
from qtype_ordering.core.question import OrderingQuestion
from qtype_ordering.core.strings import set_language
from qtype_ordering.core.utils import FORMAT_HTML

WORDS = {13: "Modular", 14: "Object", 15: "Oriented", 16: "Dynamic", 17: "Learning", 18: "Environment"}


def make_ordering_question(**kwargs):
    """Câu hỏi mẫu: 6 từ, thứ tự đúng là Modular Object Oriented Dynamic Learning Environment."""
    answers = [
        Answer(id=answerid, answer=text, answerformat=FORMAT_HTML, fraction=float(i))
        for i, (answerid, text) in enumerate(WORDS.items(), 1)
    ]
    options = dict(
        id=0,
        name="Moodle",
        questiontext="Put these words in order",
        answers=answers,
        feedback=CombinedFeedback(
            correctfeedback="Well done!",
            partiallycorrectfeedback="Parts, but only parts, of your response are correct.",
            incorrectfeedback="That is not right at all.",
        ),
        rng=random.Random(7),
    )
    options.update(kwargs)
    return OrderingQuestion(**options)


def start_and_grade(question, texts):
    """Bắt đầu lượt làm bài, chấm thứ tự `texts`; trả về qa đã có trạng thái graded."""
    qa = QuestionAttempt(question, 0)
    step = QuestionAttemptStep()
    qa.add_step(step)
    question.start_attempt(step, 1)
    fraction, state = question.grade_response(question.response_for_texts(texts))
    step.set_state(state)
    step.set_fraction(fraction)
    return qa


@pytest.fixture(autouse=True)
def english():
    set_language("en")
    yield
    set_language("en")


@pytest.fixture
def question():
    return make_ordering_question()
