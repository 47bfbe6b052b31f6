from .attempt import QuestionAttempt, QuestionAttemptStep, graded_state_for_fraction
from .models import Answer, CombinedFeedback, DisplayOptions, Hint
from .question import OrderingQuestion
from .strings import get_string, set_language

__all__ = [
    "Answer",
    "CombinedFeedback",
    "DisplayOptions",
    "Hint",
    "OrderingQuestion",
    "QuestionAttempt",
    "QuestionAttemptStep",
    "get_string",
    "graded_state_for_fraction",
    "set_language",
]
