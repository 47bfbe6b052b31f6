# -*- coding: utf-8 -*-
from typing import Any, Dict

from ..core.attempt import QuestionAttempt, is_graded
from ..core.models import DisplayOptions
from ..core.strings import get_string


class NumPartsCorrect:
    """Số mục đúng / đúng một phần / sai của response cuối."""

    def __init__(self, qa: QuestionAttempt, options: DisplayOptions):
        self.qa = qa
        self.options = options

    def export_for_template(self, output=None) -> Dict[str, Any]:
        data: Dict[str, Any] = {"show": False}
        if not self.options.numpartscorrect or not is_graded(self.qa.get_state()):
            return data

        question = self.qa.get_question()
        numright, numpartial, numincorrect = question.get_num_parts_right(self.qa.get_last_qt_data())
        data["show"] = True
        data["numright"] = numright
        data["numpartial"] = numpartial
        data["numincorrect"] = numincorrect
        data["lines"] = [
            get_string(identifier, count)
            for identifier, count in (
                ("correctitemsnumber", numright),
                ("partialitemsnumber", numpartial),
                ("incorrectitemsnumber", numincorrect),
            )
            if count
        ]
        return data
