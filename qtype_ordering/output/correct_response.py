# -*- coding: utf-8 -*-
from typing import Any, Dict

from ..core.attempt import GRADED_PARTIAL, GRADED_WRONG, QuestionAttempt


class CorrectResponse:
    """Mô tả thứ tự đúng cho một lượt làm bài."""

    def __init__(self, qa: QuestionAttempt):
        self.qa = qa

    def export_for_template(self, output=None) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        question = self.qa.get_question()
        correctresponse = question.correctresponse
        data["hascorrectresponse"] = bool(correctresponse)
        if not data["hascorrectresponse"]:
            return data

        # Chỉ hiện thứ tự đúng khi làm đúng một phần hoặc sai
        step = self.qa.get_last_step()
        data["showcorrect"] = step is not None and step.get_state() in (GRADED_PARTIAL, GRADED_WRONG)
        if not data["showcorrect"]:
            return data

        data["orderinglayoutclass"] = question.get_ordering_layoutclass()
        data["correctanswers"] = []
        for answerid in correctresponse:
            answer = question.answers[answerid]
            answertext = question.format_text(answer.answer, answer.answerformat, self.qa,
                                              "question", "answer", answerid)
            data["correctanswers"].append({"answertext": answertext})
        return data
