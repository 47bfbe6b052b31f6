# -*- coding: utf-8 -*-
import re
from typing import Any, Dict

from ..core.attempt import QuestionAttempt
from ..core.question import OrderingQuestion
from ..core.strings import get_string
from ..core.utils import round_half_up

_SHOW_RE = re.compile(r"(partial|wrong)$")


class SpecificGradeDetailFeedback:
    """
    Chi tiết chấm điểm của response: điểm từng mục (vd. 1 / 2 = 50%) và tổng
    (vd. 4 / 6 = 67%). Chỉ hiện khi làm đúng một phần hoặc sai.
    """

    def __init__(self, renderer, qa: QuestionAttempt):
        self.renderer = renderer
        self.qa = qa

    def export_for_template(self, output=None) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        question = self.qa.get_question()

        show = False
        step = self.qa.get_last_step()
        if step is not None:
            show = bool(_SHOW_RE.search(step.get_state()))
        data["show"] = show
        if not show:
            return data

        if not question.showgrading:
            return data

        gradingtype = OrderingQuestion.get_grading_types(question.gradingtype)
        if gradingtype:
            data["gradingtype"] = get_string("gradingtype") + ": " + gradingtype

        currentresponse = question.currentresponse
        if not currentresponse:
            return data

        totalscore = 0
        totalmaxscore = 0
        data["orderinglayoutclass"] = question.get_ordering_layoutclass()
        data["scoredetails"] = []

        for position, answerid in enumerate(currentresponse):
            if answerid not in question.answers:
                continue
            score, maxscore, fraction, percent, scoreclass, img = \
                self.renderer.get_ordering_item_score(question, position, answerid)
            if maxscore is None:
                score = get_string("noscore")
            else:
                totalscore += score
                totalmaxscore += maxscore
            data["scoredetails"].append({
                "score": score,
                "maxscore": maxscore,
                "percent": percent,
            })

        if totalmaxscore == 0:
            del data["scoredetails"]  # all or nothing
        else:
            if totalscore == 0:
                data["gradedetails"] = 0
            else:
                data["gradedetails"] = int(round_half_up(100 * totalscore / totalmaxscore))
            data["totalscore"] = totalscore
            data["totalmaxscore"] = totalmaxscore

        return data
