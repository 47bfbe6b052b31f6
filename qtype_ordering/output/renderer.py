# -*- coding: utf-8 -*-
"""
Renderer cho câu hỏi sắp xếp.

- get_ordering_item_score(): điểm từng mục + class CSS + icon
- các hàm render_*(): ghép dữ liệu export_for_template() thành HTML
  (HTML inline, giống cách exporter dựng bảng).
"""
from __future__ import annotations

import html
import logging
from typing import Any, Dict, List, Optional, Tuple

from ..core.attempt import QuestionAttempt, is_active
from ..core.models import DisplayOptions
from ..core.question import OrderingQuestion
from ..core.strings import get_string
from ..core.utils import format_text, round_half_up
from .correct_response import CorrectResponse
from .formulation_and_controls import FormulationAndControls
from .num_parts_correct import NumPartsCorrect
from .specific_grade_detail_feedback import SpecificGradeDetailFeedback

log = logging.getLogger(__name__)

ItemScore = Tuple[Any, Optional[float], float, float, str, str]


class OrderingRenderer:

    # ---------- icons ----------
    def feedback_image(self, fraction: float) -> str:
        if fraction > 0.999999:
            icon, extra, title = "fa-check", "text-success ", get_string("correct")
        elif fraction < 0.000001:
            icon, extra, title = "fa-remove", "text-danger ", get_string("incorrect")
        else:
            icon, extra, title = "fa-check-square", "", get_string("partiallycorrect")
        title = html.escape(title)
        return (f'<i class="icon fa {icon} {extra}fa-fw "  title="{title}" '
                f'role="img" aria-label="{title}"></i>')

    # ---------- per-item score ----------
    def get_ordering_item_score(self, question: OrderingQuestion, position: int, answerid: int) -> ItemScore:
        """
        Trả về (score, maxscore, fraction, percent, class, img).
        maxscore None nghĩa là mục này không được tính điểm (class "unscored").
        """
        score, maxscore, fraction = question.get_ordering_item_score(position, answerid)
        percent = 0
        img = ""

        if maxscore is None:
            return score, maxscore, fraction, percent, "unscored", img

        if maxscore:
            percent = int(round_half_up(100 * fraction))

        if fraction > 0.999999:
            scoreclass = "correct"
        elif fraction < 0.000001:
            scoreclass = "incorrect"
        elif fraction >= 0.66:
            scoreclass = "partial66"
        elif fraction >= 0.33:
            scoreclass = "partial33"
        else:
            scoreclass = "partial00"
        img = self.feedback_image(fraction)
        return score, maxscore, fraction, percent, scoreclass, img

    # ---------- HTML ----------
    def render_formulation_and_controls(self, qa: QuestionAttempt, options: DisplayOptions) -> str:
        data = FormulationAndControls(qa, options).export_for_template(self)

        items: List[str] = []
        for ans in data["answers"]:
            img = ans.get("feedbackimage", "")
            items.append(
                f'<li id="{ans["id"]}" class="{ans["scoreclass"]}">'
                f'{img}<span class="answertext">{ans["answertext"]}</span></li>'
            )
        listclass = f'sortablelist {data["layoutclass"]} numbering{data["numberingstyle"]}'
        if data["active"] and not data["readonly"]:
            listclass += " active"
        parts = [
            f'<div class="qtext">{data["questiontext"]}</div>',
            f'<div class="ablock" id="{data["ablockid"]}">',
            f'<div class="answer ordering"><ol class="{listclass}" id="{data["sortableid"]}">',
            "".join(items),
            "</ol></div>",
            f'<input type="hidden" name="{html.escape(data["responsename"])}" '
            f'id="{data["responseid"]}" value="{data["value"]}">',
            "</div>",
        ]
        return "".join(parts)

    def render_specific_grade_detail_feedback(self, qa: QuestionAttempt) -> str:
        data = SpecificGradeDetailFeedback(self, qa).export_for_template(self)
        if not data.get("show"):
            return ""

        parts = ['<div class="gradingdetails">']
        if data.get("gradingtype"):
            parts.append(f'<p class="gradingtype">{html.escape(data["gradingtype"])}</p>')
        if data.get("scoredetails"):
            parts.append(f'<p>{html.escape(get_string("scoredetails"))}</p>')
            parts.append(f'<ol class="scoredetails {data.get("orderinglayoutclass", "")}">')
            for detail in data["scoredetails"]:
                if detail["maxscore"] is None:
                    parts.append(f'<li>{html.escape(str(detail["score"]))}</li>')
                else:
                    parts.append(f'<li>{detail["score"]} / {detail["maxscore"]} = {detail["percent"]}%</li>')
            parts.append("</ol>")
        if "gradedetails" in data:
            parts.append(
                f'<p class="gradedetails">{html.escape(get_string("gradedetails"))}: '
                f'{data["totalscore"]} / {data["totalmaxscore"]} = {data["gradedetails"]}%</p>'
            )
        parts.append("</div>")
        return "".join(parts)

    def render_correct_response(self, qa: QuestionAttempt, options: DisplayOptions) -> str:
        if not options.rightanswer:
            return ""
        data = CorrectResponse(qa).export_for_template(self)
        if not data.get("hascorrectresponse") or not data.get("showcorrect"):
            return ""
        items = "".join(f'<li>{a["answertext"]}</li>' for a in data["correctanswers"])
        return (f'<p>{html.escape(get_string("correctorder"))}</p>'
                f'<ol class="correctorder {data["orderinglayoutclass"]}">{items}</ol>')

    def render_num_parts_correct(self, qa: QuestionAttempt, options: DisplayOptions) -> str:
        data = NumPartsCorrect(qa, options).export_for_template(self)
        if not data.get("show"):
            return ""
        return '<div class="numpartscorrect">' + "".join(f"<p>{html.escape(s)}</p>" for s in data["lines"]) + "</div>"

    def specific_feedback(self, qa: QuestionAttempt, options: DisplayOptions) -> str:
        """Combined feedback theo trạng thái + chi tiết chấm điểm."""
        if not options.feedback:
            return ""
        question = qa.get_question()
        text, fmt = question.get_combined_feedback(qa.get_state())
        out = ""
        if text:
            out += f'<div class="combinedfeedback">{format_text(text, fmt)}</div>'
        out += self.render_specific_grade_detail_feedback(qa)
        if question.feedback.shownumcorrect and options.numpartscorrect:
            out += self.render_num_parts_correct(qa, options)
        return out

    def render(self, qa: QuestionAttempt, options: Optional[DisplayOptions] = None) -> Dict[str, str]:
        """Tất cả các khối HTML của một lượt làm bài."""
        options = options or DisplayOptions()
        question = qa.get_question()
        generalfeedback = ""
        if options.generalfeedback and question.generalfeedback and not is_active(qa.get_state()):
            generalfeedback = format_text(question.generalfeedback, question.generalfeedbackformat)
        return {
            "formulation": self.render_formulation_and_controls(qa, options),
            "specificfeedback": self.specific_feedback(qa, options),
            "generalfeedback": generalfeedback,
            "rightanswer": self.render_correct_response(qa, options),
        }
