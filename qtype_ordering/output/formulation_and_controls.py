# -*- coding: utf-8 -*-
import re
from typing import Any, Dict

from ..core.attempt import QuestionAttempt, is_active, is_graded
from ..core.models import DisplayOptions


class FormulationAndControls:
    """Dữ liệu cho template hiển thị đề bài và danh sách mục kéo thả."""

    def __init__(self, qa: QuestionAttempt, options: DisplayOptions):
        self.qa = qa
        self.options = options

    def export_for_template(self, output) -> Dict[str, Any]:
        """`output` là OrderingRenderer (cần get_ordering_item_score)."""
        qa = self.qa
        question = qa.get_question()

        data: Dict[str, Any] = {}
        data["readonly"] = bool(self.options.readonly)
        data["questiontext"] = question.format_questiontext(qa)
        data["responsename"] = qa.get_qt_field_name(question.get_response_fieldname())
        data["responseid"] = "id_" + re.sub(r"[^a-zA-Z0-9]+", "_", data["responsename"])
        data["value"] = ",".join(question.answers[a].md5key for a in question.currentresponse)
        data["ablockid"] = f"id_ablock_{question.id}"
        data["layoutclass"] = question.get_ordering_layoutclass()
        data["numberingstyle"] = question.numberingstyle
        data["active"] = is_active(qa.get_state())
        data["sortableid"] = f"id_sortable_{question.id}"
        data["answers"] = []

        showcorrectness = self.options.correctness == DisplayOptions.VISIBLE and is_graded(qa.get_state())

        for position, answerid in enumerate(question.currentresponse):
            answer = question.answers[answerid]
            item = {
                "scoreclass": "sortableitem",
                "id": answer.md5key,
                "answertext": question.format_text(answer.answer, answer.answerformat, qa,
                                                   "question", "answer", answerid),
            }
            if showcorrectness:
                _, _, _, _, scoreclass, img = output.get_ordering_item_score(question, position, answerid)
                if img:
                    item["scoreclass"] = scoreclass
                    item["feedbackimage"] = img
            data["answers"].append(item)

        return data
