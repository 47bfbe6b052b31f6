# -*- coding: utf-8 -*-
"""
OrderingQuestion: câu hỏi sắp xếp thứ tự.

Giữ định nghĩa câu hỏi (các mục theo thứ tự đúng + tuỳ chọn) và trạng thái của
lượt làm bài hiện tại (correctresponse / currentresponse là list answer id,
chỉ số trong list = vị trí).
"""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from . import grading
from .attempt import QuestionAttemptStep, graded_state_for_fraction
from .grading import (
    GRADING_ABSOLUTE_POSITION,
    GRADING_ALL_OR_NOTHING,
    GRADING_LONGEST_CONTIGUOUS_SUBSET,
    GRADING_LONGEST_ORDERED_SUBSET,
    GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT,
    GRADING_RELATIVE_NEXT_EXCLUDE_LAST,
    GRADING_RELATIVE_NEXT_INCLUDE_LAST,
    GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT,
    GRADING_RELATIVE_TO_CORRECT,
)
from .models import Answer, CombinedFeedback, Hint
from .strings import get_string
from .utils import FORMAT_HTML, format_text, html_to_text

log = logging.getLogger(__name__)


class OrderingQuestion:
    LAYOUT_VERTICAL = 0
    LAYOUT_HORIZONTAL = 1

    SELECT_ALL = 0
    SELECT_RANDOM = 1
    SELECT_CONTIGUOUS = 2

    MIN_SUBSET_ITEMS = 2

    GRADING_ALL_OR_NOTHING = GRADING_ALL_OR_NOTHING
    GRADING_ABSOLUTE_POSITION = GRADING_ABSOLUTE_POSITION
    GRADING_RELATIVE_NEXT_EXCLUDE_LAST = GRADING_RELATIVE_NEXT_EXCLUDE_LAST
    GRADING_RELATIVE_NEXT_INCLUDE_LAST = GRADING_RELATIVE_NEXT_INCLUDE_LAST
    GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT = GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT
    GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT = GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT
    GRADING_LONGEST_ORDERED_SUBSET = GRADING_LONGEST_ORDERED_SUBSET
    GRADING_LONGEST_CONTIGUOUS_SUBSET = GRADING_LONGEST_CONTIGUOUS_SUBSET
    GRADING_RELATIVE_TO_CORRECT = GRADING_RELATIVE_TO_CORRECT

    NUMBERING_STYLE_DEFAULT = "none"

    def __init__(
        self,
        id: int = 0,
        name: str = "",
        questiontext: str = "",
        answers: Optional[Iterable[Union[Answer, str, Dict[str, Any]]]] = None,
        questiontextformat: int = FORMAT_HTML,
        generalfeedback: str = "",
        generalfeedbackformat: int = FORMAT_HTML,
        defaultmark: float = 1.0,
        penalty: float = 0.3333333,
        layouttype: int = LAYOUT_VERTICAL,
        selecttype: int = SELECT_ALL,
        selectcount: int = MIN_SUBSET_ITEMS,
        gradingtype: int = GRADING_ABSOLUTE_POSITION,
        showgrading: bool = True,
        numberingstyle: str = NUMBERING_STYLE_DEFAULT,
        feedback: Optional[CombinedFeedback] = None,
        hints: Optional[List[Hint]] = None,
        category_path: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self.id = id
        self.name = name
        self.questiontext = questiontext or ""
        self.questiontextformat = questiontextformat
        self.generalfeedback = generalfeedback or ""
        self.generalfeedbackformat = generalfeedbackformat
        self.defaultmark = float(defaultmark)
        self.penalty = float(penalty)
        self.layouttype = int(layouttype)
        self.selecttype = int(selecttype)
        self.selectcount = int(selectcount or 0)
        self.gradingtype = int(gradingtype)
        self.showgrading = bool(showgrading)
        self.numberingstyle = numberingstyle or self.NUMBERING_STYLE_DEFAULT
        self.feedback = feedback or CombinedFeedback()
        self.hints = list(hints or [])
        self.category_path = category_path
        self.rng = rng or random.Random()

        self.answers: Dict[int, Answer] = self._build_answers(answers or [])
        self.correctresponse: List[int] = []
        self.currentresponse: List[int] = []

    @staticmethod
    def _build_answers(items) -> Dict[int, Answer]:
        """Chuẩn hoá answers -> {id: Answer}, sắp theo fraction (thứ tự đúng)."""
        built: List[Answer] = []
        next_id = 1
        for idx, item in enumerate(items, 1):
            if isinstance(item, Answer):
                ans = item
            elif isinstance(item, dict):
                ans = Answer(
                    id=int(item.get("id") or 0),
                    answer=item.get("answer", item.get("text", "")) or "",
                    answerformat=int(item.get("answerformat", item.get("format", FORMAT_HTML))),
                    fraction=float(item.get("fraction", idx)),
                )
            else:
                ans = Answer(id=0, answer=str(item), fraction=float(idx))
            built.append(ans)
        used = {a.id for a in built if a.id}
        for ans in built:
            if not ans.id:
                while next_id in used:
                    next_id += 1
                ans.id = next_id
                used.add(next_id)
        built.sort(key=lambda a: a.fraction)
        return {a.id: a for a in built}

    # ========= option labels =========
    @staticmethod
    def get_layout_types(type: Optional[int] = None):
        types = {
            OrderingQuestion.LAYOUT_VERTICAL: get_string("vertical"),
            OrderingQuestion.LAYOUT_HORIZONTAL: get_string("horizontal"),
        }
        return types if type is None else types.get(type)

    @staticmethod
    def get_select_types(type: Optional[int] = None):
        types = {
            OrderingQuestion.SELECT_ALL: get_string("selectall"),
            OrderingQuestion.SELECT_RANDOM: get_string("selectrandom"),
            OrderingQuestion.SELECT_CONTIGUOUS: get_string("selectcontiguous"),
        }
        return types if type is None else types.get(type)

    @staticmethod
    def get_grading_types(type: Optional[int] = None):
        types = {
            GRADING_ALL_OR_NOTHING: get_string("allornothing"),
            GRADING_ABSOLUTE_POSITION: get_string("absoluteposition"),
            GRADING_RELATIVE_TO_CORRECT: get_string("relativetocorrect"),
            GRADING_RELATIVE_NEXT_EXCLUDE_LAST: get_string("relativenextexcludelast"),
            GRADING_RELATIVE_NEXT_INCLUDE_LAST: get_string("relativenextincludelast"),
            GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT: get_string("relativeonepreviousandnext"),
            GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT: get_string("relativeallpreviousandnext"),
            GRADING_LONGEST_ORDERED_SUBSET: get_string("longestorderedsubset"),
            GRADING_LONGEST_CONTIGUOUS_SUBSET: get_string("longestcontiguoussubset"),
        }
        return types if type is None else types.get(type)

    @staticmethod
    def get_numbering_styles(style: Optional[str] = None):
        styles = {s: get_string("numberingstyle" + s) for s in ("none", "abc", "ABCD", "123", "iii", "IIII")}
        return styles if style is None else styles.get(style)

    def get_ordering_layoutclass(self) -> str:
        if self.layouttype == self.LAYOUT_HORIZONTAL:
            return "horizontal"
        return "vertical"

    # ========= text =========
    def format_text(self, text: str, fmt: int, qa=None, component: str = "question",
                    filearea: str = "answer", itemid: Any = None) -> str:
        return format_text(text, fmt)

    def format_questiontext(self, qa=None) -> str:
        return format_text(self.questiontext, self.questiontextformat)

    def format_answer(self, answerid: int) -> str:
        ans = self.answers[answerid]
        return self.format_text(ans.answer, ans.answerformat, itemid=answerid)

    # ========= attempt lifecycle =========
    def get_selectcount(self) -> int:
        count = len(self.answers)
        if self.selecttype == self.SELECT_ALL or not self.selectcount:
            return count
        return max(min(self.selectcount, count), min(self.MIN_SUBSET_ITEMS, count))

    def start_attempt(self, step: QuestionAttemptStep, variant: int = 1) -> None:
        answerids = list(self.answers.keys())
        selectcount = self.get_selectcount()

        if self.selecttype == self.SELECT_RANDOM and selectcount < len(answerids):
            picked = set(self.rng.sample(answerids, selectcount))
            answerids = [a for a in answerids if a in picked]
        elif self.selecttype == self.SELECT_CONTIGUOUS and selectcount < len(answerids):
            offset = self.rng.randint(0, len(answerids) - selectcount)
            answerids = answerids[offset:offset + selectcount]

        self.correctresponse = list(answerids)
        step.set_qt_var("_correctresponse", ",".join(str(a) for a in self.correctresponse))

        shuffled = list(answerids)
        if len(shuffled) > 1:
            # tránh đưa ra đúng thứ tự đúng ngay từ đầu
            for _ in range(10):
                self.rng.shuffle(shuffled)
                if shuffled != self.correctresponse:
                    break
        self.currentresponse = shuffled
        step.set_qt_var("_currentresponse", ",".join(str(a) for a in self.currentresponse))
        log.debug("Started attempt on question %s: correct=%s current=%s",
                  self.id, self.correctresponse, self.currentresponse)

    def _ids_from_var(self, value: Optional[str]) -> List[int]:
        ids: List[int] = []
        for part in (value or "").split(","):
            part = part.strip()
            if not part:
                continue
            try:
                answerid = int(part)
            except ValueError:
                log.warning("Ignoring bad answer id %r in question %s", part, self.id)
                continue
            if answerid in self.answers:
                ids.append(answerid)
        return ids

    def apply_attempt_state(self, step: QuestionAttemptStep) -> None:
        self.correctresponse = self._ids_from_var(step.get_qt_var("_correctresponse"))
        self.currentresponse = self._ids_from_var(step.get_qt_var("_currentresponse"))

    # ========= responses =========
    def get_response_fieldname(self) -> str:
        return f"response_{self.id}"

    def get_expected_data(self) -> Dict[str, str]:
        return {self.get_response_fieldname(): "text"}

    def update_current_response(self, response: Dict[str, Any]) -> None:
        name = self.get_response_fieldname()
        value = (response or {}).get(name)
        if not value:
            return
        bykey = {ans.md5key: ans.id for ans in self.answers.values()}
        ids = []
        for key in str(value).split(","):
            answerid = bykey.get(key.strip())
            if answerid is not None:
                ids.append(answerid)
        self.currentresponse = ids

    def response_for_ids(self, answerids: Iterable[int]) -> Dict[str, str]:
        keys = [self.answers[a].md5key for a in answerids]
        return {self.get_response_fieldname(): ",".join(keys)}

    def response_for_texts(self, texts: Iterable[str]) -> Dict[str, str]:
        """Dựng response từ danh sách nội dung mục (theo thứ tự học sinh sắp)."""
        bytext = {ans.answer: ans.id for ans in self.answers.values()}
        ids = []
        for text in texts:
            if text not in bytext:
                raise ValueError(f"Unknown item {text!r} for question {self.name or self.id}")
            if bytext[text] in ids:
                raise ValueError(f"Repeated item {text!r} for question {self.name or self.id}")
            ids.append(bytext[text])
        return self.response_for_ids(ids)

    def check_unique_answers(self) -> None:
        """Hai mục cùng nội dung có cùng md5key -> ValueError."""
        seen = set()
        for ans in self.answers.values():
            if ans.md5key in seen:
                raise ValueError(f"Duplicate item {ans.answer!r} in question {self.name or self.id!r}")
            seen.add(ans.md5key)

    def get_correct_response(self) -> Dict[str, str]:
        if not self.correctresponse:
            return {}
        return self.response_for_ids(self.correctresponse)

    def is_complete_response(self, response: Dict[str, Any]) -> bool:
        # luôn có một thứ tự (có thể là thứ tự ban đầu) nên luôn đầy đủ
        return True

    def is_gradable_response(self, response: Dict[str, Any]) -> bool:
        return True

    def get_validation_error(self, response: Dict[str, Any]) -> str:
        return ""

    def is_same_response(self, prevresponse: Dict[str, Any], newresponse: Dict[str, Any]) -> bool:
        name = self.get_response_fieldname()
        return (prevresponse or {}).get(name) == (newresponse or {}).get(name)

    def summarise_response(self, response: Dict[str, Any]) -> str:
        self.update_current_response(response)
        items = [html_to_text(self.answers[a].answer) for a in self.currentresponse]
        return "; ".join(items)

    # ========= grading =========
    def grade_response(self, response: Dict[str, Any]) -> Tuple[float, str]:
        self.update_current_response(response)
        fraction = grading.grade(self.gradingtype, self.correctresponse, self.currentresponse)
        return fraction, graded_state_for_fraction(fraction)

    def get_ordering_item_score(self, position: int, answerid: int) -> Tuple[float, Optional[float], float]:
        """(score, maxscore, fraction) của mục ở `position`; maxscore None = không tính điểm."""
        return grading.item_score(self.gradingtype, self.correctresponse, self.currentresponse,
                                  position, answerid)

    def get_num_parts_right(self, response: Dict[str, Any]) -> Tuple[int, int, int]:
        self.update_current_response(response)
        numright = numpartial = numincorrect = 0
        for position, answerid in enumerate(self.currentresponse):
            score, maxscore, fraction = self.get_ordering_item_score(position, answerid)
            if maxscore is None:
                continue
            if fraction > 0.999999:
                numright += 1
            elif fraction < 0.000001:
                numincorrect += 1
            else:
                numpartial += 1
        return numright, numpartial, numincorrect

    def clear_wrong_from_response(self, response: Dict[str, Any]) -> Dict[str, Any]:
        # Thứ tự luôn phải đủ các mục nên không xoá gì
        return response

    def get_hint(self, hintnumber: int) -> Optional[Hint]:
        if 0 <= hintnumber < len(self.hints):
            return self.hints[hintnumber]
        return None

    def get_combined_feedback(self, state: str) -> Tuple[str, int]:
        fb = self.feedback
        if state.endswith("right"):
            return fb.correctfeedback, fb.correctfeedbackformat
        if state.endswith("partial"):
            return fb.partiallycorrectfeedback, fb.partiallycorrectfeedbackformat
        if state.endswith("wrong"):
            return fb.incorrectfeedback, fb.incorrectfeedbackformat
        return "", FORMAT_HTML

    # ========= (de)serialisation =========
    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_type": "ordering",
            "id": self.id,
            "name": self.name,
            "questiontext": self.questiontext,
            "questiontextformat": self.questiontextformat,
            "generalfeedback": self.generalfeedback,
            "generalfeedbackformat": self.generalfeedbackformat,
            "defaultmark": self.defaultmark,
            "penalty": self.penalty,
            "layouttype": self.layouttype,
            "selecttype": self.selecttype,
            "selectcount": self.selectcount,
            "gradingtype": self.gradingtype,
            "showgrading": self.showgrading,
            "numberingstyle": self.numberingstyle,
            "answers": [
                {"id": a.id, "answer": a.answer, "answerformat": a.answerformat, "fraction": a.fraction}
                for a in self.answers.values()
            ],
            "feedback": self.feedback.to_dict(),
            "hints": [dict(h.__dict__) for h in self.hints],
            "category_path": self.category_path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderingQuestion":
        if not isinstance(data, dict):
            raise ValueError("Question data must be an object")
        qtype = data.get("question_type", "ordering")
        if qtype != "ordering":
            raise ValueError(f"Not an ordering question: {qtype}")
        answers = data.get("answers") or []
        if not answers:
            raise ValueError(f"Question {data.get('name') or data.get('id')!r} has no answers")
        return cls(
            id=int(data.get("id") or 0),
            name=data.get("name", "") or "",
            questiontext=data.get("questiontext", "") or "",
            answers=answers,
            questiontextformat=int(data.get("questiontextformat", FORMAT_HTML)),
            generalfeedback=data.get("generalfeedback", "") or "",
            generalfeedbackformat=int(data.get("generalfeedbackformat", FORMAT_HTML)),
            defaultmark=float(data.get("defaultmark", 1.0)),
            penalty=float(data.get("penalty", 0.3333333)),
            layouttype=int(data.get("layouttype", cls.LAYOUT_VERTICAL)),
            selecttype=int(data.get("selecttype", cls.SELECT_ALL)),
            selectcount=int(data.get("selectcount", cls.MIN_SUBSET_ITEMS) or 0),
            gradingtype=int(data.get("gradingtype", GRADING_ABSOLUTE_POSITION)),
            showgrading=bool(data.get("showgrading", True)),
            numberingstyle=data.get("numberingstyle") or cls.NUMBERING_STYLE_DEFAULT,
            feedback=CombinedFeedback.from_dict(data.get("feedback")),
            hints=[Hint(**h) for h in (data.get("hints") or [])],
            category_path=data.get("category_path"),
        )
        question.check_unique_answers()
        return question
