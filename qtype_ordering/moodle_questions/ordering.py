# moodle_questions/ordering.py
# -*- coding: utf-8 -*-
"""
Xuất / nhập một câu hỏi sắp xếp dạng Moodle XML (<question type="ordering">).
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Dict, Optional

from ..core.grading import (
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
from ..core.models import Answer, CombinedFeedback, Hint
from ..core.question import OrderingQuestion
from ..core.utils import FORMAT_HTML, FORMAT_MOODLE, format_from_name, format_name, xml_escape
from .utils import cdata, text_tag

log = logging.getLogger(__name__)

LAYOUT_NAMES: Dict[int, str] = {
    OrderingQuestion.LAYOUT_VERTICAL: "VERTICAL",
    OrderingQuestion.LAYOUT_HORIZONTAL: "HORIZONTAL",
}

SELECT_NAMES: Dict[int, str] = {
    OrderingQuestion.SELECT_ALL: "ALL",
    OrderingQuestion.SELECT_RANDOM: "RANDOM",
    OrderingQuestion.SELECT_CONTIGUOUS: "CONTIGUOUS",
}

GRADING_NAMES: Dict[int, str] = {
    GRADING_ALL_OR_NOTHING: "ALL_OR_NOTHING",
    GRADING_ABSOLUTE_POSITION: "ABSOLUTE_POSITION",
    GRADING_RELATIVE_NEXT_EXCLUDE_LAST: "RELATIVE_NEXT_EXCLUDE_LAST",
    GRADING_RELATIVE_NEXT_INCLUDE_LAST: "RELATIVE_NEXT_INCLUDE_LAST",
    GRADING_RELATIVE_ONE_PREVIOUS_AND_NEXT: "RELATIVE_ONE_PREVIOUS_AND_NEXT",
    GRADING_RELATIVE_ALL_PREVIOUS_AND_NEXT: "RELATIVE_ALL_PREVIOUS_AND_NEXT",
    GRADING_LONGEST_ORDERED_SUBSET: "LONGEST_ORDERED_SUBSET",
    GRADING_LONGEST_CONTIGUOUS_SUBSET: "LONGEST_CONTIGUOUS_SUBSET",
    GRADING_RELATIVE_TO_CORRECT: "RELATIVE_TO_CORRECT",
}


def name_to_value(raw: Optional[str], names: Dict[int, str], default: int) -> int:
    """Nhận cả tên ("HORIZONTAL") lẫn số ("1"); không nhận ra thì dùng default."""
    s = (raw or "").strip().upper()
    if not s:
        return default
    try:
        value = int(s)
    except ValueError:
        for value, name in names.items():
            if name == s:
                return value
        log.warning("Unknown option value %r, using %r", raw, names.get(default))
        return default
    return value if value in names else default


def _child_text(el: ET.Element, tag: str, default: str = "") -> str:
    """<tag><text>..</text></tag> hoặc <tag>..</tag>"""
    child = el.find(tag)
    if child is None:
        return default
    t = child.find("text")
    if t is not None:
        return t.text or ""
    return (child.text or "").strip() or default


def _child_format(el: ET.Element, tag: str, default: int = FORMAT_HTML) -> int:
    child = el.find(tag)
    if child is None:
        return default
    return format_from_name(child.get("format"), default)


class OrderingXml:
    """Bọc OrderingQuestion để ghi vào MoodleQuiz (cần .to_xml() và .category_path)."""

    def __init__(self, question: OrderingQuestion):
        self.question = question
        self.qtype = "ordering"

    @property
    def category_path(self) -> str:
        return self.question.category_path or ""

    def to_xml(self) -> str:
        q = self.question
        fb = q.feedback
        xml = '  <question type="ordering">\n'
        xml += f"    <name><text>{xml_escape(q.name)}</text></name>\n"
        xml += text_tag("questiontext", q.questiontext, format_name(q.questiontextformat))
        xml += text_tag("generalfeedback", q.generalfeedback, format_name(q.generalfeedbackformat))
        xml += f"    <defaultgrade>{q.defaultmark:g}</defaultgrade>\n"
        xml += f"    <penalty>{q.penalty:.7f}</penalty>\n"
        xml += "    <hidden>0</hidden>\n"
        xml += f"    <layouttype>{LAYOUT_NAMES.get(q.layouttype, 'VERTICAL')}</layouttype>\n"
        xml += f"    <selecttype>{SELECT_NAMES.get(q.selecttype, 'ALL')}</selecttype>\n"
        xml += f"    <selectcount>{q.selectcount}</selectcount>\n"
        xml += f"    <gradingtype>{GRADING_NAMES.get(q.gradingtype, 'ABSOLUTE_POSITION')}</gradingtype>\n"
        xml += f"    <showgrading>{'SHOW' if q.showgrading else 'HIDE'}</showgrading>\n"
        xml += f"    <numberingstyle>{xml_escape(q.numberingstyle)}</numberingstyle>\n"
        xml += text_tag("correctfeedback", fb.correctfeedback, format_name(fb.correctfeedbackformat))
        xml += text_tag("partiallycorrectfeedback", fb.partiallycorrectfeedback,
                        format_name(fb.partiallycorrectfeedbackformat))
        xml += text_tag("incorrectfeedback", fb.incorrectfeedback, format_name(fb.incorrectfeedbackformat))
        if fb.shownumcorrect:
            xml += "    <shownumcorrect/>\n"

        # fraction = vị trí đúng
        for i, ans in enumerate(q.answers.values(), 1):
            xml += (f'    <answer fraction="{i}" format="{format_name(ans.answerformat)}">'
                    f"<text>{cdata(ans.answer)}</text></answer>\n")

        for hint in q.hints:
            xml += f'    <hint format="{format_name(hint.hintformat)}">\n'
            xml += f"      <text>{cdata(hint.hint)}</text>\n"
            if hint.shownumcorrect:
                xml += "      <shownumcorrect/>\n"
            if hint.options:
                xml += f"      <options>{xml_escape(str(hint.options))}</options>\n"
            xml += "    </hint>\n"

        xml += "  </question>"
        return xml

    @classmethod
    def from_element(cls, el: ET.Element, category_path: Optional[str] = None) -> "OrderingXml":
        """Đọc <question type="ordering">; thiếu mục -> ValueError."""
        if el.get("type") != "ordering":
            raise ValueError(f"Not an ordering question: {el.get('type')}")

        name = _child_text(el, "name").strip()
        answers = []
        for i, a in enumerate(el.findall("answer"), 1):
            t = a.find("text")
            text = (t.text if t is not None else a.text) or ""
            if not text.strip():
                continue
            try:
                fraction = float(a.get("fraction") or i)
            except ValueError:
                fraction = float(i)
            answers.append(Answer(id=0, answer=text.strip(), answerformat=format_from_name(a.get("format"), FORMAT_MOODLE),
                                  fraction=fraction))
        if not answers:
            raise ValueError(f"Ordering question {name!r} has no answers")
        answers.sort(key=lambda a: a.fraction)

        feedback = CombinedFeedback(
            correctfeedback=_child_text(el, "correctfeedback"),
            correctfeedbackformat=_child_format(el, "correctfeedback"),
            partiallycorrectfeedback=_child_text(el, "partiallycorrectfeedback"),
            partiallycorrectfeedbackformat=_child_format(el, "partiallycorrectfeedback"),
            incorrectfeedback=_child_text(el, "incorrectfeedback"),
            incorrectfeedbackformat=_child_format(el, "incorrectfeedback"),
            shownumcorrect=_flag(el, "shownumcorrect"),
        )

        hints = []
        for h in el.findall("hint"):
            t = h.find("text")
            options = h.findtext("options")
            hints.append(Hint(
                hint=(t.text if t is not None else "") or "",
                hintformat=format_from_name(h.get("format")),
                shownumcorrect=h.find("shownumcorrect") is not None,
                options=options.strip() if options else None,
            ))

        showgrading = (el.findtext("showgrading") or "SHOW").strip().upper()
        question = OrderingQuestion(
            name=name,
            questiontext=_child_text(el, "questiontext"),
            questiontextformat=_child_format(el, "questiontext"),
            generalfeedback=_child_text(el, "generalfeedback"),
            generalfeedbackformat=_child_format(el, "generalfeedback"),
            defaultmark=float(el.findtext("defaultgrade") or 1),
            penalty=float(el.findtext("penalty") or 0.3333333),
            answers=answers,
            layouttype=name_to_value(el.findtext("layouttype"), LAYOUT_NAMES, OrderingQuestion.LAYOUT_VERTICAL),
            selecttype=name_to_value(el.findtext("selecttype"), SELECT_NAMES, OrderingQuestion.SELECT_ALL),
            selectcount=int(float(el.findtext("selectcount") or 0)),
            gradingtype=name_to_value(el.findtext("gradingtype"), GRADING_NAMES, GRADING_ABSOLUTE_POSITION),
            showgrading=showgrading not in ("HIDE", "0"),
            numberingstyle=(el.findtext("numberingstyle") or "").strip() or OrderingQuestion.NUMBERING_STYLE_DEFAULT,
            feedback=feedback,
            hints=hints,
            category_path=category_path or None,
        )
        question.check_unique_answers()
        return cls(question)


def _flag(el: ET.Element, tag: str) -> bool:
    # <shownumcorrect/> hoặc <shownumcorrect>1</shownumcorrect>
    child = el.find(tag)
    if child is None:
        return False
    return (child.text or "1").strip() not in ("0", "")
