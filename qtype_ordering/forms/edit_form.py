# -*- coding: utf-8 -*-
"""
Form soạn câu hỏi sắp xếp.

Form chỉ mô tả các trường (FormField) và xử lý dữ liệu; phần hiển thị do
giao diện (web_app.py) đảm nhận.
"""
from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..core.config import Preferences
from ..core.models import CombinedFeedback, Hint
from ..core.question import OrderingQuestion
from ..core.strings import get_string
from ..core.utils import FORMAT_HTML, FORMAT_MOODLE, is_numeric, param_int

log = logging.getLogger(__name__)


@dataclass
class FormField:
    name: str
    type: str                      # select | text | editor | submit | header | advcheckbox | group
    label: str = ""
    options: Dict[Any, str] = field(default_factory=dict)
    default: Any = None
    help: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    hide_if: Optional[Tuple[str, str, Any]] = None   # (field, "eq", value)
    rules: List[str] = field(default_factory=list)
    elements: List["FormField"] = field(default_factory=list)


def _text_of(value) -> str:
    if isinstance(value, dict):
        return value.get("text", "") or ""
    return value or ""


def _format_of(value, default: int = FORMAT_HTML) -> int:
    if isinstance(value, dict):
        return int(value.get("format", default))
    return default


class OrderingEditForm:

    TEXTFIELD_ROWS = 2
    TEXTFIELD_COLS = 60
    NUM_ITEMS_DEFAULT = 6
    NUM_ITEMS_MIN = 3
    NUM_ITEMS_ADD = 1
    NUM_HINTS_DEFAULT = 2

    OPTION_FIELDS = ("layouttype", "selecttype", "selectcount", "gradingtype", "showgrading", "numberingstyle")

    def __init__(
        self,
        question: Optional[OrderingQuestion] = None,
        preferences: Optional[Preferences] = None,
        submitted: Optional[Dict[str, Any]] = None,
        defaultanswerformat: int = FORMAT_MOODLE,
    ):
        self.question = question
        self.preferences = preferences or Preferences()
        # tham số của request (nút "Thêm", "Bỏ HTML editor", ...)
        self.submitted = submitted or {}
        self.defaultanswerformat = defaultanswerformat
        self._fields: List[FormField] = []

    def qtype(self) -> str:
        return "ordering"

    def plugin_name(self) -> str:
        return "qtype_ordering"

    # ================= defaults =================
    def get_my_preference_name(self, name: str) -> str:
        return f"{self.plugin_name()}_{name}"

    def get_default_value(self, name: str, default: Any) -> Any:
        return self.preferences.get(self.get_my_preference_name(name), default)

    def set_default_value(self, name: str, value: Any) -> None:
        self.preferences.set(self.get_my_preference_name(name), value)

    # ================= definition =================
    def definition(self) -> List[FormField]:
        self._fields = [
            FormField("name", "text", "Question name", rules=["required"]),
            FormField("questiontext", "editor", "Question text", attributes={"rows": 15}),
            FormField("defaultmark", "text", "Default mark", default=1, rules=["numeric"]),
            FormField("generalfeedback", "editor", "General feedback", attributes={"rows": 10}),
        ]
        self.definition_inner(self._fields)
        return self._fields

    def definition_inner(self, fields: List[FormField]) -> None:
        Q = OrderingQuestion

        name = "layouttype"
        fields.append(FormField(name, "select", get_string(name), Q.get_layout_types(),
                                self.get_default_value(name, Q.LAYOUT_VERTICAL), help=name))

        name = "selecttype"
        fields.append(FormField(name, "select", get_string(name), Q.get_select_types(),
                                self.get_default_value(name, Q.SELECT_ALL), help=name))

        # Ẩn khi chọn tất cả các mục
        name = "selectcount"
        fields.append(FormField(name, "text", get_string(name), default=Q.MIN_SUBSET_ITEMS, help=name,
                                attributes={"size": 2}, hide_if=("selecttype", "eq", Q.SELECT_ALL),
                                rules=["numeric"]))

        name = "gradingtype"
        fields.append(FormField(name, "select", get_string(name), Q.get_grading_types(),
                                self.get_default_value(name, Q.GRADING_ABSOLUTE_POSITION), help=name))

        name = "showgrading"
        fields.append(FormField(name, "select", get_string(name), {0: get_string("hide"), 1: get_string("show")},
                                self.get_default_value(name, 1), help=name))

        name = "numberingstyle"
        fields.append(FormField(name, "select", get_string(name), Q.get_numbering_styles(),
                                self.get_default_value(name, Q.NUMBERING_STYLE_DEFAULT), help=name))

        fields.append(FormField("answersheader", "header", get_string("draggableitems"),
                                attributes={"expanded": True}))
        self.add_repeat_elements(fields, "answer")

        self.add_combined_feedback_fields(fields)
        self.add_interactive_settings(fields)

    def get_answer_repeats(self, question: Optional[OrderingQuestion]) -> int:
        if question is not None and question.answers:
            repeats = len(question.answers)
        else:
            repeats = self.NUM_ITEMS_DEFAULT
        return max(repeats, self.NUM_ITEMS_MIN)

    def get_editor_attributes(self) -> Dict[str, int]:
        return {"rows": self.TEXTFIELD_ROWS, "cols": self.TEXTFIELD_COLS}

    def get_editor_options(self) -> Dict[str, Any]:
        return {"maxfiles": -1, "noclean": True}

    def get_addcount_options(self, type: str, max: int = 10) -> Dict[int, str]:
        options = {}
        for i in range(1, max + 1):
            if i == 1:
                options[i] = get_string("addsingle" + type)
            else:
                options[i] = get_string("addmultiple" + type + "s", i)
        return options

    def answer_format(self, i: int) -> int:
        """Format của editor thứ i: bấm "bỏ HTML editor" -> moodle auto format."""
        if self.submitted.get(f"answerremoveeditor_{i}"):
            return FORMAT_MOODLE
        if self.question is not None:
            answers = list(self.question.answers.values())
            if i < len(answers):
                return answers[i].answerformat
        return self.defaultanswerformat

    def add_repeat_elements(self, fields: List[FormField], type: str) -> int:
        types = type + "s"
        addtypes = "add" + types
        addtypescount = addtypes + "count"

        repeats = param_int(self.submitted.get("count" + types), self.get_answer_repeats(self.question))
        count = param_int(self.submitted.get(addtypescount), self.NUM_ITEMS_ADD)
        if self.submitted.get(addtypes):
            repeats += count

        label = get_string("draggableitemno")
        for i in range(repeats):
            fields.append(FormField(
                f"{type}[{i}]", "editor", label.replace("{no}", str(i + 1)),
                attributes={**self.get_editor_attributes(), "format": self.answer_format(i)},
            ))
            fields.append(FormField(f"{type}removeeditor_{i}", "submit", get_string("removeeditor")))

        fields.append(FormField(
            addtypes + "group", "group", "",
            elements=[
                FormField(addtypes, "submit", get_string("add")),
                FormField(addtypescount, "select", "", self.get_addcount_options(type), default=count),
            ],
        ))
        return repeats

    def add_combined_feedback_fields(self, fields: List[FormField]) -> None:
        for name in ("correctfeedback", "partiallycorrectfeedback", "incorrectfeedback"):
            fields.append(FormField(name, "editor", get_string("combinedcontrolname" + name[:-len("feedback")]),
                                    default=get_string(name + "default"), attributes={"rows": 5}))
        fields.append(FormField("shownumcorrect", "advcheckbox", get_string("shownumpartscorrect"), default=1))

    def get_hint_fields(self, withclearwrong: bool = False, withshownumpartscorrect: bool = False) -> List[FormField]:
        repeated = [FormField("hint", "editor", get_string("hintn"), attributes={"rows": 5})]
        optionelements = []
        if withshownumpartscorrect:
            optionelements.append(FormField("hintshownumcorrect", "advcheckbox", get_string("shownumpartscorrect")))
        optionelements.append(FormField("hintoptions", "advcheckbox", get_string("highlightresponse")))
        repeated.append(FormField("hintoptions", "group", "", elements=optionelements))
        return repeated

    def add_interactive_settings(self, fields: List[FormField]) -> None:
        fields.append(FormField("penalty", "select", "Penalty for each incorrect try",
                                {1.0: "100%", 0.5: "50%", 0.3333333: "33.33333%", 0.25: "25%", 0.1: "10%", 0.0: "0%"},
                                default=0.3333333))
        count = max(self.NUM_HINTS_DEFAULT, len(self.question.hints) if self.question else 0)
        for i in range(count):
            for f in self.get_hint_fields(False, True):
                label = f.label.replace("{no}", str(i + 1))
                fields.append(FormField(f"{f.name}[{i}]", f.type, label, attributes=f.attributes,
                                        elements=f.elements))

    # ================= preprocessing =================
    def data_preprocessing(self, question: Optional[OrderingQuestion]) -> Dict[str, Any]:
        """Dữ liệu ban đầu cho form từ câu hỏi có sẵn (hoặc câu hỏi mới)."""
        data: Dict[str, Any] = {"id": None}
        if question is not None:
            data.update({
                "id": question.id or None,
                "name": question.name,
                "questiontext": {"text": question.questiontext, "format": question.questiontextformat},
                "generalfeedback": {"text": question.generalfeedback, "format": question.generalfeedbackformat},
                "defaultmark": question.defaultmark,
                "penalty": question.penalty,
            })

        data = self.data_preprocessing_combined_feedback(data, question)
        data = self.data_preprocessing_hints(data, question)

        data["answer"] = []
        data["fraction"] = []
        answers = list(question.answers.values()) if question is not None else []
        for i in range(self.get_answer_repeats(question)):
            if i < len(answers):
                text, fmt = answers[i].answer, answers[i].answerformat
            else:
                text, fmt = "", self.defaultanswerformat
            if question is None or not question.id:
                data["answer"].append(text)
            else:
                data["answer"].append({"text": text, "format": fmt})
            data["fraction"].append(i + 1)

        defaults = {
            "layouttype": OrderingQuestion.LAYOUT_VERTICAL,
            "selecttype": OrderingQuestion.SELECT_ALL,
            "selectcount": OrderingQuestion.MIN_SUBSET_ITEMS,
            "gradingtype": OrderingQuestion.GRADING_ABSOLUTE_POSITION,
            "showgrading": 1,  # 1 = SHOW
            "numberingstyle": OrderingQuestion.NUMBERING_STYLE_DEFAULT,
        }
        for name, default in defaults.items():
            if question is not None:
                value = getattr(question, name)
                data[name] = int(value) if isinstance(value, bool) else value
            else:
                data[name] = self.get_default_value(name, default)
        return data

    def data_preprocessing_combined_feedback(self, data: Dict[str, Any],
                                             question: Optional[OrderingQuestion]) -> Dict[str, Any]:
        fb = question.feedback if question is not None else None
        for name in ("correctfeedback", "partiallycorrectfeedback", "incorrectfeedback"):
            if fb is not None:
                data[name] = {"text": getattr(fb, name), "format": getattr(fb, name + "format")}
            else:
                data[name] = {"text": get_string(name + "default"), "format": FORMAT_HTML}
        data["shownumcorrect"] = int(fb.shownumcorrect) if fb is not None else 1
        return data

    def data_preprocessing_hints(self, data: Dict[str, Any],
                                 question: Optional[OrderingQuestion]) -> Dict[str, Any]:
        if question is None or not question.hints:
            return data
        data["hint"] = [{"text": h.hint, "format": h.hintformat} for h in question.hints]
        data["hintshownumcorrect"] = [int(bool(h.shownumcorrect)) for h in question.hints]
        data["hintoptions"] = [h.options for h in question.hints]
        return data

    # ================= validation =================
    def validation(self, data: Dict[str, Any], files: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        """Trả về {"tên trường": "lỗi"}; rỗng nếu hợp lệ."""
        errors: Dict[str, str] = {}

        if "name" in data and not (data.get("name") or "").strip():
            errors["name"] = get_string("questionnamerequired")

        minsubsetitems = OrderingQuestion.MIN_SUBSET_ITEMS
        selecttype = param_int(data.get("selecttype"), OrderingQuestion.SELECT_ALL)
        if selecttype != OrderingQuestion.SELECT_ALL:
            selectcount = data.get("selectcount")
            if not is_numeric(selectcount):
                errors["selectcount"] = get_string("err_numeric")
            elif float(selectcount) < minsubsetitems:
                errors["selectcount"] = get_string("notenoughsubsetitems", minsubsetitems)

        # Trùng mục -> báo lỗi ở ô bị trùng
        answers: List[str] = []
        answercount = 0
        for answer in data.get("answer") or []:
            answer = _text_of(answer).strip()
            if not answer:
                continue
            if answer in answers:
                i = answers.index(answer)
                item = get_string("draggableitemno").replace("{no}", str(i + 1))
                item = f'<a href="#id_answer_{i}">{html.escape(item)}</a>'
                errors[f"answer[{answercount}]"] = get_string("duplicatesnotallowed", {"text": answer, "item": item})
            else:
                answers.append(answer)
            answercount += 1

        # Không có mục nào: lỗi ở 2 ô đầu; chỉ 1 mục: lỗi ở ô thứ hai
        if answercount < 2:
            errors["answer[1]"] = get_string("notenoughanswers", 2)
            if answercount == 0:
                errors["answer[0]"] = get_string("notenoughanswers", 2)

        # Câu hỏi mới hợp lệ -> nhớ các tuỳ chọn làm mặc định cho lần sau
        if not errors and not data.get("id"):
            for name in self.OPTION_FIELDS:
                if name in data:
                    self.set_default_value(name, data[name])

        return errors

    # ================= saving =================
    def save_question(self, data: Dict[str, Any]) -> OrderingQuestion:
        """Dựng OrderingQuestion từ dữ liệu form đã validate."""
        errors = self.validation(data)
        if errors:
            raise ValueError("Invalid ordering question: " + "; ".join(f"{k}: {v}" for k, v in errors.items()))

        answers = []
        for i, answer in enumerate(data.get("answer") or []):
            text = _text_of(answer).strip()
            if not text:
                continue
            answers.append({"answer": text, "answerformat": _format_of(answer, self.answer_format(i)),
                            "fraction": len(answers) + 1})

        feedback = CombinedFeedback(shownumcorrect=bool(param_int(data.get("shownumcorrect"), 1)))
        for name in ("correctfeedback", "partiallycorrectfeedback", "incorrectfeedback"):
            value = data.get(name)
            setattr(feedback, name, _text_of(value))
            setattr(feedback, name + "format", _format_of(value))

        hints = []
        shownum = data.get("hintshownumcorrect") or []
        hintoptions = data.get("hintoptions") or []
        for i, hint in enumerate(data.get("hint") or []):
            text = _text_of(hint).strip()
            if not text:
                continue
            hints.append(Hint(
                hint=text,
                hintformat=_format_of(hint),
                shownumcorrect=bool(shownum[i]) if i < len(shownum) else False,
                options=hintoptions[i] if i < len(hintoptions) else None,
            ))

        questiontext = data.get("questiontext")
        generalfeedback = data.get("generalfeedback")
        question = OrderingQuestion(
            id=param_int(data.get("id"), 0),
            name=(data.get("name") or "").strip(),
            questiontext=_text_of(questiontext),
            questiontextformat=_format_of(questiontext),
            generalfeedback=_text_of(generalfeedback),
            generalfeedbackformat=_format_of(generalfeedback),
            defaultmark=float(data.get("defaultmark") or 1),
            penalty=float(data.get("penalty", 0.3333333)),
            answers=answers,
            layouttype=param_int(data.get("layouttype"), OrderingQuestion.LAYOUT_VERTICAL),
            selecttype=param_int(data.get("selecttype"), OrderingQuestion.SELECT_ALL),
            selectcount=param_int(data.get("selectcount"), OrderingQuestion.MIN_SUBSET_ITEMS),
            gradingtype=param_int(data.get("gradingtype"), OrderingQuestion.GRADING_ABSOLUTE_POSITION),
            showgrading=bool(param_int(data.get("showgrading"), 1)),
            numberingstyle=data.get("numberingstyle") or OrderingQuestion.NUMBERING_STYLE_DEFAULT,
            feedback=feedback,
            hints=hints,
        )
        log.info("Saved ordering question %r with %d items", question.name, len(question.answers))
        return question
