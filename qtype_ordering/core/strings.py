# -*- coding: utf-8 -*-
"""
Language strings cho qtype_ordering.

get_string(identifier, a) tra chuỗi theo ngôn ngữ hiện tại, thiếu thì lấy "en".
Placeholder dùng cú pháp str.format với tên `a`, ví dụ "{a}" hoặc "{a[text]}".
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

_EN: Dict[str, str] = {
    "pluginname": "Ordering",
    "pluginnamesummary": "Put jumbled items into a meaningful order.",
    "privacy:metadata": "The Ordering question type plugin does not store any personal data.",

    # --- layout / select / numbering ---
    "layouttype": "Layout of items",
    "vertical": "Vertical",
    "horizontal": "Horizontal",
    "selecttype": "Item selection type",
    "selectall": "Select all items",
    "selectrandom": "Select a random subset of items",
    "selectcontiguous": "Select a contiguous subset of items",
    "selectcount": "Size of subset",
    "numberingstyle": "Number the choices?",
    "numberingstylenone": "No numbering",
    "numberingstyleabc": "a., b., c., ...",
    "numberingstyleABCD": "A., B., C., ...",
    "numberingstyle123": "1., 2., 3., ...",
    "numberingstyleiii": "i., ii., iii., ...",
    "numberingstyleIIII": "I., II., III., ...",

    # --- grading ---
    "gradingtype": "Grading type",
    "allornothing": "All or nothing",
    "absoluteposition": "Absolute position",
    "relativenextexcludelast": "Relative to the next item (excluding last)",
    "relativenextincludelast": "Relative to the next item (including last)",
    "relativeonepreviousandnext": "Relative to both the previous and next items",
    "relativeallpreviousandnext": "Relative to ALL the previous and next items",
    "longestorderedsubset": "Longest ordered subset",
    "longestcontiguoussubset": "Longest contiguous subset",
    "relativetocorrect": "Relative to correct position",
    "showgrading": "Grading details",
    "hide": "Hide",
    "show": "Show",
    "noscore": "No score",
    "scoredetails": "Here are the scores for each item in this response:",
    "gradedetails": "Grade details",
    "correctorder": "The correct order for these items is as follows:",
    "correctitemsnumber": "Correct items: {a}",
    "partialitemsnumber": "Partially correct items: {a}",
    "incorrectitemsnumber": "Incorrect items: {a}",
    "correct": "Correct",
    "partiallycorrect": "Partially correct",
    "incorrect": "Incorrect",

    # --- edit form ---
    "draggableitems": "Draggable items",
    "draggableitemno": "Draggable item {no}",
    "removeeditor": "Remove HTML editor",
    "addsingleanswer": "Add 1 more item",
    "addmultipleanswers": "Add {a} more items",
    "add": "Add",
    "highlightresponse": "Highlight response as correct or incorrect",
    "hintn": "Hint {no}",
    "shownumpartscorrect": "Show the number of correct responses",
    "combinedcontrolnamecorrect": "Feedback for any correct response",
    "combinedcontrolnamepartiallycorrect": "Feedback for any partially correct response",
    "combinedcontrolnameincorrect": "Feedback for any incorrect response",
    "correctfeedbackdefault": "Your answer is correct.",
    "partiallycorrectfeedbackdefault": "Your answer is partially correct.",
    "incorrectfeedbackdefault": "Your answer is incorrect.",
    "notenoughanswers": "Ordering questions must have more than {a} answers.",
    "notenoughsubsetitems": "A subset must have at least {a} items.",
    "duplicatesnotallowed": 'Duplication of draggable items are not allowed. '
                            'The string "{a[text]}" is already used in {a[item]}.',
    "err_numeric": "You must enter a number here.",
    "questionnamerequired": "You must supply a question name.",
}

# Gói tiếng Việt: chỉ dịch những chuỗi hiện ra cho học sinh / giáo viên.
_VI: Dict[str, str] = {
    "pluginname": "Sắp xếp thứ tự",
    "privacy:metadata": "Loại câu hỏi Sắp xếp thứ tự không lưu bất kỳ dữ liệu cá nhân nào.",
    "layouttype": "Bố cục các mục",
    "vertical": "Dọc",
    "horizontal": "Ngang",
    "selecttype": "Cách chọn mục",
    "selectall": "Chọn tất cả các mục",
    "selectrandom": "Chọn ngẫu nhiên một tập con",
    "selectcontiguous": "Chọn một tập con liên tiếp",
    "selectcount": "Số mục trong tập con",
    "numberingstyle": "Đánh số các mục?",
    "numberingstylenone": "Không đánh số",
    "gradingtype": "Cách chấm",
    "allornothing": "Đúng hết mới có điểm",
    "absoluteposition": "Vị trí tuyệt đối",
    "relativenextexcludelast": "Theo mục kế tiếp (bỏ mục cuối)",
    "relativenextincludelast": "Theo mục kế tiếp (tính cả mục cuối)",
    "relativeonepreviousandnext": "Theo mục liền trước và liền sau",
    "relativeallpreviousandnext": "Theo TẤT CẢ các mục trước và sau",
    "longestorderedsubset": "Tập con có thứ tự dài nhất",
    "longestcontiguoussubset": "Tập con liên tiếp dài nhất",
    "relativetocorrect": "Theo khoảng cách tới vị trí đúng",
    "showgrading": "Chi tiết chấm điểm",
    "hide": "Ẩn",
    "show": "Hiện",
    "noscore": "Không tính điểm",
    "scoredetails": "Điểm của từng mục trong câu trả lời:",
    "gradedetails": "Chi tiết điểm",
    "correctorder": "Thứ tự đúng của các mục là:",
    "correctitemsnumber": "Số mục đúng: {a}",
    "partialitemsnumber": "Số mục đúng một phần: {a}",
    "incorrectitemsnumber": "Số mục sai: {a}",
    "correct": "Chính xác",
    "partiallycorrect": "Đúng một phần",
    "incorrect": "Chưa chính xác",
    "draggableitems": "Các mục kéo thả",
    "draggableitemno": "Mục kéo thả {no}",
    "correctfeedbackdefault": "Chính xác!",
    "partiallycorrectfeedbackdefault": "Gần đúng, hãy thử lại.",
    "incorrectfeedbackdefault": "Chưa chính xác.",
    "notenoughanswers": "Câu hỏi sắp xếp phải có nhiều hơn {a} mục.",
    "notenoughsubsetitems": "Tập con phải có ít nhất {a} mục.",
    "duplicatesnotallowed": 'Không được trùng mục kéo thả. Chuỗi "{a[text]}" đã dùng ở {a[item]}.',
    "err_numeric": "Ô này phải là số.",
}

PACKS: Dict[str, Dict[str, str]] = {"en": _EN, "vi": _VI}

_current_lang = "en"


def set_language(lang: Optional[str]) -> str:
    """Đổi ngôn ngữ hiện tại; mã không hỗ trợ thì giữ "en"."""
    global _current_lang
    lang = (lang or "en").strip().lower()
    if lang not in PACKS:
        log.warning("Unsupported language %r, using 'en'", lang)
        lang = "en"
    _current_lang = lang
    return _current_lang


def current_language() -> str:
    return _current_lang


def get_string(identifier: str, a: Any = None, lang: Optional[str] = None) -> str:
    pack = PACKS.get(lang or _current_lang, _EN)
    text = pack.get(identifier)
    if text is None:
        text = _EN.get(identifier)
    if text is None:
        # Moodle hiện [[identifier]] khi thiếu chuỗi
        log.debug("Missing language string %r", identifier)
        return f"[[{identifier}]]"
    if a is None:
        return text
    return text.format(a=a)
