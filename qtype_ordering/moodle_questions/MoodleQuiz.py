# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..core.question import OrderingQuestion
from .ordering import OrderingXml
from .utils import category_to_xml

log = logging.getLogger(__name__)


class MoodleQuiz:
    """
    File quiz Moodle XML.
    add_category(path) ngay trước add_question(...): category được chèn
    ngay trước câu hỏi tương ứng. Câu hỏi có category_path riêng thì tự
    chèn category khi khác với category vừa ghi.
    """

    def __init__(self):
        # item = ("category", "path") | ("question", OrderingXml)
        self._items: List[Tuple[str, Union[str, OrderingXml]]] = []
        self._last_category: Optional[str] = None  # tránh lặp category liền kề

    # --- Category API ---
    def add_category(self, cat: Optional[str]) -> None:
        """
        - Bỏ qua cat rỗng/"0"
        - Bỏ qua nếu trùng hệt với category vừa chèn trước đó
        """
        if not cat:
            return
        cat = str(cat).strip().strip("/")
        if not cat or cat == "0":
            return
        if self._last_category == cat:
            return
        self._items.append(("category", cat))
        self._last_category = cat

    @property
    def categories(self) -> List[str]:
        return [payload for kind, payload in self._items if kind == "category"]

    # --- Question API ---
    def add_question(self, q: Union[OrderingQuestion, OrderingXml]) -> None:
        if isinstance(q, OrderingQuestion):
            q = OrderingXml(q)
        self.add_category(q.category_path)
        self._items.append(("question", q))

    @property
    def questions(self) -> List[OrderingQuestion]:
        return [payload.question for kind, payload in self._items if kind == "question"]

    # --- XML ---
    def to_xml(self) -> str:
        parts = ['<?xml version="1.0" encoding="UTF-8"?>', "<quiz>"]
        for kind, payload in self._items:
            if kind == "category":
                parts.append(category_to_xml(payload))
            else:
                parts.append(payload.to_xml())
        parts.append("</quiz>")
        return "\n".join(parts)

    def export(self, filepath: Union[str, Path]) -> None:
        xml = self.to_xml()
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(xml)
        log.info("Exported %d question(s) to %s", len(self.questions), filepath)

    # --- Import ---
    @classmethod
    def from_xml(cls, text: Union[str, bytes]) -> "MoodleQuiz":
        """
        Đọc quiz XML: giữ các câu hỏi ordering (kèm category đang áp dụng),
        bỏ qua các loại câu hỏi khác. XML hỏng -> ValueError.
        """
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise ValueError(f"Invalid Moodle XML: {e}") from e
        if root.tag != "quiz":
            raise ValueError(f"Expected <quiz> root, got <{root.tag}>")

        quiz = cls()
        current_category: Optional[str] = None
        skipped = 0
        for el in root.findall("question"):
            qtype = el.get("type")
            if qtype == "category":
                current_category = (el.findtext("category/text") or "").strip() or None
                continue
            if qtype != "ordering":
                skipped += 1
                continue
            quiz.add_question(OrderingXml.from_element(el, current_category))
        if skipped:
            log.info("Skipped %d non-ordering question(s)", skipped)
        return quiz

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> "MoodleQuiz":
        return cls.from_xml(Path(filepath).read_bytes())
