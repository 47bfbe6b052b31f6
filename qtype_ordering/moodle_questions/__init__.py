# -*- coding: utf-8 -*-

from .MoodleQuiz import MoodleQuiz
from .ordering import GRADING_NAMES, LAYOUT_NAMES, SELECT_NAMES, OrderingXml

__all__ = [
    "MoodleQuiz",
    "OrderingXml",
    "GRADING_NAMES",
    "LAYOUT_NAMES",
    "SELECT_NAMES",
]
