# -*- coding: utf-8 -*-
"""
Question attempt / step: phần "host" tối thiểu để chạy một lượt làm bài.

Một QuestionAttempt giữ danh sách QuestionAttemptStep; bước cuối quyết định
trạng thái (todo, gradedpartial, ...) và điểm (fraction).
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

# ========= Question states =========
TODO = "todo"
INVALID = "invalid"
COMPLETE = "complete"
GAVEUP = "gaveup"
GRADED_WRONG = "gradedwrong"
GRADED_PARTIAL = "gradedpartial"
GRADED_RIGHT = "gradedright"

ACTIVE_STATES = (TODO, INVALID, COMPLETE)
GRADED_STATES = (GRADED_WRONG, GRADED_PARTIAL, GRADED_RIGHT)


def graded_state_for_fraction(fraction: float) -> str:
    if fraction < 0.0000001:
        return GRADED_WRONG
    if fraction > 0.9999999:
        return GRADED_RIGHT
    return GRADED_PARTIAL


def is_active(state: str) -> bool:
    return state in ACTIVE_STATES


def is_graded(state: str) -> bool:
    return state in GRADED_STATES


class QuestionAttemptStep:
    def __init__(self, data: Optional[Dict[str, Any]] = None, state: str = TODO):
        self._data: Dict[str, Any] = dict(data or {})
        self._state = state
        self._fraction: Optional[float] = None

    def set_qt_var(self, name: str, value: Any) -> None:
        if not name.startswith("_"):
            raise ValueError(f"Question type variables must start with '_': {name}")
        self._data[name] = value

    def get_qt_var(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def has_qt_var(self, name: str) -> bool:
        return name in self._data

    def get_qt_data(self) -> Dict[str, Any]:
        """Dữ liệu response (bỏ các biến nội bộ bắt đầu bằng '_')."""
        return {k: v for k, v in self._data.items() if not k.startswith("_")}

    def get_all_data(self) -> Dict[str, Any]:
        return dict(self._data)

    def get_state(self) -> str:
        return self._state

    def set_state(self, state: str) -> None:
        self._state = state

    def get_fraction(self) -> Optional[float]:
        return self._fraction

    def set_fraction(self, fraction: Optional[float]) -> None:
        self._fraction = fraction


class QuestionAttempt:
    def __init__(self, question, usage_id: int = 0, slot: Optional[int] = None):
        self._question = question
        self.usage_id = usage_id
        self.slot = slot
        self._steps: List[QuestionAttemptStep] = []

    def get_question(self):
        return self._question

    def add_step(self, step: QuestionAttemptStep) -> None:
        self._steps.append(step)

    def get_last_step(self) -> Optional[QuestionAttemptStep]:
        return self._steps[-1] if self._steps else None

    def get_step(self, i: int) -> QuestionAttemptStep:
        return self._steps[i]

    def get_num_steps(self) -> int:
        return len(self._steps)

    def get_state(self) -> str:
        step = self.get_last_step()
        return step.get_state() if step else TODO

    def get_fraction(self) -> Optional[float]:
        step = self.get_last_step()
        return step.get_fraction() if step else None

    def get_last_qt_var(self, name: str, default: Any = None) -> Any:
        for step in reversed(self._steps):
            if step.has_qt_var(name):
                return step.get_qt_var(name)
        return default

    def get_last_qt_data(self) -> Dict[str, Any]:
        for step in reversed(self._steps):
            data = step.get_qt_data()
            if data:
                return data
        return {}

    def get_field_prefix(self) -> str:
        slot = "" if self.slot is None else str(self.slot)
        return f"q{self.usage_id}:{slot}_"

    def get_qt_field_name(self, name: str) -> str:
        return self.get_field_prefix() + name

    # ---------- lifecycle ----------
    def start(self, variant: int = 1) -> QuestionAttemptStep:
        step = QuestionAttemptStep()
        self.add_step(step)
        self._question.start_attempt(step, variant)
        return step

    def process_response(self, response: Dict[str, Any]) -> QuestionAttemptStep:
        """Lưu response (chưa chấm)."""
        step = QuestionAttemptStep(response, state=COMPLETE)
        self.add_step(step)
        return step

    def finish(self, response: Optional[Dict[str, Any]] = None) -> QuestionAttemptStep:
        """Nộp bài: chấm response cuối cùng và thêm bước graded."""
        if response is None:
            response = self.get_last_qt_data()
        fraction, state = self._question.grade_response(response)
        step = QuestionAttemptStep(response, state=state)
        step.set_fraction(fraction)
        self.add_step(step)
        return step
