# -*- coding: utf-8 -*-
"""
Chấm hàng loạt câu trả lời từ CSV / Excel.

  questions.json + responses.(csv|xlsx) -> report.(csv|xlsx)

Cột của bảng response: question (tên hoặc id), response (các mục cách nhau
bởi "|"), student (tuỳ chọn).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pandas as pd

from ..core.attempt import QuestionAttempt, QuestionAttemptStep
from ..core.question import OrderingQuestion
from ..core.utils import round_half_up

log = logging.getLogger(__name__)

RESPONSE_SEPARATOR = "|"
REQUIRED_COLUMNS = ("question", "response")
REPORT_COLUMNS = [
    "student", "question", "response", "fraction", "state", "percentage",
    "numright", "numpartial", "numwrong", "error",
]


# ========== Small IO helpers ==========
def _read_json(p: Path):
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)


def _safe_progress(cb: Optional[Callable[[int, int, str], None]], i: int, total: int, msg: str):
    if cb:
        cb(i, total, msg)


# ========== Questions ==========
def read_questions(path: str) -> List[OrderingQuestion]:
    """Đọc file JSON: list câu hỏi hoặc {"questions": [...]}."""
    data = _read_json(Path(path))
    if isinstance(data, dict):
        data = data.get("questions", [data])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of questions")
    return [OrderingQuestion.from_dict(item) for item in data]


def load_questions(path: str) -> Dict[str, OrderingQuestion]:
    """{khoá: câu hỏi}; mỗi câu hỏi tra được bằng tên và bằng id."""
    questions: Dict[str, OrderingQuestion] = {}
    for q in read_questions(path):
        if q.name:
            questions[q.name] = q
        if q.id:
            questions[str(q.id)] = q
    log.info("Loaded %d question key(s) from %s", len(questions), path)
    return questions


# ========== Responses ==========
def read_responses(path: str) -> pd.DataFrame:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Responses file not found: {path}")
    if p.suffix.lower() in (".xlsx", ".xls"):
        df = pd.read_excel(p, sheet_name=0, dtype=str)
    else:
        df = pd.read_csv(p, dtype=str)

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing column(s): {', '.join(missing)}")
    if "student" not in df.columns:
        df["student"] = ""
    for c in ("question", "response", "student"):
        df[c] = df[c].fillna("").astype(str).str.strip()
    return df


def split_response(value: str) -> List[str]:
    return [part.strip() for part in (value or "").split(RESPONSE_SEPARATOR) if part.strip()]


# ========== Grading ==========
def grade_texts(question: OrderingQuestion, texts: List[str]) -> Dict[str, object]:
    """
    Chấm một thứ tự (danh sách nội dung mục) trên một lượt làm bài mới,
    thứ tự đúng = tất cả các mục.
    """
    if not texts:
        raise ValueError(f"Empty response for question {question.name or question.id}")
    qa = QuestionAttempt(question)
    step = QuestionAttemptStep()
    allids = ",".join(str(a) for a in question.answers)
    step.set_qt_var("_correctresponse", allids)
    step.set_qt_var("_currentresponse", allids)
    qa.add_step(step)
    question.apply_attempt_state(step)

    response = question.response_for_texts(texts)
    graded = qa.finish(response)
    numright, numpartial, numwrong = question.get_num_parts_right(response)
    fraction = graded.get_fraction() or 0.0
    return {
        "fraction": fraction,
        "state": graded.get_state(),
        "percentage": int(round_half_up(100 * fraction)),
        "numright": numright,
        "numpartial": numpartial,
        "numwrong": numwrong,
    }


def grade_batch(
    questions: Dict[str, OrderingQuestion],
    responses: pd.DataFrame,
    progress_cb: Optional[Callable[[int, int, str], None]] = None,
) -> pd.DataFrame:
    """Chấm từng dòng; dòng lỗi (câu hỏi / mục không tồn tại) ghi vào cột error."""
    rows = []
    total = len(responses)
    for i, rec in enumerate(responses.to_dict("records"), 1):
        row = {
            "student": rec.get("student", ""),
            "question": rec["question"],
            "response": rec["response"],
            "fraction": None, "state": "", "percentage": None,
            "numright": None, "numpartial": None, "numwrong": None,
            "error": "",
        }
        question = questions.get(rec["question"])
        if question is None:
            row["error"] = f"Unknown question {rec['question']!r}"
        else:
            try:
                row.update(grade_texts(question, split_response(rec["response"])))
            except ValueError as e:
                row["error"] = str(e)
        if row["error"]:
            log.warning("Row %d: %s", i, row["error"])
        rows.append(row)
        _safe_progress(progress_cb, i, total, f"{row['student'] or '-'} / {row['question']}")
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def write_report(report: pd.DataFrame, path: str) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if p.suffix.lower() in (".xlsx", ".xls"):
        report.to_excel(p, index=False)
    else:
        report.to_csv(p, index=False)
    return p


# ========== Public API ==========
def run_batch_grading(
    questions_json: str,
    responses_path: str,
    report_out: Optional[str] = None,
    progress_cb: Optional[Callable[[int, int, str], None]] = None,
) -> pd.DataFrame:
    questions = load_questions(questions_json)
    responses = read_responses(responses_path)
    report = grade_batch(questions, responses, progress_cb)
    if report_out:
        out = write_report(report, report_out)
        log.info("Report written to %s (%d rows)", out, len(report))
    return report
