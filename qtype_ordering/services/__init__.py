from .batch_grading import (
    grade_batch,
    grade_texts,
    load_questions,
    read_questions,
    read_responses,
    run_batch_grading,
    write_report,
)

__all__ = [
    "grade_batch",
    "grade_texts",
    "load_questions",
    "read_questions",
    "read_responses",
    "run_batch_grading",
    "write_report",
]
