from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .utils import FORMAT_HTML, md5_key


@dataclass
class Answer:
    id: int
    answer: str = ""
    answerformat: int = FORMAT_HTML
    fraction: float = 0.0  # thứ tự đúng: 1, 2, 3, ...

    @property
    def md5key(self) -> str:
        return md5_key(self.answer)


@dataclass
class Hint:
    hint: str = ""
    hintformat: int = FORMAT_HTML
    shownumcorrect: bool = False
    options: Any = None  # truthy = highlight response


@dataclass
class CombinedFeedback:
    correctfeedback: str = ""
    correctfeedbackformat: int = FORMAT_HTML
    partiallycorrectfeedback: str = ""
    partiallycorrectfeedbackformat: int = FORMAT_HTML
    incorrectfeedback: str = ""
    incorrectfeedbackformat: int = FORMAT_HTML
    shownumcorrect: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "CombinedFeedback":
        d = d or {}
        known = {k: d[k] for k in cls.__dataclass_fields__ if k in d}
        return cls(**known)


@dataclass
class DisplayOptions:
    """Tương đương question_display_options của host."""
    HIDDEN = 0
    VISIBLE = 1

    readonly: bool = False
    correctness: int = 1
    feedback: int = 1
    numpartscorrect: int = 1
    generalfeedback: int = 1
    rightanswer: int = 1
    manualcomment: int = 1
    history: int = 0
    extra: Dict[str, Any] = field(default_factory=dict)
