# -*- coding: utf-8 -*-
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .utils import FORMAT_MOODLE

log = logging.getLogger(__name__)

ENV_PREFIX = "QTYPE_ORDERING_"

_DEFAULT: Dict[str, Any] = {
    "lang": "en",
    "defaultanswerformat": FORMAT_MOODLE,
    "preferences_file": "configs/preferences.json",
    "log_level": "WARNING",
    "random_seed": None,
}


def _env_overrides() -> Dict[str, Any]:
    # QTYPE_ORDERING_LANG=vi, QTYPE_ORDERING_DEFAULTANSWERFORMAT=1 ...
    out: Dict[str, Any] = {}
    for key, default in _DEFAULT.items():
        raw = os.getenv(ENV_PREFIX + key.upper())
        if raw is None or raw == "":
            continue
        if isinstance(default, int) or key == "random_seed":
            try:
                out[key] = int(raw)
            except ValueError:
                log.warning("Ignoring non-integer %s%s=%r", ENV_PREFIX, key.upper(), raw)
        else:
            out[key] = raw
    return out


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Defaults <- file JSON (nếu có) <- biến môi trường QTYPE_ORDERING_*.
    Không có file thì dùng QTYPE_ORDERING_CONFIG.
    """
    cfg = dict(_DEFAULT)
    path = path or os.getenv(ENV_PREFIX + "CONFIG")
    if path:
        p = Path(path)
        if p.exists():
            try:
                cfg.update(json.loads(p.read_text(encoding="utf-8")))
            except (OSError, ValueError) as e:
                log.warning("Cannot read config %s: %s", p, e)
        else:
            log.info("Config file %s not found, using defaults", p)
    cfg.update(_env_overrides())
    return cfg


# ================= Preferences (mặc định của form) =================
class Preferences:
    """
    Lưu giá trị mặc định mà giáo viên chọn lần trước (layouttype, gradingtype, ...)
    vào một file JSON, giống settings.json của app.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path or not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Cannot read preferences %s: %s", self.path, e)
            return {}

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._data[name] = value
        self.save()

    def save(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._data)
