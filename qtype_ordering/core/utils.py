# -*- coding: utf-8 -*-
import hashlib
import html
import math
import re
from typing import Optional

# ========= Text formats (cùng mã số với Moodle) =========
FORMAT_MOODLE = 0
FORMAT_HTML = 1
FORMAT_PLAIN = 2
FORMAT_MARKDOWN = 4

_FORMAT_NAMES = {
    FORMAT_MOODLE: "moodle_auto_format",
    FORMAT_HTML: "html",
    FORMAT_PLAIN: "plain_text",
    FORMAT_MARKDOWN: "markdown",
}


def format_name(fmt: int) -> str:
    return _FORMAT_NAMES.get(int(fmt), "html")


def format_from_name(name: Optional[str], default: int = FORMAT_HTML) -> int:
    """Nhận 'html' / 'moodle_auto_format' / '1' ... trả về mã số format."""
    s = (name or "").strip()
    if not s:
        return default
    if s.isdigit():
        return int(s)
    for code, nm in _FORMAT_NAMES.items():
        if nm == s:
            return code
    return default


def format_text(text: Optional[str], fmt: int = FORMAT_HTML) -> str:
    """
    Render text theo format:
    - HTML: giữ nguyên
    - MOODLE (auto format): giữ HTML, xuống dòng -> <br />
    - PLAIN / MARKDOWN: escape rồi xuống dòng -> <br />
    """
    text = text or ""
    fmt = int(fmt)
    if fmt == FORMAT_HTML:
        return text
    if fmt == FORMAT_MOODLE:
        return text.replace("\r\n", "\n").replace("\n", "<br />")
    return html.escape(text).replace("\r\n", "\n").replace("\n", "<br />")


_TAG_RE = re.compile(r"<[^>]+>")


def html_to_text(s: Optional[str]) -> str:
    s = _TAG_RE.sub("", s or "")
    return html.unescape(s).strip()


def xml_escape(s: Optional[str]) -> str:
    """Escape cơ bản cho các thẻ <text> không dùng CDATA."""
    s = s or ""
    return (
        s.replace("&", "&amp;")
         .replace("<", "&lt;")
         .replace(">", "&gt;")
         .replace('"', "&quot;")
         .replace("'", "&apos;")
    )


def md5_key(text: Optional[str]) -> str:
    return "ordering_item_" + hashlib.md5((text or "").encode("utf-8")).hexdigest()


def round_half_up(x: float, ndigits: int = 0) -> float:
    """Làm tròn kiểu PHP round(): .5 luôn ra xa số 0."""
    m = 10 ** ndigits
    v = abs(x) * m
    r = math.floor(v + 0.5) / m
    return math.copysign(r, x) if x else 0.0


def param_int(value, default: int = 0) -> int:
    """Ép kiểu giống PARAM_INT: rỗng / sai định dạng -> default."""
    if value is None or value == "":
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def is_numeric(value) -> bool:
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value).strip())
        return True
    except ValueError:
        return False
