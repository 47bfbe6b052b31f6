# -*- coding: utf-8 -*-
from typing import Optional

from ..core.utils import xml_escape


def cdata(s: Optional[str]) -> str:
    """Bọc text vào CDATA; tách "]]>" để không đóng CDATA sớm."""
    s = (s or "").replace("]]>", "]]]]><![CDATA[>")
    return f"<![CDATA[{s}]]>"


def text_tag(tag: str, text: Optional[str], fmt: Optional[str] = None, indent: str = "    ") -> str:
    """<tag format="..."><text><![CDATA[...]]></text></tag>"""
    attr = f' format="{fmt}"' if fmt else ""
    return f"{indent}<{tag}{attr}><text>{cdata(text)}</text></{tag}>\n"


def category_to_xml(path: str) -> str:
    return (
        '<question type="category">\n'
        f'  <category><text>{xml_escape(path)}</text></category>\n'
        '</question>'
    )
