# -*- coding: utf-8 -*-
from ..core.strings import get_string


class Provider:
    """Khai báo với hệ thống privacy: plugin không lưu dữ liệu cá nhân (null provider)."""

    @staticmethod
    def get_reason() -> str:
        """Mã chuỗi ngôn ngữ giải thích vì sao không lưu dữ liệu."""
        return "privacy:metadata"

    @classmethod
    def get_reason_text(cls) -> str:
        return get_string(cls.get_reason())
