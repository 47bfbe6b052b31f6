# -*- coding: utf-8 -*-
"""Ordering question type: sắp xếp các mục theo đúng thứ tự và chấm điểm."""

__version__ = "1.0.0"
