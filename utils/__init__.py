# -*- coding: utf-8 -*-
"""
Family Registry Utility Module
"""

from .logger import get_logger, setup_logger
from .helpers import digits_only, cell_text, format_date

__all__ = [
    "get_logger",
    "setup_logger",
    "digits_only",
    "cell_text",
    "format_date",
]
