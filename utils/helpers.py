# -*- coding: utf-8 -*-
"""
Utility helper functions.
"""

import re
from datetime import datetime, date
from typing import Any, Iterable, Optional, Union

# ASCII only: \D would keep Arabic-Indic and other Unicode digits
_NON_DIGITS = re.compile(r"[^0-9]")
_INTEGER = re.compile(r"^[+-]?[0-9]+$")


def digits_only(value: Any) -> str:
    """Strip everything but ASCII digits from a value."""
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def cell_text(value: Any) -> str:
    """
    Render a spreadsheet cell as trimmed text.

    Whole floats (101.0) lose their fractional part so that numeric
    family numbers and IDs read back the way they were typed.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer, returning None for anything non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not _INTEGER.match(text):
        return None
    return int(text)


def max_numeric(values: Iterable[Any]) -> int:
    """Largest integer among values, 0 when none are numeric."""
    numbers = [n for n in (parse_int(v) for v in values) if n is not None]
    return max(numbers) if numbers else 0


def format_date(
    value: Optional[Union[datetime, date, str]],
    format_str: str = "%d/%m/%Y"
) -> str:
    """
    Format a date value for display.

    Args:
        value: Date, datetime, or ISO string
        format_str: Output format string

    Returns:
        Formatted date string or empty string
    """
    if value is None:
        return ""

    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value

    if isinstance(value, (datetime, date)):
        return value.strftime(format_str)

    return str(value)
