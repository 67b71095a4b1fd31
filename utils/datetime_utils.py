# -*- coding: utf-8 -*-
"""
DateTime Utilities - أدوات التاريخ والوقت

Dates travel through the system as ISO strings (YYYY-MM-DD); timestamps
as ISO datetimes in UTC.
"""

import re
from datetime import datetime, date, timedelta, timezone
from typing import Any, Optional, Tuple

# Day zero of the spreadsheet serial date system (1900 leap-year bug included)
EXCEL_EPOCH = datetime(1899, 12, 30)

_DMY_PATTERN = re.compile(r"^(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})$")


def utc_now_iso() -> str:
    """Current UTC timestamp as ISO string."""
    return datetime.now(timezone.utc).isoformat()


def today_iso() -> str:
    return date.today().isoformat()


def compose_date(day: Any, month: Any, year: Any) -> str:
    """Build a zero-padded YYYY-MM-DD string from its parts."""
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def split_date(value: Optional[str]) -> Tuple[str, str, str]:
    """
    Split a YYYY-MM-DD string into (day, month, year) strings.

    Anything that does not look like an ISO date yields empty parts.
    """
    if not value:
        return "", "", ""
    parts = str(value)[:10].split("-")
    if len(parts) != 3:
        return "", "", ""
    year, month, day = parts
    return day, month, year


def parse_excel_date(value: Any) -> str:
    """
    Normalize a spreadsheet date cell to YYYY-MM-DD.

    Accepts native dates, serial numbers, d/m/yyyy text and ISO text.
    Returns an empty string when the value cannot be read as a date.
    """
    if value is None or value == "":
        return ""

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return (EXCEL_EPOCH + timedelta(days=float(value))).date().isoformat()
        except OverflowError:
            return ""

    text = str(value).strip()
    match = _DMY_PATTERN.match(text)
    if match:
        day, month, year = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    try:
        return datetime.fromisoformat(text).date().isoformat()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        return ""


def calculate_age(dob: Optional[str], today: Optional[date] = None) -> int:
    """Age in whole years for an ISO birth date, 0 when unknown."""
    if not dob:
        return 0
    try:
        birth = date.fromisoformat(str(dob)[:10])
    except ValueError:
        return 0

    today = today or date.today()
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age
