# -*- coding: utf-8 -*-
"""
Field-level validation rules shared by the assembler, the draft store and
the import reconciler.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional

from app.config import Config
from services.translation_manager import tr
from utils.helpers import digits_only, parse_int
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation check."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    field: Optional[str] = None

    @classmethod
    def ok(cls, warnings: List[str] = None) -> 'ValidationResult':
        return cls(is_valid=True, warnings=warnings or [])

    @classmethod
    def fail(cls, message: str, field: str = None) -> 'ValidationResult':
        return cls(is_valid=False, errors=[message], field=field)

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None


# 10 digits with a leading 0, or 9 digits without one
PHONE_PATTERN = re.compile(r"^(0[0-9]{9}|[1-9][0-9]{8})$")


def validate_phone(phone: Optional[str]) -> bool:
    """Empty is allowed; anything else must match PHONE_PATTERN exactly."""
    if phone is None:
        return True
    text = str(phone).strip()
    if not text:
        return True
    return bool(PHONE_PATTERN.match(text))


def validate_date_parts(day: Any, month: Any, year: Any,
                        today: Optional[date] = None) -> bool:
    """
    Range check of a decomposed date.

    Day and month are checked independently, so 30/2 passes.
    """
    d, m, y = parse_int(day), parse_int(month), parse_int(year)
    if d is None or m is None or y is None:
        return False
    current_year = (today or date.today()).year
    return 1 <= d <= 31 and 1 <= m <= 12 and Config.MIN_BIRTH_YEAR <= y <= current_year


def normalize_nid(value: Any) -> str:
    return digits_only(value)


def validate_nid(value: Any) -> ValidationResult:
    """A national ID is required and must be exactly NATIONAL_ID_LENGTH digits."""
    if is_blank(value):
        return ValidationResult.fail(tr("validation.nid_required"), field="nid")
    nid = normalize_nid(value)
    if len(nid) != Config.NATIONAL_ID_LENGTH:
        return ValidationResult.fail(tr("validation.nid_length"), field="nid")
    return ValidationResult.ok()


def is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()
