# -*- coding: utf-8 -*-
"""
Vocabulary Service - maps free-text labels onto the controlled vocabularies.

Role labels arrive from the entry form (Arabic labels), from imported
sheets (Arabic synonyms with spelling variants) and from stored records
(English codes). The mapping below is the complete accepted alphabet;
anything else is reported as unrecognized.
"""

from typing import Any, Dict, Optional, Tuple, Union

from app.config import Vocabularies
from models.individual import FEMALE_ROLES, Gender, Role, RoleMatch
from models.family import ShelterType
from utils.logger import get_logger

logger = get_logger(__name__)


ROLE_SYNONYMS: Dict[str, Role] = {
    # Import synonyms
    "زوج": Role.HUSBAND,
    "أب": Role.FATHER,
    "اب": Role.FATHER,
    "زوجة": Role.WIFE,
    "زوجه": Role.WIFE,
    "أم": Role.MOTHER,
    "ام": Role.MOTHER,
    "ابن": Role.SON,
    "ابنة": Role.DAUGHTER,
    "إبنة": Role.DAUGHTER,
    "ابنه": Role.DAUGHTER,
    "إبنه": Role.DAUGHTER,
    "أرملة": Role.WIDOW,
    "ارملة": Role.WIDOW,
    "أرمله": Role.WIDOW,
    "ارمله": Role.WIDOW,
    "أرمل": Role.WIDOWER,
    "ارمل": Role.WIDOWER,
    "مطلقة": Role.DIVORCED,
    "مطلقه": Role.DIVORCED,
    "مهجورة": Role.ABANDONED,
    "مهجوره": Role.ABANDONED,
    "جد": Role.GRANDFATHER,
    "جدة": Role.GRANDMOTHER,
    "جده": Role.GRANDMOTHER,
    # Form labels
    "زوجة ثانية": Role.SECOND_WIFE,
    "وصي": Role.GUARDIAN,
    "أخرى": Role.OTHER,
}

# Canonical codes are accepted as-is
ROLE_SYNONYMS.update({role.value: role for role in Role})

_ROLE_LABELS: Dict[str, Tuple[str, str]] = {
    code: (en, ar) for code, en, ar in Vocabularies.ROLES
}

YES_VALUES = frozenset({"نعم", "yes", "1", "true"})


def map_role_label(label: Any) -> RoleMatch:
    """
    Map a free-text role label onto a Role.

    Surrounding whitespace is ignored and English codes match
    case-insensitively; Arabic spelling variants must appear in
    ROLE_SYNONYMS.
    """
    raw = "" if label is None else str(label).strip()
    role = ROLE_SYNONYMS.get(raw) or ROLE_SYNONYMS.get(raw.lower())
    if role is None:
        return RoleMatch.unrecognized(raw)
    return RoleMatch.recognized(role, raw)


def derive_gender(role: Union[Role, str, None]) -> Gender:
    """
    Gender implied by a role.

    Guardians carry an explicit gender; callers must not derive one for
    them. Unrecognized roles derive male.
    """
    if isinstance(role, str):
        try:
            role = Role(role)
        except ValueError:
            return Gender.MALE
    return Gender.FEMALE if role in FEMALE_ROLES else Gender.MALE


def role_label(role: Union[Role, str], arabic: bool = True) -> str:
    code = role.value if isinstance(role, Role) else str(role or "")
    labels = _ROLE_LABELS.get(code)
    if labels is None:
        return code
    return labels[1] if arabic else labels[0]


def map_shelter_label(label: Any) -> Tuple[Optional[ShelterType], Optional[str]]:
    """
    Map a shelter-type label to (ShelterType, other_text).

    other_text is only set for ShelterType.OTHER and holds the raw label.
    """
    text = "" if label is None else str(label).strip()
    if not text:
        return None, None
    if text in {s.value for s in ShelterType if s is not ShelterType.OTHER}:
        return ShelterType(text), None
    if "جاهزة" in text:
        return ShelterType.READY_TENT, None
    if "مصنعة" in text:
        return ShelterType.MANUFACTURED_TENT, None
    if "بيت" in text:
        return ShelterType.HOUSE, None
    return ShelterType.OTHER, text


def parse_yes_no(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip().lower() in YES_VALUES
