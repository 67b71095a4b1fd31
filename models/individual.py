# -*- coding: utf-8 -*-
"""
Individual (family member) entity model.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional


class Role(Enum):
    """Closed set of member roles; the last four only arrive via bulk import."""
    HUSBAND = "husband"
    WIFE = "wife"
    SECOND_WIFE = "second_wife"
    WIDOW = "widow"
    WIDOWER = "widower"
    DIVORCED = "divorced"
    ABANDONED = "abandoned"
    GUARDIAN = "guardian"
    SON = "son"
    DAUGHTER = "daughter"
    OTHER = "other"
    FATHER = "father"
    MOTHER = "mother"
    GRANDFATHER = "grandfather"
    GRANDMOTHER = "grandmother"


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"


FEMALE_ROLES = frozenset({
    Role.WIFE, Role.SECOND_WIFE, Role.WIDOW,
    Role.DIVORCED, Role.ABANDONED, Role.DAUGHTER,
})


class RoleMatchKind(Enum):
    RECOGNIZED = "recognized"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class RoleMatch:
    """
    Outcome of mapping a free-text role label.

    Exactly one of the two variants applies: RECOGNIZED carries a Role,
    UNRECOGNIZED carries only the raw label.
    """
    kind: RoleMatchKind
    raw: str
    role: Optional[Role] = None

    @classmethod
    def recognized(cls, role: Role, raw: str) -> 'RoleMatch':
        return cls(kind=RoleMatchKind.RECOGNIZED, raw=raw, role=role)

    @classmethod
    def unrecognized(cls, raw: str) -> 'RoleMatch':
        return cls(kind=RoleMatchKind.UNRECOGNIZED, raw=raw)

    @property
    def is_recognized(self) -> bool:
        return self.kind is RoleMatchKind.RECOGNIZED

    @property
    def stored_value(self) -> str:
        """Value persisted in the role column."""
        return self.role.value if self.is_recognized else self.raw


HEALTH_FIELDS = ("is_pregnant", "is_nursing", "notes")


@dataclass
class Individual:
    """
    A member of a family.

    Health data (pregnancy, nursing, notes) is kept on the member here and
    split into its own remote table on write.
    """

    individual_id: Optional[str] = None
    family_id: Optional[str] = None

    name: str = ""
    nid: Optional[str] = None  # 9 digits
    dob: Optional[str] = None  # YYYY-MM-DD
    gender: str = Gender.MALE.value
    role: str = Role.OTHER.value

    # Role-specific fields
    role_description: Optional[str] = None  # role == other
    deceased_husband_name: Optional[str] = None  # role == widow
    husband_death_date: Optional[str] = None  # role == widow

    # Sizes
    shoe_size: Optional[str] = None
    clothes_size: Optional[str] = None

    # Health
    is_pregnant: bool = False
    is_nursing: bool = False
    notes: Optional[str] = None

    created_at: Optional[str] = None

    @property
    def is_female(self) -> bool:
        return self.gender == Gender.FEMALE.value

    @property
    def has_health_data(self) -> bool:
        return bool(self.is_pregnant or self.is_nursing or self.notes)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_record(self) -> Dict[str, Any]:
        """Row for the individuals table (health fields excluded)."""
        record = self.to_dict()
        for name in HEALTH_FIELDS:
            record.pop(name)
        return record

    def health_record(self) -> Optional[Dict[str, Any]]:
        """Row for the health_records table, or None when there is nothing to store."""
        if not self.has_health_data:
            return None
        return {
            "individual_id": self.individual_id,
            "is_pregnant": bool(self.is_pregnant),
            "is_nursing": bool(self.is_nursing),
            "notes": self.notes or None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Individual':
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for flag in ("is_pregnant", "is_nursing"):
            if flag in known:
                known[flag] = bool(known[flag])
        return cls(**known)
