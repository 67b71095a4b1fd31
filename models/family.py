# -*- coding: utf-8 -*-
"""
Family entity model.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from models.individual import Individual


class ShelterType(Enum):
    READY_TENT = "ready_tent"
    MANUFACTURED_TENT = "manufactured_tent"
    HOUSE = "house"
    OTHER = "other"


@dataclass
class Family:
    """
    A registered family.

    family_id is assigned when the family is created remotely; a family
    that only exists inside a local draft has none.
    family_number is unique among non-departed families of one camp.
    """

    family_id: Optional[str] = None
    family_number: str = ""
    camp_id: Optional[str] = None

    address: str = ""
    contact: Optional[str] = None  # digits only
    alternative_mobile: Optional[str] = None  # digits only
    housing_status: Optional[str] = None
    family_needs: Optional[str] = None
    shelter_type: Optional[str] = None
    shelter_type_other: Optional[str] = None  # shelter_type == other
    delegate: Optional[str] = None

    is_departed: bool = False
    created_at: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return not self.is_departed

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Family':
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "family_number" in known and known["family_number"] is not None:
            known["family_number"] = str(known["family_number"])
        if "is_departed" in known:
            known["is_departed"] = bool(known["is_departed"])
        return cls(**known)


@dataclass
class FamilyBundle:
    """A family together with its members, ready to be persisted."""

    family: Family = field(default_factory=Family)
    members: List[Individual] = field(default_factory=list)

    @property
    def family_number(self) -> str:
        return self.family.family_number

    def member_nids(self) -> List[str]:
        return [m.nid for m in self.members if m.nid]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "family": self.family.to_dict(),
            "members": [m.to_dict() for m in self.members],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FamilyBundle':
        return cls(
            family=Family.from_dict(data.get("family") or {}),
            members=[Individual.from_dict(m) for m in data.get("members") or []],
        )
