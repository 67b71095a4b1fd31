# -*- coding: utf-8 -*-
"""
Aid parcel and delivery entity models.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional


class ParcelStatus(Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass
class AidParcel:
    """A distributable aid item; display_id is a per-camp sequence number."""

    parcel_id: Optional[str] = None
    camp_id: Optional[str] = None
    display_id: int = 0
    name: str = ""
    date: Optional[str] = None
    status: str = ParcelStatus.ACTIVE.value
    created_at: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == ParcelStatus.ACTIVE.value

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AidParcel':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class AidDelivery:
    """
    Delivery of a parcel to a family.
    At most one delivery exists per (family_id, parcel_id).
    """

    delivery_id: Optional[str] = None
    family_id: str = ""
    parcel_id: Optional[str] = None
    items: Optional[str] = None
    date: Optional[str] = None
    recipient: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AidDelivery':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
