# -*- coding: utf-8 -*-
"""
Camp and delegate entity models.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class Camp:
    """A camp (region) that owns families."""

    camp_id: Optional[str] = None
    name: str = ""
    location: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Camp':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class Delegate:
    """A delegate responsible for a group of families in a camp."""

    delegate_id: Optional[str] = None
    name: str = ""
    camp_id: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Delegate':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
