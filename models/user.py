# -*- coding: utf-8 -*-
"""
User entity model for the authenticated session.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional


@dataclass
class User:
    """
    The signed-in operator.

    The backend authenticates by email; operators type a plain username,
    which maps to a virtual address on the system domain.
    """

    user_id: str = ""
    username: str = ""
    email: str = ""
    full_name: str = ""
    role: str = "data_entry"
    assigned_camps: List[str] = field(default_factory=list)

    # Session token (not persisted with the cached user)
    access_token: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username or self.email

    def to_dict(self, include_token: bool = False) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        if not include_token:
            data.pop("access_token")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
