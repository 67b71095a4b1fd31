# -*- coding: utf-8 -*-
"""
Notification entity model.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class Notification:
    notification_id: Optional[str] = None
    type: str = "info"  # info, alert, new_entry
    message: str = ""
    user_name: Optional[str] = None
    is_read: bool = False
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Notification':
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "is_read" in known:
            known["is_read"] = bool(known["is_read"])
        return cls(**known)
