# -*- coding: utf-8 -*-
"""
Draft entity model - a family captured locally and not yet uploaded.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from models.family import FamilyBundle
from models.individual import Individual
from utils.datetime_utils import utc_now_iso


class DraftStatus(Enum):
    PENDING = "pending"
    ERROR = "error"


@dataclass
class Draft:
    """
    A queued family bundle owned by the local draft store.

    draft_id is the store's monotonic local identifier, unrelated to the
    family_id the remote store assigns on upload.
    """

    draft_id: Optional[int] = None
    camp_id: str = ""
    bundle: FamilyBundle = field(default_factory=FamilyBundle)
    status: DraftStatus = DraftStatus.PENDING
    error: Optional[str] = None
    created_at: str = field(default_factory=utc_now_iso)

    @property
    def family_number(self) -> str:
        return self.bundle.family_number

    @property
    def members(self) -> List[Individual]:
        return self.bundle.members

    @property
    def is_pending(self) -> bool:
        return self.status == DraftStatus.PENDING

    def payload_json(self) -> str:
        return json.dumps(self.bundle.to_dict(), ensure_ascii=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "draft_id": self.draft_id,
            "camp_id": self.camp_id,
            "family_number": self.family_number,
            "bundle": self.bundle.to_dict(),
            "status": self.status.value,
            "error": self.error,
            "created_at": self.created_at,
        }

    @classmethod
    def from_row(cls, row) -> 'Draft':
        return cls(
            draft_id=row["draft_id"],
            camp_id=row["camp_id"],
            bundle=FamilyBundle.from_dict(json.loads(row["payload"] or "{}")),
            status=DraftStatus(row["status"]),
            error=row["error"],
            created_at=row["created_at"],
        )
