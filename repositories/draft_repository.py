# -*- coding: utf-8 -*-
"""
Draft repository for the offline draft store.
"""

from typing import List, Optional

from models.draft import Draft, DraftStatus
from .database import Database
from utils.logger import get_logger

logger = get_logger(__name__)


class DraftRepository:
    """Repository for Draft CRUD operations."""

    def __init__(self, db: Database):
        self.db = db

    def create(self, draft: Draft) -> Draft:
        """Append a draft; assigns its draft_id."""
        query = """
            INSERT INTO drafts (camp_id, family_number, payload, status, error, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """
        params = (
            draft.camp_id,
            draft.family_number,
            draft.payload_json(),
            draft.status.value,
            draft.error,
            draft.created_at,
        )
        draft.draft_id = self.db.insert(query, params)
        logger.debug(f"Created draft: {draft.draft_id} (family {draft.family_number})")
        return draft

    def get_by_id(self, draft_id: int) -> Optional[Draft]:
        row = self.db.fetch_one("SELECT * FROM drafts WHERE draft_id = ?", (draft_id,))
        if row:
            return Draft.from_row(row)
        return None

    def list(self, camp_id: Optional[str] = None) -> List[Draft]:
        """Drafts in storage order (oldest first), optionally for one camp."""
        if camp_id is None:
            rows = self.db.fetch_all("SELECT * FROM drafts ORDER BY draft_id ASC")
        else:
            rows = self.db.fetch_all(
                "SELECT * FROM drafts WHERE camp_id = ? ORDER BY draft_id ASC",
                (camp_id,)
            )
        return [Draft.from_row(row) for row in rows]

    def update_status(self, draft_id: int, status: DraftStatus, error: Optional[str] = None) -> bool:
        updated = self.db.modify(
            "UPDATE drafts SET status = ?, error = ? WHERE draft_id = ?",
            (status.value, error, draft_id)
        )
        return updated > 0

    def delete(self, draft_id: int) -> bool:
        deleted = self.db.modify("DELETE FROM drafts WHERE draft_id = ?", (draft_id,))
        if deleted:
            logger.debug(f"Deleted draft: {draft_id}")
        return deleted > 0

    def count(self, camp_id: Optional[str] = None, status: Optional[DraftStatus] = None) -> int:
        query = "SELECT COUNT(*) as count FROM drafts WHERE 1=1"
        params = []

        if camp_id is not None:
            query += " AND camp_id = ?"
            params.append(camp_id)

        if status is not None:
            query += " AND status = ?"
            params.append(status.value)

        result = self.db.fetch_one(query, tuple(params))
        return result["count"] if result else 0

    def family_numbers(self, camp_id: str) -> List[str]:
        rows = self.db.fetch_all(
            "SELECT family_number FROM drafts WHERE camp_id = ?",
            (camp_id,)
        )
        return [row["family_number"] for row in rows]
