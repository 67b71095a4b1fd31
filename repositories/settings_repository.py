# -*- coding: utf-8 -*-
"""
Key/value settings persisted on the client device.

Holds the cached session user, the selected camp, per-camp "next family
number" suggestions and cached delegate names for offline use.
"""

import json
from typing import Any, Optional

from .database import Database
from utils.datetime_utils import utc_now_iso
from utils.logger import get_logger

logger = get_logger(__name__)


class SettingsRepository:
    """Repository for app_settings rows."""

    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        row = self.db.fetch_one("SELECT value FROM app_settings WHERE key = ?", (key,))
        if row is None or row["value"] is None:
            return default
        return row["value"]

    def set(self, key: str, value: Optional[str]) -> None:
        with self.db.cursor() as cur:
            cur.execute(
                """
                INSERT INTO app_settings (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, utc_now_iso())
            )

    def delete(self, key: str) -> None:
        self.db.modify("DELETE FROM app_settings WHERE key = ?", (key,))

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring unreadable setting {key!r}")
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value, ensure_ascii=False))

    def get_int(self, key: str, default: int = 0) -> int:
        try:
            return int(self.get(key, str(default)))
        except (TypeError, ValueError):
            return default
