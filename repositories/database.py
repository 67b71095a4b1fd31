# -*- coding: utf-8 -*-
"""
Local database facade used by the repositories.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from repositories.db_adapter import SQLiteAdapter, RowProxy
from utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """
    Thin wrapper over the SQLite adapter.

    Usage:
        db = Database(Path("data/family_registry.db"))
        db.initialize()
        rows = db.fetch_all("SELECT * FROM drafts WHERE camp_id = ?", (camp_id,))
    """

    def __init__(self, db_path: Optional[Path] = None):
        self._adapter = SQLiteAdapter(db_path)
        self._adapter.connect()

    @property
    def db_path(self) -> Path:
        return self._adapter.db_path

    def initialize(self) -> None:
        """Initialize database schema."""
        self._adapter.initialize()

    @contextmanager
    def cursor(self):
        with self._adapter.cursor() as cur:
            yield cur

    def modify(self, query: str, params: tuple = ()) -> int:
        """Execute an UPDATE or DELETE and return the affected row count."""
        return self._adapter.modify(query, params)

    def insert(self, query: str, params: tuple = ()) -> int:
        """Execute an INSERT and return the generated row id."""
        return self._adapter.insert(query, params)

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[RowProxy]:
        return self._adapter.fetch_one(query, params)

    def fetch_all(self, query: str, params: tuple = ()) -> List[RowProxy]:
        return self._adapter.fetch_all(query, params)

    def close(self) -> None:
        self._adapter.close()
