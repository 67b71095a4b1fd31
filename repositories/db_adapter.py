# -*- coding: utf-8 -*-
"""
Local database adapter.

The local database holds only client-side state: the offline draft store
and a small key/value settings table. Remote data lives behind
services.remote_store.

This module is the ONLY place that should import sqlite3.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from utils.logger import get_logger

logger = get_logger(__name__)


class RowProxy:
    """
    A dict-like row proxy that supports both dict access and attribute access.
    """

    def __init__(self, data: Dict[str, Any], columns: Optional[List[str]] = None):
        self._data = data
        self._columns = columns or list(data.keys())

    def __getitem__(self, key):
        if isinstance(key, int):
            return self._data[self._columns[key]]
        return self._data[key]

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

    def __contains__(self, key):
        return key in self._data

    def __len__(self):
        return len(self._data)

    def get(self, key, default=None):
        return self._data.get(key, default)

    def keys(self):
        return self._data.keys()

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __repr__(self):
        return f"RowProxy({self._data})"


class DatabaseAdapter(ABC):
    """Interface every local database backend implements."""

    @abstractmethod
    def connect(self) -> bool:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def fetch_one(self, query: str, params: Optional[Tuple] = None) -> Optional[RowProxy]:
        pass

    @abstractmethod
    def fetch_all(self, query: str, params: Optional[Tuple] = None) -> List[RowProxy]:
        pass

    @abstractmethod
    @contextmanager
    def cursor(self) -> Iterator[Any]:
        pass

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[Any]:
        pass

    @abstractmethod
    def initialize(self) -> None:
        pass


class SQLiteAdapter(DatabaseAdapter):
    """SQLite database adapter."""

    def __init__(self, db_path: Optional[Path] = None):
        import sqlite3 as _sqlite3
        self._sqlite3 = _sqlite3

        if db_path is None:
            from app.config import Config
            db_path = Config.DB_PATH

        self._db_path = Path(db_path)
        self._connection = None

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self) -> bool:
        """Establish SQLite connection."""
        try:
            if self._connection is None:
                self._connection = self._sqlite3.connect(
                    str(self._db_path),
                    check_same_thread=False
                )
                self._connection.row_factory = self._dict_factory
            return True
        except self._sqlite3.Error as e:
            logger.error(f"SQLite connection error: {e}")
            return False

    def _dict_factory(self, cursor, row):
        columns = [col[0] for col in cursor.description]
        return {col: row[idx] for idx, col in enumerate(columns)}

    def close(self) -> None:
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.debug("SQLite connection closed")

    def _get_connection(self):
        if not self._connection:
            self.connect()
        return self._connection

    def modify(self, query: str, params: Optional[Tuple] = None) -> int:
        """Execute an UPDATE/DELETE and return the affected row count."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(query, params or ())
            conn.commit()
            return cursor.rowcount
        except Exception as e:
            conn.rollback()
            logger.error(f"SQLite modify error: {e}\nQuery: {query}")
            raise
        finally:
            cursor.close()

    def insert(self, query: str, params: Optional[Tuple] = None) -> int:
        """Execute an INSERT and return the new rowid."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(query, params or ())
            conn.commit()
            return cursor.lastrowid
        except Exception as e:
            conn.rollback()
            logger.error(f"SQLite insert error: {e}\nQuery: {query}")
            raise
        finally:
            cursor.close()

    def fetch_one(self, query: str, params: Optional[Tuple] = None) -> Optional[RowProxy]:
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(query, params or ())
            row = cursor.fetchone()
            if row and cursor.description:
                columns = [col[0] for col in cursor.description]
                return RowProxy(row, columns)
            return None
        except Exception as e:
            logger.error(f"SQLite fetch_one error: {e}\nQuery: {query}")
            raise
        finally:
            cursor.close()

    def fetch_all(self, query: str, params: Optional[Tuple] = None) -> List[RowProxy]:
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(query, params or ())
            if cursor.description:
                columns = [col[0] for col in cursor.description]
                return [RowProxy(row, columns) for row in cursor.fetchall()]
            return []
        except Exception as e:
            logger.error(f"SQLite fetch_all error: {e}\nQuery: {query}")
            raise
        finally:
            cursor.close()

    @contextmanager
    def cursor(self) -> Iterator[Any]:
        """Cursor that commits on exit and rolls back on error."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"SQLite cursor error: {e}")
            raise
        finally:
            cursor.close()

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Transaction context manager."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"SQLite transaction error: {e}")
            raise

    def initialize(self) -> None:
        """Create the local schema."""
        logger.info(f"Initializing local database at: {self._db_path}")
        with self.transaction() as conn:
            self._create_tables(conn)

    def _create_tables(self, conn) -> None:
        # Offline draft store; draft_id is the monotonic local identifier
        conn.execute("""
            CREATE TABLE IF NOT EXISTS drafts (
                draft_id INTEGER PRIMARY KEY AUTOINCREMENT,
                camp_id TEXT NOT NULL,
                family_number TEXT NOT NULL,
                payload TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                error TEXT,
                created_at TEXT NOT NULL
            )
        """)
        conn.execute("CREATE INDEX IF NOT EXISTS idx_drafts_camp ON drafts(camp_id)")

        conn.execute("""
            CREATE TABLE IF NOT EXISTS app_settings (
                key TEXT PRIMARY KEY,
                value TEXT,
                updated_at TEXT
            )
        """)
