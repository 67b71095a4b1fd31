# -*- coding: utf-8 -*-
"""
In-process RemoteStore.

Holds every table in memory with the same filter, key and timestamp
behaviour as the hosted backend. Used by the test-suite and as a demo
backend when no REMOTE_URL is reachable.
"""

import copy
import uuid
from collections import defaultdict
from typing import Any, Dict, List, Tuple

from services.exceptions import NetworkException, RemoteOperationError
from services.remote_store import PRIMARY_KEYS, Filters, RemoteStore, Row
from utils.datetime_utils import utc_now_iso
from utils.logger import get_logger

logger = get_logger(__name__)


def _matches(row: Row, filters: Filters) -> bool:
    for column, expected in (filters or {}).items():
        actual = row.get(column)
        if expected is None:
            if actual is not None:
                return False
        elif isinstance(expected, (list, tuple, set)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class InMemoryRemoteStore(RemoteStore):
    """Dict-of-lists backend. Rows are copied in and out."""

    def __init__(self):
        self.tables: Dict[str, List[Row]] = defaultdict(list)
        self.online = True
        self._failures: Dict[Tuple[str, str], List[Exception]] = defaultdict(list)

    # ==================== Failure injection ====================

    def fail_next(self, table: str, operation: str, error: Exception = None):
        """Make the next `operation` ("select", "insert", ...) on table raise error."""
        self._failures[(table, operation)].append(
            error or RemoteOperationError(f"{operation} on {table} failed")
        )

    def _check(self, table: str, operation: str):
        if not self.online:
            raise NetworkException("remote store unreachable")
        pending = self._failures.get((table, operation))
        if pending:
            raise pending.pop(0)

    # ==================== RemoteStore ====================

    def select(self, table, filters=None, order=None, limit=None):
        self._check(table, "select")
        rows = [copy.deepcopy(r) for r in self.tables[table] if _matches(r, filters)]
        if order:
            column = order.lstrip("-")
            rows.sort(
                key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else ""),
                reverse=order.startswith("-"),
            )
        if limit is not None:
            rows = rows[:limit]
        return rows

    def insert(self, table, rows):
        self._check(table, "insert")
        return self._store(table, rows)

    def _store(self, table: str, rows: List[Row]) -> List[Row]:
        pk = PRIMARY_KEYS.get(table)
        stored = []
        for row in rows:
            record = copy.deepcopy(row)
            if pk and not record.get(pk):
                record[pk] = str(uuid.uuid4())
            if pk and any(r.get(pk) == record[pk] for r in self.tables[table]):
                raise RemoteOperationError(
                    f"duplicate key value violates unique constraint on {table}.{pk}",
                    status_code=409,
                )
            record.setdefault("created_at", utc_now_iso())
            self.tables[table].append(record)
            stored.append(copy.deepcopy(record))
        return stored

    def update(self, table, filters, values):
        self._check(table, "update")
        updated = []
        for row in self.tables[table]:
            if _matches(row, filters):
                row.update(copy.deepcopy(values))
                updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table, filters):
        self._check(table, "delete")
        if not filters:
            raise ValueError("delete() requires filters; use delete_all() to empty a table")
        before = len(self.tables[table])
        self.tables[table] = [r for r in self.tables[table] if not _matches(r, filters)]
        return before - len(self.tables[table])

    def delete_all(self, table):
        self._check(table, "delete_all")
        self.tables[table] = []

    def count(self, table, filters=None):
        self._check(table, "count")
        return sum(1 for r in self.tables[table] if _matches(r, filters))

    def health_check(self):
        return self.online

    # ==================== Helpers ====================

    def rows(self, table: str) -> List[Row]:
        """Unfiltered snapshot of a table."""
        return copy.deepcopy(self.tables[table])

    def seed(self, table: str, rows: List[Dict[str, Any]]) -> List[Row]:
        """Insert rows bypassing failure injection and the online flag."""
        return self._store(table, rows)
