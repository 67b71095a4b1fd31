# -*- coding: utf-8 -*-
"""
Remote store abstraction.

The hosted backend is a set of tables with create/select/update/delete.
Services talk to it only through RemoteStore so that the HTTP backend and
the in-process store are interchangeable.

Filter convention (all filters are AND-ed equality tests):
    {"camp_id": "c1"}            camp_id = 'c1'
    {"nid": ["1", "2"]}          nid IN ('1', '2')
    {"family_id": None}          family_id IS NULL
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.config import Config
from utils.logger import get_logger

logger = get_logger(__name__)

Row = Dict[str, Any]
Filters = Optional[Dict[str, Any]]

PRIMARY_KEYS = {
    "camps": "camp_id",
    "delegates": "delegate_id",
    "families": "family_id",
    "individuals": "individual_id",
    "health_records": "individual_id",
    "parcels": "parcel_id",
    "aid_deliveries": "delivery_id",
    "notifications": "notification_id",
}


class RemoteStore(ABC):
    """Table-oriented remote persistence."""

    @abstractmethod
    def select(self, table: str, filters: Filters = None,
               order: Optional[str] = None, limit: Optional[int] = None) -> List[Row]:
        """
        Rows of table matching filters.

        order is a column name, prefixed with "-" for descending.
        """

    @abstractmethod
    def insert(self, table: str, rows: List[Row]) -> List[Row]:
        """Insert rows and return them as stored (keys and timestamps filled in)."""

    @abstractmethod
    def update(self, table: str, filters: Filters, values: Row) -> List[Row]:
        """Update matching rows and return them."""

    @abstractmethod
    def delete(self, table: str, filters: Filters) -> int:
        """Delete matching rows and return how many were removed."""

    @abstractmethod
    def delete_all(self, table: str) -> None:
        """Empty a table using the backend's own truncate primitive."""

    @abstractmethod
    def count(self, table: str, filters: Filters = None) -> int:
        pass

    def select_one(self, table: str, filters: Filters = None,
                   order: Optional[str] = None) -> Optional[Row]:
        rows = self.select(table, filters, order=order, limit=1)
        return rows[0] if rows else None

    def insert_one(self, table: str, row: Row) -> Row:
        return self.insert(table, [row])[0]

    def health_check(self) -> bool:
        """True when the backend answers; subclasses without a network are always up."""
        return True


def _encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_filters(filters: Filters) -> Dict[str, str]:
    """Translate the filter convention into PostgREST query parameters."""
    params = {}
    for column, value in (filters or {}).items():
        if value is None:
            params[column] = "is.null"
        elif isinstance(value, (list, tuple, set)):
            quoted = ",".join(f'"{_encode_value(v)}"' for v in value)
            params[column] = f"in.({quoted})"
        else:
            params[column] = f"eq.{_encode_value(value)}"
    return params


def encode_order(order: Optional[str]) -> Optional[str]:
    if not order:
        return None
    if order.startswith("-"):
        return f"{order[1:]}.desc"
    return f"{order}.asc"


class HttpRemoteStore(RemoteStore):
    """RemoteStore over the hosted REST API."""

    def __init__(self, client, page_size: int = None):
        self.client = client
        self.page_size = page_size or Config.REMOTE_PAGE_SIZE

    def select(self, table, filters=None, order=None, limit=None):
        params = encode_filters(filters)
        params["select"] = "*"
        encoded_order = encode_order(order)
        if encoded_order:
            params["order"] = encoded_order

        if limit is not None:
            params["limit"] = str(limit)
            return self.client.get_rows(table, params) or []

        # Page through the table; the server caps each response
        rows: List[Row] = []
        start = 0
        while True:
            page = self.client.get_rows(
                table, params, range_header=f"{start}-{start + self.page_size - 1}"
            ) or []
            rows.extend(page)
            if len(page) < self.page_size:
                break
            start += self.page_size
        return rows

    def insert(self, table, rows):
        if not rows:
            return []
        return self.client.post_rows(table, rows) or []

    def update(self, table, filters, values):
        return self.client.patch_rows(table, encode_filters(filters), values) or []

    def delete(self, table, filters):
        if not filters:
            raise ValueError("delete() requires filters; use delete_all() to empty a table")
        deleted = self.client.delete_rows(table, encode_filters(filters)) or []
        return len(deleted)

    def delete_all(self, table):
        self.client.call_rpc(Config.REMOTE_TRUNCATE_RPC, {"table_name": table})

    def count(self, table, filters=None):
        return self.client.count_rows(table, encode_filters(filters))

    def health_check(self):
        return self.client.health_check()
