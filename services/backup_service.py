# -*- coding: utf-8 -*-
"""
Full backup and restore of the remote tables as one JSON document.

Document layout:
    {"metadata": {"version", "created_at", "app"},
     "data": {"<table>": [rows...]}}

Restore is destructive: every table is emptied (children first) before
the backup rows are inserted (parents first).
"""

import json
from pathlib import Path
from typing import Any, Dict

from app.config import Config
from services.exceptions import RemoteOperationError, ValidationError
from services.remote_store import RemoteStore
from services.translation_manager import tr
from utils.datetime_utils import utc_now_iso
from utils.logger import get_logger

logger = get_logger(__name__)

BACKUP_APP = "family_data_cloud"

# Parents first
INSERT_ORDER = [
    "camps",
    "delegates",
    "families",
    "individuals",
    "health_records",
    "parcels",
    "aid_deliveries",
    "notifications",
]

# Children first
DELETE_ORDER = [
    "health_records",
    "individuals",
    "aid_deliveries",
    "parcels",
    "families",
    "delegates",
    "camps",
    "notifications",
]


class BackupService:
    """Creates and restores full backups of the remote store."""

    def __init__(self, remote: RemoteStore):
        self.remote = remote

    def create_backup(self) -> Dict[str, Any]:
        backup = {
            "metadata": {
                "version": Config.BACKUP_VERSION,
                "created_at": utc_now_iso(),
                "app": BACKUP_APP,
            },
            "data": {},
        }
        for table in INSERT_ORDER:
            backup["data"][table] = self.remote.select(table)

        total = sum(len(rows) for rows in backup["data"].values())
        logger.info(f"Backup created: {total} rows in {len(INSERT_ORDER)} tables")
        return backup

    def save_backup(self, file_path: Path) -> Dict[str, Any]:
        backup = self.create_backup()
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(backup, f, ensure_ascii=False, indent=2)
        logger.info(f"Backup written to {file_path}")
        return backup

    def load_backup(self, file_path: Path) -> Dict[str, Any]:
        """
        Read a backup document from disk.

        Raises:
            ValidationError: the file is not a backup document.
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Cannot read backup {file_path}: {e}")
            raise ValidationError(tr("backup.invalid"))
        self._validate(document)
        return document

    @staticmethod
    def _validate(document: Any):
        if not isinstance(document, dict) or not isinstance(document.get("data"), dict):
            raise ValidationError(tr("backup.invalid"))
        for table, rows in document["data"].items():
            if table in INSERT_ORDER and not isinstance(rows, list):
                raise ValidationError(tr("backup.invalid"))

    def restore_backup(self, document: Dict[str, Any], confirmed: bool = False) -> Dict[str, int]:
        """
        Replace all remote data with the backup's.

        Returns the number of rows restored per table.

        Raises:
            ValidationError: not confirmed, or the document is invalid.
            RemoteOperationError: a table could not be written.
        """
        self._validate(document)
        if not confirmed:
            raise ValidationError(tr("backup.not_confirmed"))

        for table in DELETE_ORDER:
            self.remote.delete_all(table)
            logger.debug(f"Cleared {table}")

        restored = {}
        for table in INSERT_ORDER:
            rows = document["data"].get(table) or []
            if not rows:
                restored[table] = 0
                continue
            try:
                self.remote.insert(table, rows)
            except RemoteOperationError as e:
                logger.error(f"Restore of {table} failed: {e}")
                raise RemoteOperationError(
                    tr("backup.restore_table_failed", table=table, error=e.message),
                    status_code=e.status_code,
                    original_error=e,
                )
            restored[table] = len(rows)

        logger.info(f"Backup restored: {sum(restored.values())} rows")
        return restored
