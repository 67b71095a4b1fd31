# -*- coding: utf-8 -*-
"""
Notification service - operator-facing alerts stored remotely.
"""

from typing import List

from models.notification import Notification
from services.remote_store import RemoteStore
from services.translation_manager import tr
from utils.logger import get_logger

logger = get_logger(__name__)

TABLE = "notifications"


class NotificationType:
    INFO = "info"
    ALERT = "alert"
    NEW_ENTRY = "new_entry"


class NotificationService:
    """Create, list and clear notifications."""

    def __init__(self, remote: RemoteStore):
        self.remote = remote

    def create(self, message: str, type: str = NotificationType.INFO,
               user_name: str = None) -> Notification:
        row = self.remote.insert_one(TABLE, {
            "message": message,
            "type": type,
            "user_name": user_name or tr("common.system"),
            "is_read": False,
        })
        logger.info(f"Notification [{type}] created")
        return Notification.from_dict(row)

    def list_all(self) -> List[Notification]:
        return [Notification.from_dict(r) for r in self.remote.select(TABLE, order="-created_at")]

    def unread(self) -> List[Notification]:
        rows = self.remote.select(TABLE, {"is_read": False}, order="-created_at")
        return [Notification.from_dict(r) for r in rows]

    def mark_read(self, notification_id: str) -> bool:
        return bool(self.remote.update(TABLE, {"notification_id": notification_id}, {"is_read": True}))

    def delete_all(self):
        self.remote.delete_all(TABLE)
        logger.info("All notifications deleted")
