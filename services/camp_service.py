# -*- coding: utf-8 -*-
"""
Camps and delegates.
"""

from typing import List, Optional

from models.camp import Camp, Delegate
from repositories.settings_repository import SettingsRepository
from services.connectivity import ConnectivityMonitor
from services.exceptions import NetworkException
from services.remote_store import RemoteStore
from utils.logger import get_logger

logger = get_logger(__name__)


def delegates_cache_key(camp_id: str) -> str:
    return f"delegates_{camp_id}"


class CampService:
    """CRUD over camps and delegates, plus an offline cache of delegate names."""

    def __init__(self, remote: RemoteStore, settings: SettingsRepository = None,
                 connectivity: ConnectivityMonitor = None):
        self.remote = remote
        self.settings = settings
        self.connectivity = connectivity

    # ==================== Camps ====================

    def list_camps(self) -> List[Camp]:
        rows = self.remote.select("camps", order="created_at")
        return [Camp.from_dict(r) for r in rows]

    def get_camp(self, camp_id: str) -> Optional[Camp]:
        row = self.remote.select_one("camps", {"camp_id": camp_id})
        return Camp.from_dict(row) if row else None

    def add_camp(self, name: str, location: str = None) -> Camp:
        row = self.remote.insert_one("camps", {"name": name.strip(), "location": location})
        logger.info(f"Camp added: {name}")
        return Camp.from_dict(row)

    def update_camp(self, camp_id: str, **values) -> Optional[Camp]:
        rows = self.remote.update("camps", {"camp_id": camp_id}, values)
        return Camp.from_dict(rows[0]) if rows else None

    def delete_camp(self, camp_id: str) -> bool:
        return self.remote.delete("camps", {"camp_id": camp_id}) > 0

    def assign_orphan_families(self, camp_id: str) -> int:
        """Attach families that have no camp to camp_id."""
        return len(self.remote.update("families", {"camp_id": None}, {"camp_id": camp_id}))

    # ==================== Delegates ====================

    def list_delegates(self, camp_id: str = None) -> List[Delegate]:
        filters = {"camp_id": camp_id} if camp_id else None
        return [Delegate.from_dict(r) for r in self.remote.select("delegates", filters, order="name")]

    def add_delegate(self, name: str, camp_id: str = None, phone: str = None) -> Delegate:
        row = self.remote.insert_one("delegates", {
            "name": name.strip(),
            "camp_id": camp_id,
            "phone": phone,
        })
        logger.info(f"Delegate added: {name} (camp {camp_id})")
        return Delegate.from_dict(row)

    def update_delegate(self, delegate_id: str, **values) -> Optional[Delegate]:
        rows = self.remote.update("delegates", {"delegate_id": delegate_id}, values)
        return Delegate.from_dict(rows[0]) if rows else None

    def delete_delegate(self, delegate_id: str) -> bool:
        return self.remote.delete("delegates", {"delegate_id": delegate_id}) > 0

    def assign_unassigned_delegates(self, camp_id: str) -> int:
        return len(self.remote.update("delegates", {"camp_id": None}, {"camp_id": camp_id}))

    def delegate_names(self, camp_id: str) -> List[str]:
        """
        Delegate names of a camp.

        Online the names are fetched and cached in settings; offline (or
        when the fetch cannot reach the backend) the cached list is used.
        """
        online = self.connectivity is None or self.connectivity.is_online
        if online:
            try:
                names = [d.name for d in self.list_delegates(camp_id)]
            except NetworkException as e:
                logger.warning(f"Delegate list unavailable, using cache: {e}")
                if self.connectivity is not None:
                    self.connectivity.set_online(False)
            else:
                if self.settings is not None:
                    self.settings.set_json(delegates_cache_key(camp_id), names)
                return names

        if self.settings is None:
            return []
        return self.settings.get_json(delegates_cache_key(camp_id), [])
