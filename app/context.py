# -*- coding: utf-8 -*-
"""
Application context.

Owns the long-lived objects of one running client: the local database,
the remote store, the connectivity monitor, the authenticated session and
the services built on them. Entry points create one AppContext and pass
it (or the services it holds) down instead of reaching for globals.
"""

from pathlib import Path
from typing import Optional

from app.config import Config
from models.camp import Camp
from models.user import User
from repositories.database import Database
from repositories.draft_repository import DraftRepository
from repositories.settings_repository import SettingsRepository
from services.aid_service import AidService
from services.api_client import RemoteApiClient
from services.auth_service import AuthService
from services.backup_service import BackupService
from services.camp_service import CampService
from services.connectivity import ConnectivityMonitor
from services.draft_store import DraftStore
from services.draft_uploader import DraftUploader
from services.exceptions import NetworkException
from services.export_service import ExportService
from services.family_service import FamilyService
from services.import_service import BulkImportReconciler
from services.notification_service import NotificationService
from services.remote_store import HttpRemoteStore, RemoteStore
from services.report_service import SmartReportService
from services.sync_policy import SyncPolicy
from services.uniqueness_service import NationalIdChecker
from utils.logger import get_logger

logger = get_logger(__name__)

CACHED_USER_KEY = "local_user"
SELECTED_CAMP_KEY = "selected_camp"


class AppContext:
    """
    Wiring of one client.

    Usage:
        ctx = AppContext()
        ctx.init()
        ctx.sync_policy.submit(form, ctx.camp_id, ctx.user_name)
    """

    def __init__(self, db_path: Path = None, remote: RemoteStore = None,
                 client: RemoteApiClient = None, connectivity: ConnectivityMonitor = None):
        self.db = Database(db_path or Config.DB_PATH)
        self.db.initialize()
        self.settings = SettingsRepository(self.db)
        self.drafts = DraftRepository(self.db)

        self.client = client or RemoteApiClient()
        self.remote = remote or HttpRemoteStore(self.client)
        self.connectivity = connectivity or ConnectivityMonitor(probe=self.remote.health_check)
        self.auth = AuthService(self.client)

        self.notifications = NotificationService(self.remote)
        self.family_service = FamilyService(self.remote, self.notifications)
        self.camp_service = CampService(self.remote, self.settings, self.connectivity)
        self.draft_store = DraftStore(self.drafts, self.settings)
        self.uploader = DraftUploader(self.draft_store, self.family_service, self.connectivity)
        self.sync_policy = SyncPolicy(self.connectivity, self.family_service,
                                      self.draft_store, self.uploader)
        self.nid_checker = NationalIdChecker(self.draft_store, self.family_service, self.connectivity)
        self.importer = BulkImportReconciler(self.family_service, self.camp_service,
                                             self.notifications, self.connectivity)
        self.aid_service = AidService(self.remote, self.family_service)
        self.backup_service = BackupService(self.remote)
        self.report_service = SmartReportService(self.family_service)
        self.export_service = ExportService()

        self.user: Optional[User] = None
        self.camp: Optional[Camp] = None
        self.auth.session_changed.connect(self._on_session_changed)

    # ==================== Lifecycle ====================

    def init(self) -> Optional[User]:
        """
        Restore the cached session and camp choice.

        The cached user is kept only if the backend still accepts its
        token; when the backend cannot be reached the cache is trusted.
        """
        cached = self.settings.get_json(CACHED_USER_KEY)
        if cached:
            self.user = User.from_dict(cached)
        camp = self.settings.get_json(SELECTED_CAMP_KEY)
        if camp:
            self.camp = Camp.from_dict(camp)

        if self.user is not None:
            try:
                verified = self.auth.current_user(self.user.access_token)
            except NetworkException as e:
                logger.warning(f"Session not verified (offline), using cached user: {e}")
                self.connectivity.set_online(False)
            else:
                if verified is None:
                    logger.info("Cached session rejected by the backend")
                    self.teardown()
                else:
                    self._cache_user(verified)

        logger.info(
            f"Context ready: user={self.user.username if self.user else None}, "
            f"camp={self.camp.camp_id if self.camp else None}"
        )
        return self.user

    def teardown(self):
        """Forget the signed-in user and the camp choice."""
        self.user = None
        self.camp = None
        self.settings.delete(CACHED_USER_KEY)
        self.settings.delete(SELECTED_CAMP_KEY)

    def close(self):
        self.connectivity.stop()
        self.db.close()

    # ==================== Session ====================

    def _cache_user(self, user: User):
        self.user = user
        self.settings.set_json(CACHED_USER_KEY, user.to_dict(include_token=True))

    def _on_session_changed(self, user: Optional[User]):
        if user is None:
            self.teardown()
        else:
            self._cache_user(user)

    def select_camp(self, camp: Camp):
        self.camp = camp
        self.settings.set_json(SELECTED_CAMP_KEY, camp.to_dict())
        logger.info(f"Camp selected: {camp.name} ({camp.camp_id})")

    @property
    def camp_id(self) -> str:
        return self.camp.camp_id if self.camp else Config.DEFAULT_CAMP_ID

    @property
    def user_name(self) -> Optional[str]:
        return self.user.display_name if self.user else None
