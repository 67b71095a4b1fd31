# -*- coding: utf-8 -*-
"""
Synchronization policy.

The one place that decides between writing a family to the remote store
and queueing it as a local draft. Entry points never branch on
connectivity themselves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from models.draft import Draft
from models.family import Family
from services import family_assembler
from services.connectivity import ConnectivityMonitor
from services.draft_store import DraftStore
from services.draft_uploader import DraftUploader, UploadSummary
from services.exceptions import NetworkException, RemoteOperationError
from services.family_service import FamilyService
from services.notification_service import NotificationType
from services.translation_manager import tr
from utils.logger import get_logger

logger = get_logger(__name__)


class SubmissionKind(Enum):
    CREATED_REMOTE = "created_remote"
    QUEUED_DRAFT = "queued_draft"


@dataclass
class SubmissionOutcome:
    kind: SubmissionKind
    family: Optional[Family] = None
    draft: Optional[Draft] = None

    @property
    def family_number(self) -> str:
        if self.family is not None:
            return self.family.family_number
        return self.draft.family_number if self.draft else ""


class SyncPolicy:
    """Online: write through to the remote store. Offline: queue a draft."""

    def __init__(self, connectivity: ConnectivityMonitor, family_service: FamilyService,
                 draft_store: DraftStore, uploader: DraftUploader = None):
        self.connectivity = connectivity
        self.family_service = family_service
        self.draft_store = draft_store
        self.uploader = uploader or DraftUploader(draft_store, family_service, connectivity)

    def submit(self, form: Dict[str, Any], camp_id: str, user_name: str = None) -> SubmissionOutcome:
        """
        Save a family form.

        Raises:
            ValidationError: the form is invalid.
            DuplicateError: (online) the number or an ID is already taken.
            RemoteOperationError: (online) a member write failed after the
                family row was created.
        """
        bundle = family_assembler.assemble(form, camp_id)

        if self.connectivity.is_online:
            try:
                self.family_service.ensure_can_create(bundle.family_number, bundle.members, camp_id)
                family = self.family_service.create_family(bundle.family, camp_id)
            except NetworkException as e:
                logger.warning(f"Backend unreachable, queueing family {bundle.family_number}: {e}")
                self.connectivity.set_online(False)
            else:
                self.family_service.add_members(family.family_id, bundle.members)
                self._notify_new_entry(family, len(bundle.members), user_name)
                self.family_service.check_cross_camp_duplicates(family, bundle.members, user_name)
                return SubmissionOutcome(SubmissionKind.CREATED_REMOTE, family=family)

        draft = self.draft_store.save_draft(bundle, camp_id)
        return SubmissionOutcome(SubmissionKind.QUEUED_DRAFT, draft=draft)

    def _notify_new_entry(self, family: Family, member_count: int, user_name: Optional[str]):
        """
        Tell the admins who added which family; only for signed-in users.

        The family is already saved, so a failed notification is only logged.
        """
        if not user_name:
            return
        try:
            self.family_service.notifications.create(
                tr("notification.new_entry", user=user_name,
                   family_number=family.family_number, count=member_count),
                NotificationType.NEW_ENTRY,
                user_name,
            )
        except RemoteOperationError as e:
            logger.error(f"New-entry notification for family {family.family_number} failed: {e}")

    def suggest_family_number(self, camp_id: str) -> int:
        remote_numbers = []
        if self.connectivity.is_online:
            try:
                remote_numbers = [f.family_number for f in self.family_service.get_families(camp_id)]
            except NetworkException as e:
                logger.warning(f"Using local numbers only: {e}")
                self.connectivity.set_online(False)
        return self.draft_store.suggest_next_family_number(camp_id, remote_numbers)

    def upload_pending(self, camp_id: str) -> UploadSummary:
        return self.uploader.upload_all(camp_id)
