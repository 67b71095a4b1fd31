# -*- coding: utf-8 -*-
"""
Draft Uploader.

Drains the draft store of one camp into the remote store, strictly one
draft after another so that every uniqueness check sees the writes of
the drafts before it. A draft that fails keeps its place in the store,
marked as error with the reason; a draft that succeeds is deleted.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from models.draft import Draft, DraftStatus
from services.connectivity import ConnectivityMonitor
from services.draft_store import DraftStore
from services.exceptions import DuplicateError, RemoteOperationError
from services.family_service import FamilyService
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DraftUploadResult:
    draft_id: int
    family_number: str
    success: bool
    family_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class UploadSummary:
    success_count: int = 0
    fail_count: int = 0
    results: List[DraftUploadResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.fail_count


class DraftUploader:
    """Sequential upload of stored drafts."""

    def __init__(self, draft_store: DraftStore, family_service: FamilyService,
                 connectivity: ConnectivityMonitor):
        self.draft_store = draft_store
        self.family_service = family_service
        self.connectivity = connectivity

    def upload_all(self, camp_id: str) -> UploadSummary:
        """
        Upload every stored draft of camp_id in storage order.

        Raises:
            ConnectivityError: when offline; no draft is touched.
        """
        self.connectivity.require_online("upload drafts")

        summary = UploadSummary()
        drafts = self.draft_store.drafts_for_camp(camp_id)
        logger.info(f"Uploading {len(drafts)} draft(s) for camp {camp_id}")

        for draft in drafts:
            result = self._upload_one(draft, camp_id)
            summary.results.append(result)
            if result.success:
                summary.success_count += 1
            else:
                summary.fail_count += 1

        logger.info(
            f"Upload finished for camp {camp_id}: "
            f"{summary.success_count} succeeded, {summary.fail_count} failed"
        )
        return summary

    def _upload_one(self, draft: Draft, camp_id: str) -> DraftUploadResult:
        try:
            self.family_service.ensure_can_create(draft.family_number, draft.members, camp_id)
            family = self.family_service.create_family_with_members(draft.bundle, camp_id)
        except (DuplicateError, RemoteOperationError) as e:
            logger.warning(f"Draft {draft.draft_id} (family {draft.family_number}) failed: {e}")
            self.draft_store.update_status(draft.draft_id, DraftStatus.ERROR, e.message)
            return DraftUploadResult(draft.draft_id, draft.family_number, False, error=e.message)

        self.draft_store.delete_draft(draft.draft_id)
        logger.info(f"Draft {draft.draft_id} uploaded as family {family.family_id}")
        return DraftUploadResult(draft.draft_id, draft.family_number, True, family_id=family.family_id)
