# -*- coding: utf-8 -*-
"""
National-ID Uniqueness Checker.

A national ID is a duplicate when it already appears
    a. in the in-progress member list (except the row being edited),
    b. in any other stored draft,
    c. among members of active remote families (only while online).
Checks run in that order and stop at the first hit; matching is exact on
the digits-only form.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Union

from models.individual import Individual
from services.connectivity import ConnectivityMonitor
from services.draft_store import DraftStore
from services.exceptions import NetworkException
from services.family_service import FamilyService
from services.translation_manager import tr
from services.validation_service import normalize_nid
from utils.logger import get_logger

logger = get_logger(__name__)


class DuplicateSource(Enum):
    FORM = "form"
    DRAFT = "draft"
    REMOTE = "remote"


@dataclass
class UniquenessContext:
    """Where the ID is being entered."""
    members: Sequence[Union[Individual, dict]] = field(default_factory=list)
    editing_index: Optional[int] = None
    exclude_draft_id: Optional[int] = None


@dataclass(frozen=True)
class DuplicateHit:
    source: DuplicateSource
    nid: str
    family_number: Optional[str] = None

    @property
    def message(self) -> str:
        if self.source is DuplicateSource.FORM:
            return tr("validation.nid_in_family")
        if self.source is DuplicateSource.DRAFT:
            return tr("duplicate.nid_in_draft")
        return tr("duplicate.nid_remote")


def _member_nid(member) -> str:
    nid = member.nid if isinstance(member, Individual) else member.get("nid")
    return normalize_nid(nid)


class NationalIdChecker:
    """Short-circuiting duplicate check across form, drafts and remote store."""

    def __init__(self, draft_store: DraftStore, family_service: FamilyService,
                 connectivity: ConnectivityMonitor):
        self.draft_store = draft_store
        self.family_service = family_service
        self.connectivity = connectivity

    def find_duplicate(self, nid: str, context: UniquenessContext = None) -> Optional[DuplicateHit]:
        context = context or UniquenessContext()
        nid = normalize_nid(nid)
        if not nid:
            return None

        for index, member in enumerate(context.members):
            if index != context.editing_index and _member_nid(member) == nid:
                return DuplicateHit(DuplicateSource.FORM, nid)

        for draft in self.draft_store.list_drafts():
            if draft.draft_id == context.exclude_draft_id:
                continue
            if nid in draft.bundle.member_nids():
                return DuplicateHit(DuplicateSource.DRAFT, nid, draft.family_number)

        if self.connectivity.is_online:
            try:
                found = self.family_service.find_active_individual(nid)
            except NetworkException as e:
                logger.warning(f"Remote ID check skipped, backend unreachable: {e}")
                self.connectivity.set_online(False)
                return None
            if found:
                _, family_number = found
                return DuplicateHit(DuplicateSource.REMOTE, nid, family_number)

        return None

    def is_duplicate(self, nid: str, context: UniquenessContext = None) -> bool:
        return self.find_duplicate(nid, context) is not None
