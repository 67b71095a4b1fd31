# -*- coding: utf-8 -*-
"""
Local Draft Store.

Append-only queue of families captured while working offline. Drafts
survive restarts (SQLite), are only changed by the uploader (status and
error) and disappear when deleted or successfully uploaded.

Duplicate family numbers between drafts are accepted here; they are
detected at upload time against the remote store.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from models.draft import Draft, DraftStatus
from models.family import FamilyBundle
from repositories.draft_repository import DraftRepository
from repositories.settings_repository import SettingsRepository
from services import family_assembler
from utils.helpers import max_numeric, parse_int
from utils.logger import get_logger

logger = get_logger(__name__)


def next_number_key(camp_id: str) -> str:
    return f"next_fam_num_{camp_id}"


class DraftStore:
    """Draft queue plus the camp-scoped next-family-number suggestion."""

    def __init__(self, drafts: DraftRepository, settings: SettingsRepository):
        self.drafts = drafts
        self.settings = settings

    def save_draft(self, form: Union[Dict[str, Any], FamilyBundle], camp_id: str) -> Draft:
        """
        Validate and append a draft.

        Raises:
            ValidationError: the form is invalid; nothing is stored.
        """
        if isinstance(form, FamilyBundle):
            form = {**form.family.to_dict(), "members": form.members}
        bundle = family_assembler.assemble(form, camp_id)

        draft = self.drafts.create(Draft(camp_id=camp_id, bundle=bundle))
        logger.info(f"Draft {draft.draft_id} saved (camp {camp_id}, family {draft.family_number})")

        number = parse_int(draft.family_number)
        if number is not None:
            self.settings.set(next_number_key(camp_id), str(number + 1))
        return draft

    def get_draft(self, draft_id: int) -> Optional[Draft]:
        return self.drafts.get_by_id(draft_id)

    def delete_draft(self, draft_id: int) -> bool:
        deleted = self.drafts.delete(draft_id)
        if deleted:
            logger.info(f"Draft {draft_id} deleted")
        return deleted

    def update_status(self, draft_id: int, status: DraftStatus, error: str = None) -> bool:
        return self.drafts.update_status(draft_id, status, error)

    def list_drafts(self, camp_id: str = None) -> List[Draft]:
        """
        All drafts in storage order.

        With camp_id, that camp's drafts come first and the rest follow.
        """
        drafts = self.drafts.list()
        if camp_id is None:
            return drafts
        own = [d for d in drafts if d.camp_id == camp_id]
        others = [d for d in drafts if d.camp_id != camp_id]
        return own + others

    def drafts_for_camp(self, camp_id: str) -> List[Draft]:
        return self.drafts.list(camp_id)

    def pending_count(self, camp_id: str = None) -> int:
        return self.drafts.count(camp_id, DraftStatus.PENDING)

    def suggest_next_family_number(self, camp_id: str, remote_numbers: Iterable[Any] = ()) -> int:
        """One past the highest number seen remotely, in drafts, or suggested before."""
        saved_next = self.settings.get_int(next_number_key(camp_id), 0)
        highest = max(
            max_numeric(remote_numbers),
            max_numeric(self.drafts.family_numbers(camp_id)),
            saved_next - 1,
        )
        return highest + 1
