# -*- coding: utf-8 -*-
"""
Data Entry Controller
=====================
Family registration: the in-progress member list, saving through the
synchronization policy, and the local draft queue.
"""

from typing import Any, Dict, List, Optional

from PyQt5.QtCore import pyqtSignal

from controllers.base_controller import BaseController, OperationResult
from models.draft import Draft
from models.family import Family
from models.individual import Individual
from services import family_assembler
from services.exceptions import DuplicateError
from services.sync_policy import SubmissionKind, SubmissionOutcome
from services.translation_manager import tr, tr_in
from services.uniqueness_service import UniquenessContext
from utils.datetime_utils import split_date
from utils.logger import get_logger

logger = get_logger(__name__)


class DataEntryController(BaseController):
    """
    Controller behind the family entry form.

    Members are collected one by one (add_member/remove_member) and the
    family is saved with save_family; whether that writes remotely or
    queues a draft is decided by the sync policy.
    """

    # Signals
    member_added = pyqtSignal(object)  # Individual
    draft_saved = pyqtSignal(int)  # draft_id
    family_created = pyqtSignal(str)  # family_id
    upload_finished = pyqtSignal(object)  # UploadSummary

    def __init__(self, context, parent=None):
        super().__init__(parent)
        self.context = context
        self._members: List[Individual] = []

    # ==================== Properties ====================

    @property
    def members(self) -> List[Individual]:
        return list(self._members)

    # ==================== Members ====================

    def add_member(self, form: Dict[str, Any], editing_index: int = None) -> OperationResult[Individual]:
        """
        Validate a member row and add it (or replace the row being edited).

        The national ID must be unused in this form, in the stored drafts
        and, while online, among active remote families.
        """
        self._log_operation("add_member", editing_index=editing_index)

        def _add():
            member = family_assembler.assemble_member(form, self._members, editing_index)
            hit = self.context.nid_checker.find_duplicate(
                member.nid, UniquenessContext(self._members, editing_index)
            )
            if hit is not None:
                raise DuplicateError(hit.message, nid=hit.nid, family_number=hit.family_number)

            if editing_index is None:
                self._members.append(member)
            else:
                self._members[editing_index] = member
            return member

        result = self.execute_with_error_handling("add_member", _add)
        if result.success:
            self.member_added.emit(result.data)
        return result

    def remove_member(self, index: int) -> OperationResult[Individual]:
        if not 0 <= index < len(self._members):
            return OperationResult.fail(f"No member at position {index}")
        removed = self._members.pop(index)
        self.data_changed.emit()
        return OperationResult.ok(data=removed)

    def clear(self):
        self._members = []

    # ==================== Saving ====================

    def suggest_family_number(self) -> int:
        return self.context.sync_policy.suggest_family_number(self.context.camp_id)

    def save_family(self, form: Dict[str, Any]) -> OperationResult[SubmissionOutcome]:
        """
        Save the family form with the collected members.

        form["members"], when present, replaces the collected list.
        """
        self._log_operation("save_family", family_number=form.get("family_number"))
        if "members" not in form:
            form = {**form, "members": self._members}

        result = self.execute_with_error_handling(
            "save_family", self.context.sync_policy.submit,
            form, self.context.camp_id, self.context.user_name,
        )
        if not result.success:
            return result

        outcome: SubmissionOutcome = result.data
        self.clear()
        if outcome.kind is SubmissionKind.QUEUED_DRAFT:
            self.draft_saved.emit(outcome.draft.draft_id)
            key = "draft.saved"
        else:
            self.family_created.emit(outcome.family.family_id)
            key = "family.saved"
        result.message = tr(key, family_number=outcome.family_number)
        result.message_ar = tr_in("ar", key, family_number=outcome.family_number)
        return result

    def update_family(self, family_id: str, form: Dict[str, Any]) -> OperationResult[Family]:
        """
        Save edits to a family already stored remotely.

        The family fields are revalidated; form["members"], when present,
        replaces the whole member list.
        """
        self._log_operation("update_family", family_id=family_id)
        family_service = self.context.family_service

        def _update():
            members = None
            if "members" in form:
                bundle = family_assembler.assemble(form, self.context.camp_id)
                family, members = bundle.family, bundle.members
            else:
                family = family_assembler.assemble_family(form, self.context.camp_id)
            family.family_id = family_id

            updated = family_service.update_family(family)
            if members is not None:
                family_service.replace_members(family_id, members)
            return updated

        result = self.execute_with_error_handling("update_family", _update)
        if result.success:
            self.data_changed.emit()
        return result

    # ==================== Drafts ====================

    def list_drafts(self) -> List[Draft]:
        """Drafts of the selected camp first, then the rest."""
        return self.context.draft_store.list_drafts(self.context.camp_id)

    def pending_count(self) -> int:
        return self.context.draft_store.pending_count(self.context.camp_id)

    def delete_draft(self, draft_id: int) -> OperationResult[bool]:
        deleted = self.context.draft_store.delete_draft(draft_id)
        if not deleted:
            return OperationResult.fail(f"Draft {draft_id} not found")
        self.data_changed.emit()
        return OperationResult.ok(data=True)

    def load_draft(self, draft_id: int) -> OperationResult[Dict[str, Any]]:
        """
        Move a draft back into the form for editing.

        The draft leaves the store; saving the form queues (or uploads)
        it again.
        """
        draft: Optional[Draft] = self.context.draft_store.get_draft(draft_id)
        if draft is None:
            return OperationResult.fail(f"Draft {draft_id} not found")

        self._members = list(draft.members)
        form = draft.bundle.family.to_dict()
        form.pop("family_id")
        form.pop("created_at")
        form["members"] = [self._member_form(m) for m in draft.members]

        self.context.draft_store.delete_draft(draft_id)
        logger.info(f"Draft {draft_id} loaded for editing")
        self.data_changed.emit()
        return OperationResult.ok(data=form)

    @staticmethod
    def _member_form(member: Individual) -> Dict[str, Any]:
        form = member.to_dict()
        form["dob_day"], form["dob_month"], form["dob_year"] = split_date(member.dob)
        if member.husband_death_date:
            day, month, year = split_date(member.husband_death_date)
            form["death_day"], form["death_month"], form["death_year"] = day, month, year
        return form

    def upload_drafts(self) -> OperationResult:
        """Upload every draft of the selected camp, one after another."""
        self._log_operation("upload_drafts", camp_id=self.context.camp_id)
        if not self.context.draft_store.drafts_for_camp(self.context.camp_id):
            return OperationResult.fail(tr("upload.no_drafts"))

        result = self.execute_with_error_handling(
            "upload_drafts", self.context.sync_policy.upload_pending, self.context.camp_id
        )
        if not result.success:
            return result

        summary = result.data
        lines = []
        if summary.success_count:
            lines.append(tr("upload.summary", success=summary.success_count))
        if summary.fail_count:
            lines.append(tr("upload.failed", failed=summary.fail_count))
        result.message = result.message_ar = "\n".join(lines)
        if summary.fail_count:
            result.errors = [r.error for r in summary.results if not r.success]
        self.upload_finished.emit(summary)
        return result
