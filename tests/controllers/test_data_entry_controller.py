# -*- coding: utf-8 -*-
"""
Tests for the family entry controller and the application context.
"""

import pytest

from controllers.base_controller import BaseController, OperationResult
from controllers.data_entry_controller import DataEntryController
from models.camp import Camp
from models.user import User
from services.exceptions import DuplicateError, ValidationError
from services.translation_manager import tr


@pytest.fixture
def controller(context):
    context.select_camp(Camp(camp_id="camp-1", name="مخيم الأمل"))
    return DataEntryController(context)


def _record(signal):
    seen = []
    signal.connect(lambda *args: seen.append(args[0] if len(args) == 1 else args))
    return seen


class TestOperationResult:

    def test_from_error_keeps_field(self):
        result = OperationResult.from_error(ValidationError("bad", field="nid"))
        assert not result.success
        assert result.message == "bad"
        assert result.field == "nid"

    def test_unexpected_error_is_reported(self):
        controller = BaseController()
        errors = _record(controller.operation_error)

        def explode():
            raise KeyError("missing")

        result = controller.execute_with_error_handling("explode", explode)
        assert not result.success
        assert errors

    def test_domain_error_is_reported(self):
        controller = BaseController()

        def duplicate():
            raise DuplicateError("taken", nid="1")

        result = controller.execute_with_error_handling("dup", duplicate)
        assert result.message == "taken"


class TestMembers:

    def test_add_member(self, controller, member):
        added = _record(controller.member_added)

        result = controller.add_member(member("أحمد", "123456789", "زوج"))

        assert result.success
        assert result.data.role == "husband"
        assert added == [result.data]
        assert len(controller.members) == 1

    def test_invalid_member(self, controller, member):
        result = controller.add_member(member("أحمد", "1234", "husband"))
        assert not result.success
        assert result.field == "nid"
        assert controller.members == []

    def test_duplicate_in_form(self, controller, member):
        controller.add_member(member("أحمد", "123456789", "husband"))
        result = controller.add_member(member("فاطمة", "123456789", "wife"))
        assert result.message == tr("validation.nid_in_family")

    def test_duplicate_in_stored_draft(self, controller, context, make_form, member):
        context.draft_store.save_draft(make_form("101"), "camp-2")
        result = controller.add_member(member("فاطمة", "200000101", "wife"))
        assert not result.success
        assert result.message == tr("duplicate.nid_in_draft")

    def test_duplicate_remote(self, controller, context, member):
        context.remote.seed("families", [{"family_id": "f1", "family_number": "4", "camp_id": "camp-2"}])
        context.remote.seed("individuals", [{"individual_id": "i1", "family_id": "f1",
                                             "nid": "555555555"}])
        result = controller.add_member(member("سعيد", "555555555", "husband"))
        assert result.message == tr("duplicate.nid_remote")

    def test_edit_member_in_place(self, controller, member):
        controller.add_member(member("أحمد", "123456789", "husband"))
        result = controller.add_member(member("أحمد علي", "123456789", "husband"), editing_index=0)
        assert result.success
        assert [m.name for m in controller.members] == ["أحمد علي"]

    def test_remove_member(self, controller, member):
        controller.add_member(member("أحمد", "123456789", "husband"))
        assert controller.remove_member(0).success
        assert not controller.remove_member(0).success


class TestSaving:

    def test_save_online(self, controller, context, make_form, member):
        created = _record(controller.family_created)
        controller.add_member(member("أحمد", "123456789", "husband"))
        form = make_form("101")
        del form["members"]

        result = controller.save_family(form)

        assert result.success
        assert result.message == tr("family.saved", family_number="101")
        assert len(created) == 1
        assert controller.members == []
        assert len(context.remote.rows("individuals")) == 1

    def test_save_offline_queues_draft(self, controller, context, connectivity, make_form):
        saved = _record(controller.draft_saved)
        connectivity.set_online(False)

        result = controller.save_family(make_form("101"))

        assert result.message == tr("draft.saved", family_number="101")
        assert saved == [result.data.draft.draft_id]
        assert controller.pending_count() == 1
        assert context.remote.rows("families") == []

    def test_validation_failure(self, controller, make_form):
        result = controller.save_family(make_form(address=""))
        assert not result.success
        assert result.field == "address"

    def test_suggest_number(self, controller, make_form):
        controller.save_family(make_form("15"))
        assert controller.suggest_family_number() == 16

    def test_update_family(self, controller, context, make_form, member):
        controller.save_family(make_form("101"))
        family_id = context.remote.rows("families")[0]["family_id"]
        changed = _record(controller.data_changed)
        form = make_form("101", address="بلوك 9", members=[member("أحمد", "123456789", "husband")])

        result = controller.update_family(family_id, form)

        assert result.success
        assert result.data.address == "بلوك 9"
        assert changed
        assert [r["nid"] for r in context.remote.rows("individuals")] == ["123456789"]

    def test_update_family_keeps_members(self, controller, context, make_form):
        controller.save_family(make_form("101"))
        family_id = context.remote.rows("families")[0]["family_id"]
        form = make_form("102")
        del form["members"]

        assert controller.update_family(family_id, form).success
        assert context.remote.rows("families")[0]["family_number"] == "102"
        assert len(context.remote.rows("individuals")) == 2

    def test_update_family_invalid(self, controller, context, make_form):
        controller.save_family(make_form("101"))
        family_id = context.remote.rows("families")[0]["family_id"]

        result = controller.update_family(family_id, make_form("101", address=""))

        assert not result.success
        assert result.field == "address"


class TestDrafts:

    def test_load_draft_into_form(self, controller, context, connectivity, make_form):
        connectivity.set_online(False)
        draft_id = controller.save_family(make_form("101")).data.draft.draft_id

        result = controller.load_draft(draft_id)

        assert result.success
        form = result.data
        assert form["family_number"] == "101"
        assert (form["members"][0]["dob_day"], form["members"][0]["dob_year"]) == ("15", "1985")
        assert len(controller.members) == 2
        assert controller.list_drafts() == []

    def test_load_missing(self, controller):
        assert not controller.load_draft(404).success

    def test_upload(self, controller, context, connectivity, make_form):
        finished = _record(controller.upload_finished)
        connectivity.set_online(False)
        controller.save_family(make_form("101"))
        controller.save_family(make_form("102"))
        connectivity.set_online(True)

        result = controller.upload_drafts()

        assert result.success
        assert result.message == tr("upload.summary", success=2)
        assert finished[0].success_count == 2
        assert controller.pending_count() == 0

    def test_upload_nothing(self, controller):
        result = controller.upload_drafts()
        assert result.message == tr("upload.no_drafts")

    def test_upload_offline(self, controller, connectivity, make_form):
        connectivity.set_online(False)
        controller.save_family(make_form("101"))
        result = controller.upload_drafts()
        assert not result.success
        assert result.message == tr("connectivity.offline")


class TestAppContext:

    def test_session_is_cached(self, context):
        user = User(user_id="u1", username="ahmad", full_name="أحمد", access_token="tok")
        context.auth.session_changed.emit(user)

        assert context.user_name == "أحمد"
        cached = context.settings.get_json("local_user")
        assert cached["access_token"] == "tok"

        context.auth.session_changed.emit(None)
        assert context.user is None
        assert context.settings.get_json("local_user") is None

    def test_camp_selection_persists(self, context):
        assert context.camp_id == "default"
        context.select_camp(Camp(camp_id="camp-2", name="مخيم النور"))
        context.camp = None

        context.init()
        assert context.camp_id == "camp-2"
