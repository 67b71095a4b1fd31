# -*- coding: utf-8 -*-
"""
Tests for camps, delegates and notifications.

Tests cover:
- Camp CRUD and attaching camp-less families
- Delegate listing per camp and the offline name cache
- Notification create / unread / mark_read / delete_all
"""

from services.exceptions import NetworkException
from services.notification_service import NotificationType
from services.translation_manager import tr


class TestCamps:

    def test_list_and_add(self, camp_service):
        created = camp_service.add_camp("  مخيم السلام ", location="رفح")

        assert created.camp_id
        assert created.name == "مخيم السلام"
        names = {c.name for c in camp_service.list_camps()}
        assert names == {"مخيم الأمل", "مخيم النور", "مخيم السلام"}

    def test_update_and_delete(self, camp_service):
        updated = camp_service.update_camp("camp-1", name="مخيم الأمل 2")
        assert updated.name == "مخيم الأمل 2"
        assert camp_service.update_camp("missing", name="x") is None

        assert camp_service.delete_camp("camp-2")
        assert not camp_service.delete_camp("camp-2")
        assert camp_service.get_camp("camp-2") is None

    def test_assign_orphan_families(self, camp_service, remote):
        remote.seed("families", [
            {"family_id": "f1", "family_number": "1", "camp_id": None},
            {"family_id": "f2", "family_number": "2", "camp_id": "camp-2"},
        ])

        assert camp_service.assign_orphan_families("camp-1") == 1
        by_id = {r["family_id"]: r["camp_id"] for r in remote.rows("families")}
        assert by_id == {"f1": "camp-1", "f2": "camp-2"}


class TestDelegates:

    def test_list_by_camp(self, camp_service):
        camp_service.add_delegate("محمد أحمد", camp_id="camp-1")
        camp_service.add_delegate("خالد يوسف", camp_id="camp-2", phone="0599000000")

        assert [d.name for d in camp_service.list_delegates("camp-1")] == ["محمد أحمد"]
        assert len(camp_service.list_delegates()) == 2

    def test_update_and_delete(self, camp_service):
        delegate = camp_service.add_delegate("محمد أحمد")
        assert camp_service.update_delegate(delegate.delegate_id, phone="0599111111").phone == "0599111111"
        assert camp_service.assign_unassigned_delegates("camp-1") == 1
        assert camp_service.delete_delegate(delegate.delegate_id)
        assert camp_service.list_delegates() == []

    def test_names_cached_for_offline_use(self, camp_service, connectivity):
        camp_service.add_delegate("محمد أحمد", camp_id="camp-1")
        assert camp_service.delegate_names("camp-1") == ["محمد أحمد"]

        connectivity.set_online(False)
        assert camp_service.delegate_names("camp-1") == ["محمد أحمد"]
        assert camp_service.delegate_names("camp-2") == []

    def test_unreachable_backend_uses_cache(self, camp_service, connectivity, remote):
        camp_service.add_delegate("محمد أحمد", camp_id="camp-1")
        camp_service.delegate_names("camp-1")
        remote.fail_next("delegates", "select", NetworkException("refused"))

        assert camp_service.delegate_names("camp-1") == ["محمد أحمد"]
        assert not connectivity.is_online


class TestNotifications:

    def test_create_defaults_to_system_user(self, notifications):
        note = notifications.create("تم استيراد 3 عائلات")

        assert note.notification_id
        assert note.type == NotificationType.INFO
        assert note.user_name == tr("common.system")
        assert not note.is_read

    def test_unread_and_mark_read(self, notifications):
        first = notifications.create("أ", NotificationType.ALERT, user_name="ahmad")
        notifications.create("ب")

        assert notifications.mark_read(first.notification_id)
        assert [n.message for n in notifications.unread()] == ["ب"]
        assert len(notifications.list_all()) == 2
        assert not notifications.mark_read("missing")

    def test_delete_all(self, notifications):
        notifications.create("أ")
        notifications.delete_all()
        assert notifications.list_all() == []
