# -*- coding: utf-8 -*-
"""
Tests for remote family operations and cross-camp duplicate alerts.
"""

import pytest

from models.family import Family, FamilyBundle
from models.individual import Individual
from services.exceptions import DuplicateError, RemoteOperationError
from services.family_service import find_head_of_family, head_name_by_priority


def _bundle(number, *members):
    return FamilyBundle(
        family=Family(family_number=number, address="بلوك 1"),
        members=[Individual(name=name, nid=nid, role=role, dob=dob) for name, nid, role, dob in members],
    )


class TestHeadOfFamily:

    def test_head_role_wins(self):
        members = [
            Individual(name="ابن", role="son", dob="2010-01-01"),
            Individual(name="أب", role="husband", dob="1980-01-01"),
        ]
        assert find_head_of_family(members).name == "أب"

    def test_oldest_when_no_head_role(self):
        members = [
            Individual(name="صغير", role="son", dob="2012-01-01"),
            Individual(name="مجهول", role="son", dob=None),
            Individual(name="كبير", role="daughter", dob="2001-05-01"),
        ]
        assert find_head_of_family(members).name == "كبير"

    def test_empty(self):
        assert find_head_of_family([]) is None

    def test_priority_naming(self):
        members = [Individual(name="زوجة", role="wife"), Individual(name="زوج", role="husband")]
        assert head_name_by_priority(members) == "زوج"


class TestFamilyWrites:

    def test_create_with_members(self, family_service, remote):
        created = family_service.create_family_with_members(
            _bundle("3", ("أحمد", "111111111", "husband", "1980-01-01")), "camp-1"
        )
        assert created.family_id
        assert created.camp_id == "camp-1"
        row = remote.rows("individuals")[0]
        assert row["family_id"] == created.family_id
        assert "is_pregnant" not in row

    def test_partial_failure_leaves_written_rows(self, family_service, remote):
        remote.fail_next("individuals", "insert")
        bundle = _bundle("3", ("أحمد", "111111111", "husband", "1980-01-01"))
        with pytest.raises(RemoteOperationError):
            family_service.create_family_with_members(bundle, "camp-1")
        assert len(remote.rows("families")) == 1
        assert remote.rows("individuals") == []

    def test_families_sorted_numerically(self, family_service):
        for number in ("10", "2", "b", "1"):
            family_service.create_family(Family(family_number=number, address="x"), "camp-1")
        assert [f.family_number for f in family_service.get_families("camp-1")] == ["1", "2", "10", "b"]

    def test_update_family_fields(self, family_service):
        created = family_service.create_family(Family(family_number="3", address="x"), "camp-1")
        family_service.set_departed(created.family_id, True)
        created.address = "بلوك 9"
        created.family_number = "4"
        created.is_departed = False

        updated = family_service.update_family(created)

        assert updated.address == "بلوك 9"
        assert updated.family_number == "4"
        assert family_service.get_family(created.family_id).is_departed is True

    def test_update_to_taken_number(self, family_service):
        family_service.create_family(Family(family_number="3", address="x"), "camp-1")
        other = family_service.create_family(Family(family_number="4", address="y"), "camp-1")
        other.family_number = "3"

        with pytest.raises(DuplicateError):
            family_service.update_family(other)
        assert family_service.get_family(other.family_id).family_number == "4"

    def test_update_missing_family(self, family_service):
        with pytest.raises(RemoteOperationError):
            family_service.update_family(Family(family_id="missing", family_number="3",
                                                camp_id="camp-1", address="x"))

    def test_replace_members(self, family_service, remote):
        created = family_service.create_family_with_members(
            _bundle("3", ("أحمد", "111111111", "husband", "1980-01-01")), "camp-1"
        )
        family_service.replace_members(created.family_id, [Individual(name="جديد", nid="222222222")])
        assert [r["name"] for r in remote.rows("individuals")] == ["جديد"]

    def test_delete_family_removes_children(self, family_service, remote):
        created = family_service.create_family_with_members(
            _bundle("3", ("أحمد", "111111111", "husband", "1980-01-01")), "camp-1"
        )
        remote.seed("aid_deliveries", [{"family_id": created.family_id, "parcel_id": "p1"}])
        family_service.delete_family(created.family_id)
        assert remote.rows("families") == []
        assert remote.rows("individuals") == []
        assert remote.rows("aid_deliveries") == []


class TestDeparture:

    def test_departed_number_is_free(self, family_service):
        first = family_service.create_family(Family(family_number="8", address="x"), "camp-1")
        family_service.set_departed(first.family_id, True)
        assert family_service.find_active_family("camp-1", "8") is None

    def test_reactivation_conflict(self, family_service):
        first = family_service.create_family(Family(family_number="8", address="x"), "camp-1")
        family_service.set_departed(first.family_id, True)
        family_service.create_family(Family(family_number="8", address="y"), "camp-1")

        with pytest.raises(DuplicateError) as exc:
            family_service.set_departed(first.family_id, False)
        assert exc.value.family_number == "8"
        assert family_service.get_family(first.family_id).is_departed is True

    def test_reactivation_without_conflict(self, family_service):
        first = family_service.create_family(Family(family_number="8", address="x"), "camp-1")
        family_service.set_departed(first.family_id, True)
        assert family_service.set_departed(first.family_id, False).is_departed is False


class TestCrossCampDuplicates:

    @pytest.fixture
    def two_camps(self, family_service):
        first = family_service.create_family_with_members(
            _bundle("1", ("أحمد", "111111111", "husband", "1980-01-01"),
                    ("سارة", "222222222", "wife", "1985-01-01")),
            "camp-1",
        )
        second = family_service.create_family_with_members(
            _bundle("9", ("خالد", "333333333", "husband", "1979-01-01"),
                    ("سارة", "222222222", "wife", "1985-01-01")),
            "camp-2",
        )
        return first, second

    def test_alert_after_save(self, family_service, remote, two_camps):
        _, second = two_camps
        members = family_service.get_family_members(second.family_id)

        sent = family_service.check_cross_camp_duplicates(second, members, "admin")

        assert sent == 1
        alert = remote.rows("notifications")[0]
        assert alert["type"] == "alert"
        assert alert["user_name"] == "admin"
        assert "مخيم الأمل" in alert["message"]

    def test_same_camp_not_alerted(self, family_service, remote):
        first = family_service.create_family_with_members(
            _bundle("1", ("أحمد", "111111111", "husband", "1980-01-01")), "camp-1")
        family_service.create_family_with_members(
            _bundle("2", ("أحمد", "111111111", "husband", "1980-01-01")), "camp-1")

        sent = family_service.check_cross_camp_duplicates(
            first, family_service.get_family_members(first.family_id))
        assert sent == 0
        assert remote.rows("notifications") == []

    def test_check_never_raises(self, family_service, remote, two_camps):
        first, _ = two_camps
        remote.fail_next("individuals", "select")
        assert family_service.check_cross_camp_duplicates(
            first, [Individual(nid="222222222")]) == 0

    def test_scan_existing(self, family_service, remote, two_camps):
        summary = family_service.scan_existing_duplicates("admin")

        assert summary.duplicate_nids == 1
        assert summary.notifications_sent == 1
        assert len(remote.rows("notifications")) == 1

    def test_scan_ignores_departed(self, family_service, two_camps):
        _, second = two_camps
        family_service.set_departed(second.family_id, True)
        assert family_service.scan_existing_duplicates().notifications_sent == 0
