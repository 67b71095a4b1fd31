# -*- coding: utf-8 -*-
"""
Tests for the bulk import reconciler.

Tests cover:
- Grouping rows into families and resolving delegates
- All-or-nothing abort on unknown delegates
- Per-family duplicate skipping
- Template round trip through openpyxl
"""

import pytest

from services.exceptions import ConnectivityError, ValidationError
from services.import_service import (
    TEMPLATE_HEADERS, BulkImportReconciler, ImportReport, ImportState
)
from services.translation_manager import tr

HEADER = list(TEMPLATE_HEADERS)


def _row(number, name, nid, role, delegate="محمد أحمد", dob="15/03/1985", **cells):
    row = [number, name, nid, role, "بلوك 3", dob, "0599123456", "", "خيمة جاهزة",
           "جيد", "", "", "42", "XL", "لا", "لا", delegate]
    for index, value in cells.items():
        row[int(index.lstrip("c"))] = value
    return row


@pytest.fixture
def importer(family_service, camp_service, notifications, connectivity, remote):
    remote.seed("delegates", [
        {"delegate_id": "d1", "name": "محمد أحمد", "camp_id": "camp-1"},
        {"delegate_id": "d2", "name": "خالد يوسف", "camp_id": "camp-1"},
    ])
    return BulkImportReconciler(family_service, camp_service, notifications, connectivity)


class TestParse:

    def test_husband_and_wife_grouped(self, importer):
        rows = [
            HEADER,
            _row("101", "أحمد محمد علي", "123456789", "زوج"),
            _row("101", "فاطمة خالد", "987654321", "زوجة", delegate="محمد احمد"),
        ]
        batch = importer.parse(rows, ["محمد أحمد", "خالد يوسف"])

        assert batch.family_numbers == ["101"]
        bundle = batch.bundles[0]
        assert [m.gender for m in bundle.members] == ["male", "female"]
        assert [m.role for m in bundle.members] == ["husband", "wife"]
        assert bundle.family.delegate == "محمد أحمد"
        assert batch.delegate_issues == []
        assert batch.warnings == []

    def test_family_fields_from_first_row(self, importer):
        rows = [
            HEADER,
            _row("7", "أحمد", "123456789", "زوج", c4="العنوان الأول"),
            _row("7", "سارة", "987654321", "ابنة", c4="عنوان آخر"),
        ]
        family = importer.parse(rows, ["محمد أحمد"]).bundles[0].family
        assert family.address == "العنوان الأول"
        assert family.shelter_type == "ready_tent"
        assert family.contact == "0599123456"

    def test_numeric_cells_and_dates(self, importer):
        rows = [HEADER, _row(101.0, "أحمد", 123456789.0, "زوج", dob=31121.0, c14="نعم")]
        member = importer.parse(rows, ["محمد أحمد"]).bundles[0].members[0]
        assert member.nid == "123456789"
        assert member.dob == "1985-03-15"
        assert member.is_pregnant is True
        assert importer.parse(rows, ["محمد أحمد"]).family_numbers == ["101"]

    def test_short_rows_skipped(self, importer):
        rows = [
            HEADER,
            ["5", "أحمد", "123456789"],
            ["", "بلا رقم", "123456789", "زوج"],
            ["6", "", "123456789", "زوج"],
            [None] * 17,
            _row("8", "خالد", "111111111", "زوج"),
        ]
        batch = importer.parse(rows, ["محمد أحمد"])
        assert batch.family_numbers == ["8"]
        assert batch.skipped_rows == 4

    def test_unrecognized_role_kept_with_warning(self, importer):
        rows = [HEADER, _row("9", "سعيد", "123456789", "عم")]
        batch = importer.parse(rows, ["محمد أحمد"])
        assert batch.bundles[0].members[0].role == "عم"
        assert batch.bundles[0].members[0].gender == "male"
        assert batch.warnings == [tr("import.unrecognized_role", family_number="9", role="عم")]

    def test_one_delegate_issue_per_family(self, importer):
        rows = [
            HEADER,
            _row("1", "أ", "111111111", "زوج", delegate="زيد"),
            _row("1", "ب", "222222222", "زوجة", delegate="زيد"),
            _row("2", "ج", "333333333", "زوج", delegate="عمرو"),
        ]
        batch = importer.parse(rows, ["محمد أحمد"])
        assert batch.delegate_issues == [("1", "زيد"), ("2", "عمرو")]

    def test_header_only_is_empty(self, importer):
        with pytest.raises(ValidationError) as exc:
            importer.parse([HEADER])
        assert exc.value.message == tr("import.empty_file")


class TestRun:

    def test_imports_and_notifies(self, importer, remote):
        rows = [
            HEADER,
            _row("101", "أحمد محمد علي", "123456789", "زوج"),
            _row("101", "فاطمة خالد", "987654321", "زوجة"),
            _row("102", "سارة يوسف", "321654987", "أرملة"),
        ]
        progress = []

        report = importer.run(rows, "camp-1", "admin",
                              progress_callback=lambda done, total: progress.append((done, total)))

        assert report.state is ImportState.REPORT_GENERATED
        assert report.success_count == 2
        assert report.fail_count == 0
        assert progress == [(1, 2), (2, 2)]
        assert len(remote.rows("families")) == 2
        assert len(remote.rows("individuals")) == 3
        entries = [n for n in remote.rows("notifications") if n["type"] == "new_entry"]
        assert len(entries) == 1
        assert report.summary == tr("import.success", count=2)

    def test_unknown_delegate_aborts_without_writes(self, importer, remote):
        rows = [
            HEADER,
            _row("101", "أحمد", "123456789", "زوج"),
            _row("102", "سارة", "321654987", "أرملة", delegate="شخص غير معروف"),
        ]

        report = importer.run(rows, "camp-1")

        assert report.aborted
        assert report.results == []
        assert report.messages == [
            tr("import.delegate_issue", family_number="102", delegate="شخص غير معروف")
        ]
        assert "102" in report.error
        assert remote.rows("families") == []
        assert remote.rows("notifications") == []

    def test_duplicate_family_skipped_rest_continue(self, importer, family_service, remote):
        importer.run([HEADER, _row("101", "أحمد", "123456789", "زوج")], "camp-1")

        report = importer.run([
            HEADER,
            _row("101", "خالد", "111111111", "زوج"),
            _row("103", "ليلى", "222222222", "زوجة"),
        ], "camp-1")

        assert [(r.family_number, r.success) for r in report.results] == [("101", False), ("103", True)]
        assert report.messages == [tr("duplicate.family_in_camp", family_number="101")]
        assert len(remote.rows("families")) == 2

    def test_duplicate_nid_reports_holder(self, importer):
        importer.run([HEADER, _row("101", "أحمد", "123456789", "زوج")], "camp-1")

        report = importer.run([HEADER, _row("200", "أحمد آخر", "123456789", "زوج")], "camp-1")

        assert report.fail_count == 1
        assert report.results[0].error == tr(
            "duplicate.nid_in_family", nid="123456789", holder="أحمد", holder_number="101"
        )
        assert report.success_count == 0

    def test_no_notification_when_nothing_imported(self, importer, remote):
        importer.run([HEADER, _row("101", "أحمد", "123456789", "زوج")], "camp-1")
        before = len(remote.rows("notifications"))
        importer.run([HEADER, _row("101", "أحمد", "123456789", "زوج")], "camp-1")
        assert len(remote.rows("notifications")) == before

    def test_offline_refused(self, importer, connectivity):
        connectivity.set_online(False)
        with pytest.raises(ConnectivityError):
            importer.run([HEADER, _row("101", "أحمد", "123456789", "زوج")], "camp-1")


class TestImportReport:

    def test_illegal_transition(self):
        report = ImportReport()
        with pytest.raises(RuntimeError):
            report.advance(ImportState.PER_FAMILY_COMMITTED)

    def test_aborted_is_terminal(self):
        report = ImportReport()
        report.advance(ImportState.ABORTED)
        with pytest.raises(RuntimeError):
            report.advance(ImportState.ROWS_GROUPED)


class TestTemplate:

    def test_template_round_trip(self, importer, tmp_path):
        path = tmp_path / "template.xlsx"
        importer.write_template(path)

        rows = importer.read_rows(path)
        assert rows[0] == HEADER
        batch = importer.parse(rows, ["اسم المفوض"])
        assert batch.family_numbers == ["101", "102"]
        assert len(batch.bundles[0].members) == 3
        assert batch.bundles[1].members[0].role == "widow"
        assert batch.delegate_issues == []
