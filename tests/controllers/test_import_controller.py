# -*- coding: utf-8 -*-
"""
Tests for the import controller (families, deliveries, template).
"""

import pytest
from openpyxl import Workbook

from controllers.import_controller import ImportController
from models.camp import Camp
from services.import_service import TEMPLATE_HEADERS
from services.translation_manager import tr


def _write_rows(path, rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    wb.save(path)
    return path


def _row(number, name, nid, role, delegate="محمد أحمد"):
    return [number, name, nid, role, "بلوك 3", "15/03/1985", "0599123456", "", "خيمة جاهزة",
            "جيد", "", "", "42", "XL", "لا", "لا", delegate]


@pytest.fixture
def controller(context):
    context.select_camp(Camp(camp_id="camp-1", name="مخيم الأمل"))
    context.remote.seed("delegates", [{"delegate_id": "d1", "name": "محمد أحمد", "camp_id": "camp-1"}])
    return ImportController(context)


class TestImportFamilies:

    def test_import(self, controller, context, tmp_path):
        path = _write_rows(tmp_path / "families.xlsx", [
            TEMPLATE_HEADERS,
            _row("101", "أحمد", "123456789", "زوج"),
            _row("101", "فاطمة", "987654321", "زوجة"),
        ])
        finished, progress = [], []
        controller.import_finished.connect(finished.append)
        controller.import_progress.connect(lambda done, total: progress.append((done, total)))

        result = controller.import_families(path)

        assert result.success
        assert result.message == tr("import.success", count=1)
        assert finished[0].success_count == 1
        assert progress == [(1, 1)]
        family = context.family_service.find_active_family("camp-1", "101")
        assert family.delegate == "محمد أحمد"

    def test_unknown_delegate_fails_with_report(self, controller, context, tmp_path):
        path = _write_rows(tmp_path / "families.xlsx", [
            TEMPLATE_HEADERS,
            _row("101", "أحمد", "123456789", "زوج", delegate="زيد عمرو"),
        ])
        errors = []
        controller.operation_error.connect(lambda operation, message: errors.append(operation))

        result = controller.import_families(path)

        assert not result.success
        assert result.data.aborted
        assert result.errors == [tr("import.delegate_issue", family_number="101", delegate="زيد عمرو")]
        assert errors == ["import_families"]
        assert context.remote.rows("families") == []

    def test_empty_sheet(self, controller, tmp_path):
        path = _write_rows(tmp_path / "empty.xlsx", [TEMPLATE_HEADERS])
        result = controller.import_families(path)
        assert result.message == tr("import.empty_file")

    def test_offline(self, controller, connectivity, tmp_path):
        path = _write_rows(tmp_path / "families.xlsx", [TEMPLATE_HEADERS, _row("1", "أ", "123456789", "زوج")])
        connectivity.set_online(False)
        result = controller.import_families(path)
        assert result.message == tr("connectivity.offline")


class TestImportDeliveries:

    def test_import_deliveries(self, controller, context, tmp_path):
        families_path = _write_rows(tmp_path / "families.xlsx", [
            TEMPLATE_HEADERS, _row("101", "أحمد", "123456789", "زوج"),
        ])
        controller.import_families(families_path)
        context.aid_service.create_parcel("camp-1", "سلة غذائية")
        path = _write_rows(tmp_path / "deliveries.xlsx", [["رقم الهوية", "رقم الطرد"], ["123456789", 1]])

        result = controller.import_deliveries(path)

        assert result.success
        assert result.data == 1
        assert result.message == tr("aid.import_summary", count=1)


class TestTemplate:

    def test_export_template(self, controller, context, tmp_path):
        path = tmp_path / "template.xlsx"
        result = controller.export_template(path)

        assert result.success
        assert result.data["record_count"] == 4
        assert context.importer.read_rows(path)[0] == list(TEMPLATE_HEADERS)
