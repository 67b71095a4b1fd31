# -*- coding: utf-8 -*-
"""
Smoke tests to ensure the application doesn't break after changes.
These run the command-line entry point against the in-process backend.
"""

import json

import main
from services.import_service import TEMPLATE_HEADERS


def test_imports():
    """Test that all main modules can be imported."""
    from app import AppContext, Config
    from controllers import DataEntryController, ImportController
    from models import Draft, Family, Individual
    from services import AidService, BackupService, SmartReportService

    assert Config.NATIONAL_ID_LENGTH == 9
    assert all([AppContext, DataEntryController, ImportController, Draft, Family, Individual,
                AidService, BackupService, SmartReportService])


def test_template_command(tmp_path, capsys):
    path = tmp_path / "template.xlsx"
    code = main.main(["--db", str(tmp_path / "cli.db"), "--memory", "template", str(path)])

    assert code == 0
    assert path.exists()
    from services.export_service import read_sheet
    assert read_sheet(path)[0] == list(TEMPLATE_HEADERS)


def test_backup_command(tmp_path):
    path = tmp_path / "backup.json"
    code = main.main(["--db", str(tmp_path / "cli.db"), "--memory", "backup", str(path)])

    assert code == 0
    document = json.loads(path.read_text(encoding="utf-8"))
    assert document["metadata"]["app"] == "family_data_cloud"


def test_restore_needs_confirmation(tmp_path, capsys):
    path = tmp_path / "backup.json"
    main.main(["--db", str(tmp_path / "cli.db"), "--memory", "backup", str(path)])

    code = main.main(["--db", str(tmp_path / "cli.db"), "--memory", "restore", str(path)])

    assert code == 1
    assert capsys.readouterr().err.strip()


def test_upload_without_drafts(tmp_path, capsys):
    code = main.main(["--db", str(tmp_path / "cli.db"), "--memory", "--camp", "c1", "upload"])

    assert code == 0
    assert "0 uploaded, 0 failed" in capsys.readouterr().out
