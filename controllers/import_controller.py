# -*- coding: utf-8 -*-
"""
Import Controller
=================
Spreadsheet import of families and aid deliveries, and the import template.
"""

from pathlib import Path

from PyQt5.QtCore import pyqtSignal

from controllers.base_controller import BaseController, OperationResult
from services.export_service import read_sheet
from services.import_service import ImportReport
from services.translation_manager import tr, tr_in
from utils.logger import get_logger

logger = get_logger(__name__)


class ImportController(BaseController):
    """Runs imports for the selected camp."""

    # Signals
    import_finished = pyqtSignal(object)  # ImportReport
    import_progress = pyqtSignal(int, int)  # done, total

    def __init__(self, context, parent=None):
        super().__init__(parent)
        self.context = context

    def import_families(self, file_path: Path) -> OperationResult[ImportReport]:
        """
        Import families from an .xlsx file.

        An aborted import (unknown delegates) is a failed result carrying
        the report; families skipped as duplicates are listed in errors of
        an otherwise successful result.
        """
        self._log_operation("import_families", file_path=str(file_path))
        importer = self.context.importer

        def _import():
            rows = importer.read_rows(Path(file_path))
            return importer.run(rows, self.context.camp_id, self.context.user_name,
                                progress_callback=self.import_progress.emit)

        result = self.execute_with_error_handling("import_families", _import)
        if not result.success:
            return result

        report: ImportReport = result.data
        self.import_finished.emit(report)
        if report.aborted:
            self._emit_error("import_families", report.error)
            return OperationResult.fail(report.error, errors=report.messages, data=report)

        result.message = result.message_ar = report.summary
        result.errors = list(report.messages)
        return result

    def import_deliveries(self, file_path: Path) -> OperationResult[int]:
        """Record deliveries from a (head national ID, parcel number) sheet."""
        self._log_operation("import_deliveries", file_path=str(file_path))

        def _import():
            rows = read_sheet(Path(file_path))
            return self.context.aid_service.import_deliveries(rows, self.context.camp_id)

        result = self.execute_with_error_handling("import_deliveries", _import)
        if result.success:
            result.message = tr("aid.import_summary", count=result.data)
            result.message_ar = tr_in("ar", "aid.import_summary", count=result.data)
        return result

    def export_template(self, file_path: Path) -> OperationResult:
        return self.execute_with_error_handling(
            "export_template", self.context.importer.write_template, Path(file_path)
        )
