# -*- coding: utf-8 -*-
"""
Bulk import of families from a spreadsheet.

One row per member; rows sharing a family number form one family. The
import is all-or-nothing on delegate names (every name must resolve to a
known delegate before anything is written) and per-family on duplicate
checks (a family whose number or IDs already exist is skipped, the rest
of the batch continues).

Columns:
    0 family number   1 name           2 national ID     3 role
    4 address         5 birth date     6 phone           7 alt. phone
    8 shelter type    9 housing        10 needs          11 health notes
    12 shoe size      13 clothes size  14 pregnant       15 nursing
    16 delegate
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from models.family import Family, FamilyBundle
from models.individual import Individual
from services.camp_service import CampService
from services.connectivity import ConnectivityMonitor
from services.exceptions import (
    DelegateResolutionError, DuplicateError, RemoteOperationError, ValidationError
)
from services.export_service import read_sheet, write_sheet
from services.family_service import IMPORT_CONFLICTS, FamilyService
from services.matching_service import DelegateMatcher
from services.notification_service import NotificationService, NotificationType
from services.translation_manager import tr
from services.vocab_service import derive_gender, map_role_label, map_shelter_label, parse_yes_no
from utils.datetime_utils import parse_excel_date
from utils.helpers import cell_text, digits_only
from utils.logger import get_logger

logger = get_logger(__name__)

MIN_POPULATED_COLUMNS = 4

TEMPLATE_HEADERS = [
    "رقم العائلة", "الاسم الرباعي", "رقم الهوية", "الصفة", "العنوان",
    "تاريخ الميلاد", "رقم الجوال", "رقم جوال بديل", "نوع السكن", "حالة السكن",
    "احتياجات الأسرة", "ملاحظات صحية", "مقاس الحذاء", "مقاس الملابس",
    "حامل", "مرضع", "المفوض",
]

TEMPLATE_ROWS = [
    ["101", "أحمد محمد علي حسن", "123456789", "زوج", "مخيم الأمل - بلوك 3",
     "15/03/1985", "0599123456", "", "خيمة جاهزة", "جيد", "", "", "42", "XL",
     "لا", "لا", "اسم المفوض"],
    ["101", "فاطمة خالد محمود", "987654321", "زوجة", "مخيم الأمل - بلوك 3",
     "20/07/1990", "", "", "", "", "", "", "38", "L", "نعم", "لا", "اسم المفوض"],
    ["101", "محمد أحمد محمد", "456789123", "ابن", "", "10/01/2015", "", "", "", "",
     "", "", "32", "M", "لا", "لا", "اسم المفوض"],
    ["102", "سارة يوسف إبراهيم", "321654987", "أرملة", "مخيم الأمل - بلوك 5",
     "05/11/1978", "0598765432", "", "خيمة مصنعة", "متوسط", "حليب أطفال",
     "سكري", "39", "XL", "لا", "لا", "اسم المفوض"],
]

TEMPLATE_WIDTHS = [12, 25, 14, 10, 25, 14, 14, 14, 14, 12, 20, 20, 10, 10, 8, 8, 18]


class ImportState(Enum):
    """Lifecycle of one import batch."""
    PARSED = "parsed"
    ABORTED = "aborted"
    ROWS_GROUPED = "rows_grouped"
    PER_FAMILY_VALIDATED = "per_family_validated"
    PER_FAMILY_COMMITTED = "per_family_committed"
    REPORT_GENERATED = "report_generated"


_TRANSITIONS = {
    ImportState.PARSED: {ImportState.ABORTED, ImportState.ROWS_GROUPED},
    ImportState.ROWS_GROUPED: {ImportState.PER_FAMILY_VALIDATED, ImportState.REPORT_GENERATED},
    ImportState.PER_FAMILY_VALIDATED: {ImportState.PER_FAMILY_COMMITTED},
    ImportState.PER_FAMILY_COMMITTED: {
        ImportState.PER_FAMILY_VALIDATED, ImportState.REPORT_GENERATED
    },
    ImportState.ABORTED: set(),
    ImportState.REPORT_GENERATED: set(),
}


@dataclass
class ParsedBatch:
    """Rows grouped into family bundles, in first-appearance order."""
    bundles: List[FamilyBundle] = field(default_factory=list)
    delegate_issues: List[Tuple[str, str]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    skipped_rows: int = 0

    @property
    def family_numbers(self) -> List[str]:
        return [b.family_number for b in self.bundles]


@dataclass
class FamilyImportResult:
    family_number: str
    success: bool
    family_id: Optional[str] = None
    member_count: int = 0
    error: Optional[str] = None


@dataclass
class ImportReport:
    state: ImportState = ImportState.PARSED
    results: List[FamilyImportResult] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def advance(self, state: ImportState):
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal import transition {self.state.value} -> {state.value}")
        self.state = state

    @property
    def aborted(self) -> bool:
        return self.state is ImportState.ABORTED

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def fail_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def summary(self) -> str:
        if self.aborted:
            return self.error or ""
        lines = []
        if self.success_count:
            lines.append(tr("import.success", count=self.success_count))
        if self.fail_count:
            lines.append(tr("import.failed", count=self.fail_count))
        return "\n\n".join(lines + self.messages)


def _trimmed(row: Sequence[Any]) -> List[Any]:
    """Row without trailing empty cells."""
    values = list(row or [])
    while values and cell_text(values[-1]) == "":
        values.pop()
    return values


def _column(row: Sequence[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


class BulkImportReconciler:
    """Turns spreadsheet rows into remote families."""

    def __init__(self, family_service: FamilyService, camp_service: CampService,
                 notifications: NotificationService = None,
                 connectivity: ConnectivityMonitor = None):
        self.family_service = family_service
        self.camp_service = camp_service
        self.notifications = notifications or family_service.notifications
        self.connectivity = connectivity

    # ==================== Files ====================

    def read_rows(self, file_path: Path) -> List[List[Any]]:
        return read_sheet(Path(file_path))

    def write_template(self, file_path: Path) -> Dict[str, Any]:
        return write_sheet(
            Path(file_path), "نموذج البيانات", TEMPLATE_HEADERS, TEMPLATE_ROWS,
            column_widths=TEMPLATE_WIDTHS,
        )

    # ==================== Parsing ====================

    def parse(self, rows: Sequence[Sequence[Any]], delegate_names: Sequence[str] = ()) -> ParsedBatch:
        """
        Group data rows into family bundles and resolve delegate names.

        Raises:
            ValidationError: the sheet has no data rows.
        """
        if not rows or len(rows) < 2:
            raise ValidationError(tr("import.empty_file"))

        matcher = DelegateMatcher(delegate_names)
        batch = ParsedBatch()
        by_number: Dict[str, FamilyBundle] = {}
        flagged = set()

        for raw in rows[1:]:
            row = _trimmed(raw)
            family_number = cell_text(_column(row, 0))
            name = cell_text(_column(row, 1))
            if len(row) < MIN_POPULATED_COLUMNS or not family_number or not name:
                batch.skipped_rows += 1
                continue

            bundle = by_number.get(family_number)
            if bundle is None:
                bundle = FamilyBundle(family=self._family_from_row(row, family_number))
                by_number[family_number] = bundle
                batch.bundles.append(bundle)

            delegate_text = cell_text(_column(row, 16))
            if delegate_text:
                match = matcher.best_match(delegate_text)
                if not match.is_resolved:
                    if family_number not in flagged:
                        flagged.add(family_number)
                        batch.delegate_issues.append((family_number, delegate_text))
                elif bundle.family.delegate is None:
                    bundle.family.delegate = match.name

            member, recognized = self._member_from_row(row, name)
            if not recognized:
                batch.warnings.append(
                    tr("import.unrecognized_role", family_number=family_number, role=member.role)
                )
            bundle.members.append(member)

        logger.info(
            f"Parsed {len(batch.bundles)} families "
            f"({batch.skipped_rows} rows skipped, {len(batch.delegate_issues)} delegate issues)"
        )
        return batch

    def _family_from_row(self, row: Sequence[Any], family_number: str) -> Family:
        shelter, shelter_other = map_shelter_label(_column(row, 8))
        return Family(
            family_number=family_number,
            address=cell_text(_column(row, 4)),
            contact=digits_only(_column(row, 6)) or None,
            alternative_mobile=digits_only(_column(row, 7)) or None,
            shelter_type=shelter.value if shelter else None,
            shelter_type_other=shelter_other,
            housing_status=cell_text(_column(row, 9)) or None,
            family_needs=cell_text(_column(row, 10)) or None,
        )

    def _member_from_row(self, row: Sequence[Any], name: str) -> Tuple[Individual, bool]:
        match = map_role_label(_column(row, 3))
        member = Individual(
            name=name,
            nid=cell_text(_column(row, 2)) or None,
            dob=parse_excel_date(_column(row, 5)) or None,
            role=match.stored_value,
            gender=derive_gender(match.role if match.is_recognized else match.raw).value,
            notes=cell_text(_column(row, 11)) or None,
            shoe_size=cell_text(_column(row, 12)) or None,
            clothes_size=cell_text(_column(row, 13)) or None,
            is_pregnant=parse_yes_no(_column(row, 14)),
            is_nursing=parse_yes_no(_column(row, 15)),
        )
        return member, match.is_recognized

    # ==================== Reconciliation ====================

    def run(self, rows: Sequence[Sequence[Any]], camp_id: str, user_name: str = None,
            progress_callback: Callable[[int, int], None] = None) -> ImportReport:
        """
        Import rows into camp_id.

        Returns an ABORTED report when any delegate name is unresolved;
        nothing is written in that case.

        Raises:
            ValidationError: the sheet has no data rows.
            ConnectivityError: the backend is offline.
        """
        if self.connectivity is not None:
            self.connectivity.require_online("bulk import")

        batch = self.parse(rows, self.camp_service.delegate_names(camp_id))
        report = ImportReport(warnings=list(batch.warnings))

        try:
            self._ensure_delegates_resolved(batch)
        except DelegateResolutionError as e:
            report.advance(ImportState.ABORTED)
            report.error = e.message
            report.messages = [
                tr("import.delegate_issue", family_number=number, delegate=text)
                for number, text in e.issues
            ]
            logger.warning(f"Import aborted: {len(e.issues)} unresolved delegate(s)")
            return report

        report.advance(ImportState.ROWS_GROUPED)
        total = len(batch.bundles)
        for index, bundle in enumerate(batch.bundles, 1):
            report.advance(ImportState.PER_FAMILY_VALIDATED)
            result = self._import_family(bundle, camp_id, user_name)
            report.results.append(result)
            if result.error:
                report.messages.append(result.error)
            report.advance(ImportState.PER_FAMILY_COMMITTED)
            if progress_callback:
                progress_callback(index, total)

        if report.success_count > 0:
            self.notifications.create(
                tr("import.notification", user=user_name or tr("common.system"),
                   count=report.success_count),
                NotificationType.NEW_ENTRY,
                user_name,
            )

        report.advance(ImportState.REPORT_GENERATED)
        logger.info(
            f"Import into camp {camp_id} finished: "
            f"{report.success_count} imported, {report.fail_count} failed"
        )
        return report

    def _ensure_delegates_resolved(self, batch: ParsedBatch):
        if not batch.delegate_issues:
            return
        issues = "\n".join(
            tr("import.delegate_issue", family_number=number, delegate=text)
            for number, text in batch.delegate_issues
        )
        raise DelegateResolutionError(tr("import.delegate_abort", issues=issues),
                                      batch.delegate_issues)

    def _import_family(self, bundle: FamilyBundle, camp_id: str, user_name: str) -> FamilyImportResult:
        try:
            self.family_service.ensure_can_create(bundle.family_number, bundle.members, camp_id,
                                                  messages=IMPORT_CONFLICTS)
            family = self.family_service.create_family_with_members(bundle, camp_id)
        except (DuplicateError, RemoteOperationError) as e:
            logger.warning(f"Family {bundle.family_number} not imported: {e}")
            return FamilyImportResult(bundle.family_number, False, error=e.message)

        self.family_service.check_cross_camp_duplicates(family, bundle.members, user_name)
        logger.info(f"Family {bundle.family_number} imported with {len(bundle.members)} member(s)")
        return FamilyImportResult(
            bundle.family_number, True,
            family_id=family.family_id,
            member_count=len(bundle.members),
        )
