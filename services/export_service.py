# -*- coding: utf-8 -*-
"""
Spreadsheet export and reading (.xlsx via openpyxl).

All sheets share one header style; Arabic sheets are written right-to-left.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from models.family import Family
from models.individual import Individual
from services.family_service import find_head_of_family
from services.vocab_service import role_label
from utils.logger import get_logger

logger = get_logger(__name__)

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="0072BC", end_color="0072BC", fill_type="solid")
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin")
)


def write_sheet(
    file_path: Path,
    title: str,
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    column_widths: Optional[Sequence[int]] = None,
    rtl: bool = True,
) -> Dict[str, Any]:
    """
    Write one styled sheet.

    Returns:
        Export summary dict
    """
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]
    ws.sheet_view.rightToLeft = rtl

    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = THIN_BORDER

    for row_num, values in enumerate(rows, 2):
        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row_num, column=col, value=value)
            cell.border = THIN_BORDER

    widths = column_widths or [max(12, len(str(h)) + 4) for h in headers]
    for col, width in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col)].width = width
    ws.freeze_panes = "A2"

    wb.save(file_path)
    logger.info(f"Exported {len(rows)} rows to {file_path}")

    return {
        "file_path": str(file_path),
        "record_count": len(rows),
        "format": "xlsx",
        "exported_at": datetime.now().isoformat()
    }


def read_sheet(file_path: Path) -> List[List[Any]]:
    """All rows of the first sheet as lists (header included)."""
    wb = load_workbook(file_path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = [list(row) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()
    logger.info(f"Read {len(rows)} rows from {file_path}")
    return rows


class ExportService:
    """Family list exports."""

    FAMILY_HEADERS = [
        "رقم العائلة", "رب الأسرة", "رقم هوية رب الأسرة", "عدد الأفراد",
        "العنوان", "رقم التواصل", "المفوض", "حالة السكن", "الحالة",
    ]
    MEMBER_HEADERS = [
        "رقم العائلة", "الاسم", "رقم الهوية", "الصفة", "الجنس", "تاريخ الميلاد",
        "حامل", "مرضع", "ملاحظات صحية",
    ]

    def export_families(self, file_path: Path, families: Sequence[Family],
                        members_by_family: Dict[str, List[Individual]]) -> Dict[str, Any]:
        rows = []
        for family in families:
            members = members_by_family.get(family.family_id, [])
            head = find_head_of_family(members)
            rows.append([
                family.family_number,
                head.name if head else "",
                head.nid if head else "",
                len(members),
                family.address,
                family.contact or "",
                family.delegate or "",
                family.housing_status or "",
                "مغادرة" if family.is_departed else "نشطة",
            ])
        return write_sheet(file_path, "العائلات", self.FAMILY_HEADERS, rows,
                           column_widths=[12, 25, 15, 10, 25, 15, 20, 12, 10])

    def export_members(self, file_path: Path, families: Sequence[Family],
                       members_by_family: Dict[str, List[Individual]]) -> Dict[str, Any]:
        rows = []
        for family in families:
            for member in members_by_family.get(family.family_id, []):
                rows.append([
                    family.family_number,
                    member.name,
                    member.nid or "",
                    role_label(member.role),
                    "أنثى" if member.is_female else "ذكر",
                    member.dob or "",
                    "نعم" if member.is_pregnant else "لا",
                    "نعم" if member.is_nursing else "لا",
                    member.notes or "",
                ])
        return write_sheet(file_path, "الأفراد", self.MEMBER_HEADERS, rows,
                           column_widths=[12, 25, 15, 12, 8, 14, 8, 8, 30])
