# -*- coding: utf-8 -*-
"""
Smart Report Service
====================
Builds a per-family table whose columns are described in free text.

Column descriptions are sent to the report bridge, which answers with one
expression tree per column (see report_expression). When the bridge is
unreachable or answers with something unusable, a local keyword/regex
engine computes the columns instead.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from app.config import Config
from models.family import Family
from models.individual import Gender, Individual, Role
from services.exceptions import (
    ApiException, NetworkException, RemoteOperationError, ReportExpressionError
)
from services.export_service import write_sheet
from services.family_service import FamilyService, find_head_of_family
from services.report_expression import EMPTY_CELL, ExpressionEvaluator, render_value
from services.translation_manager import tr
from utils.datetime_utils import calculate_age
from utils.logger import get_logger

logger = get_logger(__name__)

MODE_BRIDGE = "ai"
MODE_LOCAL = "local"

FAMILY_NUMBER_COLUMN = "1"
HEAD_NAME_COLUMN = "2"


@dataclass
class ReportColumn:
    id: str
    label: str
    description: str = ""
    system: bool = False


def system_columns() -> List[ReportColumn]:
    """The two fixed leading columns of every report."""
    return [
        ReportColumn(FAMILY_NUMBER_COLUMN, tr("report.family_number"), system=True),
        ReportColumn(HEAD_NAME_COLUMN, tr("report.head_name"), system=True),
    ]


@dataclass
class ReportResult:
    columns: List[ReportColumn]
    rows: List[List[Any]] = field(default_factory=list)
    mode: str = MODE_BRIDGE
    notice: Optional[str] = None

    @property
    def headers(self) -> List[str]:
        return [c.label for c in self.columns]

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [dict(zip(self.headers, row)) for row in self.rows]


class ReportBridgeClient:
    """HTTP client for the natural-language report bridge."""

    def __init__(self, url: str = None, timeout: int = None):
        self.url = Config.REPORT_BRIDGE_URL if url is None else url
        self.timeout = timeout or Config.REPORT_BRIDGE_TIMEOUT

    def fetch_logic(self, columns: Sequence[ReportColumn]) -> Dict[str, Any]:
        """
        Ask the bridge for one expression per non-system column.

        Raises:
            NetworkException: the bridge could not be reached.
            ApiException: the bridge answered with an error status.
            ReportExpressionError: the answer is not a JSON logic object.
        """
        smart = [{"id": c.id, "description": c.description} for c in columns if not c.system]
        if not smart:
            return {}
        if not self.url:
            raise NetworkException("Report bridge URL is not configured")

        logger.info(f"[API REQ] POST {self.url} ({len(smart)} columns)")
        try:
            response = requests.post(self.url, json={"columns": smart}, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else 0
            logger.error(f"[API ERR] {status} POST {self.url}")
            raise ApiException(str(e), status_code=status, original_error=e)
        except requests.exceptions.RequestException as e:
            logger.error(f"[API ERR] Network error: POST {self.url} - {e}")
            raise NetworkException(str(e), original_error=e)

        logger.info(f"[API RES] {response.status_code} {self.url}")
        if "application/json" not in response.headers.get("content-type", ""):
            raise ReportExpressionError("Report bridge did not answer with JSON")
        try:
            payload = response.json()
        except ValueError as e:
            raise ReportExpressionError(f"Report bridge sent invalid JSON: {e}")

        logic = payload.get("logic", payload) if isinstance(payload, dict) else None
        if not isinstance(logic, dict):
            raise ReportExpressionError("Report bridge answer has no logic object", payload)
        logger.debug(f"[API RES] Body: {json.dumps(logic, ensure_ascii=False)[:1000]}")
        return logic


# ==================== Local engine ====================

_AGE_RANGE = re.compile(r"(عدد|كم).*?(\d+).*?(إلى|الى|و).*?(\d+)")
_AGE_BELOW = re.compile(r"(عدد|كم).*اقل.*من.*?(\d+)")

WIFE_ROLES = {Role.WIFE.value, Role.SECOND_WIFE.value}
HUSBAND_ROLES = {Role.HUSBAND.value, Role.FATHER.value}


def _has_any(text: str, words: Sequence[str]) -> bool:
    return any(w in text for w in words)


def _find_role(members: Sequence[Individual], codes: set, arabic: Sequence[str]) -> Optional[Individual]:
    for member in members:
        role = member.role or ""
        if role in codes or _has_any(role, arabic):
            return member
    return None


def local_value(description: str, family: Family, members: Sequence[Individual]) -> Any:
    """Keyword/regex interpretation of a column description."""
    desc = (description or "").lower().strip()

    match = _AGE_RANGE.search(desc)
    if match:
        low, high = int(match.group(2)), int(match.group(4))
        return sum(1 for m in members if low <= calculate_age(m.dob) <= high)

    match = _AGE_BELOW.search(desc)
    if match:
        limit = int(match.group(2))
        return sum(1 for m in members if calculate_age(m.dob) < limit)

    if _has_any(desc, ("حامل", "حوامل")):
        return any(m.is_pregnant for m in members)
    if _has_any(desc, ("اناث", "نساء", "أنثى")):
        return sum(1 for m in members if m.gender in (Gender.FEMALE.value, "أنثى"))
    if _has_any(desc, ("ذكور", "رجال", "ذكر")):
        return sum(1 for m in members if m.gender in (Gender.MALE.value, "ذكر"))

    if _has_any(desc, ("تاريخ ميلاد", "تاريخ الميلاد")):
        if _has_any(desc, ("زوجة",)):
            wife = _find_role(members, WIFE_ROLES, ("زوجة",))
            return wife.dob if wife else None
        if _has_any(desc, ("رب", "الاب", "الزوج")):
            head = find_head_of_family(members)
            return head.dob if head else None

    if _has_any(desc, ("زوجة", "شريك")):
        wife = _find_role(members, WIFE_ROLES, ("زوجة", "ثانية"))
        return wife.name if wife else None

    if _has_any(desc, ("اسم الزوج", "اسم الاب")):
        husband = _find_role(members, HUSBAND_ROLES, ("زوج", "أب"))
        return husband.name if husband else None

    head = find_head_of_family(members)
    if _has_any(desc, ("رب الاسرة", "الاسم الكامل", "الاسم الثلاثي")):
        return head.name if head else None
    if _has_any(desc, ("هوية", "رقم")):
        return head.nid if head else None
    return None


class SmartReportService:
    """Computes smart reports over families and their members."""

    def __init__(self, family_service: FamilyService = None, bridge: ReportBridgeClient = None,
                 evaluator: ExpressionEvaluator = None):
        self.family_service = family_service
        self.bridge = bridge or ReportBridgeClient()
        self.evaluator = evaluator or ExpressionEvaluator()

    def generate(self, columns: Sequence[ReportColumn], families: Sequence[Family],
                 individuals: Sequence[Individual]) -> ReportResult:
        """One row per family, one cell per column."""
        columns = list(columns)
        result = ReportResult(columns=columns)

        try:
            logic = self.bridge.fetch_logic(columns)
        except (RemoteOperationError, ReportExpressionError) as e:
            logger.warning(f"Report bridge unavailable, using local engine: {e}")
            logic = {}
            result.mode = MODE_LOCAL
            result.notice = tr("report.local_mode")

        members_by_family: Dict[str, List[Individual]] = {}
        for member in individuals:
            members_by_family.setdefault(member.family_id, []).append(member)

        cells = {c.id: self._column_function(c, logic) for c in columns}
        for family in families:
            members = members_by_family.get(family.family_id, [])
            result.rows.append([render_value(cells[c.id](family, members)) for c in columns])

        logger.info(f"Report generated: {len(result.rows)} rows, {len(columns)} columns ({result.mode})")
        return result

    def generate_for_camp(self, columns: Sequence[ReportColumn], camp_id: str) -> ReportResult:
        families = self.family_service.get_families(camp_id)
        grouped = self.family_service.get_members_by_family([f.family_id for f in families]) if families else {}
        individuals = [m for members in grouped.values() for m in members]
        return self.generate(columns, families, individuals)

    def _column_function(self, column: ReportColumn, logic: Dict[str, Any]) -> Callable:
        if column.system:
            if column.id == FAMILY_NUMBER_COLUMN:
                return lambda family, members: family.family_number
            if column.id == HEAD_NAME_COLUMN:
                return lambda family, members: getattr(find_head_of_family(members), "name", None)
            return lambda family, members: None

        def local(family, members):
            return local_value(column.description, family, members)

        expression = logic.get(column.id)
        if expression is None:
            return local
        try:
            self.evaluator.validate(expression)
        except ReportExpressionError as e:
            logger.warning(f"Column {column.label!r}: malformed expression, using local engine ({e})")
            return local

        def evaluated(family, members):
            try:
                return self.evaluator.evaluate(expression, family, members)
            except ReportExpressionError as e:
                logger.error(f"Column {column.label!r} failed for family {family.family_number}: {e}")
                return local(family, members)

        return evaluated

    def export_report(self, result: ReportResult, file_path: Path) -> Dict[str, Any]:
        rows = [[EMPTY_CELL if v is None else v for v in row] for row in result.rows]
        return write_sheet(Path(file_path), tr("report.sheet_title"), result.headers, rows)
