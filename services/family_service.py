# -*- coding: utf-8 -*-
"""
Remote family operations.

Families, their members and the members' health records live in the
remote store. A family is "active" while is_departed is false; family
numbers are unique among the active families of one camp, national IDs
among the members of active families.
"""

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.family import Family, FamilyBundle
from models.individual import Individual
from services.exceptions import DuplicateError, RemoteOperationError
from services.notification_service import NotificationService, NotificationType
from services.remote_store import RemoteStore
from services.translation_manager import tr
from utils.helpers import parse_int
from utils.logger import get_logger

logger = get_logger(__name__)

HEAD_ROLES = frozenset({
    "husband", "widower", "widow", "divorced", "abandoned", "second_wife", "guardian", "other",
    "father", "head", "head_of_household",
    "زوج", "أرمل", "أرملة", "مطلقة", "مهجورة", "زوجة ثانية", "وصي", "أخرى", "أب", "اب",
    "رب أسرة", "ربة أسرة",
})

@dataclass(frozen=True)
class ConflictMessages:
    """Translation keys used when a new family collides with remote data."""
    family_number: str
    nid: str


WRITE_CONFLICTS = ConflictMessages("duplicate.family_number_exists", "duplicate.member_nid_exists")
IMPORT_CONFLICTS = ConflictMessages("duplicate.family_in_camp", "duplicate.nid_in_family")

# Lower number wins when naming a family in duplicate alerts
HEAD_PRIORITY = {
    "husband": 1, "wife": 2, "widow": 3, "widower": 4,
    "divorced": 5, "abandoned": 6, "guardian": 7,
}


def _is_active(row: dict) -> bool:
    return not row.get("is_departed")


def _family_sort_key(family: Family):
    number = parse_int(family.family_number)
    return (number is None, number or 0, family.family_number)


def find_head_of_family(members: Sequence[Individual]) -> Optional[Individual]:
    """
    Pick the member who represents the family.

    First a member holding a head role, then an "other" member described
    as رب (head), then the oldest member; members without a birth date
    count as youngest.
    """
    if not members:
        return None

    for member in members:
        if member.role and member.role.strip().lower() in HEAD_ROLES:
            return member

    for member in members:
        if member.role == "أخرى" and "رب" in (member.role_description or ""):
            return member

    def birth_key(member: Individual):
        try:
            return (0, date.fromisoformat(str(member.dob)[:10]))
        except (TypeError, ValueError):
            return (1, date.max)

    return sorted(members, key=birth_key)[0]


def head_name_by_priority(members: Iterable[Individual]) -> str:
    best_name, best_priority = tr("common.unknown"), 99
    for member in members:
        priority = HEAD_PRIORITY.get(member.role, 99)
        if priority < best_priority:
            best_name, best_priority = member.name, priority
    return best_name


@dataclass
class ScanSummary:
    duplicate_nids: int = 0
    notifications_sent: int = 0


class FamilyService:
    """Reads and writes families, members and health records."""

    def __init__(self, remote: RemoteStore, notifications: NotificationService = None):
        self.remote = remote
        self.notifications = notifications or NotificationService(remote)

    # ==================== Reading ====================

    def get_families(self, camp_id: str = None) -> List[Family]:
        filters = {"camp_id": camp_id} if camp_id else None
        families = [Family.from_dict(r) for r in self.remote.select("families", filters)]
        return sorted(families, key=_family_sort_key)

    def get_active_families(self, camp_id: str) -> List[Family]:
        return [f for f in self.get_families(camp_id) if f.is_active]

    def get_family(self, family_id: str) -> Optional[Family]:
        row = self.remote.select_one("families", {"family_id": family_id})
        return Family.from_dict(row) if row else None

    def find_active_family(self, camp_id: str, family_number: str) -> Optional[Family]:
        rows = self.remote.select("families", {
            "camp_id": camp_id,
            "family_number": str(family_number).strip(),
        })
        for row in rows:
            if _is_active(row):
                return Family.from_dict(row)
        return None

    def find_active_individual(self, nid: str) -> Optional[Tuple[Individual, str]]:
        """
        The member holding nid in an active family.

        Returns (individual, family_number), or None when the ID is free.
        """
        if not nid:
            return None
        rows = self.remote.select("individuals", {"nid": nid})
        if not rows:
            return None
        family_ids = list({r["family_id"] for r in rows if r.get("family_id")})
        families = {
            f["family_id"]: f
            for f in self.remote.select("families", {"family_id": family_ids})
        }
        for row in rows:
            family = families.get(row.get("family_id"))
            if family and _is_active(family):
                return Individual.from_dict(row), str(family.get("family_number"))
        return None

    def ensure_can_create(self, family_number: str, members: Sequence[Individual], camp_id: str,
                          messages: ConflictMessages = WRITE_CONFLICTS):
        """
        Pre-write uniqueness check of a new family against the remote store.

        Raises:
            DuplicateError: the number is held by an active family of
                camp_id, or a member's ID by a member of any active family.
        """
        if self.find_active_family(camp_id, family_number):
            raise DuplicateError(
                tr(messages.family_number, family_number=family_number),
                family_number=family_number,
            )
        for member in members:
            found = self.find_active_individual(member.nid)
            if found:
                holder, holder_number = found
                raise DuplicateError(
                    tr(messages.nid, nid=member.nid, name=member.name,
                       holder=holder.name, holder_number=holder_number),
                    nid=member.nid,
                    family_number=holder_number,
                )

    def get_family_members(self, family_id: str) -> List[Individual]:
        return self.get_members_by_family([family_id]).get(family_id, [])

    def get_members_by_family(self, family_ids: Sequence[str] = None) -> Dict[str, List[Individual]]:
        """Members grouped by family_id with health data merged in."""
        filters = {"family_id": list(family_ids)} if family_ids is not None else None
        rows = self.remote.select("individuals", filters)
        ids = [r["individual_id"] for r in rows]
        health = {
            h["individual_id"]: h
            for h in (self.remote.select("health_records", {"individual_id": ids}) if ids else [])
        }

        grouped: Dict[str, List[Individual]] = {}
        for row in rows:
            record = health.get(row["individual_id"], {})
            merged = dict(row)
            merged["is_pregnant"] = bool(record.get("is_pregnant"))
            merged["is_nursing"] = bool(record.get("is_nursing"))
            merged["notes"] = record.get("notes")
            grouped.setdefault(row["family_id"], []).append(Individual.from_dict(merged))
        return grouped

    # ==================== Writing ====================

    def create_family_with_members(self, bundle: FamilyBundle, camp_id: str) -> Family:
        """
        Create the family row, then each member in order.

        A failure part-way leaves the family and the members written so
        far in place.
        """
        created = self.create_family(bundle.family, camp_id)
        self.add_members(created.family_id, bundle.members)
        return created

    def create_family(self, family: Family, camp_id: str) -> Family:
        """Insert the family row alone."""
        record = family.to_dict()
        record["family_id"] = family.family_id or str(uuid.uuid4())
        record["camp_id"] = camp_id
        record.pop("created_at")

        created = Family.from_dict(self.remote.insert_one("families", record))
        logger.info(f"Family {created.family_number} created in camp {camp_id}")
        return created

    def add_members(self, family_id: str, members: Sequence[Individual]) -> List[Individual]:
        return [self._create_member(family_id, member) for member in members]

    def _create_member(self, family_id: str, member: Individual) -> Individual:
        member.individual_id = member.individual_id or str(uuid.uuid4())
        member.family_id = family_id
        record = member.to_record()
        record.pop("created_at")
        stored = self.remote.insert_one("individuals", record)

        health = member.health_record()
        if health:
            self.remote.insert_one("health_records", health)
        member.created_at = stored.get("created_at")
        return member

    def update_family(self, family: Family) -> Family:
        """
        Write edited family fields.

        The departure flag is left alone (see set_departed). A new number
        already held by another active family of the camp is rejected.
        """
        holder = self.find_active_family(family.camp_id, family.family_number)
        if holder and holder.family_id != family.family_id:
            raise DuplicateError(
                tr("duplicate.family_number_exists", family_number=family.family_number),
                family_number=family.family_number,
            )

        values = family.to_dict()
        for key in ("family_id", "created_at", "is_departed"):
            values.pop(key)
        rows = self.remote.update("families", {"family_id": family.family_id}, values)
        if not rows:
            raise RemoteOperationError(f"Family {family.family_id} not found")
        logger.info(f"Family {family.family_number} updated")
        return Family.from_dict(rows[0])

    def set_departed(self, family_id: str, departed: bool) -> Family:
        """
        Mark a family departed or active again.

        Reactivation is refused while another active family of the same
        camp holds the number.
        """
        family = self.get_family(family_id)
        if family is None:
            raise RemoteOperationError(f"Family {family_id} not found")

        if not departed and family.is_departed:
            holder = self.find_active_family(family.camp_id, family.family_number)
            if holder and holder.family_id != family_id:
                raise DuplicateError(
                    tr("duplicate.reactivate_conflict", family_number=family.family_number),
                    family_number=family.family_number,
                )

        rows = self.remote.update("families", {"family_id": family_id}, {"is_departed": bool(departed)})
        logger.info(f"Family {family.family_number} departed={bool(departed)}")
        return Family.from_dict(rows[0])

    def _delete_members(self, family_id: str):
        ids = [r["individual_id"] for r in self.remote.select("individuals", {"family_id": family_id})]
        if ids:
            self.remote.delete("health_records", {"individual_id": ids})
            self.remote.delete("individuals", {"family_id": family_id})

    def replace_members(self, family_id: str, members: Sequence[Individual]) -> List[Individual]:
        """Full replacement of a family's member list."""
        self._delete_members(family_id)
        created = []
        for member in members:
            member.individual_id = None
            created.append(self._create_member(family_id, member))
        return created

    def delete_family(self, family_id: str):
        self._delete_members(family_id)
        self.remote.delete("aid_deliveries", {"family_id": family_id})
        self.remote.delete("families", {"family_id": family_id})
        logger.info(f"Family {family_id} deleted")

    # ==================== Cross-camp duplicates ====================

    def _camp_names(self) -> Dict[str, str]:
        return {c["camp_id"]: c.get("name") for c in self.remote.select("camps")}

    def check_cross_camp_duplicates(self, family: Family, members: Sequence[Individual],
                                    user_name: str = None) -> int:
        """
        Alert about active families in other camps sharing national IDs.

        Saves already refuse IDs held by any active family, so this only
        fires when another client registered the same ID between that
        check and this save.

        Returns the number of notifications raised. Errors are logged and
        swallowed so that a save never fails because of this check.
        """
        try:
            return self._check_cross_camp_duplicates(family, members, user_name)
        except RemoteOperationError as e:
            logger.error(f"Cross-camp duplicate check failed: {e}")
            return 0

    def _check_cross_camp_duplicates(self, family, members, user_name) -> int:
        nids = [m.nid for m in members if m.nid and m.nid.strip()]
        if not nids or family.is_departed:
            return 0

        matches = self.remote.select("individuals", {"nid": nids})
        other_ids = list({m["family_id"] for m in matches if m["family_id"] != family.family_id})
        if not other_ids:
            return 0

        others = {
            f["family_id"]: f
            for f in self.remote.select("families", {"family_id": other_ids})
            if _is_active(f) and f.get("camp_id") != family.camp_id
        }
        if not others:
            return 0

        shared_count: Dict[str, int] = {}
        for match in matches:
            if match["family_id"] in others:
                shared_count[match["family_id"]] = shared_count.get(match["family_id"], 0) + 1

        camps = self._camp_names()
        members_by_family = self.get_members_by_family(list(others))
        head = head_name_by_priority(members)
        sent = 0
        for other_id, count in shared_count.items():
            other = others[other_id]
            message = tr(
                "notification.cross_camp",
                family_number=family.family_number,
                head=head,
                camp=camps.get(family.camp_id, family.camp_id),
                other_number=other.get("family_number"),
                other_head=head_name_by_priority(members_by_family.get(other_id, [])),
                other_camp=camps.get(other.get("camp_id"), other.get("camp_id")),
                count=count,
            )
            self.notifications.create(message, NotificationType.ALERT, user_name)
            sent += 1

        logger.info(f"Family {family.family_number}: {sent} cross-camp duplicate alert(s)")
        return sent

    def scan_existing_duplicates(self, user_name: str = None) -> ScanSummary:
        """One alert per pair of active families in different known camps sharing IDs."""
        camps = self._camp_names()
        families = {
            f["family_id"]: f
            for f in self.remote.select("families")
            if _is_active(f) and f.get("camp_id") in camps
        }
        members_by_family = self.get_members_by_family(list(families))

        by_nid: Dict[str, List[str]] = {}
        for family_id, members in members_by_family.items():
            for member in members:
                if member.nid and member.nid.strip():
                    by_nid.setdefault(member.nid, []).append(family_id)

        pairs: Dict[Tuple[str, str], set] = {}
        duplicate_nids = 0
        for nid, family_ids in by_nid.items():
            if len({families[f]["camp_id"] for f in family_ids}) < 2:
                continue
            duplicate_nids += 1
            for i, first in enumerate(family_ids):
                for second in family_ids[i + 1:]:
                    if families[first]["camp_id"] == families[second]["camp_id"]:
                        continue
                    key = tuple(sorted((first, second)))
                    pairs.setdefault(key, set()).add(nid)

        sent = 0
        for (first_id, second_id), nids in pairs.items():
            first, second = families[first_id], families[second_id]
            message = tr(
                "notification.pair_duplicate",
                family_number=first.get("family_number"),
                head=head_name_by_priority(members_by_family.get(first_id, [])),
                camp=camps[first["camp_id"]],
                other_number=second.get("family_number"),
                other_head=head_name_by_priority(members_by_family.get(second_id, [])),
                other_camp=camps[second["camp_id"]],
                count=len(nids),
            )
            self.notifications.create(message, NotificationType.ALERT, user_name)
            sent += 1

        logger.info(f"Duplicate scan: {duplicate_nids} shared IDs, {sent} notification(s)")
        return ScanSummary(duplicate_nids=duplicate_nids, notifications_sent=sent)
