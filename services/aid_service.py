# -*- coding: utf-8 -*-
"""
Aid distribution: parcels per camp and their delivery to families.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from models.aid import AidDelivery, AidParcel, ParcelStatus
from services.family_service import FamilyService, find_head_of_family
from services.remote_store import RemoteStore
from services.translation_manager import tr
from utils.datetime_utils import today_iso
from utils.helpers import cell_text, parse_int
from utils.logger import get_logger

logger = get_logger(__name__)

PARCELS = "parcels"
DELIVERIES = "aid_deliveries"


@dataclass
class Beneficiary:
    """An active family as seen from the distribution screen."""
    family_id: str
    family_number: str
    head_name: str
    head_nid: str
    delegate: str
    size: int
    received_parcels: List[str] = field(default_factory=list)

    def has_received(self, parcel_id: str) -> bool:
        return parcel_id in self.received_parcels


@dataclass
class AssignSummary:
    added: int = 0
    skipped: int = 0


class AidService:
    """Parcels, deliveries and bulk distribution."""

    def __init__(self, remote: RemoteStore, family_service: FamilyService = None):
        self.remote = remote
        self.family_service = family_service or FamilyService(remote)

    # ==================== Parcels ====================

    def list_parcels(self, camp_id: str = None) -> List[AidParcel]:
        filters = {"camp_id": camp_id} if camp_id else None
        return [AidParcel.from_dict(r) for r in self.remote.select(PARCELS, filters, order="-created_at")]

    def get_parcel(self, parcel_id: str) -> Optional[AidParcel]:
        row = self.remote.select_one(PARCELS, {"parcel_id": parcel_id})
        return AidParcel.from_dict(row) if row else None

    def create_parcel(self, camp_id: str, name: str, parcel_date: str = None) -> AidParcel:
        """New active parcel numbered after the camp's highest display id."""
        last = self.remote.select_one(PARCELS, {"camp_id": camp_id}, order="-display_id")
        next_id = (parse_int(last.get("display_id")) or 0) + 1 if last else 1

        row = self.remote.insert_one(PARCELS, {
            "camp_id": camp_id,
            "display_id": next_id,
            "name": name.strip(),
            "date": parcel_date or today_iso(),
            "status": ParcelStatus.ACTIVE.value,
        })
        logger.info(f"Parcel #{next_id} '{name}' created in camp {camp_id}")
        return AidParcel.from_dict(row)

    def complete_parcel(self, parcel_id: str) -> Optional[AidParcel]:
        rows = self.remote.update(PARCELS, {"parcel_id": parcel_id},
                                  {"status": ParcelStatus.COMPLETED.value})
        return AidParcel.from_dict(rows[0]) if rows else None

    def delete_parcel(self, parcel_id: str):
        removed = self.remote.delete(DELIVERIES, {"parcel_id": parcel_id})
        self.remote.delete(PARCELS, {"parcel_id": parcel_id})
        logger.info(f"Parcel {parcel_id} deleted with {removed} delivery record(s)")

    # ==================== Deliveries ====================

    def family_deliveries(self, family_id: str) -> List[AidDelivery]:
        return [AidDelivery.from_dict(r) for r in self.remote.select(DELIVERIES, {"family_id": family_id})]

    def add_delivery(self, family_id: str, parcel_id: str = None, items: str = None,
                     recipient: str = None, notes: str = None,
                     delivery_date: str = None) -> AidDelivery:
        """
        Record a delivery.

        A family receives a given parcel at most once; repeating the call
        returns the existing record.
        """
        if parcel_id:
            existing = self.remote.select_one(DELIVERIES, {"family_id": family_id, "parcel_id": parcel_id})
            if existing:
                logger.debug(f"Parcel {parcel_id} already delivered to family {family_id}")
                return AidDelivery.from_dict(existing)

        row = self.remote.insert_one(DELIVERIES, {
            "family_id": family_id,
            "parcel_id": parcel_id,
            "items": items,
            "date": delivery_date or today_iso(),
            "recipient": recipient,
            "notes": notes,
        })
        return AidDelivery.from_dict(row)

    def delete_delivery(self, delivery_id: str) -> bool:
        return self.remote.delete(DELIVERIES, {"delivery_id": delivery_id}) > 0

    # ==================== Distribution ====================

    def beneficiaries(self, camp_id: str) -> List[Beneficiary]:
        """Active families of a camp with their head and received parcels."""
        families = self.family_service.get_active_families(camp_id)
        ids = [f.family_id for f in families]
        members = self.family_service.get_members_by_family(ids) if ids else {}

        received: Dict[str, List[str]] = {}
        for row in (self.remote.select(DELIVERIES, {"family_id": ids}) if ids else []):
            if row.get("parcel_id"):
                received.setdefault(row["family_id"], []).append(row["parcel_id"])

        result = []
        for family in families:
            family_members = members.get(family.family_id, [])
            head = find_head_of_family(family_members)
            result.append(Beneficiary(
                family_id=family.family_id,
                family_number=family.family_number,
                head_name=head.name if head else tr("common.no_members"),
                head_nid=(head.nid or "") if head else "",
                delegate=family.delegate or tr("common.unassigned"),
                size=len(family_members),
                received_parcels=received.get(family.family_id, []),
            ))
        return result

    def bulk_assign(self, parcel_id: str, family_ids: Iterable[str], camp_id: str) -> AssignSummary:
        """Deliver a parcel to every listed family that has not received it yet."""
        parcel = self.get_parcel(parcel_id)
        if parcel is None:
            raise ValueError(f"Unknown parcel {parcel_id}")

        by_id = {b.family_id: b for b in self.beneficiaries(camp_id)}
        summary = AssignSummary()
        for family_id in family_ids:
            beneficiary = by_id.get(family_id)
            if beneficiary is None or beneficiary.has_received(parcel_id):
                summary.skipped += 1
                continue
            self.add_delivery(
                family_id, parcel_id,
                items=parcel.name,
                recipient=beneficiary.head_name,
                notes=tr("aid.bulk_note"),
            )
            beneficiary.received_parcels.append(parcel_id)
            summary.added += 1

        logger.info(f"Parcel {parcel.display_id}: {summary.added} delivered, {summary.skipped} skipped")
        return summary

    def import_deliveries(self, rows: Sequence[Sequence[Any]], camp_id: str) -> int:
        """
        Record deliveries listed as (head national ID, parcel display id) rows.

        The first row is a header. Rows naming an unknown head or parcel,
        or a parcel the family already received, are ignored.
        """
        heads = {b.head_nid: b for b in self.beneficiaries(camp_id) if b.head_nid}
        parcels = {p.display_id: p for p in self.list_parcels(camp_id)}

        count = 0
        for row in list(rows)[1:]:
            nid = cell_text(row[0]) if len(row) > 0 else ""
            display_id = parse_int(cell_text(row[1])) if len(row) > 1 else None
            if not nid or display_id is None:
                continue

            beneficiary = heads.get(nid)
            parcel = parcels.get(display_id)
            if beneficiary is None or parcel is None or beneficiary.has_received(parcel.parcel_id):
                continue

            self.add_delivery(
                beneficiary.family_id, parcel.parcel_id,
                items=parcel.name,
                recipient=beneficiary.head_name,
                notes=tr("aid.import_note"),
            )
            beneficiary.received_parcels.append(parcel.parcel_id)
            count += 1

        logger.info(f"Imported {count} deliveries into camp {camp_id}")
        return count
