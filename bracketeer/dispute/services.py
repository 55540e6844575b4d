"""Service layer for match disputes."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Optional, cast

from firebase_admin import firestore

from bracketeer.core.constants import DISPUTES_COLLECTION
from bracketeer.core.store import get_client, read_document
from bracketeer.errors import ValidationError
from bracketeer.utils import to_iso, utc_now

from .models import ACTIVE_DISPUTE_STATUSES, DisputeStatus, MatchDispute

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


class DisputeService:
    """Records and resolves contested match outcomes.

    Disputes never change a match's recorded winner; corrections go through
    the administrative result override.
    """

    @staticmethod
    def report(
        match_id: str,
        reported_by: str,
        reason: str,
        description: str = "",
        tournament_id: Optional[str] = None,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> str:
        """Open a dispute against a match and return its ID."""
        if not reason:
            raise ValidationError("A dispute reason is required.")
        db = get_client(db)
        payload = {
            "matchId": match_id,
            "reportedBy": reported_by,
            "reason": reason,
            "description": description,
            "status": DisputeStatus.OPEN.value,
            "createdAt": to_iso(now or utc_now()),
        }
        if tournament_id:
            payload["tournamentId"] = tournament_id
        _, ref = db.collection(DISPUTES_COLLECTION).add(payload)
        logger.info("Dispute %s opened on %s by %s", ref.id, match_id, reported_by)
        return str(ref.id)

    @staticmethod
    def get_dispute(dispute_id: str, db: Client | None = None) -> MatchDispute:
        db = get_client(db)
        ref = db.collection(DISPUTES_COLLECTION).document(dispute_id)
        data = read_document(ref, label="Dispute")
        return cast(MatchDispute, {**data, "id": dispute_id})

    @staticmethod
    def _set_status(
        dispute_id: str, status: DisputeStatus, db: Client | None, **fields: str
    ) -> None:
        db = get_client(db)
        ref = db.collection(DISPUTES_COLLECTION).document(dispute_id)
        read_document(ref, label="Dispute")
        ref.update({"status": status.value, **fields})

    @staticmethod
    def review(dispute_id: str, db: Client | None = None) -> None:
        """Mark a dispute as under review."""
        DisputeService._set_status(dispute_id, DisputeStatus.UNDER_REVIEW, db)

    @staticmethod
    def resolve(
        dispute_id: str,
        resolution: str,
        resolved_by: str,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> None:
        """Close a dispute with a resolution. The match is left untouched."""
        DisputeService._set_status(
            dispute_id,
            DisputeStatus.RESOLVED,
            db,
            resolution=resolution,
            resolvedBy=resolved_by,
            resolvedAt=to_iso(now or utc_now()),
        )
        logger.info("Dispute %s resolved by %s", dispute_id, resolved_by)

    @staticmethod
    def dismiss(
        dispute_id: str,
        resolved_by: str,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> None:
        DisputeService._set_status(
            dispute_id,
            DisputeStatus.DISMISSED,
            db,
            resolvedBy=resolved_by,
            resolvedAt=to_iso(now or utc_now()),
        )

    @staticmethod
    def list_for_match(match_id: str, db: Client | None = None) -> list[MatchDispute]:
        db = get_client(db)
        docs = (
            db.collection(DISPUTES_COLLECTION)
            .where(filter=firestore.FieldFilter("matchId", "==", match_id))
            .stream()
        )
        return [
            cast(MatchDispute, {**(doc.to_dict() or {}), "id": doc.id}) for doc in docs
        ]

    @staticmethod
    def count_open(match_ids: list[str], db: Client | None = None) -> int:
        """Count open or under-review disputes across ``match_ids``."""
        db = get_client(db)
        return sum(
            1
            for match_id in match_ids
            for dispute in DisputeService.list_for_match(match_id, db=db)
            if dispute.get("status") in ACTIVE_DISPUTE_STATUSES
        )
