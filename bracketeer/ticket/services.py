"""Service layer for issuing and validating match-entry tickets."""

from __future__ import annotations

import datetime
import logging
import secrets
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore

from bracketeer.core.constants import (
    DEFAULT_TICKET_TTL_MINUTES,
    TICKET_CODE_ALPHABET,
    TICKET_CODE_LENGTH,
    TICKETS_COLLECTION,
)
from bracketeer.core.store import get_client
from bracketeer.utils import to_iso, utc_now

from .models import Ticket

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from bracketeer.bracket.models import BracketMatch

logger = logging.getLogger(__name__)


def generate_code(length: int = TICKET_CODE_LENGTH) -> str:
    """Generate an uppercase alphanumeric ticket code.

    No collision check is made against existing codes.
    """
    return "".join(secrets.choice(TICKET_CODE_ALPHABET) for _ in range(length))


class TicketService:
    """Issues, validates and retires single-use tickets."""

    @staticmethod
    def _find(
        db: Client, code: str, competition_id: Optional[str] = None
    ) -> Optional[DocumentSnapshot]:
        query = db.collection(TICKETS_COLLECTION).where(
            filter=firestore.FieldFilter("code", "==", code)
        )
        if competition_id is not None:
            query = query.where(
                filter=firestore.FieldFilter("competitionId", "==", competition_id)
            )
        for doc in query.limit(1).stream():
            return doc
        return None

    @staticmethod
    def issue(
        user_id: str,
        competition_id: str,
        round_id: Optional[str] = None,
        match_id: Optional[str] = None,
        ttl_minutes: int = DEFAULT_TICKET_TTL_MINUTES,
        db: Client | None = None,
        now: datetime.datetime | None = None,
        code_length: int = TICKET_CODE_LENGTH,
    ) -> str:
        """Issue a ticket and return its code."""
        db = get_client(db)
        now = now or utc_now()
        ticket = Ticket(
            code=generate_code(code_length),
            user_id=user_id,
            competition_id=competition_id,
            round_id=round_id,
            match_id=match_id,
            valid=True,
            issued_at=to_iso(now),
            expires_at=to_iso(now + datetime.timedelta(minutes=ttl_minutes)),
        )
        db.collection(TICKETS_COLLECTION).add(ticket.to_dict())
        logger.info(
            "Issued ticket for user %s in %s (match %s)", user_id, competition_id, match_id
        )
        return ticket.code

    @staticmethod
    def issue_for_match(
        competition_id: str,
        match: BracketMatch,
        round_id: Optional[str] = None,
        ttl_minutes: int = DEFAULT_TICKET_TTL_MINUTES,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> dict[str, str]:
        """Issue one ticket per seated player of ``match``, keyed by player id."""
        db = get_client(db)
        return {
            player_id: TicketService.issue(
                player_id,
                competition_id,
                round_id=round_id,
                match_id=match.match_id,
                ttl_minutes=ttl_minutes,
                db=db,
                now=now,
            )
            for player_id in match.players
        }

    @staticmethod
    def get_ticket(
        code: str, competition_id: Optional[str] = None, db: Client | None = None
    ) -> Optional[Ticket]:
        """Fetch a ticket by code, optionally scoped to a competition."""
        doc = TicketService._find(get_client(db), code, competition_id)
        if doc is None:
            return None
        return Ticket.from_dict(doc.to_dict() or {}, ticket_id=doc.id)

    @staticmethod
    def validate(
        code: str,
        competition_id: str,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> bool:
        """Check that a ticket exists, is flagged valid and has not expired.

        An expired ticket still flagged valid is invalidated on this read.
        """
        db = get_client(db)
        now = now or utc_now()
        doc = TicketService._find(db, code, competition_id)
        if doc is None:
            return False

        ticket = Ticket.from_dict(doc.to_dict() or {}, ticket_id=doc.id)
        if not ticket.valid:
            return False
        if ticket.is_expired(now):
            doc.reference.update({"valid": False, "invalidatedAt": to_iso(now)})
            logger.warning("Ticket for user %s in %s expired", ticket.user_id, competition_id)
            return False
        return True

    @staticmethod
    def _retire(
        code: str,
        competition_id: Optional[str],
        updates: dict[str, Any],
        db: Client | None,
    ) -> bool:
        doc = TicketService._find(get_client(db), code, competition_id)
        if doc is None:
            return False
        doc.reference.update({"valid": False, **updates})
        return True

    @staticmethod
    def revoke(
        code: str,
        competition_id: Optional[str] = None,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> bool:
        """Flip a ticket to invalid. Returns False when no ticket matches."""
        revoked = TicketService._retire(
            code, competition_id, {"revokedAt": to_iso(now or utc_now())}, db
        )
        if revoked:
            logger.info("Ticket revoked in %s", competition_id or "any competition")
        return revoked

    @staticmethod
    def mark_used(
        code: str,
        used_by: str,
        competition_id: Optional[str] = None,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> bool:
        """Consume a ticket on behalf of ``used_by``."""
        return TicketService._retire(
            code,
            competition_id,
            {"usedAt": to_iso(now or utc_now()), "usedBy": used_by},
            db,
        )
