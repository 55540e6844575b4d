"""Service layer for player-reported match scores."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING

from bracketeer.core.store import get_client
from bracketeer.errors import InvalidTicketError
from bracketeer.ticket.services import TicketService
from bracketeer.tournament.repository import mutate_tournament
from bracketeer.utils import utc_now

from .models import ScoreOutcome
from .processor import MatchResultProcessor

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from bracketeer.tournament.models import Tournament

logger = logging.getLogger(__name__)


class MatchService:
    """Ticket-gated self-reporting of match scores."""

    @staticmethod
    def submit_score(
        user_id: str,
        competition_id: str,
        match_id: str,
        ticket_code: str,
        score: float,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> ScoreOutcome:
        """Record ``user_id``'s score for a bracket match.

        The ticket is validated in its own read, separate from the tournament
        transaction, so two submissions racing on one ticket can both pass.
        """
        db = get_client(db)
        now = now or utc_now()

        if not TicketService.validate(ticket_code, competition_id, db=db, now=now):
            logger.warning(
                "Rejected score from %s for %s: invalid ticket", user_id, match_id
            )
            raise InvalidTicketError()

        def _submit(tournament: Tournament) -> ScoreOutcome:
            return MatchResultProcessor.record_score(
                tournament, match_id, user_id, score, ticket_code=ticket_code, now=now
            )

        outcome = mutate_tournament(competition_id, _submit, db=db, now=now)
        logger.info(
            "Score %s submitted by %s in %s, match %s (%s)",
            score,
            user_id,
            competition_id,
            match_id,
            outcome.match.status.value,
        )
        return outcome
