"""Tournament status state machine."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING

from bracketeer.core.constants import ARCHIVE_RETENTION_DAYS
from bracketeer.errors import InvalidTransitionError
from bracketeer.utils import to_iso, utc_now

from .models import TournamentStatus

if TYPE_CHECKING:
    from .models import Tournament

logger = logging.getLogger(__name__)

Status = TournamentStatus

# Exhaustive: any status not listed here has no outgoing edges.
ALLOWED_TRANSITIONS: dict[TournamentStatus, frozenset[TournamentStatus]] = {
    Status.DRAFT: frozenset({Status.REGISTRATION}),
    Status.REGISTRATION: frozenset({Status.CHECKIN, Status.ARCHIVED}),
    Status.CHECKIN: frozenset({Status.LIVE, Status.ARCHIVED}),
    Status.LIVE: frozenset({Status.COMPLETED, Status.ARCHIVED}),
    Status.COMPLETED: frozenset({Status.ARCHIVED}),
}


def can_transition(from_status: TournamentStatus, to_status: TournamentStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


class StatusStateMachine:
    """Validates and applies lifecycle transitions.

    The machine never decides when to move; callers do. It only checks the
    edge and writes the new status onto the in-memory tournament.
    """

    @staticmethod
    def transition(
        tournament: Tournament,
        target: TournamentStatus | str,
        now: datetime.datetime | None = None,
        retention_days: int = ARCHIVE_RETENTION_DAYS,
    ) -> Tournament:
        """Move ``tournament`` to ``target`` or raise InvalidTransitionError."""
        current = tournament.status
        try:
            target = TournamentStatus(target)
        except ValueError:
            raise InvalidTransitionError(current.value, str(target)) from None

        if not can_transition(current, target):
            raise InvalidTransitionError(current.value, target.value)

        now = now or utc_now()
        tournament.status = target
        tournament.updated_at = to_iso(now)

        if target == TournamentStatus.ARCHIVED:
            tournament.archived = True
            tournament.archived_at = to_iso(now)
            tournament.prune_at = to_iso(now + datetime.timedelta(days=retention_days))

        logger.info(
            "Tournament %s moved %s -> %s", tournament.id, current.value, target.value
        )
        return tournament
