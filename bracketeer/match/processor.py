"""Recording results against bracket matches."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Optional

from bracketeer.bracket.advancement import BracketAdvancer
from bracketeer.bracket.models import MatchStatus
from bracketeer.errors import (
    AlreadySubmittedError,
    MatchNotFoundError,
    NotAParticipantError,
)
from bracketeer.utils import to_iso, utc_now

from .models import MatchReport, ScoreOutcome

if TYPE_CHECKING:
    from bracketeer.bracket.models import BracketMatch
    from bracketeer.tournament.models import Tournament

logger = logging.getLogger(__name__)


class MatchResultProcessor:
    """Applies results to the bracket of an in-memory tournament."""

    @staticmethod
    def report_result(
        tournament: Tournament,
        match_id: str,
        report: MatchReport,
        now: Optional[datetime.datetime] = None,
    ) -> BracketMatch:
        """Administrative override of a match result.

        Overwrites the supplied fields without checking that the winner is
        seated in the match. Status defaults to completed unless the report
        marks the match disputed.
        """
        if tournament.bracket is None:
            raise MatchNotFoundError(match_id)
        match = tournament.bracket.get_match(match_id)

        match.winner = report.winner
        if report.loser:
            match.loser = report.loser
        if report.score:
            match.score = dict(report.score)
        if report.stream_link:
            match.stream_link = report.stream_link
        if report.status == MatchStatus.DISPUTED:
            match.status = MatchStatus.DISPUTED
        else:
            match.status = MatchStatus.COMPLETED
            match.completed_at = to_iso(now or utc_now())

        logger.info(
            "Result for %s in %s set to %s (%s)",
            match_id,
            tournament.id,
            report.winner,
            match.status.value,
        )
        return match

    @staticmethod
    def record_score(
        tournament: Tournament,
        match_id: str,
        user_id: str,
        score: float,
        ticket_code: Optional[str] = None,
        now: Optional[datetime.datetime] = None,
    ) -> ScoreOutcome:
        """Record one player's self-reported score and resolve the match.

        The first submission only marks the match in progress. Once both
        players have reported, the higher score wins. An exact tie leaves the
        winner empty while still completing the match.
        """
        if tournament.bracket is None:
            raise MatchNotFoundError(match_id)
        bracket = tournament.bracket
        round_index, match_index = bracket.locate(match_id)
        match = bracket.match_at(round_index, match_index)

        if not match.has_player(user_id):
            raise NotAParticipantError(user_id, match_id)
        if user_id in match.score:
            raise AlreadySubmittedError(user_id, match_id)

        match.score[user_id] = score
        if ticket_code:
            match.ticket_codes[user_id] = ticket_code
        outcome = ScoreOutcome(match=match)

        if not match.is_full or any(p not in match.score for p in match.players):
            match.status = MatchStatus.IN_PROGRESS
            return outcome

        first, second = match.players[0], match.players[1]
        first_score, second_score = match.score[first], match.score[second]
        match.status = MatchStatus.COMPLETED
        match.completed_at = to_iso(now or utc_now())

        if first_score == second_score:
            match.winner = None
            match.loser = None
            outcome.tied = True
            logger.warning(
                "Match %s in %s tied %s-%s; needs an admin decision",
                match_id,
                tournament.id,
                first_score,
                second_score,
            )
            return outcome

        winner, loser = (first, second) if first_score > second_score else (second, first)
        match.winner = winner
        match.loser = loser
        outcome.decided = True

        BracketAdvancer.on_match_decided(
            bracket,
            tournament.id,
            round_index,
            match_index,
            tournament.settings.advancement,
        )
        outcome.champion = BracketAdvancer.complete_if_final(tournament, now)
        return outcome
