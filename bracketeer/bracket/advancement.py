"""Moving winners into later rounds."""

from __future__ import annotations

import datetime
import logging
import math
from typing import TYPE_CHECKING, Optional

from bracketeer.tournament.lifecycle import StatusStateMachine
from bracketeer.tournament.models import AdvancementPolicy, TournamentStatus

from .models import BracketMatch, MatchStatus, StructuredBracket, make_match_id

if TYPE_CHECKING:
    from bracketeer.tournament.models import Tournament

logger = logging.getLogger(__name__)


class BracketAdvancer:
    """Per-match promotion and whole-round advancement.

    Both modes return quietly when their preconditions are not met; callers
    re-check the bracket rather than rely on an error.
    """

    @staticmethod
    def promote_winner(
        bracket: StructuredBracket,
        tournament_id: str,
        round_index: int,
        match_index: int,
        ticket_code: Optional[str] = None,
    ) -> Optional[BracketMatch]:
        """Push one match winner into the first open slot of the next round.

        The next round is created on demand with ``ceil(n / 2)`` empty matches.
        The slot search is not position-aware: it takes the first match with
        fewer than two players. The winner's ticket code travels with them,
        taken from ``ticket_code`` or from the code they scored this match with.
        Returns the receiving match, if any.
        """
        match = bracket.match_at(round_index, match_index)
        if not match.winner:
            return None
        ticket_code = ticket_code or match.ticket_codes.get(match.winner)

        current_round = bracket.rounds[round_index]
        if len(current_round.matches) < 2 and round_index == len(bracket.rounds) - 1:
            # Single-match last round: this was the final.
            return None

        next_index = round_index + 1
        if next_index >= len(bracket.rounds):
            next_number = current_round.round_number + 1
            size = math.ceil(len(current_round.matches) / 2)
            bracket.append_round([
                BracketMatch(match_id=make_match_id(tournament_id, next_number, k + 1))
                for k in range(size)
            ])

        for candidate in bracket.rounds[next_index].matches:
            if candidate.has_player(match.winner):
                return candidate
            if not candidate.is_full:
                candidate.players.append(match.winner)
                if ticket_code:
                    candidate.ticket_codes[match.winner] = ticket_code
                logger.info(
                    "Promoted %s from %s into %s",
                    match.winner,
                    match.match_id,
                    candidate.match_id,
                )
                return candidate

        logger.warning(
            "No open slot in round %d for winner of %s",
            next_index + 1,
            match.match_id,
        )
        return None

    @classmethod
    def promote_override(
        cls,
        bracket: StructuredBracket,
        tournament_id: str,
        round_index: int,
        match_index: int,
        previous_winner: Optional[str] = None,
    ) -> Optional[BracketMatch]:
        """Promote the winner of an overridden match.

        When the override replaces a winner that was already promoted, the new
        winner takes that seat in the next round instead of a fresh one.
        """
        match = bracket.match_at(round_index, match_index)
        if not match.winner:
            return None

        next_index = round_index + 1
        if (
            previous_winner
            and previous_winner != match.winner
            and next_index < len(bracket.rounds)
        ):
            for candidate in bracket.rounds[next_index].matches:
                if not candidate.has_player(previous_winner):
                    continue
                seat = candidate.players.index(previous_winner)
                candidate.players[seat] = match.winner
                candidate.ticket_codes.pop(previous_winner, None)
                code = match.ticket_codes.get(match.winner)
                if code:
                    candidate.ticket_codes[match.winner] = code
                logger.info(
                    "Replaced %s with %s in %s after override of %s",
                    previous_winner,
                    match.winner,
                    candidate.match_id,
                    match.match_id,
                )
                return candidate

        return cls.promote_winner(bracket, tournament_id, round_index, match_index)

    @staticmethod
    def advance_round(bracket: StructuredBracket, tournament_id: str) -> bool:
        """Build the next round from the winners of the last round.

        Fewer than two winners is a no-op. Winners are paired in match order;
        an odd trailing winner gets a one-player match awaiting a bye.
        Returns True when a round was appended.
        """
        last_round = bracket.last_round
        if last_round is None:
            return False

        winners = last_round.winners
        if len(winners) < 2:
            return False

        codes = {
            m.winner: m.ticket_codes[m.winner]
            for m in last_round.matches
            if m.winner and m.winner in m.ticket_codes
        }
        next_number = last_round.round_number + 1
        matches = []
        for k, i in enumerate(range(0, len(winners), 2)):
            players = winners[i : i + 2]
            matches.append(
                BracketMatch(
                    match_id=make_match_id(tournament_id, next_number, k + 1),
                    players=players,
                    status=MatchStatus.PENDING,
                    ticket_codes={p: codes[p] for p in players if p in codes},
                )
            )
        bracket.append_round(matches)
        logger.info(
            "Advanced %s to round %d with %d matches",
            tournament_id,
            next_number,
            len(matches),
        )
        return True

    @classmethod
    def on_match_decided(
        cls,
        bracket: StructuredBracket,
        tournament_id: str,
        round_index: int,
        match_index: int,
        policy: AdvancementPolicy,
    ) -> None:
        """Apply the tournament's advancement policy after a decisive result."""
        if policy == AdvancementPolicy.PER_MATCH:
            cls.promote_winner(bracket, tournament_id, round_index, match_index)
            return

        round_ = bracket.rounds[round_index]
        is_last = round_index == len(bracket.rounds) - 1
        # A tied match is completed without a winner and holds the round back.
        if is_last and round_.is_complete and len(round_.winners) == len(round_.matches):
            cls.advance_round(bracket, tournament_id)

    @staticmethod
    def champion(bracket: Optional[StructuredBracket]) -> Optional[str]:
        """Winner of a resolved final, i.e. a single-match last round."""
        if bracket is None or bracket.last_round is None:
            return None
        final = bracket.last_round
        if len(final.matches) != 1:
            return None
        match = final.matches[0]
        if match.is_completed and match.winner:
            return match.winner
        return None

    @classmethod
    def complete_if_final(
        cls, tournament: Tournament, now: Optional[datetime.datetime] = None
    ) -> Optional[str]:
        """Record the champion and close a live tournament whose final resolved.

        A completed tournament whose final was overridden takes the new
        champion without another transition.
        """
        champion = cls.champion(tournament.bracket)
        if champion is None:
            return None
        if tournament.status == TournamentStatus.COMPLETED:
            if tournament.winner != champion:
                logger.info(
                    "Tournament %s winner corrected from %s to %s",
                    tournament.id,
                    tournament.winner,
                    champion,
                )
                tournament.winner = champion
            return champion
        if tournament.status != TournamentStatus.LIVE:
            return champion
        tournament.winner = champion
        StatusStateMachine.transition(tournament, TournamentStatus.COMPLETED, now)
        logger.info("Tournament %s won by %s", tournament.id, champion)
        return champion
