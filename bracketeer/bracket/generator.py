"""Seeding and round-1 generation for single-elimination brackets."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from bracketeer.tournament.models import SeedingPolicy

from .models import BracketMatch, MatchStatus, StructuredBracket, make_match_id

if TYPE_CHECKING:
    from bracketeer.tournament.models import Tournament

logger = logging.getLogger(__name__)


class BracketGenerator:
    """Builds the first round of a bracket from the checked-in pool."""

    @staticmethod
    def seed(
        players: list[str],
        policy: SeedingPolicy,
        rng: random.Random | None = None,
        seed_order: list[str] | None = None,
    ) -> list[str]:
        """Order ``players`` for pairing.

        ``random`` shuffles with ``rng``. ``leaderboard`` and ``manual`` keep
        the externally supplied order: ``seed_order`` first (restricted to the
        pool), then any remaining players in pool order.
        """
        seeded = list(players)
        if policy == SeedingPolicy.RANDOM:
            (rng or random.Random()).shuffle(seeded)
            return seeded

        if seed_order:
            pool = set(seeded)
            ordered = [p for p in dict.fromkeys(seed_order) if p in pool]
            placed = set(ordered)
            seeded = ordered + [p for p in seeded if p not in placed]
        return seeded

    @staticmethod
    def pair_round_one(tournament_id: str, seeded: list[str]) -> list[BracketMatch]:
        """Pair consecutive seeds. An odd last participant is left unpaired."""
        matches = []
        for i in range(0, len(seeded) - 1, 2):
            matches.append(
                BracketMatch(
                    match_id=make_match_id(tournament_id, 1, i // 2 + 1),
                    players=[seeded[i], seeded[i + 1]],
                    status=MatchStatus.PENDING,
                )
            )
        if len(seeded) % 2:
            logger.warning(
                "Tournament %s: %s left without an opponent in round 1",
                tournament_id,
                seeded[-1],
            )
        return matches

    @classmethod
    def generate(
        cls, tournament: Tournament, rng: random.Random | None = None
    ) -> StructuredBracket:
        """Return a one-round bracket for the tournament's checked-in players.

        An empty pool yields a bracket with no rounds. A lone player still gets
        a first round, with no matches.
        """
        pool = list(tournament.slots.checked_in)
        if not pool:
            logger.info("Tournament %s has no checked-in players", tournament.id)
            return StructuredBracket(rounds=[])

        settings = tournament.settings
        seeded = cls.seed(pool, settings.seeding, rng, settings.seed_order)
        bracket = StructuredBracket(rounds=[])
        bracket.append_round(cls.pair_round_one(tournament.id, seeded))
        logger.info(
            "Generated round 1 for %s: %d matches from %d players (%s seeding)",
            tournament.id,
            len(bracket.rounds[0].matches),
            len(pool),
            settings.seeding.value,
        )
        return bracket
