"""Data models for the match blueprint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from bracketeer.bracket.models import BracketMatch, MatchStatus


@dataclass
class MatchReport:
    """An administrative result for a bracket match."""

    winner: str
    loser: Optional[str] = None
    score: dict[str, float] = field(default_factory=dict)
    stream_link: Optional[str] = None
    status: Optional[MatchStatus] = None

    def validate(self) -> None:
        """Validate the report for obvious errors."""
        if not self.winner:
            raise ValueError("A winner is required.")
        if self.loser and self.loser == self.winner:
            raise ValueError("Winner and loser must differ.")
        if self.status not in (None, MatchStatus.COMPLETED, MatchStatus.DISPUTED):
            raise ValueError("Status must be 'completed' or 'disputed'.")


@dataclass
class ScoreOutcome:
    """What a single score submission did to its match."""

    match: BracketMatch
    decided: bool = False
    tied: bool = False
    champion: Optional[str] = None

    @property
    def winner(self) -> Optional[str]:
        return self.match.winner
