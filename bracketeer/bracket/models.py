"""Data models for structured brackets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from bracketeer.core.constants import MATCH_ID_TEMPLATE
from bracketeer.errors import MatchNotFoundError


class MatchStatus(str, Enum):
    """Lifecycle of a single bracket match."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DISPUTED = "disputed"


def make_match_id(tournament_id: str, round_number: int, match_number: int) -> str:
    """Build the deterministic id of a bracket match (1-based numbers)."""
    return MATCH_ID_TEMPLATE.format(
        tournament_id=tournament_id,
        round_number=round_number,
        match_number=match_number,
    )


@dataclass
class BracketMatch:
    """A pairing inside a bracket round."""

    match_id: str
    players: list[str] = field(default_factory=list)
    winner: Optional[str] = None
    loser: Optional[str] = None
    score: dict[str, float] = field(default_factory=dict)
    status: MatchStatus = MatchStatus.PENDING
    stream_link: Optional[str] = None
    ticket_codes: dict[str, str] = field(default_factory=dict)
    completed_at: Optional[str] = None

    @property
    def is_full(self) -> bool:
        """Whether both player slots are taken."""
        return len(self.players) >= 2

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    def has_player(self, player_id: str) -> bool:
        return player_id in self.players

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "matchId": self.match_id,
            "players": list(self.players),
            "status": self.status.value,
        }
        if self.winner is not None:
            data["winner"] = self.winner
        if self.loser is not None:
            data["loser"] = self.loser
        if self.score:
            data["score"] = dict(self.score)
        if self.stream_link:
            data["streamLink"] = self.stream_link
        if self.ticket_codes:
            data["ticketCodes"] = dict(self.ticket_codes)
        if self.completed_at:
            data["completedAt"] = self.completed_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BracketMatch:
        return cls(
            match_id=data["matchId"],
            players=[p for p in data.get("players") or [] if p],
            winner=data.get("winner"),
            loser=data.get("loser"),
            score=dict(data.get("score") or {}),
            status=MatchStatus(data.get("status") or MatchStatus.PENDING.value),
            stream_link=data.get("streamLink"),
            ticket_codes=dict(data.get("ticketCodes") or {}),
            completed_at=data.get("completedAt"),
        )


@dataclass
class BracketRound:
    """One round of a bracket. Round numbers are 1-based with no gaps."""

    round_number: int
    matches: list[BracketMatch] = field(default_factory=list)

    @property
    def winners(self) -> list[str]:
        """Winners of this round, in match order."""
        return [m.winner for m in self.matches if m.winner]

    @property
    def is_complete(self) -> bool:
        """Whether every match of the round has been completed."""
        return bool(self.matches) and all(m.is_completed for m in self.matches)

    def to_dict(self) -> dict[str, Any]:
        return {
            "roundNumber": self.round_number,
            "matches": [m.to_dict() for m in self.matches],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BracketRound:
        return cls(
            round_number=int(data["roundNumber"]),
            matches=[BracketMatch.from_dict(m) for m in data.get("matches") or []],
        )


@dataclass
class StructuredBracket:
    """Ordered list of rounds with an index from match id to position.

    Matches are addressed by ``(round_index, match_index)``, both 0-based.
    """

    rounds: list[BracketRound] = field(default_factory=list)
    _index: dict[str, tuple[int, int]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self.reindex()

    def reindex(self) -> None:
        """Rebuild the match id index after the round list changed."""
        self._index = {
            match.match_id: (r_idx, m_idx)
            for r_idx, round_ in enumerate(self.rounds)
            for m_idx, match in enumerate(round_.matches)
        }

    @property
    def last_round(self) -> Optional[BracketRound]:
        return self.rounds[-1] if self.rounds else None

    def locate(self, match_id: str) -> tuple[int, int]:
        """Return the position of ``match_id`` or raise MatchNotFoundError."""
        try:
            return self._index[match_id]
        except KeyError:
            raise MatchNotFoundError(match_id) from None

    def get_match(self, match_id: str) -> BracketMatch:
        round_index, match_index = self.locate(match_id)
        return self.rounds[round_index].matches[match_index]

    def match_at(self, round_index: int, match_index: int) -> BracketMatch:
        return self.rounds[round_index].matches[match_index]

    def append_round(self, matches: list[BracketMatch]) -> BracketRound:
        """Append the next round and index its matches."""
        round_ = BracketRound(round_number=len(self.rounds) + 1, matches=matches)
        self.rounds.append(round_)
        round_index = len(self.rounds) - 1
        for m_idx, match in enumerate(matches):
            self._index[match.match_id] = (round_index, m_idx)
        return round_

    def all_matches(self) -> list[BracketMatch]:
        return [m for round_ in self.rounds for m in round_.matches]

    def to_dict(self) -> dict[str, Any]:
        return {"rounds": [r.to_dict() for r in self.rounds]}

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> StructuredBracket:
        rounds = [BracketRound.from_dict(r) for r in (data or {}).get("rounds") or []]
        rounds.sort(key=lambda r: r.round_number)
        return cls(rounds=rounds)
