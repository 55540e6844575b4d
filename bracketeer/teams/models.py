"""Data models for tournament teams."""

from __future__ import annotations

from typing import TypedDict

from bracketeer.core.types import FirestoreDocument

TEAM_ROLES = ("captain", "member", "substitute")


class TeamMember(TypedDict, total=False):
    """Represents a player on a team roster."""

    playerId: str
    playerName: str
    playerTag: str
    role: str  # captain/member/substitute
    joinedAt: str


class TeamStats(TypedDict, total=False):
    wins: int
    losses: int
    draws: int
    pointDiff: int
    totalPoints: int
    totalPointsAgainst: int
    matchesPlayed: int
    customStats: dict[str, float]


def empty_stats() -> TeamStats:
    return TeamStats(
        wins=0,
        losses=0,
        draws=0,
        pointDiff=0,
        totalPoints=0,
        totalPointsAgainst=0,
        matchesPlayed=0,
        customStats={},
    )


class TournamentTeam(FirestoreDocument, total=False):
    """A team document in Firestore."""

    tournamentId: str
    teamName: str
    teamTag: str
    captainId: str
    members: list[TeamMember]
    registeredAt: str
    checkedIn: bool
    checkedInAt: str
    stats: TeamStats
