"""Data models for the tournament blueprint."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TypedDict

from bracketeer.bracket.models import StructuredBracket
from bracketeer.core.types import FirestoreDocument


class TournamentStatus(str, Enum):
    """Lifecycle status of a tournament. Exactly one is active at a time."""

    DRAFT = "draft"
    REGISTRATION = "registration"
    CHECKIN = "checkin"
    UPCOMING = "upcoming"
    LIVE = "live"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"


class TournamentType(str, Enum):
    SINGLE_ELIM = "single_elim"
    DOUBLE_ELIM = "double_elim"
    SWISS = "swiss"
    ROUND_ROBIN = "round_robin"
    LEAGUE = "league"


class SeedingPolicy(str, Enum):
    """How the checked-in pool is ordered before round-1 pairing."""

    RANDOM = "random"
    LEADERBOARD = "leaderboard"
    MANUAL = "manual"


class AdvancementPolicy(str, Enum):
    """How winners move into later rounds, chosen once per tournament."""

    PER_MATCH = "per_match"
    PER_ROUND = "per_round"


@dataclass
class TournamentSettings:
    """Per-tournament configuration snapshot."""

    max_players: int = 0
    team_cap: Optional[int] = None
    seeding: SeedingPolicy = SeedingPolicy.RANDOM
    advancement: AdvancementPolicy = AdvancementPolicy.PER_ROUND
    seed_order: list[str] = field(default_factory=list)
    stream_required: bool = False
    disputes_allowed: bool = True
    check_in_required: bool = False
    allow_late_registration: bool = False
    registration_deadline: Optional[str] = None
    match_time_limit: Optional[int] = None

    @property
    def capacity(self) -> int:
        """Seats available in ``registered``; 0 means unlimited."""
        if self.team_cap is not None:
            return self.team_cap
        return self.max_players or 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "maxPlayers": self.max_players,
            "seeding": self.seeding.value,
            "advancement": self.advancement.value,
            "streamRequired": self.stream_required,
            "disputesAllowed": self.disputes_allowed,
            "checkInRequired": self.check_in_required,
            "allowLateRegistration": self.allow_late_registration,
        }
        if self.team_cap is not None:
            data["teamCap"] = self.team_cap
        if self.seed_order:
            data["seedOrder"] = list(self.seed_order)
        if self.registration_deadline:
            data["registrationDeadline"] = self.registration_deadline
        if self.match_time_limit is not None:
            data["matchTimeLimit"] = self.match_time_limit
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> TournamentSettings:
        data = data or {}
        team_cap = data.get("teamCap")
        return cls(
            max_players=int(data.get("maxPlayers") or 0),
            team_cap=int(team_cap) if team_cap is not None else None,
            seeding=SeedingPolicy(data.get("seeding") or SeedingPolicy.RANDOM.value),
            advancement=AdvancementPolicy(
                data.get("advancement") or AdvancementPolicy.PER_ROUND.value
            ),
            seed_order=list(data.get("seedOrder") or []),
            stream_required=bool(
                data.get("streamRequired", data.get("requiresStream", False))
            ),
            disputes_allowed=bool(data.get("disputesAllowed", True)),
            check_in_required=bool(data.get("checkInRequired", False)),
            allow_late_registration=bool(data.get("allowLateRegistration", False)),
            registration_deadline=data.get("registrationDeadline"),
            match_time_limit=data.get("matchTimeLimit"),
        )


@dataclass
class TournamentSlots:
    """Participant id sets, kept as insertion-ordered lists."""

    registered: list[str] = field(default_factory=list)
    waitlist: list[str] = field(default_factory=list)
    checked_in: list[str] = field(default_factory=list)
    late_entries: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "registered": list(self.registered),
            "waitlist": list(self.waitlist),
            "checkedIn": list(self.checked_in),
            "lateEntries": list(self.late_entries),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> TournamentSlots:
        data = data or {}
        return cls(
            registered=list(data.get("registered") or []),
            waitlist=list(data.get("waitlist") or []),
            checked_in=list(data.get("checkedIn") or []),
            late_entries=list(data.get("lateEntries") or []),
        )


# Document keys owned by the Tournament dataclass; anything else is carried
# through untouched on write.
_TOURNAMENT_FIELDS = {
    "name",
    "game",
    "status",
    "type",
    "settings",
    "slots",
    "bracket",
    "seasonId",
    "description",
    "winner",
    "archived",
    "archivedAt",
    "pruneAt",
    "createdBy",
    "createdAt",
    "updatedAt",
}


@dataclass
class Tournament:
    """Root aggregate: one Firestore document per tournament."""

    id: str
    name: str = ""
    game: str = ""
    status: TournamentStatus = TournamentStatus.DRAFT
    type: TournamentType = TournamentType.SINGLE_ELIM
    settings: TournamentSettings = field(default_factory=TournamentSettings)
    slots: TournamentSlots = field(default_factory=TournamentSlots)
    bracket: Optional[StructuredBracket] = None
    season_id: Optional[str] = None
    description: Optional[str] = None
    winner: Optional[str] = None
    archived: bool = False
    archived_at: Optional[str] = None
    prune_at: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data.update({
            "name": self.name,
            "game": self.game,
            "status": self.status.value,
            "type": self.type.value,
            "settings": self.settings.to_dict(),
            "slots": self.slots.to_dict(),
            "archived": self.archived,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        })
        optional = {
            "bracket": self.bracket.to_dict() if self.bracket is not None else None,
            "seasonId": self.season_id,
            "description": self.description,
            "winner": self.winner,
            "archivedAt": self.archived_at,
            "pruneAt": self.prune_at,
            "createdBy": self.created_by,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, tournament_id: str, data: dict[str, Any]) -> Tournament:
        bracket_data = data.get("bracket")
        audit = data.get("audit") or {}
        return cls(
            id=tournament_id,
            name=data.get("name", ""),
            game=data.get("game", ""),
            status=TournamentStatus(data.get("status") or TournamentStatus.DRAFT.value),
            type=TournamentType(data.get("type") or TournamentType.SINGLE_ELIM.value),
            settings=TournamentSettings.from_dict(data.get("settings")),
            slots=TournamentSlots.from_dict(data.get("slots")),
            bracket=(
                StructuredBracket.from_dict(bracket_data)
                if bracket_data is not None
                else None
            ),
            season_id=data.get("seasonId"),
            description=data.get("description"),
            winner=data.get("winner"),
            archived=bool(data.get("archived", False)),
            archived_at=data.get("archivedAt"),
            prune_at=data.get("pruneAt"),
            created_by=data.get("createdBy") or audit.get("createdBy"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            extra={k: v for k, v in data.items() if k not in _TOURNAMENT_FIELDS},
        )


class TournamentSeason(FirestoreDocument, total=False):
    """A league season document in Firestore."""

    name: str
    year: int
    quarter: int
    startDate: str
    endDate: str
    status: str  # upcoming/active/completed
    totalTournaments: int
    totalPrizePool: float


class TournamentStats(TypedDict):
    """Aggregate counters for an admin overview of one tournament."""

    status: str
    registered: int
    waitlisted: int
    checkedIn: int
    lateEntries: int
    rounds: int
    totalMatches: int
    completedMatches: int
    openDisputes: int
    champion: Optional[str]
