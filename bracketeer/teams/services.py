"""Service layer for team-related operations."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from bracketeer.core.constants import TEAMS_COLLECTION
from bracketeer.core.store import get_client
from bracketeer.errors import TeamNotFoundError, ValidationError
from bracketeer.utils import to_iso, utc_now

from .models import TEAM_ROLES, TeamMember, TeamStats, TournamentTeam, empty_stats

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference


class TeamService:
    """Service class for team-related operations."""

    @staticmethod
    def _get_team(
        db: Client, tournament_id: str, team_id: str
    ) -> tuple[DocumentReference, dict[str, Any]]:
        """Load a team that belongs to ``tournament_id`` or raise TeamNotFoundError."""
        ref = db.collection(TEAMS_COLLECTION).document(team_id)
        doc = cast("DocumentSnapshot", ref.get())
        data = doc.to_dict() if doc.exists else None
        if not data or data.get("tournamentId") != tournament_id:
            raise TeamNotFoundError(team_id)
        return ref, data

    @staticmethod
    def register_team(
        tournament_id: str,
        team_name: str,
        captain_id: str,
        members: list[TeamMember] | None = None,
        team_tag: str = "",
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> str:
        """Register a team for a tournament and return its ID."""
        if not team_name:
            raise ValidationError("A team name is required.")
        db = get_client(db)
        stamp = to_iso(now or utc_now())

        roster = list(members or [])
        if not any(m.get("playerId") == captain_id for m in roster):
            roster.insert(
                0, TeamMember(playerId=captain_id, role="captain", joinedAt=stamp)
            )

        payload: TournamentTeam = {
            "tournamentId": tournament_id,
            "teamName": team_name,
            "teamTag": team_tag,
            "captainId": captain_id,
            "members": roster,
            "registeredAt": stamp,
            "checkedIn": False,
            "stats": empty_stats(),
        }
        _, ref = db.collection(TEAMS_COLLECTION).add(payload)
        return str(ref.id)

    @staticmethod
    def unregister_team(
        tournament_id: str, team_id: str, db: Client | None = None
    ) -> None:
        db = get_client(db)
        ref, _ = TeamService._get_team(db, tournament_id, team_id)
        ref.delete()

    @staticmethod
    def check_in_team(
        tournament_id: str,
        team_id: str,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> None:
        db = get_client(db)
        ref, _ = TeamService._get_team(db, tournament_id, team_id)
        ref.update({"checkedIn": True, "checkedInAt": to_iso(now or utc_now())})

    @staticmethod
    def add_member(
        tournament_id: str,
        team_id: str,
        member: TeamMember,
        db: Client | None = None,
    ) -> None:
        """Append a member to the roster atomically."""
        if member.get("role", "member") not in TEAM_ROLES:
            raise ValidationError(f"Unknown team role: {member.get('role')}")
        db = get_client(db)
        ref, _ = TeamService._get_team(db, tournament_id, team_id)
        ref.update({"members": firestore.ArrayUnion([member])})

    @staticmethod
    def remove_member(
        tournament_id: str, team_id: str, player_id: str, db: Client | None = None
    ) -> None:
        db = get_client(db)
        ref, data = TeamService._get_team(db, tournament_id, team_id)
        members = [
            m for m in data.get("members", []) if m.get("playerId") != player_id
        ]
        ref.update({"members": members})

    @staticmethod
    def update_stats(
        tournament_id: str,
        team_id: str,
        stats: TeamStats,
        db: Client | None = None,
    ) -> TeamStats:
        """Merge ``stats`` into the team's current stats."""
        db = get_client(db)
        ref, data = TeamService._get_team(db, tournament_id, team_id)
        merged = cast(TeamStats, {**(data.get("stats") or {}), **stats})
        ref.update({"stats": merged})
        return merged

    @staticmethod
    def list_teams(tournament_id: str, db: Client | None = None) -> list[TournamentTeam]:
        db = get_client(db)
        docs = (
            db.collection(TEAMS_COLLECTION)
            .where(filter=firestore.FieldFilter("tournamentId", "==", tournament_id))
            .stream()
        )
        return [
            cast(TournamentTeam, {**(doc.to_dict() or {}), "id": doc.id}) for doc in docs
        ]
