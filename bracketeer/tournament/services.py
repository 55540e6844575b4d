"""Service layer for tournament lifecycle, roster and bracket operations."""

from __future__ import annotations

import datetime
import logging
import random
from typing import TYPE_CHECKING, Any, Optional, cast

from firebase_admin import firestore

from bracketeer.audit import log_admin_action
from bracketeer.bracket.advancement import BracketAdvancer
from bracketeer.bracket.generator import BracketGenerator
from bracketeer.core.constants import (
    ARCHIVE_RETENTION_DAYS,
    SEASONS_COLLECTION,
    TOURNAMENTS_COLLECTION,
)
from bracketeer.core.store import get_client
from bracketeer.dispute.services import DisputeService
from bracketeer.errors import NotFoundError, ValidationError
from bracketeer.match.models import MatchReport
from bracketeer.match.processor import MatchResultProcessor
from bracketeer.utils import parse_iso, to_iso, utc_now

from .lifecycle import StatusStateMachine
from .models import (
    AdvancementPolicy,
    Tournament,
    TournamentSettings,
    TournamentStats,
    TournamentStatus,
    TournamentType,
)
from .repository import load_tournament, mutate_tournament, tournament_ref
from .slots import SlotManager

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from bracketeer.bracket.models import BracketMatch, StructuredBracket

    from .models import TournamentSeason

logger = logging.getLogger(__name__)


class TournamentService:
    """Handles business logic and data access for tournaments."""

    @staticmethod
    def create_draft(
        admin_id: str,
        data: dict[str, Any],
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> str:
        """Create a tournament in draft status and return its ID."""
        db = get_client(db)
        stamp = to_iso(now or utc_now())
        try:
            tournament = Tournament(
                id="",
                name=data["name"],
                game=data.get("game", ""),
                type=TournamentType(data.get("type") or TournamentType.SINGLE_ELIM.value),
                settings=TournamentSettings.from_dict(data.get("settings")),
                season_id=data.get("seasonId"),
                description=data.get("description"),
                created_by=admin_id,
                created_at=stamp,
                updated_at=stamp,
            )
        except (KeyError, ValueError) as e:
            raise ValidationError(f"Invalid tournament data: {e}") from e

        _, ref = db.collection(TOURNAMENTS_COLLECTION).add(tournament.to_dict())
        log_admin_action(
            admin_id, "create_tournament", {"tournamentId": ref.id}, db=db
        )
        logger.info("Created draft tournament %s (%s)", ref.id, tournament.name)
        return str(ref.id)

    @staticmethod
    def get_tournament(tournament_id: str, db: Client | None = None) -> Tournament:
        """Fetch a tournament or raise NotFoundError."""
        return load_tournament(tournament_id, db)

    @staticmethod
    def list_tournaments(
        status: Optional[str] = None,
        game: Optional[str] = None,
        season_id: Optional[str] = None,
        limit: Optional[int] = None,
        db: Client | None = None,
    ) -> list[Tournament]:
        """List tournaments matching the filters, newest first."""
        db = get_client(db)
        query: Any = db.collection(TOURNAMENTS_COLLECTION)
        for field_path, value in (
            ("status", status),
            ("game", game),
            ("seasonId", season_id),
        ):
            if value is not None:
                query = query.where(filter=firestore.FieldFilter(field_path, "==", value))

        # Sorted client-side to avoid a composite index per filter combination.
        tournaments = [
            Tournament.from_dict(doc.id, doc.to_dict() or {}) for doc in query.stream()
        ]
        tournaments.sort(key=lambda t: t.created_at or "", reverse=True)
        return tournaments[:limit] if limit else tournaments

    # Lifecycle

    @staticmethod
    def transition_status(
        tournament_id: str,
        target: TournamentStatus | str,
        db: Client | None = None,
        now: datetime.datetime | None = None,
        retention_days: int = ARCHIVE_RETENTION_DAYS,
    ) -> Tournament:
        """Move a tournament along a legal lifecycle edge."""
        now = now or utc_now()
        return mutate_tournament(
            tournament_id,
            lambda t: StatusStateMachine.transition(t, target, now, retention_days),
            db=db,
            now=now,
        )

    @staticmethod
    def finalize(tournament_id: str, db: Client | None = None) -> Tournament:
        return TournamentService.transition_status(
            tournament_id, TournamentStatus.COMPLETED, db=db
        )

    @staticmethod
    def archive(
        tournament_id: str,
        db: Client | None = None,
        retention_days: int = ARCHIVE_RETENTION_DAYS,
    ) -> Tournament:
        return TournamentService.transition_status(
            tournament_id,
            TournamentStatus.ARCHIVED,
            db=db,
            retention_days=retention_days,
        )

    @staticmethod
    def prune_archived(
        db: Client | None = None, now: datetime.datetime | None = None
    ) -> list[str]:
        """Delete archived tournaments whose retention window has passed."""
        db = get_client(db)
        now = now or utc_now()
        pruned = []
        archived = (
            db.collection(TOURNAMENTS_COLLECTION)
            .where(filter=firestore.FieldFilter("archived", "==", True))
            .stream()
        )
        for doc in archived:
            prune_at = parse_iso((doc.to_dict() or {}).get("pruneAt"))
            if prune_at is not None and prune_at <= now:
                doc.reference.delete()
                pruned.append(doc.id)
        if pruned:
            logger.info("Pruned %d archived tournaments", len(pruned))
        return pruned

    # Roster

    @staticmethod
    def register_player(
        tournament_id: str, participant_id: str, db: Client | None = None
    ) -> bool:
        """Register a participant, overflowing into the waitlist."""
        return mutate_tournament(
            tournament_id, lambda t: SlotManager.register(t, participant_id), db=db
        )

    @staticmethod
    def unregister_player(
        tournament_id: str, participant_id: str, db: Client | None = None
    ) -> bool:
        return mutate_tournament(
            tournament_id, lambda t: SlotManager.unregister(t, participant_id), db=db
        )

    @staticmethod
    def check_in_player(
        tournament_id: str, participant_id: str, db: Client | None = None
    ) -> bool:
        return mutate_tournament(
            tournament_id, lambda t: SlotManager.check_in(t, participant_id), db=db
        )

    @staticmethod
    def add_late_entry(
        tournament_id: str, participant_id: str, db: Client | None = None
    ) -> bool:
        return mutate_tournament(
            tournament_id,
            lambda t: SlotManager.add_late_entry(t, participant_id),
            db=db,
        )

    # Bracket

    @staticmethod
    def generate_bracket(
        tournament_id: str,
        rng: random.Random | None = None,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> StructuredBracket:
        """Seed the checked-in pool into round 1 and take the tournament live.

        With nobody checked in this is a no-op and the returned bracket has
        no rounds.
        """
        now = now or utc_now()

        def _generate(tournament: Tournament) -> StructuredBracket:
            bracket = BracketGenerator.generate(tournament, rng)
            if not bracket.rounds:
                return bracket
            tournament.bracket = bracket
            StatusStateMachine.transition(tournament, TournamentStatus.LIVE, now)
            return bracket

        return mutate_tournament(tournament_id, _generate, db=db, now=now)

    @staticmethod
    def report_result(
        tournament_id: str,
        match_id: str,
        report: MatchReport,
        admin_id: Optional[str] = None,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> BracketMatch:
        """Administrative override of a bracket match result.

        In a per-match tournament a completed override with a winner is
        promoted at once, replacing a previously promoted winner if there was
        one. Per-round tournaments move on through ``advance_round``.
        """
        try:
            report.validate()
        except ValueError as e:
            raise ValidationError(str(e)) from e
        now = now or utc_now()
        db = get_client(db)

        def _report(tournament: Tournament) -> BracketMatch:
            bracket = tournament.bracket
            previous = bracket.get_match(match_id).winner if bracket else None
            match = MatchResultProcessor.report_result(tournament, match_id, report, now)
            if (
                tournament.settings.advancement == AdvancementPolicy.PER_MATCH
                and match.is_completed
                and match.winner
            ):
                round_index, match_index = bracket.locate(match_id)
                BracketAdvancer.promote_override(
                    bracket, tournament.id, round_index, match_index, previous
                )
            BracketAdvancer.complete_if_final(tournament, now)
            return match

        match = mutate_tournament(tournament_id, _report, db=db, now=now)
        if admin_id:
            log_admin_action(
                admin_id,
                "report_match_result",
                {"tournamentId": tournament_id, "matchId": match_id, "winner": report.winner},
                db=db,
            )
        return match

    @staticmethod
    def advance_round(
        tournament_id: str,
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> bool:
        """Append the next round from the last round's winners.

        Only per-round tournaments advance this way; anything else, or a round
        with fewer than two winners, is a no-op returning False.
        """

        def _advance(tournament: Tournament) -> bool:
            if tournament.settings.advancement != AdvancementPolicy.PER_ROUND:
                logger.info(
                    "Tournament %s promotes per match; skipping round advance",
                    tournament.id,
                )
                return False
            if tournament.bracket is None:
                return False
            return BracketAdvancer.advance_round(tournament.bracket, tournament.id)

        return mutate_tournament(tournament_id, _advance, db=db, now=now)

    # Reporting

    @staticmethod
    def get_stats(tournament_id: str, db: Client | None = None) -> TournamentStats:
        """Aggregate roster, bracket and dispute counters for one tournament."""
        db = get_client(db)
        tournament = load_tournament(tournament_id, db)
        matches = tournament.bracket.all_matches() if tournament.bracket else []
        return TournamentStats(
            status=tournament.status.value,
            registered=len(tournament.slots.registered),
            waitlisted=len(tournament.slots.waitlist),
            checkedIn=len(tournament.slots.checked_in),
            lateEntries=len(tournament.slots.late_entries),
            rounds=len(tournament.bracket.rounds) if tournament.bracket else 0,
            totalMatches=len(matches),
            completedMatches=sum(1 for m in matches if m.is_completed),
            openDisputes=DisputeService.count_open(
                [m.match_id for m in matches], db=db
            ),
            champion=BracketAdvancer.champion(tournament.bracket),
        )


class SeasonService:
    """League seasons that tournaments can be linked to."""

    @staticmethod
    def create_season(
        data: dict[str, Any],
        db: Client | None = None,
        now: datetime.datetime | None = None,
    ) -> str:
        db = get_client(db)
        stamp = to_iso(now or utc_now())
        payload = {
            "name": data["name"],
            "year": int(data["year"]),
            "quarter": int(data.get("quarter", 1)),
            "startDate": data.get("startDate"),
            "endDate": data.get("endDate"),
            "status": data.get("status", "upcoming"),
            "totalTournaments": 0,
            "totalPrizePool": 0,
            "createdAt": stamp,
            "updatedAt": stamp,
        }
        _, ref = db.collection(SEASONS_COLLECTION).add(payload)
        return str(ref.id)

    @staticmethod
    def get_season(season_id: str, db: Client | None = None) -> TournamentSeason:
        """Fetch a season or raise NotFoundError."""
        db = get_client(db)
        doc = cast(
            "DocumentSnapshot", db.collection(SEASONS_COLLECTION).document(season_id).get()
        )
        if not doc.exists:
            raise NotFoundError("Season not found.")
        data = cast("TournamentSeason", {**(doc.to_dict() or {}), "id": doc.id})
        return data

    @staticmethod
    def get_active_season(db: Client | None = None) -> Optional[TournamentSeason]:
        db = get_client(db)
        docs = (
            db.collection(SEASONS_COLLECTION)
            .where(filter=firestore.FieldFilter("status", "==", "active"))
            .limit(1)
            .stream()
        )
        for doc in docs:
            return cast("TournamentSeason", {**(doc.to_dict() or {}), "id": doc.id})
        return None
