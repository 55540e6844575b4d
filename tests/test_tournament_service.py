"""Tests for TournamentService and SeasonService using mockfirestore."""

from __future__ import annotations

import datetime
import random

from bracketeer.bracket.models import MatchStatus
from bracketeer.dispute.services import DisputeService
from bracketeer.errors import InvalidTransitionError, NotFoundError, ValidationError
from bracketeer.match.models import MatchReport
from bracketeer.tournament.models import (
    AdvancementPolicy,
    SeedingPolicy,
    Tournament,
    TournamentSettings,
    TournamentSlots,
    TournamentStatus,
)
from bracketeer.tournament.services import SeasonService, TournamentService
from tests.mock_utils import FirestoreTestCase

NOW = datetime.datetime(2024, 6, 1, 9, 0, tzinfo=datetime.timezone.utc)


class TournamentServiceTestCase(FirestoreTestCase):
    """Test case for tournament persistence and transactions."""

    def seed(self, tournament: Tournament) -> None:
        self.db.collection("tournaments").document(tournament.id).set(
            tournament.to_dict()
        )

    def stored(self, tournament_id: str = "t1") -> dict:
        return self.db.collection("tournaments").document(tournament_id).get().to_dict()

    def test_create_draft(self) -> None:
        tournament_id = TournamentService.create_draft(
            "admin1",
            {"name": "Spring Cup", "game": "chess", "settings": {"maxPlayers": 8}},
            db=self.db,
            now=NOW,
        )

        data = self.stored(tournament_id)
        self.assertEqual(data["status"], "draft")
        self.assertEqual(data["name"], "Spring Cup")
        self.assertEqual(data["settings"]["maxPlayers"], 8)
        self.assertEqual(data["settings"]["advancement"], "per_round")
        self.assertEqual(data["createdBy"], "admin1")
        self.assertEqual(data["createdAt"], NOW.isoformat())

        logs = [doc.to_dict() for doc in self.db.collection("auditLogs").stream()]
        self.assertEqual(len(logs), 1)
        self.assertEqual(logs[0]["action"], "create_tournament")
        self.assertEqual(logs[0]["details"], {"tournamentId": tournament_id})

    def test_create_draft_rejects_bad_data(self) -> None:
        with self.assertRaises(ValidationError):
            TournamentService.create_draft("admin1", {"game": "chess"}, db=self.db)
        with self.assertRaises(ValidationError):
            TournamentService.create_draft(
                "admin1", {"name": "X", "type": "bogus"}, db=self.db
            )

    def test_get_missing_tournament(self) -> None:
        with self.assertRaises(NotFoundError):
            TournamentService.get_tournament("nope", db=self.db)
        with self.assertRaises(NotFoundError):
            TournamentService.register_player("nope", "p1", db=self.db)

    def test_list_tournaments(self) -> None:
        self.seed(Tournament(id="a", game="chess", created_at="2024-01-01T00:00:00+00:00"))
        self.seed(
            Tournament(
                id="b",
                game="chess",
                status=TournamentStatus.LIVE,
                created_at="2024-03-01T00:00:00+00:00",
            )
        )
        self.seed(Tournament(id="c", game="go", created_at="2024-02-01T00:00:00+00:00"))

        chess = TournamentService.list_tournaments(game="chess", db=self.db)
        self.assertEqual([t.id for t in chess], ["b", "a"])

        live = TournamentService.list_tournaments(status="live", db=self.db)
        self.assertEqual([t.id for t in live], ["b"])

        newest = TournamentService.list_tournaments(limit=1, db=self.db)
        self.assertEqual([t.id for t in newest], ["b"])

    def test_transition_persists(self) -> None:
        self.seed(Tournament(id="t1"))
        TournamentService.transition_status("t1", "registration", db=self.db, now=NOW)

        data = self.stored()
        self.assertEqual(data["status"], "registration")
        self.assertEqual(data["updatedAt"], NOW.isoformat())

    def test_invalid_transition_leaves_document(self) -> None:
        self.seed(Tournament(id="t1"))
        before = self.stored()
        with self.assertRaises(InvalidTransitionError):
            TournamentService.finalize("t1", db=self.db)
        self.assertEqual(self.stored(), before)

    def test_register_and_waitlist(self) -> None:
        self.seed(
            Tournament(
                id="t1",
                status=TournamentStatus.REGISTRATION,
                settings=TournamentSettings(max_players=1),
            )
        )
        self.assertTrue(TournamentService.register_player("t1", "p1", db=self.db))
        self.assertTrue(TournamentService.register_player("t1", "p2", db=self.db))

        slots = self.stored()["slots"]
        self.assertEqual(slots["registered"], ["p1"])
        self.assertEqual(slots["waitlist"], ["p2"])

        updated_at = self.stored()["updatedAt"]
        self.assertFalse(TournamentService.register_player("t1", "p1", db=self.db))
        self.assertEqual(self.stored()["updatedAt"], updated_at)

        TournamentService.unregister_player("t1", "p1", db=self.db)
        self.assertEqual(self.stored()["slots"]["registered"], ["p2"])

    def test_check_in_and_late_entry(self) -> None:
        self.seed(
            Tournament(
                id="t1",
                status=TournamentStatus.CHECKIN,
                settings=TournamentSettings(allow_late_registration=True),
                slots=TournamentSlots(registered=["p1"]),
            )
        )
        TournamentService.check_in_player("t1", "p1", db=self.db)
        TournamentService.add_late_entry("t1", "p9", db=self.db)

        slots = self.stored()["slots"]
        self.assertEqual(slots["checkedIn"], ["p1"])
        self.assertEqual(slots["registered"], [])
        self.assertEqual(slots["lateEntries"], ["p9"])

    def test_generate_bracket(self) -> None:
        self.seed(
            Tournament(
                id="t1",
                status=TournamentStatus.CHECKIN,
                settings=TournamentSettings(seeding=SeedingPolicy.MANUAL),
                slots=TournamentSlots(checked_in=["A", "B", "C", "D"]),
            )
        )
        bracket = TournamentService.generate_bracket(
            "t1", rng=random.Random(1), db=self.db, now=NOW
        )

        self.assertEqual(len(bracket.rounds[0].matches), 2)
        data = self.stored()
        self.assertEqual(data["status"], "live")
        matches = data["bracket"]["rounds"][0]["matches"]
        self.assertEqual([m["matchId"] for m in matches], ["t1_R1_M1", "t1_R1_M2"])
        self.assertEqual([m["players"] for m in matches], [["A", "B"], ["C", "D"]])

    def test_generate_with_empty_pool_is_noop(self) -> None:
        self.seed(Tournament(id="t1", status=TournamentStatus.CHECKIN))
        before = self.stored()

        bracket = TournamentService.generate_bracket("t1", db=self.db)

        self.assertEqual(bracket.rounds, [])
        self.assertEqual(self.stored(), before)

    def test_generate_with_single_player_goes_live(self) -> None:
        self.seed(
            Tournament(
                id="t1",
                status=TournamentStatus.CHECKIN,
                slots=TournamentSlots(checked_in=["A"]),
            )
        )

        bracket = TournamentService.generate_bracket("t1", db=self.db, now=NOW)

        self.assertEqual(len(bracket.rounds), 1)
        self.assertEqual(bracket.rounds[0].matches, [])
        data = self.stored()
        self.assertEqual(data["status"], "live")
        self.assertEqual(data["bracket"]["rounds"][0]["matches"], [])

    def test_generate_requires_checkin_status(self) -> None:
        self.seed(
            Tournament(
                id="t1",
                status=TournamentStatus.REGISTRATION,
                slots=TournamentSlots(checked_in=["A", "B"]),
            )
        )
        with self.assertRaises(InvalidTransitionError):
            TournamentService.generate_bracket("t1", db=self.db)
        self.assertNotIn("bracket", self.stored())

    def _live_with_bracket(self, advancement: AdvancementPolicy) -> None:
        self.seed(
            Tournament(
                id="t1",
                status=TournamentStatus.CHECKIN,
                settings=TournamentSettings(
                    seeding=SeedingPolicy.MANUAL, advancement=advancement
                ),
                slots=TournamentSlots(checked_in=["A", "B", "C", "D"]),
            )
        )
        TournamentService.generate_bracket("t1", db=self.db)

    def test_report_result_and_advance_round(self) -> None:
        self._live_with_bracket(AdvancementPolicy.PER_ROUND)

        TournamentService.report_result(
            "t1", "t1_R1_M1", MatchReport(winner="A", loser="B"), db=self.db
        )
        self.assertFalse(TournamentService.advance_round("t1", db=self.db))

        TournamentService.report_result(
            "t1", "t1_R1_M2", MatchReport(winner="D", loser="C"), admin_id="admin1", db=self.db
        )
        self.assertTrue(TournamentService.advance_round("t1", db=self.db))

        rounds = self.stored()["bracket"]["rounds"]
        self.assertEqual(len(rounds), 2)
        self.assertEqual(rounds[1]["matches"][0]["players"], ["A", "D"])

        match = TournamentService.report_result(
            "t1", "t1_R2_M1", MatchReport(winner="D", loser="A"), db=self.db
        )
        self.assertEqual(match.status, MatchStatus.COMPLETED)

        data = self.stored()
        self.assertEqual(data["status"], "completed")
        self.assertEqual(data["winner"], "D")

        actions = [doc.to_dict()["action"] for doc in self.db.collection("auditLogs").stream()]
        self.assertEqual(actions, ["report_match_result"])

    def test_per_match_override_promotes_without_advance_round(self) -> None:
        self._live_with_bracket(AdvancementPolicy.PER_MATCH)
        TournamentService.report_result("t1", "t1_R1_M1", MatchReport(winner="A"), db=self.db)
        TournamentService.report_result("t1", "t1_R1_M2", MatchReport(winner="C"), db=self.db)

        self.assertFalse(TournamentService.advance_round("t1", db=self.db))
        rounds = self.stored()["bracket"]["rounds"]
        self.assertEqual(len(rounds), 2)
        self.assertEqual(rounds[1]["matches"][0]["players"], ["A", "C"])

    def test_corrected_override_replaces_promoted_winner(self) -> None:
        self._live_with_bracket(AdvancementPolicy.PER_MATCH)
        TournamentService.report_result("t1", "t1_R1_M1", MatchReport(winner="A"), db=self.db)
        TournamentService.report_result("t1", "t1_R1_M2", MatchReport(winner="C"), db=self.db)

        TournamentService.report_result(
            "t1", "t1_R1_M1", MatchReport(winner="B", loser="A"), db=self.db
        )

        rounds = self.stored()["bracket"]["rounds"]
        self.assertEqual(len(rounds[1]["matches"]), 1)
        self.assertEqual(rounds[1]["matches"][0]["players"], ["B", "C"])

    def test_corrected_final_updates_tournament_winner(self) -> None:
        self._live_with_bracket(AdvancementPolicy.PER_MATCH)
        TournamentService.report_result("t1", "t1_R1_M1", MatchReport(winner="A"), db=self.db)
        TournamentService.report_result("t1", "t1_R1_M2", MatchReport(winner="C"), db=self.db)
        TournamentService.report_result("t1", "t1_R2_M1", MatchReport(winner="A"), db=self.db)
        self.assertEqual(self.stored()["winner"], "A")

        TournamentService.report_result(
            "t1", "t1_R2_M1", MatchReport(winner="C", loser="A"), db=self.db
        )

        data = self.stored()
        self.assertEqual(data["status"], "completed")
        self.assertEqual(data["winner"], "C")
        self.assertEqual(TournamentService.get_stats("t1", db=self.db)["champion"], "C")

    def test_report_result_rejects_invalid_report(self) -> None:
        self._live_with_bracket(AdvancementPolicy.PER_ROUND)
        with self.assertRaises(ValidationError):
            TournamentService.report_result(
                "t1", "t1_R1_M1", MatchReport(winner="A", loser="A"), db=self.db
            )

    def test_stats(self) -> None:
        self._live_with_bracket(AdvancementPolicy.PER_ROUND)
        TournamentService.report_result("t1", "t1_R1_M1", MatchReport(winner="A"), db=self.db)
        DisputeService.report("t1_R1_M1", "B", "lag", db=self.db)
        dispute_id = DisputeService.report("t1_R1_M2", "C", "no show", db=self.db)
        DisputeService.dismiss(dispute_id, "admin1", db=self.db)

        stats = TournamentService.get_stats("t1", db=self.db)

        self.assertEqual(stats["status"], "live")
        self.assertEqual(stats["checkedIn"], 4)
        self.assertEqual(stats["rounds"], 1)
        self.assertEqual(stats["totalMatches"], 2)
        self.assertEqual(stats["completedMatches"], 1)
        self.assertEqual(stats["openDisputes"], 1)
        self.assertIsNone(stats["champion"])

    def test_archive_and_prune(self) -> None:
        self.seed(Tournament(id="old", status=TournamentStatus.COMPLETED))
        self.seed(Tournament(id="recent", status=TournamentStatus.COMPLETED))
        self.seed(Tournament(id="kept", status=TournamentStatus.COMPLETED))

        TournamentService.transition_status(
            "old", "archived", db=self.db, now=NOW - datetime.timedelta(days=40)
        )
        TournamentService.archive("recent", db=self.db)

        old = self.stored("old")
        self.assertTrue(old["archived"])
        self.assertEqual(
            old["pruneAt"], (NOW + datetime.timedelta(days=-10)).isoformat()
        )

        pruned = TournamentService.prune_archived(db=self.db, now=NOW)

        self.assertEqual(pruned, ["old"])
        self.assertFalse(self.db.collection("tournaments").document("old").get().exists)
        self.assertTrue(self.db.collection("tournaments").document("recent").get().exists)
        self.assertTrue(self.db.collection("tournaments").document("kept").get().exists)


class SeasonServiceTestCase(FirestoreTestCase):
    """Test case for league seasons."""

    def test_create_and_get(self) -> None:
        season_id = SeasonService.create_season(
            {"name": "Q1", "year": "2024", "status": "active"}, db=self.db, now=NOW
        )
        season = SeasonService.get_season(season_id, db=self.db)
        self.assertEqual(season["id"], season_id)
        self.assertEqual(season["year"], 2024)
        self.assertEqual(season["quarter"], 1)

        active = SeasonService.get_active_season(db=self.db)
        self.assertEqual(active["id"], season_id)

    def test_missing_season(self) -> None:
        with self.assertRaises(NotFoundError):
            SeasonService.get_season("nope", db=self.db)
        self.assertIsNone(SeasonService.get_active_season(db=self.db))
