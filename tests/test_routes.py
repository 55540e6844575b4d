"""Tests for the JSON blueprints using the test client and mocked services."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from bracketeer import create_app
from bracketeer.bracket.models import (
    BracketMatch,
    BracketRound,
    MatchStatus,
    StructuredBracket,
)
from bracketeer.errors import (
    AlreadySubmittedError,
    InvalidTicketError,
    InvalidTransitionError,
    MatchNotFoundError,
    TeamNotFoundError,
)
from bracketeer.match.models import MatchReport, ScoreOutcome
from bracketeer.tournament.models import Tournament

MOCK_USER_ID = "user1"
MOCK_ADMIN_ID = "admin1"


class RoutesTestCase(unittest.TestCase):
    """Base test case with an app, a client and a mocked Firestore client."""

    def setUp(self) -> None:
        self.mock_db = MagicMock()
        patcher = patch("firebase_admin.firestore.client", return_value=self.mock_db)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.app = create_app({"TESTING": True, "SECRET_KEY": "test"})
        self.client = self.app.test_client()

    def login(self, user_id: str = MOCK_USER_ID, is_admin: bool = False) -> None:
        with self.client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["is_admin"] = is_admin

    def patch_service(self, target: str) -> MagicMock:
        patcher = patch(target)
        mock = patcher.start()
        self.addCleanup(patcher.stop)
        return mock


class AccessTestCase(RoutesTestCase):
    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, b"OK")

    def test_login_required(self) -> None:
        response = self.client.post("/tournaments/t1/register", json={})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Authentication required.")

    def test_admin_required(self) -> None:
        self.login()
        response = self.client.post("/tournaments/t1/bracket")
        self.assertEqual(response.status_code, 403)

    def test_unknown_route_is_json(self) -> None:
        response = self.client.get("/nowhere")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["type"], "NotFound")


class TournamentRoutesTestCase(RoutesTestCase):
    """Test case for the tournament blueprint."""

    def setUp(self) -> None:
        super().setUp()
        self.service = self.patch_service("bracketeer.tournament.routes.TournamentService")

    def test_create_tournament(self) -> None:
        self.login(MOCK_ADMIN_ID, is_admin=True)
        self.service.create_draft.return_value = "new-id"

        response = self.client.post(
            "/tournaments/",
            json={"name": "Cup", "game": "chess", "settings": {"maxPlayers": 16}},
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json(), {"id": "new-id"})
        admin_id, data = self.service.create_draft.call_args.args
        self.assertEqual(admin_id, MOCK_ADMIN_ID)
        self.assertEqual(data["name"], "Cup")
        self.assertEqual(data["type"], "single_elim")
        self.assertEqual(data["settings"], {"maxPlayers": 16})

    def test_create_tournament_requires_name(self) -> None:
        self.login(MOCK_ADMIN_ID, is_admin=True)
        response = self.client.post("/tournaments/", json={"game": "chess"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["type"], "ValidationError")
        self.service.create_draft.assert_not_called()

    def test_view_tournament(self) -> None:
        self.login()
        self.service.get_tournament.return_value = Tournament(id="t1", name="Cup")

        response = self.client.get("/tournaments/t1")

        body = response.get_json()
        self.assertEqual(body["id"], "t1")
        self.assertEqual(body["status"], "draft")

    def test_invalid_transition_maps_to_409(self) -> None:
        self.login(MOCK_ADMIN_ID, is_admin=True)
        self.service.transition_status.side_effect = InvalidTransitionError(
            "draft", "live"
        )

        response = self.client.post("/tournaments/t1/status", json={"status": "live"})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(
            response.get_json(),
            {
                "error": "Invalid status transition: draft -> live",
                "type": "InvalidTransitionError",
            },
        )
        self.assertEqual(
            self.service.transition_status.call_args.kwargs["retention_days"], 30
        )

    def test_register_defaults_to_session_user(self) -> None:
        self.login()
        self.service.register_player.return_value = True

        response = self.client.post("/tournaments/t1/register", json={})

        self.assertEqual(response.get_json(), {"changed": True})
        self.service.register_player.assert_called_once_with(
            "t1", MOCK_USER_ID, db=self.mock_db
        )

    def test_check_in_named_participant(self) -> None:
        self.login()
        self.service.check_in_player.return_value = False

        response = self.client.post(
            "/tournaments/t1/checkin", json={"participant_id": "p7"}
        )

        self.assertEqual(response.get_json(), {"changed": False})
        self.service.check_in_player.assert_called_once_with("t1", "p7", db=self.mock_db)

    def test_generate_bracket(self) -> None:
        self.login(MOCK_ADMIN_ID, is_admin=True)
        self.service.generate_bracket.return_value = StructuredBracket(
            rounds=[BracketRound(1, [BracketMatch("t1_R1_M1", ["A", "B"])])]
        )

        response = self.client.post("/tournaments/t1/bracket")

        rounds = response.get_json()["rounds"]
        self.assertEqual(rounds[0]["matches"][0]["matchId"], "t1_R1_M1")

    def test_report_result(self) -> None:
        self.login(MOCK_ADMIN_ID, is_admin=True)
        self.service.report_result.return_value = BracketMatch(
            "t1_R1_M1", ["A", "B"], winner="A", status=MatchStatus.COMPLETED
        )

        response = self.client.post(
            "/tournaments/t1/matches/t1_R1_M1/result",
            json={"winner": "A", "loser": "B", "score": {"A": 2, "B": 0}},
        )

        self.assertEqual(response.status_code, 200)
        args = self.service.report_result.call_args
        self.assertEqual(args.args[:2], ("t1", "t1_R1_M1"))
        self.assertEqual(
            args.args[2], MatchReport(winner="A", loser="B", score={"A": 2, "B": 0})
        )
        self.assertEqual(args.kwargs["admin_id"], MOCK_ADMIN_ID)

    def test_report_result_rejects_bad_status(self) -> None:
        self.login(MOCK_ADMIN_ID, is_admin=True)
        response = self.client.post(
            "/tournaments/t1/matches/t1_R1_M1/result",
            json={"winner": "A", "status": "pending"},
        )
        self.assertEqual(response.status_code, 400)

    def test_match_not_found(self) -> None:
        self.login(MOCK_ADMIN_ID, is_admin=True)
        self.service.report_result.side_effect = MatchNotFoundError("t1_R9_M9")

        response = self.client.post(
            "/tournaments/t1/matches/t1_R9_M9/result", json={"winner": "A"}
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["type"], "MatchNotFoundError")

    def test_stats(self) -> None:
        self.login()
        self.service.get_stats.return_value = {"status": "live", "openDisputes": 0}
        response = self.client.get("/tournaments/t1/stats")
        self.assertEqual(response.get_json()["status"], "live")


class MatchRoutesTestCase(RoutesTestCase):
    """Test case for score submission."""

    def setUp(self) -> None:
        super().setUp()
        self.service = self.patch_service("bracketeer.match.routes.MatchService")
        self.login()

    def test_submit_score(self) -> None:
        match = BracketMatch(
            "t1_R1_M1",
            [MOCK_USER_ID, "B"],
            winner=MOCK_USER_ID,
            loser="B",
            status=MatchStatus.COMPLETED,
        )
        self.service.submit_score.return_value = ScoreOutcome(match=match, decided=True)

        response = self.client.post(
            "/matches/t1/t1_R1_M1/score", json={"ticket_code": "ABCD1234", "score": 0}
        )

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["decided"])
        self.assertEqual(body["winner"], MOCK_USER_ID)
        self.service.submit_score.assert_called_once_with(
            MOCK_USER_ID, "t1", "t1_R1_M1", "ABCD1234", 0.0, db=self.mock_db
        )

    def test_missing_score(self) -> None:
        response = self.client.post(
            "/matches/t1/t1_R1_M1/score", json={"ticket_code": "ABCD1234"}
        )
        self.assertEqual(response.status_code, 400)
        self.service.submit_score.assert_not_called()

    def test_error_mapping(self) -> None:
        cases = [
            (InvalidTicketError(), 403, "InvalidTicketError"),
            (AlreadySubmittedError(MOCK_USER_ID, "m"), 409, "AlreadySubmittedError"),
            (MatchNotFoundError("m"), 404, "MatchNotFoundError"),
        ]
        for error, status_code, error_type in cases:
            with self.subTest(error=error_type):
                self.service.submit_score.side_effect = error
                response = self.client.post(
                    "/matches/t1/m/score", json={"ticket_code": "X", "score": 1}
                )
                self.assertEqual(response.status_code, status_code)
                self.assertEqual(response.get_json()["type"], error_type)


class TicketRoutesTestCase(RoutesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.service = self.patch_service("bracketeer.ticket.routes.TicketService")
        self.login(MOCK_ADMIN_ID, is_admin=True)

    def test_issue_uses_configured_lifetime(self) -> None:
        self.app.config["TICKET_TTL_MINUTES"] = 45
        self.service.issue.return_value = "ABCD1234"

        response = self.client.post(
            "/tickets/", json={"user_id": "u1", "competition_id": "t1"}
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json(), {"code": "ABCD1234"})
        kwargs = self.service.issue.call_args.kwargs
        self.assertEqual(kwargs["ttl_minutes"], 45)
        self.assertEqual(kwargs["code_length"], 8)

    def test_revoke_unknown_ticket(self) -> None:
        self.service.revoke.return_value = False
        response = self.client.post("/tickets/NOPE/revoke", json={})
        self.assertEqual(response.status_code, 404)


class DisputeRoutesTestCase(RoutesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.service = self.patch_service("bracketeer.dispute.routes.DisputeService")

    def test_report_dispute(self) -> None:
        self.login()
        self.service.report.return_value = "d1"

        response = self.client.post(
            "/disputes/", json={"match_id": "t1_R1_M1", "reason": "lag"}
        )

        self.assertEqual(response.status_code, 201)
        self.service.report.assert_called_once_with(
            "t1_R1_M1",
            MOCK_USER_ID,
            "lag",
            description="",
            tournament_id=None,
            db=self.mock_db,
        )

    def test_resolve_dispute(self) -> None:
        self.login(MOCK_ADMIN_ID, is_admin=True)
        response = self.client.post(
            "/disputes/d1/resolve", json={"resolution": "replay"}
        )
        self.assertEqual(response.get_json(), {"status": "resolved"})
        self.service.resolve.assert_called_once_with(
            "d1", "replay", MOCK_ADMIN_ID, db=self.mock_db
        )


class TeamRoutesTestCase(RoutesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.service = self.patch_service("bracketeer.teams.routes.TeamService")
        self.login()

    def test_register_team(self) -> None:
        self.service.register_team.return_value = "team1"
        response = self.client.post("/teams/t1", json={"team_name": "Owls"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json(), {"id": "team1"})

    def test_add_member_to_missing_team(self) -> None:
        self.service.add_member.side_effect = TeamNotFoundError("ghost")

        response = self.client.post(
            "/teams/t1/ghost/members", json={"player_id": "p2"}
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.get_json(),
            {"error": "Team ghost not found.", "type": "TeamNotFoundError"},
        )

    def test_check_in_team(self) -> None:
        response = self.client.post("/teams/t1/team1/checkin")
        self.assertEqual(response.get_json(), {"checkedIn": True})


if __name__ == "__main__":
    unittest.main()
