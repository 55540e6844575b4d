"""Routes for the tournament blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify, request, session

from bracketeer.auth.decorators import login_required
from bracketeer.bracket.models import MatchStatus
from bracketeer.core.forms import validated
from bracketeer.match.models import MatchReport

from . import bp
from .forms import MatchResultForm, ParticipantForm, StatusForm, TournamentForm
from .services import TournamentService


def serialize(tournament) -> dict[str, Any]:
    return {"id": tournament.id, **tournament.to_dict()}


def _participant(form: ParticipantForm) -> str:
    return form.participant_id.data or session["user_id"]


@bp.route("/", methods=["GET"])
@login_required
def list_tournaments() -> Any:
    """List tournaments, optionally filtered by status, game or season."""
    db = firestore.client()
    tournaments = TournamentService.list_tournaments(
        status=request.args.get("status"),
        game=request.args.get("game"),
        season_id=request.args.get("season_id"),
        limit=request.args.get("limit", type=int),
        db=db,
    )
    return jsonify([serialize(t) for t in tournaments])


@bp.route("/", methods=["POST"])
@login_required(admin_required=True)
def create_tournament() -> Any:
    """Create a tournament in draft status."""
    form = validated(TournamentForm())
    body = request.get_json(silent=True) or {}
    db = firestore.client()
    tournament_id = TournamentService.create_draft(
        session["user_id"],
        {
            "name": form.name.data,
            "game": form.game.data or "",
            "type": form.tournament_type.data,
            "description": form.description.data or None,
            "seasonId": form.season_id.data or None,
            "settings": body.get("settings"),
        },
        db=db,
    )
    current_app.logger.info(f"Tournament {tournament_id} created")
    return jsonify({"id": tournament_id}), 201


@bp.route("/<string:tournament_id>", methods=["GET"])
@login_required
def view_tournament(tournament_id: str) -> Any:
    db = firestore.client()
    return jsonify(serialize(TournamentService.get_tournament(tournament_id, db=db)))


@bp.route("/<string:tournament_id>/status", methods=["POST"])
@login_required(admin_required=True)
def change_status(tournament_id: str) -> Any:
    """Move a tournament to a new lifecycle status."""
    form = validated(StatusForm())
    db = firestore.client()
    tournament = TournamentService.transition_status(
        tournament_id,
        form.status.data,
        db=db,
        retention_days=current_app.config["ARCHIVE_RETENTION_DAYS"],
    )
    return jsonify(serialize(tournament))


@bp.route("/<string:tournament_id>/register", methods=["POST"])
@login_required
def register(tournament_id: str) -> Any:
    form = validated(ParticipantForm())
    changed = TournamentService.register_player(
        tournament_id, _participant(form), db=firestore.client()
    )
    return jsonify({"changed": changed})


@bp.route("/<string:tournament_id>/unregister", methods=["POST"])
@login_required
def unregister(tournament_id: str) -> Any:
    form = validated(ParticipantForm())
    changed = TournamentService.unregister_player(
        tournament_id, _participant(form), db=firestore.client()
    )
    return jsonify({"changed": changed})


@bp.route("/<string:tournament_id>/checkin", methods=["POST"])
@login_required
def check_in(tournament_id: str) -> Any:
    form = validated(ParticipantForm())
    changed = TournamentService.check_in_player(
        tournament_id, _participant(form), db=firestore.client()
    )
    return jsonify({"changed": changed})


@bp.route("/<string:tournament_id>/late-entry", methods=["POST"])
@login_required(admin_required=True)
def late_entry(tournament_id: str) -> Any:
    form = validated(ParticipantForm())
    changed = TournamentService.add_late_entry(
        tournament_id, _participant(form), db=firestore.client()
    )
    return jsonify({"changed": changed})


@bp.route("/<string:tournament_id>/bracket", methods=["POST"])
@login_required(admin_required=True)
def generate_bracket(tournament_id: str) -> Any:
    """Seed round 1 from the checked-in pool and take the tournament live."""
    bracket = TournamentService.generate_bracket(tournament_id, db=firestore.client())
    if not bracket.rounds:
        current_app.logger.warning(
            f"Bracket generation for {tournament_id} skipped: nobody checked in"
        )
    return jsonify(bracket.to_dict())


@bp.route("/<string:tournament_id>/bracket/advance", methods=["POST"])
@login_required(admin_required=True)
def advance_round(tournament_id: str) -> Any:
    advanced = TournamentService.advance_round(tournament_id, db=firestore.client())
    return jsonify({"advanced": advanced})


@bp.route(
    "/<string:tournament_id>/matches/<string:match_id>/result", methods=["POST"]
)
@login_required(admin_required=True)
def report_result(tournament_id: str, match_id: str) -> Any:
    """Administrative override of a match result."""
    form = validated(MatchResultForm())
    body = request.get_json(silent=True) or {}
    score = body.get("score")
    report = MatchReport(
        winner=form.winner.data,
        loser=form.loser.data or None,
        score=score if isinstance(score, dict) else {},
        stream_link=form.stream_link.data or None,
        status=MatchStatus(form.status.data) if form.status.data else None,
    )
    match = TournamentService.report_result(
        tournament_id,
        match_id,
        report,
        admin_id=session["user_id"],
        db=firestore.client(),
    )
    return jsonify(match.to_dict())


@bp.route("/<string:tournament_id>/stats", methods=["GET"])
@login_required
def stats(tournament_id: str) -> Any:
    return jsonify(TournamentService.get_stats(tournament_id, db=firestore.client()))
