"""Routes for the teams blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import jsonify, session

from bracketeer.auth.decorators import login_required
from bracketeer.core.forms import validated
from bracketeer.utils import to_iso, utc_now

from . import bp
from .forms import MemberForm, TeamForm
from .models import TeamMember
from .services import TeamService


@bp.route("/<string:tournament_id>", methods=["GET"])
@login_required
def list_teams(tournament_id: str) -> Any:
    return jsonify(TeamService.list_teams(tournament_id, db=firestore.client()))


@bp.route("/<string:tournament_id>", methods=["POST"])
@login_required
def register_team(tournament_id: str) -> Any:
    """Register a team captained by the logged-in user."""
    form = validated(TeamForm())
    team_id = TeamService.register_team(
        tournament_id,
        form.team_name.data,
        session["user_id"],
        team_tag=form.team_tag.data or "",
        db=firestore.client(),
    )
    return jsonify({"id": team_id}), 201


@bp.route("/<string:tournament_id>/<string:team_id>", methods=["DELETE"])
@login_required(admin_required=True)
def unregister_team(tournament_id: str, team_id: str) -> Any:
    TeamService.unregister_team(tournament_id, team_id, db=firestore.client())
    return jsonify({"deleted": True})


@bp.route("/<string:tournament_id>/<string:team_id>/checkin", methods=["POST"])
@login_required
def check_in_team(tournament_id: str, team_id: str) -> Any:
    TeamService.check_in_team(tournament_id, team_id, db=firestore.client())
    return jsonify({"checkedIn": True})


@bp.route("/<string:tournament_id>/<string:team_id>/members", methods=["POST"])
@login_required
def add_member(tournament_id: str, team_id: str) -> Any:
    form = validated(MemberForm())
    member = TeamMember(
        playerId=form.player_id.data,
        playerName=form.player_name.data or "",
        playerTag=form.player_tag.data or "",
        role=form.role.data,
        joinedAt=to_iso(utc_now()),
    )
    TeamService.add_member(tournament_id, team_id, member, db=firestore.client())
    return jsonify(member), 201


@bp.route(
    "/<string:tournament_id>/<string:team_id>/members/<string:player_id>",
    methods=["DELETE"],
)
@login_required
def remove_member(tournament_id: str, team_id: str, player_id: str) -> Any:
    TeamService.remove_member(
        tournament_id, team_id, player_id, db=firestore.client()
    )
    return jsonify({"removed": player_id})
