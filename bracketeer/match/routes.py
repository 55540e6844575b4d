"""Routes for the match blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import jsonify, session

from bracketeer.auth.decorators import login_required
from bracketeer.core.forms import validated

from . import bp
from .forms import ScoreForm
from .services import MatchService


@bp.route("/<string:competition_id>/<string:match_id>/score", methods=["POST"])
@login_required
def submit_score(competition_id: str, match_id: str) -> Any:
    """Report the logged-in player's score, gated by their ticket."""
    form = validated(ScoreForm())
    outcome = MatchService.submit_score(
        session["user_id"],
        competition_id,
        match_id,
        form.ticket_code.data,
        form.score.data,
        db=firestore.client(),
    )
    return jsonify(
        {
            "match": outcome.match.to_dict(),
            "decided": outcome.decided,
            "tied": outcome.tied,
            "winner": outcome.winner,
            "champion": outcome.champion,
        }
    )
