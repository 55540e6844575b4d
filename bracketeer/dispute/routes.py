"""Routes for the dispute blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import jsonify, session

from bracketeer.auth.decorators import login_required
from bracketeer.core.forms import validated

from . import bp
from .forms import DisputeForm, ResolveDisputeForm
from .services import DisputeService


@bp.route("/", methods=["POST"])
@login_required
def report_dispute() -> Any:
    """Contest a match outcome. The match itself is not changed."""
    form = validated(DisputeForm())
    dispute_id = DisputeService.report(
        form.match_id.data,
        session["user_id"],
        form.reason.data,
        description=form.description.data or "",
        tournament_id=form.tournament_id.data or None,
        db=firestore.client(),
    )
    return jsonify({"id": dispute_id}), 201


@bp.route("/<string:dispute_id>", methods=["GET"])
@login_required
def view_dispute(dispute_id: str) -> Any:
    return jsonify(DisputeService.get_dispute(dispute_id, db=firestore.client()))


@bp.route("/<string:dispute_id>/review", methods=["POST"])
@login_required(admin_required=True)
def review_dispute(dispute_id: str) -> Any:
    DisputeService.review(dispute_id, db=firestore.client())
    return jsonify({"status": "under_review"})


@bp.route("/<string:dispute_id>/resolve", methods=["POST"])
@login_required(admin_required=True)
def resolve_dispute(dispute_id: str) -> Any:
    form = validated(ResolveDisputeForm())
    DisputeService.resolve(
        dispute_id, form.resolution.data, session["user_id"], db=firestore.client()
    )
    return jsonify({"status": "resolved"})


@bp.route("/<string:dispute_id>/dismiss", methods=["POST"])
@login_required(admin_required=True)
def dismiss_dispute(dispute_id: str) -> Any:
    DisputeService.dismiss(dispute_id, session["user_id"], db=firestore.client())
    return jsonify({"status": "dismissed"})
