"""Routes for the ticket blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify

from bracketeer.auth.decorators import login_required
from bracketeer.core.forms import validated
from bracketeer.errors import NotFoundError

from . import bp
from .forms import IssueTicketForm, RevokeTicketForm
from .services import TicketService


@bp.route("/", methods=["POST"])
@login_required(admin_required=True)
def issue_ticket() -> Any:
    """Issue a ticket and return its code."""
    form = validated(IssueTicketForm())
    code = TicketService.issue(
        form.user_id.data,
        form.competition_id.data,
        round_id=form.round_id.data or None,
        match_id=form.match_id.data or None,
        ttl_minutes=form.ttl_minutes.data or current_app.config["TICKET_TTL_MINUTES"],
        code_length=current_app.config["TICKET_CODE_LENGTH"],
        db=firestore.client(),
    )
    return jsonify({"code": code}), 201


@bp.route("/<string:code>/revoke", methods=["POST"])
@login_required(admin_required=True)
def revoke_ticket(code: str) -> Any:
    form = validated(RevokeTicketForm())
    if not TicketService.revoke(
        code, competition_id=form.competition_id.data or None, db=firestore.client()
    ):
        raise NotFoundError("Ticket not found.")
    return jsonify({"revoked": True})
