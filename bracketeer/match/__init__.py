"""Blueprint for ticket-gated score submission."""

from flask import Blueprint

bp = Blueprint("match", __name__, url_prefix="/matches")
