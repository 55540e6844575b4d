"""Blueprint for match ticket administration."""

from flask import Blueprint

bp = Blueprint("ticket", __name__, url_prefix="/tickets")
