"""Blueprint for tournament lifecycle, roster and bracket endpoints."""

from flask import Blueprint

bp = Blueprint("tournament", __name__, url_prefix="/tournaments")
