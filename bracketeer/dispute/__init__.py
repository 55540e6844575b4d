"""Blueprint for match disputes."""

from flask import Blueprint

bp = Blueprint("dispute", __name__, url_prefix="/disputes")
