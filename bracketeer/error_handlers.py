from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError
from google.api_core.exceptions import GoogleAPICallError

from .errors import (
    AppError,
    InvalidTicketError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

error_handlers_bp = Blueprint("error_handlers", __name__)


def error_response(error, status_code):
    """Build the JSON error body shared by every handler."""
    return (
        jsonify({"error": error.message, "type": type(error).__name__}),
        status_code,
    )


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return error_response(error, error.status_code)


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors, including missing matches and teams."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return error_response(error, error.status_code)


@error_handlers_bp.app_errorhandler(InvalidTransitionError)
def handle_invalid_transition(error):
    current_app.logger.warning(
        f"Rejected transition {error.from_status} -> {error.to_status}"
    )
    return error_response(error, error.status_code)


@error_handlers_bp.app_errorhandler(InvalidTicketError)
def handle_invalid_ticket(error):
    current_app.logger.warning(f"Ticket Error: {error.message}")
    return error_response(error, error.status_code)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors."""
    current_app.logger.error(f"Application Error: {error.message}")
    return error_response(error, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"error": "Not found.", "type": "NotFound"}), 404


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return jsonify({"error": "Internal server error.", "type": "ServerError"}), 500


@error_handlers_bp.app_errorhandler(GoogleAPICallError)
def handle_db_error(e):
    """Handles Firestore errors."""
    current_app.logger.error(f"Database Error: {e}")
    # Avoid exposing raw database error details to the caller
    return (
        jsonify(
            {
                "error": "A database error occurred. Please try again later.",
                "type": "DatabaseError",
            }
        ),
        500,
    )


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """Handles CSRF errors on session-backed form posts."""
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return jsonify({"error": e.description, "type": "CSRFError"}), 400
