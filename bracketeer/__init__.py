"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.constants import (
    ARCHIVE_RETENTION_DAYS,
    DEFAULT_TICKET_TTL_MINUTES,
    TICKET_CODE_LENGTH,
)
from .extensions import csrf

CREDENTIALS_FILE = "firebase_credentials.json"


def _load_credentials(app):
    """Return ``(credential, project_id)`` from env, local file or ADC."""
    # Production deployments pass the service account inline.
    raw = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if raw:
        try:
            info = json.loads(raw)
            return credentials.Certificate(info), info.get("project_id")
        except ValueError as e:
            app.logger.error(f"Invalid FIREBASE_CREDENTIALS_JSON: {e}")

    path = os.path.join(os.path.dirname(os.path.dirname(__file__)), CREDENTIALS_FILE)
    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                info = json.load(f)
            return credentials.Certificate(path), info.get("project_id")
        except ValueError as e:
            app.logger.error(f"Invalid credentials file {path}: {e}")

    try:
        return credentials.ApplicationDefault(), os.environ.get("FIREBASE_PROJECT_ID")
    except Exception as e:
        app.logger.error(f"No usable Firebase credentials: {e}")
        return None, None


def init_firebase(app):
    """Initialize the Firebase Admin SDK once per process."""
    if firebase_admin._apps:
        return
    cred, project_id = _load_credentials(app)
    if cred is None:
        return
    try:
        options = {"projectId": project_id} if project_id else None
        firebase_admin.initialize_app(cred, options)
    except ValueError:
        app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        TICKET_TTL_MINUTES=int(
            os.environ.get("TICKET_TTL_MINUTES") or DEFAULT_TICKET_TTL_MINUTES
        ),
        TICKET_CODE_LENGTH=int(
            os.environ.get("TICKET_CODE_LENGTH") or TICKET_CODE_LENGTH
        ),
        ARCHIVE_RETENTION_DAYS=int(
            os.environ.get("ARCHIVE_RETENTION_DAYS") or ARCHIVE_RETENTION_DAYS
        ),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        init_firebase(app)

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints. Each package exposes only ``bp``; its routes
    # module attaches the views.
    from .dispute import bp as dispute_bp
    from .dispute import routes as dispute_routes  # noqa: F401
    from .match import bp as match_bp
    from .match import routes as match_routes  # noqa: F401
    from .teams import bp as teams_bp
    from .teams import routes as teams_routes  # noqa: F401
    from .ticket import bp as ticket_bp
    from .ticket import routes as ticket_routes  # noqa: F401
    from .tournament import bp as tournament_bp
    from .tournament import routes as tournament_routes  # noqa: F401

    for blueprint in (tournament_bp, match_bp, ticket_bp, dispute_bp, teams_bp):
        csrf.exempt(blueprint)
        app.register_blueprint(blueprint)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
