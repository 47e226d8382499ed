"""Initialize the Flask app and the Firebase Admin SDK."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def _load_firebase_credentials(app):
    """Find Firebase credentials from the environment, a local file or ADC."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # Then a credentials file at the repository root (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    return cred, project_id


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        ENVIRONMENT=os.environ.get("APP_ENV") or "development",
        RANKING_TIMEZONE=os.environ.get("RANKING_TIMEZONE") or "UTC",
        LOG_LEVEL=os.environ.get("LOG_LEVEL") or "INFO",
        DEFAULT_PAGE_SIZE=int(os.environ.get("DEFAULT_PAGE_SIZE") or DEFAULT_PAGE_SIZE),
        MAX_PAGE_SIZE=int(os.environ.get("MAX_PAGE_SIZE") or MAX_PAGE_SIZE),
    )

    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        cred, project_id = _load_firebase_credentials(app)
        if cred and not firebase_admin._apps:
            try:
                options = {"projectId": project_id} if project_id else None
                firebase_admin.initialize_app(cred, options)
            except ValueError:
                app.logger.info("Firebase app already initialized.")

    # Register blueprints
    from . import group as group_bp

    app.register_blueprint(group_bp.bp)

    from . import participant as participant_bp

    app.register_blueprint(participant_bp.bp)

    from . import record as record_bp

    app.register_blueprint(record_bp.bp)

    from . import main as main_bp

    app.register_blueprint(main_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
