"""Routes for the main blueprint."""

from __future__ import annotations

import datetime

from firebase_admin import firestore
from flask import current_app, jsonify

from groupfit.core.constants import GROUPS_COLLECTION

from . import bp


@bp.route("/health")
def health_check():
    """Report that the server is up."""
    return jsonify(
        {
            "message": "Server is running",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "environment": current_app.config["ENVIRONMENT"],
        }
    )


@bp.route("/health/db")
def database_health_check():
    """Report whether Firestore can be reached."""
    try:
        db = firestore.client()
        list(db.collection(GROUPS_COLLECTION).limit(1).stream())
    except Exception as e:
        current_app.logger.error(f"Database health check failed: {e}")
        return (
            jsonify({"message": "Database connection failed", "error": "DATABASE_ERROR"}),
            500,
        )
    return jsonify({"message": "Database connection successful"})
