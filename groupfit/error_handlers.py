from flask import Blueprint, current_app, jsonify
from google.api_core.exceptions import GoogleAPICallError

from .errors import AppError, DuplicateResourceError, NotFoundError, ValidationError

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(ValidationError)
def handle_validation_error(error):
    """Handles validation errors."""
    current_app.logger.warning(f"Validation Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(DuplicateResourceError)
def handle_duplicate_resource_error(error):
    """Handles duplicate resource errors."""
    current_app.logger.warning(f"Duplicate Resource Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Handles not found errors."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles generic application errors, including unauthorized access."""
    current_app.logger.warning(f"Application Error: {error.message}")
    return jsonify(error.to_dict()), error.status_code


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"message": "Requested resource not found.", "error": "NOT_FOUND"}), 404


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests using a method the route does not accept."""
    return (
        jsonify({"message": "Method not allowed.", "error": "METHOD_NOT_ALLOWED"}),
        405,
    )


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return jsonify({"message": "A server error occurred.", "error": "SERVER_ERROR"}), 500


@error_handlers_bp.app_errorhandler(GoogleAPICallError)
def handle_db_error(e):
    """Handles Firestore errors."""
    current_app.logger.error(f"Database Error: {e}")
    # Avoid exposing raw database error details to the user
    return (
        jsonify(
            {
                "message": "A database error occurred. Please try again later.",
                "error": "DATABASE_ERROR",
            }
        ),
        500,
    )
