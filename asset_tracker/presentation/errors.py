"""
Error rendering for the JSON API

Domain errors keep their own status and message. Persistence failures and
anything unexpected are logged with a traceback and reported as a generic 500.
"""

from flask import jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from asset_tracker import db
from asset_tracker.buisness.core.errors import AssetTrackerError, InternalError
from asset_tracker.utils.logger import get_logger
from asset_tracker.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("asset_tracker.presentation.errors")

GENERIC_SERVER_ERROR = "Internal server error"

HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
    429: "Too many requests",
}


def error_response(message, status_code):
    return jsonify({"success": False, "error": message}), status_code


def register_error_handlers(app):
    """Attach error handlers that render the failure envelope"""

    @app.errorhandler(AssetTrackerError)
    def handle_domain_error(e):
        db.session.rollback()
        if isinstance(e, InternalError) or e.status_code >= 500:
            logger.error(f"{type(e).__name__} on {request.method} {request.path}: {e.message}", exc_info=e)
            return error_response(GENERIC_SERVER_ERROR, 500)

        logger.info(f"{type(e).__name__} on {request.method} {request.path}: {e.message}")
        return error_response(e.message, e.status_code)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e):
        db.session.rollback()
        logger.error(f"Database error on {request.method} {request.path}: {sanitize_exception_message(e)}",
                     exc_info=e)
        return error_response(GENERIC_SERVER_ERROR, 500)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code == 429:
            logger.warning(f"Rate limit exceeded on {request.method} {request.path}")
        message = HTTP_ERROR_MESSAGES.get(e.code, e.name)
        return error_response(message, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.error(f"Unhandled error on {request.method} {request.path}: {sanitize_exception_message(e)}",
                     exc_info=e)
        return error_response(GENERIC_SERVER_ERROR, 500)
