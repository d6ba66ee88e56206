import logging

from flask import current_app, jsonify
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from utils.exceptions import AuthError, InvalidToken

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred"


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # Domain errors carry their own status and code
    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        if err.internal:
            logger.exception("Internal error", exc_info=err)
            return error_response("INTERNAL_ERROR", GENERIC_MESSAGE, 500)
        response, status = error_response(err.error, err.message, err.status_code)
        if isinstance(err, InvalidToken):
            response.headers["WWW-Authenticate"] = "Bearer"
        return response, status

    # Marshmallow validation errors map to 400 with field-level details
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        if current_app and current_app.debug:
            logger.debug("Validation failed: %s", err.messages)
        return error_response("VALIDATION_ERROR", "Invalid input", 400, details=err.messages)

    # Constraint violations that escaped the services
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err)).lower()
        logger.exception("Unhandled integrity error", exc_info=err)
        if "unique" in message:
            return error_response("CONFLICT", "Unique constraint violated.", 409)
        return error_response("INTERNAL_ERROR", GENERIC_MESSAGE, 500)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(err: SQLAlchemyError):
        logger.exception("Database error", exc_info=err)
        return error_response("INTERNAL_ERROR", GENERIC_MESSAGE, 500)

    # 404 Not Found (unknown route)
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = err.name.upper().replace(" ", "_")
        return error_response(code, err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response("INTERNAL_ERROR", GENERIC_MESSAGE, 500)
