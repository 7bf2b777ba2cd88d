from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from models import EmailTaken
from utils.errors import AuthenticationError, AuthError

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized"


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # Every authentication failure looks the same to the client:
    # unknown email, wrong password, bad/expired/revoked token.
    @app.errorhandler(AuthenticationError)
    def unauthorized(err: AuthenticationError):
        logger.info("authentication failed: %s", err.__class__.__name__)
        return error_response("UNAUTHORIZED", UNAUTHORIZED_MESSAGE, 401)

    # HashingFailure, SigningFailure, StoreFailure
    @app.errorhandler(AuthError)
    def auth_internal_error(err: AuthError):
        logger.error("auth component failure: %s", err, exc_info=err)
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500)

    @app.errorhandler(EmailTaken)
    def email_taken(err: EmailTaken):
        return error_response("CONFLICT", "Email already registered", 409)

    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("VALIDATION_ERROR", "Invalid input", 422, details=err.messages)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        if current_app and current_app.debug:
            logger.exception("Integrity error", exc_info=err)
        if "unique constraint" in lower_msg or "unique violation" in lower_msg:
            return error_response("CONFLICT", "Unique constraint violated.", 409)
        return error_response("BAD_REQUEST", "Integrity error.", 400)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        code = err.code or 400
        name = (err.name or "Bad Request").upper().replace(" ", "_")
        return error_response(name, err.description, code)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        # In dev, include exception details to speed up debugging
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
