from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from models import storage
from services.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 422,
    ErrorKind.INTERNAL: 500,
}


def success_response(data=None, status: int = 200, message: str | None = None):
    payload = {"status": "success"}
    if data is not None:
        payload["data"] = data
    if message:
        payload["message"] = message
    return jsonify(payload), status


def error_response(message: str, status: int, details: dict | None = None):
    payload = {"status": "error", "message": message}
    if details:
        payload["errors"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # Service-layer taxonomy
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        status = STATUS_BY_KIND.get(err.kind, 500)
        if status >= 500:
            logger.exception("Application error", exc_info=err)
        return error_response(err.message, status, details=err.details)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("Validation error", 422, details=err.messages)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        storage.rollback()
        lower_msg = str(getattr(err, "orig", err)).lower()
        logger.warning("Integrity error: %s", lower_msg)
        if "unique constraint" in lower_msg or "unique violation" in lower_msg or "duplicate key" in lower_msg:
            return error_response("Resource already exists", 409)
        if "foreign key" in lower_msg:
            return error_response("Referenced resource does not exist or is still in use", 400)
        return error_response("Integrity error", 400)

    # Werkzeug HTTPExceptions (abort) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or err.name, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app and current_app.debug and not current_app.testing:
            details = {"type": err.__class__.__name__}
        return error_response("Internal server error", 500, details=details)
