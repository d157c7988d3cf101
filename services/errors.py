"""
Error taxonomy shared by the service layer and the HTTP boundary.

Services raise these without knowing about HTTP; api/errors.py maps each
ErrorKind to a status code and the response envelope.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION = "VALIDATION_ERROR"
    INTERNAL = "INTERNAL_ERROR"


class AppError(Exception):
    kind = ErrorKind.INTERNAL
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class Conflict(AppError):
    kind = ErrorKind.CONFLICT
    default_message = "Conflict"


class Unauthorized(AppError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class BadRequest(AppError):
    kind = ErrorKind.BAD_REQUEST
    default_message = "Bad request"


class ValidationFailed(AppError):
    kind = ErrorKind.VALIDATION
    default_message = "Validation error"
