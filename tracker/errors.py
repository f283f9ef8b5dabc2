"""Error taxonomy shared by the data layer and the transports.

Every failure the tracker reports carries a stable ``code`` and a message
that is safe to show to the caller. Transports translate the code into their
own representation (see ``tracker.error_handlers`` for HTTP).
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_COLOR = "INVALID_COLOR"
    USER_EXISTS = "USER_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    NO_UPDATE_FIELDS = "NO_UPDATE_FIELDS"
    DB_ERROR = "DB_ERROR"
    HASH_ERROR = "HASH_ERROR"
    INTERNAL = "INTERNAL"


class TrackerError(Exception):
    """Base exception for all tracker errors."""

    code: ErrorCode = ErrorCode.INTERNAL
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"code": self.code.value, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidInputError(TrackerError):
    code = ErrorCode.INVALID_INPUT
    default_message = "Invalid input."


class InvalidColorError(TrackerError):
    code = ErrorCode.INVALID_COLOR
    default_message = "Color must be in format #RRGGBB (e.g., #FF0000)."


class UserExistsError(TrackerError):
    code = ErrorCode.USER_EXISTS
    default_message = "Username already taken."


class InvalidCredentialsError(TrackerError):
    code = ErrorCode.INVALID_CREDENTIALS
    default_message = "Invalid username or password."


class UnauthorizedError(TrackerError):
    code = ErrorCode.UNAUTHORIZED
    default_message = "Invalid or expired session."


class NotFoundError(TrackerError):
    code = ErrorCode.NOT_FOUND
    default_message = "Resource not found."


class NoUpdateFieldsError(TrackerError):
    code = ErrorCode.NO_UPDATE_FIELDS
    default_message = "No fields provided for update."


class DatabaseError(TrackerError):
    code = ErrorCode.DB_ERROR
    default_message = "Database error."


class HashError(TrackerError):
    code = ErrorCode.HASH_ERROR
    default_message = "Unable to process credentials."


def summarize_validation_errors(errors) -> list[dict]:
    """Reduce pydantic error entries to JSON-safe ``loc``/``msg`` pairs."""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in errors
    ]
