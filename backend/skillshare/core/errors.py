# backend/skillshare/core/errors.py
"""Domain errors raised by the store layer and their HTTP mapping."""
import enum

from fastapi import status


class StoreErrorKind(str, enum.Enum):
    """Closed set of failures a store operation can report."""
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    ALREADY_JOINED = "already_joined"
    NOT_JOINED = "not_joined"
    SESSION_FULL = "session_full"
    FEEDBACK_EXISTS = "feedback_exists"
    DATABASE = "database"


class StoreError(Exception):
    """A store operation failed with a tagged, client-safe reason."""

    def __init__(self, kind: StoreErrorKind, message: str | None = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"StoreError({self.kind.value!r}, {self.message!r})"


DEFAULT_MESSAGES: dict[StoreErrorKind, str] = {
    StoreErrorKind.NOT_FOUND: "Resource not found",
    StoreErrorKind.CONFLICT: "Resource already exists",
    StoreErrorKind.ALREADY_JOINED: "User already joined this session",
    StoreErrorKind.NOT_JOINED: "User is not a participant in this session",
    StoreErrorKind.SESSION_FULL: "Session is full",
    StoreErrorKind.FEEDBACK_EXISTS: "User has already submitted feedback for this session",
    StoreErrorKind.DATABASE: "Internal server error",
}

STATUS_CODES: dict[StoreErrorKind, int] = {
    StoreErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    StoreErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    StoreErrorKind.ALREADY_JOINED: status.HTTP_409_CONFLICT,
    StoreErrorKind.NOT_JOINED: status.HTTP_409_CONFLICT,
    StoreErrorKind.SESSION_FULL: status.HTTP_409_CONFLICT,
    StoreErrorKind.FEEDBACK_EXISTS: status.HTTP_409_CONFLICT,
    StoreErrorKind.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(error: StoreError) -> int:
    return STATUS_CODES[error.kind]


def client_message_for(error: StoreError) -> str:
    """Message safe to return to the client; database details never leak."""
    if error.kind is StoreErrorKind.DATABASE:
        return DEFAULT_MESSAGES[StoreErrorKind.DATABASE]
    return error.message
