"""Error kinds raised by application services and mapped at the HTTP boundary."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Caller-facing error categories."""

    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class AppError(Exception):
    """Base class for typed application failures."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(AppError):
    """Raised when required fields are missing or malformed."""

    kind = ErrorKind.INVALID_INPUT


class ConflictError(AppError):
    """Raised when a unique value is already bound to another record."""

    kind = ErrorKind.CONFLICT


class UnauthenticatedError(AppError):
    """Raised for missing, invalid or expired credentials and tokens."""

    kind = ErrorKind.UNAUTHENTICATED


class ForbiddenError(AppError):
    """Raised when an authenticated caller does not own the target resource."""

    kind = ErrorKind.FORBIDDEN


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    kind = ErrorKind.NOT_FOUND


class InternalError(AppError):
    """Raised when a collaborator fails unexpectedly; message stays generic."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message)
