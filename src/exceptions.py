"""Error taxonomy shared by every service in the application."""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    CONFLICT = "CONFLICT"
    INVALID_INPUT = "INVALID_INPUT"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    EXPIRED_TOKEN = "EXPIRED_TOKEN"
    REVOKED_TOKEN = "REVOKED_TOKEN"
    UNKNOWN_USER = "UNKNOWN_USER"
    FORBIDDEN = "FORBIDDEN"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class DomainError(Exception):
    """Base domain error with code, user-safe message and HTTP status."""

    code = ErrorCode.INVALID_INPUT
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND
    status_code = 404


class EventNotFoundError(NotFoundError):
    """Raised when an event row does not exist."""

    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_id: int):
        super().__init__(f"No event found with ID: {event_id}")
        self.event_id = event_id


class ConflictError(DomainError):
    code = ErrorCode.CONFLICT
    status_code = 409


class InvalidInputError(DomainError):
    code = ErrorCode.INVALID_INPUT
    status_code = 400


class InsufficientInventoryError(DomainError):
    """Raised when an event has fewer tickets left than requested."""

    code = ErrorCode.INSUFFICIENT_INVENTORY
    status_code = 400

    def __init__(self, event_id: int, requested: int, remaining: int):
        super().__init__(
            f"Not enough tickets available. Only {remaining} tickets remaining.",
            details={"remaining_tickets": remaining},
        )
        self.event_id = event_id
        self.requested = requested
        self.remaining = remaining


class UnauthenticatedError(DomainError):
    code = ErrorCode.UNAUTHENTICATED
    status_code = 401

    def __init__(self, message: str = "No token provided"):
        super().__init__(message)


class InvalidCredentialError(DomainError):
    code = ErrorCode.INVALID_CREDENTIAL
    status_code = 401


class ExpiredTokenError(InvalidCredentialError):
    code = ErrorCode.EXPIRED_TOKEN


class RevokedTokenError(InvalidCredentialError):
    code = ErrorCode.REVOKED_TOKEN

    def __init__(self, message: str = "Refresh token has been revoked or does not exist"):
        super().__init__(message)


class UnknownUserError(DomainError):
    """Token is valid but its subject no longer exists or is inactive."""

    code = ErrorCode.UNKNOWN_USER
    status_code = 401

    def __init__(self, message: str = "The user associated with this token no longer exists or is inactive"):
        super().__init__(message)


class ForbiddenError(DomainError):
    code = ErrorCode.FORBIDDEN
    status_code = 403


class StoreUnavailableError(DomainError):
    code = ErrorCode.STORE_UNAVAILABLE
    status_code = 500

    def __init__(self, message: str = "The database is unavailable"):
        super().__init__(message)
