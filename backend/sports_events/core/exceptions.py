"""
Domain errors raised by the service layer.

Services never raise HTTPException. Each error carries a stable code and a
user-safe message; the API layer maps error classes to status codes.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    REGISTRATION_CLOSED = "REGISTRATION_CLOSED"
    BOOKING_NOT_CANCELLABLE = "BOOKING_NOT_CANCELLABLE"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    DUPLICATE_CATEGORY = "DUPLICATE_CATEGORY"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    HAS_DEPENDENTS = "HAS_DEPENDENTS"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_FAILED

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when a referenced id or natural key does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"{entity} {key} not found")
        self.entity = entity
        self.key = key


class ConflictError(DomainError):
    """Raised when a business invariant would be violated."""

    code = ErrorCode.CONFLICT


class ValidationError(DomainError):
    """Raised when input is well-formed but semantically invalid."""

    code = ErrorCode.VALIDATION_FAILED


class StoreUnavailableError(DomainError):
    """Transient persistence failure. Safe for the caller to retry."""

    code = ErrorCode.STORE_UNAVAILABLE

    def __init__(self, message: str = "Data store temporarily unavailable") -> None:
        super().__init__(message)
