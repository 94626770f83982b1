"""Shared domain exceptions and error codes.

This module defines the closed set of operational errors the platform
returns to callers. Every variant derives from DomainException so the
presentation layer can map it to an HTTP response in one place. Anything
that is not a DomainException is treated as an unexpected programming error.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # Validation Errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PASSWORD_MISMATCH = "PASSWORD_MISMATCH"
    DUPLICATE_FIELD = "DUPLICATE_FIELD"
    INVALID_RESET_TOKEN = "INVALID_RESET_TOKEN"

    # Authentication / Authorization Errors (401)
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"

    # Not Found Errors (404)
    ENTITY_NOT_FOUND = "ENTITY_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"

    # Delivery Errors (500)
    DELIVERY_FAILED = "DELIVERY_FAILED"

    # General Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class RejectionReason(str, Enum):
    """Why the request gate turned a request away."""

    NO_CREDENTIAL = "NO_CREDENTIAL"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    UNKNOWN_SUBJECT = "UNKNOWN_SUBJECT"
    PASSWORD_CHANGED = "PASSWORD_CHANGED"


class DomainException(Exception):  # NOQA: N818
    """Base exception for all operational (expected) errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    details
        Optional additional context (logged but not exposed to users)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class ValidationError(DomainException):
    """Raised for malformed or missing fields and password/confirm mismatch."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class AuthenticationError(DomainException):
    """Raised when presented credentials are wrong (login, change-password)."""

    def __init__(
        self,
        message: str = "Incorrect email or password",
        code: ErrorCode = ErrorCode.AUTHENTICATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class AuthorizationError(DomainException):
    """Raised when the request gate rejects a bearer token."""

    def __init__(
        self,
        message: str,
        reason: RejectionReason,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.NOT_AUTHORIZED, details)
        self.reason = reason


class NotFoundError(DomainException):
    """Raised when a requested entity cannot be found."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ENTITY_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class InvalidResetTokenError(DomainException):
    """Raised when a recovery secret matches nothing or has expired."""

    def __init__(
        self,
        message: str = "Token is invalid or has expired",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.INVALID_RESET_TOKEN, details)


class DeliveryError(DomainException):
    """Raised when an out-of-band notification could not be delivered."""

    def __init__(
        self,
        message: str = "There was an error sending the email. Try again later!",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.DELIVERY_FAILED, details)
