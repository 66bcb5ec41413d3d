"""
Application exception hierarchy.

Exceptions here describe failures that cross the service boundary and have
to be turned into an API or realtime error payload. Expected failures inside
a service (missing receiver, empty text, unknown counterpart) are returned
as ``ServiceResult.failure`` instead; see ``core.services``.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures (400)
    ├── NotFoundError - Referenced identity or record missing (404)
    ├── PermissionDeniedError - Acting on behalf of someone else (403)
    ├── RateLimitError - Message flood control (429)
    ├── ExternalServiceError - Push gateway failures (502)
    └── PersistenceError - Message/context store unavailable (503)

Usage:
    from core.exceptions import NotFoundError

    raise NotFoundError(
        "Receiver not found",
        error_code="RECEIVER_NOT_FOUND",
        details={"receiver_id": str(receiver_id)},
    )

    # Rendered by core.exception_handlers as
    # {"error": "Receiver not found", "error_code": "RECEIVER_NOT_FOUND", ...}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, identifiers)
        status_code: HTTP status used when the error reaches a DRF view
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Receiver not found",
                "error_code": "RECEIVER_NOT_FOUND",
                "details": {"receiver_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Example:
        raise ValidationError("Message text is required", error_code="EMPTY_TEXT")

    Note:
        DRF serializers validate request shape. Use this for rules that
        live in the service layer.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """Raised when a referenced user or record does not exist."""

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when a caller acts on behalf of another identity.

    Example:
        if claimed_user_id != str(self.user.id):
            raise PermissionDeniedError(
                "Cannot act on behalf of another user",
                error_code="IDENTITY_MISMATCH",
            )
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class RateLimitError(BaseApplicationError):
    """
    Raised when a sender exceeds the message rate limit.

    Include ``retry_after`` in details when it is known.
    """

    default_error_code: str = "RATE_LIMIT_EXCEEDED"
    status_code: int = 429


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    The push gateway client raises this; the notification service converts
    it into a per-token failure count so it never reaches a client.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 502


class PersistenceError(BaseApplicationError):
    """
    Raised when the database rejects or cannot complete a write or read.

    Wraps ``django.db.DatabaseError`` at the service boundary. Clients get a
    generic message; the original error is logged, not exposed.
    """

    default_error_code: str = "PERSISTENCE_ERROR"
    status_code: int = 503
