"""
Error taxonomy.

Every failure raised by the network-bound steps of an analysis is a
``DocumentatorError`` subclass carrying an ``ErrorType`` and the transport
status code a caller should surface. The pure collection code never raises
any of these.
"""

from __future__ import annotations

from typing import Any

from prdocumentator.models.base import ErrorType


class DocumentatorError(Exception):
    """Base exception for all pr-documentator errors.

    Attributes:
        error_type: Classification of the failure
        status_code: Transport status code to report
        context: Extra key/value details for logs and payloads
    """

    error_type: ErrorType = ErrorType.INTERNAL
    status_code: int = 500

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context

    def __str__(self) -> str:
        if self.__cause__ is not None:
            return f"{self.message}: {self.__cause__}"
        return self.message


class ValidationError(DocumentatorError):
    """Raised when input or oracle output fails validation."""

    error_type = ErrorType.VALIDATION
    status_code = 400


class UnauthorizedError(DocumentatorError):
    """Raised when an upstream rejects our credentials, or a session is unknown."""

    error_type = ErrorType.UNAUTHORIZED
    status_code = 401


class NotFoundError(DocumentatorError):
    """Raised when an upstream resource does not exist."""

    error_type = ErrorType.NOT_FOUND
    status_code = 404


class RateLimitError(DocumentatorError):
    """Raised when an upstream rate limit is exceeded."""

    error_type = ErrorType.RATE_LIMIT
    status_code = 429


class UpstreamTimeoutError(DocumentatorError):
    """Raised when an upstream call does not finish in time."""

    error_type = ErrorType.TIMEOUT
    status_code = 504


class UnavailableError(DocumentatorError):
    """Raised when an upstream is temporarily unavailable (5xx)."""

    error_type = ErrorType.UNAVAILABLE
    status_code = 503


class ExternalServiceError(DocumentatorError):
    """Raised for any other upstream failure."""

    error_type = ErrorType.EXTERNAL
    status_code = 502


class InternalError(DocumentatorError):
    """Raised for failures inside this package."""

    error_type = ErrorType.INTERNAL
    status_code = 500


def status_code_for(exc: BaseException) -> int:
    """Map any exception to the status code a transport should return."""
    if isinstance(exc, DocumentatorError):
        return exc.status_code
    return InternalError.status_code


def to_error_payload(exc: BaseException) -> dict[str, Any]:
    """Render an exception as the JSON error body returned to callers."""
    error_type = exc.error_type if isinstance(exc, DocumentatorError) else ErrorType.INTERNAL
    payload: dict[str, Any] = {"error": str(exc), "type": error_type.value}
    if isinstance(exc, DocumentatorError) and exc.context:
        payload["context"] = exc.context
    return payload
