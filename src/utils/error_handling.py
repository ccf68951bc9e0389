"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors.

    ``kind`` is the stable error category returned to clients; the message is
    the only other detail that leaves the service.
    """

    kind = "Internal"

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    kind = "NotFound"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class TicketNotFoundError(NotFoundError):
    def __init__(self, message: str = "Ticket not found"):
        super().__init__(message)


class EventNotFoundError(NotFoundError):
    def __init__(self, message: str = "Event not found"):
        super().__init__(message)


class ForbiddenError(AppError):
    """Raised on ownership or organizer mismatch."""

    kind = "Forbidden"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403)


class ConflictError(AppError):
    """Raised when a write would violate a uniqueness or capacity rule."""

    kind = "Conflict"
    reason = "Conflict"

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, status_code=409)


class DuplicateBookingError(ConflictError):
    reason = "DuplicateBooking"

    def __init__(self, message: str = "You already booked this event"):
        super().__init__(message)


class SoldOutError(ConflictError):
    reason = "SoldOut"

    def __init__(self, message: str = "This event is sold out"):
        super().__init__(message)


class CodeGenerationExhaustedError(ConflictError):
    reason = "CodeGenerationExhausted"

    def __init__(self, message: str = "Could not allocate a unique ticket code"):
        super().__init__(message)


class InvalidStateError(AppError):
    """Raised when the event time window does not allow the operation."""

    kind = "InvalidState"
    reason = "InvalidState"

    def __init__(self, message: str = "Operation not allowed at this time"):
        super().__init__(message, status_code=400)


class SalesClosedError(InvalidStateError):
    reason = "SalesClosed"

    def __init__(self, message: str = "Ticket sales closed when the event started"):
        super().__init__(message)


class EventNotStartedError(InvalidStateError):
    reason = "EventNotStarted"

    def __init__(self, message: str = "Event has not started yet"):
        super().__init__(message)


class EventEndedError(InvalidStateError):
    reason = "EventEnded"

    def __init__(self, message: str = "Ticket expired, the event has already ended"):
        super().__init__(message)


class UnauthenticatedError(AppError):
    kind = "Unauthenticated"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class ValidationError(AppError):
    """Raised when input validation fails."""

    kind = "Validation"

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=422)


class DependentServiceError(AppError):
    """Raised when the store, the directory or the encoder fails."""

    kind = "DependentServiceError"

    def __init__(self, message: str = "A dependent service is unavailable"):
        super().__init__(message, status_code=502)


class EncodingError(DependentServiceError):
    def __init__(self, message: str = "Failed to generate QR code"):
        super().__init__(message)


def json_response(status: int, body: Any) -> Dict[str, Any]:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": body if isinstance(body, str) else json.dumps(body),
    }


def to_response(error: AppError, correlation_id: Optional[str] = None) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body = {"message": error.message, "kind": error.kind, "status": "error"}
    reason = getattr(error, "reason", None)
    if reason and reason != error.kind:
        body["reason"] = reason
    if correlation_id:
        body["correlation_id"] = correlation_id
    return json_response(error.status_code, body)


def internal_error_response(correlation_id: Optional[str] = None) -> Dict[str, Any]:
    """Stable 500 body that never carries exception details."""
    body = {"message": "Internal server error", "kind": "Internal", "status": "error"}
    if correlation_id:
        body["correlation_id"] = correlation_id
    return json_response(500, body)
