# litrato/core/exceptions.py
"""
Domain exceptions for the scheduling engine.

Services raise these; routes turn them into HTTP errors with
``to_http_exception()``. Every error body has the same shape:
``{"message": ..., "code": ..., "details": {...}}``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base for errors a caller can act on."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Malformed input: bad clock times, negative hours, invalid ids."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Well-formed input the current state does not allow (inactive package, cancelled booking)."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Storage or provider failure."""


class BookingConflictException(ConflictException):
    """
    The slot collides with an already accepted booking.

    ``details`` holds the other booking's ``event_date`` and ``event_time``
    only, so the message can be shown to customers.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code="BOOKING_CONFLICT",
            details=details,
        )


class StaleStateException(ConflictException):
    """The request has left ``pending``; ``details.current_status`` says where it went."""

    def __init__(self, current_status: Optional[str], message: Optional[str] = None):
        super().__init__(
            message=message or f"Request is no longer pending (status: {current_status})",
            code="STALE_STATE",
            details={"current_status": current_status},
        )


class InvariantViolationException(DomainException):
    """Stored rows contradict the request state machine, e.g. a pending request with a confirmed booking."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVARIANT_VIOLATION", details=details)


class RepositoryException(Exception):
    """
    Data access failure inside a repository.

    ``integrity_error`` is set when a constraint rejected the write, which the
    acceptance flow reports as a booking conflict rather than a crash.
    """

    def __init__(self, message: str, *, integrity_error: bool = False):
        super().__init__(message)
        self.integrity_error = integrity_error
