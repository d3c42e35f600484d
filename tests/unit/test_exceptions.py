"""Unit tests for domain exception to HTTP mapping."""

import pytest

from litrato.core.exceptions import (
    BookingConflictException,
    BusinessRuleException,
    ConflictException,
    InvariantViolationException,
    NotFoundException,
    ServiceException,
    StaleStateException,
    ValidationException,
)


@pytest.mark.parametrize(
    "exc,status_code",
    [
        (ValidationException("bad"), 400),
        (NotFoundException("missing"), 404),
        (BookingConflictException(), 409),
        (StaleStateException("accepted"), 409),
        (BusinessRuleException("nope"), 422),
        (InvariantViolationException("broken"), 500),
        (ServiceException("db down"), 500),
    ],
)
def test_status_codes(exc, status_code):
    assert exc.to_http_exception().status_code == status_code


def test_booking_conflict_carries_slot_not_ids():
    exc = BookingConflictException(details={"event_date": "2026-12-12", "event_time": "10:00"})

    detail = exc.to_http_exception().detail

    assert detail["code"] == "BOOKING_CONFLICT"
    assert detail["details"] == {"event_date": "2026-12-12", "event_time": "10:00"}
    assert isinstance(exc, ConflictException)


def test_stale_state_reports_current_status():
    exc = StaleStateException("rejected")

    assert exc.code == "STALE_STATE"
    assert exc.details == {"current_status": "rejected"}
    assert "rejected" in exc.message


def test_conflict_and_stale_are_distinguishable():
    assert not isinstance(StaleStateException("accepted"), BookingConflictException)
