# litrato/routes/scheduling.py
"""
Scheduling routes: conflict checks, daily availability, request decisions
and booking extensions.

Routes stay thin; services raise DomainException subclasses which are
converted here to HTTP errors.
"""

from datetime import date
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ..api.dependencies import (
    get_availability_service,
    get_booking_acceptance_service,
    get_conflict_checker,
    get_extension_service,
    get_pricing_service,
)
from ..core.exceptions import DomainException
from ..core.ulid_helper import require_ulid
from ..schemas.availability import DailyAvailability
from ..schemas.scheduling import (
    BookingRequestResponse,
    ConfirmedBookingResponse,
    ConflictCheckRequest,
    ConflictCheckResponse,
    ConflictingBooking,
    ExtensionPreflightRequest,
    ExtensionPreflightResponse,
    ExtensionResponse,
    ExtensionUpdateRequest,
    RejectRequestBody,
)
from ..services.availability_service import AvailabilityService
from ..services.booking_acceptance_service import BookingAcceptanceService
from ..services.conflict_checker import ConflictChecker
from ..services.extension_service import BookingExtensionService
from ..services.pricing_service import ExtensionPricingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


def handle_domain_exception(exc: DomainException):
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/conflicts/check", response_model=ConflictCheckResponse)
def check_conflict(
    payload: ConflictCheckRequest,
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
):
    """Check whether a prospective slot collides with an accepted booking."""
    try:
        require_ulid(payload.package_id, "package_id")
        conflict = conflict_checker.find_slot_conflict(
            payload.package_id,
            payload.event_date,
            payload.start_time,
            payload.end_time,
            payload.extension_hours,
        )
        return ConflictCheckResponse(
            conflict=conflict is not None,
            conflicting_booking=ConflictingBooking.from_window(conflict),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/availability/{event_date}", response_model=DailyAvailability)
def get_daily_availability(
    event_date: date,
    availability_service: AvailabilityService = Depends(get_availability_service),
):
    """Blocked ranges and startable windows for every active package on a date."""
    try:
        return availability_service.compute_daily_availability(event_date)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/requests/{request_id}/accept", response_model=ConfirmedBookingResponse)
def accept_request(
    request_id: str,
    acceptance_service: BookingAcceptanceService = Depends(get_booking_acceptance_service),
):
    try:
        require_ulid(request_id, "request_id")
        confirmed = acceptance_service.accept_request(request_id)
        return ConfirmedBookingResponse.from_model(confirmed)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/requests/{request_id}/reject", response_model=BookingRequestResponse)
def reject_request(
    request_id: str,
    payload: Optional[RejectRequestBody] = None,
    acceptance_service: BookingAcceptanceService = Depends(get_booking_acceptance_service),
):
    try:
        require_ulid(request_id, "request_id")
        request = acceptance_service.reject_request(
            request_id, payload.reason if payload else None
        )
        return BookingRequestResponse.from_model(request)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/requests/{request_id}/cancel", response_model=BookingRequestResponse)
def cancel_request(
    request_id: str,
    acceptance_service: BookingAcceptanceService = Depends(get_booking_acceptance_service),
):
    try:
        require_ulid(request_id, "request_id")
        request = acceptance_service.cancel_request(request_id)
        return BookingRequestResponse.from_model(request)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/confirmed/{booking_id}/extension/preflight",
    response_model=ExtensionPreflightResponse,
)
def preflight_extension(
    booking_id: str,
    payload: ExtensionPreflightRequest,
    extension_service: BookingExtensionService = Depends(get_extension_service),
    pricing_service: ExtensionPricingService = Depends(get_pricing_service),
):
    """Report whether a proposed total extension would run into another booking."""
    try:
        require_ulid(booking_id, "booking_id")
        conflict = extension_service.preflight_extension(booking_id, payload.hours)
        return ExtensionPreflightResponse(
            conflict=conflict is not None,
            conflicting_booking=ConflictingBooking.from_window(conflict),
            extension_amount=pricing_service.extension_amount(payload.hours),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/confirmed/{booking_id}/extension", response_model=ExtensionResponse)
def update_extension(
    booking_id: str,
    payload: ExtensionUpdateRequest,
    extension_service: BookingExtensionService = Depends(get_extension_service),
    pricing_service: ExtensionPricingService = Depends(get_pricing_service),
):
    """
    Change a confirmed booking's extension.

    A conflict without ``force`` is not an error: the response reports
    ``applied: false`` together with the conflicting slot.
    """
    try:
        require_ulid(booking_id, "booking_id")
        if payload.hours is not None:
            outcome = extension_service.set_extension(booking_id, payload.hours, payload.force)
        else:
            outcome = extension_service.extend_by(booking_id, payload.add_hours, payload.force)

        amount_due = (
            pricing_service.amount_due_for_change(outcome.previous_hours, outcome.requested_hours)
            if outcome.applied
            else pricing_service.extension_amount(0)
        )
        return ExtensionResponse(
            applied=outcome.applied,
            forced=outcome.forced,
            previous_hours=outcome.previous_hours,
            requested_hours=outcome.requested_hours,
            conflicting_booking=ConflictingBooking.from_window(outcome.conflict),
            amount_due=amount_due,
            booking=ConfirmedBookingResponse.from_model(outcome.booking),
        )
    except DomainException as e:
        handle_domain_exception(e)
