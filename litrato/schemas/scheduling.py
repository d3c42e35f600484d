# litrato/schemas/scheduling.py
"""Request and response payloads for the scheduling routes."""

from datetime import date, time
from typing import Optional

from pydantic import Field, model_validator

from ..domain.booking_window import BookingWindow
from ..models.booking_request import BookingRequest
from ..models.confirmed_booking import ConfirmedBooking
from ..utils.time_utils import format_minutes, time_to_minutes
from .base import Money, StandardizedModel, StrictModel


def _clock(value: Optional[time]) -> Optional[str]:
    return format_minutes(time_to_minutes(value)) if value is not None else None


class ConflictingBooking(StandardizedModel):
    """The slot a request collided with; no internal ids."""

    event_date: str
    event_time: str

    @classmethod
    def from_window(cls, window: Optional[BookingWindow]) -> Optional["ConflictingBooking"]:
        if window is None:
            return None
        return cls(**window.describe())


class ConflictCheckRequest(StrictModel):
    package_id: str
    event_date: date
    start_time: str = Field(..., description="HH:MM")
    end_time: Optional[str] = Field(None, description="HH:MM; omitted means package duration")
    extension_hours: int = 0


class ConflictCheckResponse(StandardizedModel):
    conflict: bool
    conflicting_booking: Optional[ConflictingBooking] = None


class BookingRequestResponse(StandardizedModel):
    id: str
    package_id: str
    event_date: date
    start_time: str
    end_time: Optional[str] = None
    extension_hours: int
    status: str
    notes: Optional[str] = None

    @classmethod
    def from_model(cls, request: BookingRequest) -> "BookingRequestResponse":
        return cls(
            id=request.id,
            package_id=request.package_id,
            event_date=request.event_date,
            start_time=_clock(request.start_time),
            end_time=_clock(request.end_time),
            extension_hours=request.extension_hours or 0,
            status=request.status,
            notes=request.notes,
        )


class ConfirmedBookingResponse(StandardizedModel):
    id: str
    request_id: str
    booking_status: str
    event_date: date
    event_start: str
    event_end: Optional[str] = None
    extension_hours: int

    @classmethod
    def from_model(cls, booking: ConfirmedBooking) -> "ConfirmedBookingResponse":
        request = booking.request
        return cls(
            id=booking.id,
            request_id=booking.request_id,
            booking_status=booking.booking_status,
            event_date=request.event_date,
            event_start=_clock(request.start_time),
            event_end=_clock(request.effective_end_time),
            extension_hours=request.effective_extension_hours,
        )


class RejectRequestBody(StrictModel):
    reason: Optional[str] = Field(None, max_length=1000)


class ExtensionPreflightRequest(StrictModel):
    hours: int = Field(..., description="Proposed total extension hours")


class ExtensionPreflightResponse(StandardizedModel):
    conflict: bool
    conflicting_booking: Optional[ConflictingBooking] = None
    extension_amount: Money


class ExtensionUpdateRequest(StrictModel):
    """Either a new total (``hours``) or hours to add (``add_hours``)."""

    hours: Optional[int] = None
    add_hours: Optional[int] = None
    force: bool = False

    @model_validator(mode="after")
    def _one_of_hours(self) -> "ExtensionUpdateRequest":
        if (self.hours is None) == (self.add_hours is None):
            raise ValueError("Provide exactly one of 'hours' or 'add_hours'")
        return self


class ExtensionResponse(StandardizedModel):
    applied: bool
    forced: bool
    previous_hours: int
    requested_hours: int
    conflicting_booking: Optional[ConflictingBooking] = None
    amount_due: Money
    booking: ConfirmedBookingResponse
