# litrato/services/booking_acceptance_service.py
"""
Booking Acceptance Service for the Litrato scheduling engine.

Owns the request state machine: pending -> accepted | rejected | cancelled.

Accepting is a single transaction:
1. Conditional UPDATE pending -> accepted, guarded against another accepted
   request holding the same package, date and start time.
2. Buffered conflict re-check against the package's other accepted bookings.
3. Creation of the one ConfirmedBooking for the request.
4. Cascade rejection of every other pending request for the same slot.

Customer emails go out only after the commit, and never fail the call.
"""

from datetime import date, time
import logging
from typing import Optional, Union

from sqlalchemy.orm import Session

from ..core.config import SchedulingSettings
from ..core.constants import CASCADE_REJECTION_NOTE
from ..core.exceptions import (
    BookingConflictException,
    BusinessRuleException,
    InvariantViolationException,
    NotFoundException,
    RepositoryException,
    StaleStateException,
)
from ..models.booking_request import BookingRequest, BookingRequestStatus
from ..models.confirmed_booking import ConfirmedBooking, ConfirmedBookingStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..utils.time_utils import format_minutes, minutes_to_time, parse_time, time_to_minutes
from .base import BaseService
from .conflict_checker import ConflictChecker
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


def _slot_details(request: BookingRequest) -> dict:
    return {
        "event_date": request.event_date.isoformat(),
        "event_time": format_minutes(time_to_minutes(request.start_time)),
    }


class BookingAcceptanceService(BaseService):
    """Accepts, rejects and cancels booking requests."""

    def __init__(
        self,
        db: Session,
        config: Optional[SchedulingSettings] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db, config)
        self.request_repository = RepositoryFactory.create_booking_request_repository(db)
        self.confirmed_repository = RepositoryFactory.create_confirmed_booking_repository(db)
        self.package_repository = RepositoryFactory.create_package_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db, self.config)
        self.notification_service = notification_service or NotificationService(db)

    @BaseService.measure_operation("accept_request")
    def accept_request(self, request_id: str) -> ConfirmedBooking:
        """
        Accept a pending request and confirm it.

        Args:
            request_id: The request to accept

        Returns:
            The newly created ConfirmedBooking

        Raises:
            NotFoundException: unknown request
            BookingConflictException: the slot is already taken, or the buffered
                window collides with another accepted booking
            StaleStateException: the request is no longer pending
            InvariantViolationException: a confirmed booking already exists
        """
        request = self._get_request(request_id)
        if not request.is_pending:
            prometheus_metrics.record_accept_outcome("stale")
            raise StaleStateException(request.status)

        with self.transaction():
            if not self._flip_to_accepted(request):
                self._raise_accept_failure(request)
            self.db.refresh(request)

            if self.config.enforce_buffer_on_accept:
                overlap = self.conflict_checker.find_accepted_overlap(request)
                if overlap:
                    prometheus_metrics.record_accept_outcome("conflict")
                    raise BookingConflictException(
                        "This booking overlaps another accepted booking once setup time is included",
                        details=overlap.describe(),
                    )

            if self.confirmed_repository.get_by_request_id(request.id):
                raise InvariantViolationException(
                    f"Request {request.id} already has a confirmed booking",
                    details={"request_id": request.id},
                )
            confirmed = self._create_confirmed_booking(request)

            rivals = self.request_repository.reject_pending_rivals(request, CASCADE_REJECTION_NOTE)

        prometheus_metrics.record_accept_outcome("accepted")
        prometheus_metrics.record_cascade_rejections(len(rivals))
        self.log_operation(
            "accept_request",
            request_id=request.id,
            confirmed_booking_id=confirmed.id,
            cascade_rejected=len(rivals),
        )

        self.notification_service.notify_request_accepted(request)
        for rival in rivals:
            self.notification_service.notify_slot_taken(rival)

        return confirmed

    @BaseService.measure_operation("reject_request")
    def reject_request(self, request_id: str, reason: Optional[str] = None) -> BookingRequest:
        """
        Reject a pending request.

        Rejecting twice raises StaleStateException and leaves the request unchanged.

        Args:
            request_id: The request to reject
            reason: Optional reason, appended to the request notes and emailed

        Raises:
            NotFoundException: unknown request
            StaleStateException: the request is no longer pending
            InvariantViolationException: the request already has a confirmed booking
        """
        request = self._get_request(request_id)
        if not request.is_pending:
            raise StaleStateException(request.status)

        reason = reason.strip() if reason else None

        with self.transaction():
            if self.confirmed_repository.get_by_request_id(request.id):
                raise InvariantViolationException(
                    f"Pending request {request.id} has a confirmed booking",
                    details={"request_id": request.id},
                )
            if not self.request_repository.reject_if_pending(request.id, reason):
                raise StaleStateException(self.request_repository.get_status(request.id))
            self.db.refresh(request)

        self.log_operation("reject_request", request_id=request.id)
        self.notification_service.notify_request_rejected(request, reason)
        return request

    @BaseService.measure_operation("cancel_request")
    def cancel_request(self, request_id: str) -> BookingRequest:
        """Withdraw a pending request on the customer's behalf."""
        request = self._get_request(request_id)
        if not request.is_pending:
            raise StaleStateException(request.status)

        with self.transaction():
            if not self.request_repository.cancel_if_pending(request.id):
                raise StaleStateException(self.request_repository.get_status(request.id))
            self.db.refresh(request)

        self.log_operation("cancel_request", request_id=request.id)
        return request

    @BaseService.measure_operation("create_and_confirm")
    def create_and_confirm(
        self,
        package_id: str,
        event_date: date,
        start_time: Union[str, time],
        end_time: Optional[Union[str, time]] = None,
        *,
        extension_hours: int = 0,
        customer_name: Optional[str] = None,
        customer_email: Optional[str] = None,
        event_name: Optional[str] = None,
        event_address: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ConfirmedBooking:
        """
        Create a request for an admin-entered booking and accept it straight away.

        The slot is checked before anything is written. If acceptance then
        loses a race, the request is left pending for review.

        Raises:
            NotFoundException: unknown package
            BusinessRuleException: the package is inactive
            ValidationException: malformed times
            BookingConflictException: the slot collides with an accepted booking
        """
        package = self.package_repository.get_by_id(package_id, load_relationships=False)
        if not package:
            raise NotFoundException(f"Package {package_id} not found")
        if not package.is_active:
            raise BusinessRuleException(
                f"Package {package.name} is not available for booking",
                code="PACKAGE_INACTIVE",
            )

        conflict = self.conflict_checker.find_slot_conflict(
            package_id, event_date, start_time, end_time, extension_hours
        )
        if conflict:
            raise BookingConflictException(details=conflict.describe())

        start = parse_time(start_time)
        end = parse_time(end_time) if end_time is not None else None

        with self.transaction():
            request = self.request_repository.create(
                package_id=package_id,
                event_date=event_date,
                start_time=minutes_to_time(start),
                end_time=minutes_to_time(end) if end is not None else None,
                extension_hours=extension_hours,
                customer_name=customer_name,
                customer_email=customer_email,
                event_name=event_name,
                event_address=event_address,
                notes=notes,
                status=BookingRequestStatus.PENDING.value,
            )
            request_id = request.id

        self.logger.info(f"Created request {request_id} for admin confirmation")
        return self.accept_request(request_id)

    def _get_request(self, request_id: str) -> BookingRequest:
        request = self.request_repository.get_by_id(request_id)
        if not request:
            raise NotFoundException(f"Booking request {request_id} not found")
        return request

    def _flip_to_accepted(self, request: BookingRequest) -> bool:
        try:
            return self.request_repository.accept_if_slot_free(request.id)
        except RepositoryException as e:
            if e.integrity_error:
                prometheus_metrics.record_accept_outcome("conflict")
                raise BookingConflictException(
                    "This time slot has already been booked", details=_slot_details(request)
                ) from e
            raise

    def _raise_accept_failure(self, request: BookingRequest) -> None:
        """Explain why the conditional update touched no rows."""
        holder = self.request_repository.find_accepted_for_slot(
            request.package_id,
            request.event_date,
            request.start_time,
            exclude_request_id=request.id,
        )
        if holder:
            prometheus_metrics.record_accept_outcome("conflict")
            raise BookingConflictException(
                "This time slot has already been booked", details=_slot_details(holder)
            )

        current_status = self.request_repository.get_status(request.id)
        if current_status is None:
            raise NotFoundException(f"Booking request {request.id} not found")
        prometheus_metrics.record_accept_outcome("stale")
        raise StaleStateException(current_status)

    def _create_confirmed_booking(self, request: BookingRequest) -> ConfirmedBooking:
        try:
            return self.confirmed_repository.create(
                request=request,
                booking_status=ConfirmedBookingStatus.SCHEDULED.value,
            )
        except RepositoryException as e:
            if e.integrity_error:
                raise InvariantViolationException(
                    f"Request {request.id} already has a confirmed booking",
                    details={"request_id": request.id},
                ) from e
            raise
