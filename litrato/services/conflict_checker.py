# litrato/services/conflict_checker.py
"""
Conflict Checker Service for the Litrato scheduling engine.

Decides whether a new or extended booking collides with an accepted
booking of the same package on the same date.

Every accepted booking is an obstacle covering
[start - buffer, core_end + remaining_headroom + buffer), where the
remaining headroom is the extension it could still be granted before the
ceiling. A new request reserves [start, core_end + its own headroom); an
extension reserves [start, new_core_end) with the concrete hours asked
for. A collision is an overlap of the obstacle with the reserved span, so
exactly one buffer must separate any two bookings and the check gives the
same answer whichever of the two is treated as the obstacle.
"""

from dataclasses import replace
from datetime import date, time
import logging
from typing import Iterable, List, Optional, Union

from sqlalchemy.orm import Session

from ..core.config import SchedulingSettings
from ..core.exceptions import NotFoundException, ValidationException
from ..domain.booking_window import BookingWindow
from ..domain.intervals import resolve_core_end
from ..models.booking_request import BookingRequest
from ..models.confirmed_booking import ConfirmedBooking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from ..utils.time_utils import MINUTES_PER_DAY, format_minutes, parse_time, time_to_minutes
from .base import BaseService

logger = logging.getLogger(__name__)

TimeInput = Union[str, time]


class ConflictChecker(BaseService):
    """
    Service for checking booking conflicts.

    Pure checks take ``BookingWindow`` snapshots; the ``check_*`` and
    ``*_extension`` entry points load accepted bookings through the
    repository first.
    """

    def __init__(
        self,
        db: Session,
        config: Optional[SchedulingSettings] = None,
        repository: Optional[ConflictCheckerRepository] = None,
    ):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            config: Scheduling constants
            repository: Optional ConflictCheckerRepository instance
        """
        super().__init__(db, config)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)
        self.package_repository = RepositoryFactory.create_package_repository(db)

    # Window construction

    def window_for_request(self, request: BookingRequest) -> BookingWindow:
        """Snapshot a stored request using its effective end time and extension."""
        start = time_to_minutes(request.start_time)
        end_time = request.effective_end_time
        extension_hours = request.effective_extension_hours
        duration_hours = request.package.duration_hours if request.package else None

        core_end = resolve_core_end(
            start,
            time_to_minutes(end_time) if end_time is not None else None,
            duration_hours,
            extension_hours,
            self.config.default_duration_hours,
        )
        return BookingWindow(
            request_id=request.id,
            package_id=request.package_id,
            event_date=request.event_date,
            start_minute=start,
            core_end_minute=core_end,
            extension_hours=extension_hours,
            event_name=request.event_name,
            status=request.status,
        )

    def extended_window(self, window: BookingWindow, total_extension_hours: int) -> BookingWindow:
        """
        The same booking with a different total extension.

        The base duration is what remains of the core span once the current
        extension is taken off, so only the extension part changes.
        """
        base_end = window.core_end_minute - (window.extension_hours or 0) * 60
        return replace(
            window,
            core_end_minute=base_end + total_extension_hours * 60,
            extension_hours=total_extension_hours,
        )

    # Pure checks

    def find_new_request_conflict(
        self, candidate: BookingWindow, existing: Iterable[BookingWindow]
    ) -> Optional[BookingWindow]:
        """First accepted booking whose obstacle overlaps the candidate's reserved span."""
        ceiling = self.config.extension_ceiling_hours
        span = candidate.reserved_interval(ceiling)
        return self._first_blocking(candidate, span, existing)

    def conflicts_new_request(
        self, candidate: BookingWindow, existing: Iterable[BookingWindow]
    ) -> bool:
        """
        Check a prospective booking against accepted bookings.

        The candidate is treated pessimistically: it reserves its remaining
        headroom up to the extension ceiling.
        """
        return self.find_new_request_conflict(candidate, existing) is not None

    def find_window_extension_conflict(
        self,
        target: BookingWindow,
        proposed_total_hours: int,
        others: Iterable[BookingWindow],
    ) -> Optional[BookingWindow]:
        """First other booking that the extended target would run into."""
        span = self.extended_window(target, proposed_total_hours).core_interval
        return self._first_blocking(target, span, others)

    def _first_blocking(self, subject: BookingWindow, span, others) -> Optional[BookingWindow]:
        buffer_minutes = self.config.buffer_minutes
        ceiling = self.config.extension_ceiling_hours
        for other in others:
            if other.package_id != subject.package_id or other.event_date != subject.event_date:
                continue
            if subject.request_id and other.request_id == subject.request_id:
                continue
            if other.blocked_interval(buffer_minutes, ceiling).overlaps(span):
                return other
        return None

    # Database-backed checks

    @BaseService.measure_operation("check_new_request_conflict")
    def find_slot_conflict(
        self,
        package_id: str,
        event_date: date,
        start_time: TimeInput,
        end_time: Optional[TimeInput] = None,
        extension_hours: int = 0,
    ) -> Optional[BookingWindow]:
        """
        Find the accepted booking a prospective slot would collide with.

        Args:
            package_id: Package being requested
            event_date: Event date
            start_time: Requested start ("HH:MM")
            end_time: Optional requested end; omitted means the package duration applies
            extension_hours: Extension already agreed for the request

        Returns:
            The colliding booking, or None when the slot is free

        Raises:
            ValidationException: malformed times or negative extension
            NotFoundException: unknown package
        """
        start = parse_time(start_time)
        if start is None:
            raise ValidationException(
                f"Invalid start time: {start_time!r}", details={"field": "start_time"}
            )
        end = None
        if end_time is not None:
            end = parse_time(end_time)
            if end is None:
                raise ValidationException(
                    f"Invalid end time: {end_time!r}", details={"field": "end_time"}
                )
        if extension_hours is None or extension_hours < 0:
            raise ValidationException("Extension hours cannot be negative")

        package = self.package_repository.get_by_id(package_id, load_relationships=False)
        if not package:
            raise NotFoundException(f"Package {package_id} not found")

        candidate = BookingWindow(
            request_id="",
            package_id=package_id,
            event_date=event_date,
            start_minute=start,
            core_end_minute=resolve_core_end(
                start, end, package.duration_hours, extension_hours, self.config.default_duration_hours
            ),
            extension_hours=extension_hours,
        )
        existing = self._windows(
            self.repository.get_bookings_for_conflict_check(package_id, event_date)
        )
        conflict = self.find_new_request_conflict(candidate, existing)
        if conflict:
            prometheus_metrics.record_conflict("new_request")
            self.logger.warning(
                f"Slot {event_date} {format_minutes(start)} on package {package_id} "
                f"collides with booking at {format_minutes(conflict.start_minute)}"
            )
        return conflict

    def check_new_request_conflict(
        self,
        package_id: str,
        event_date: date,
        start_time: TimeInput,
        end_time: Optional[TimeInput] = None,
        extension_hours: int = 0,
    ) -> bool:
        """True when the slot would collide with an accepted booking."""
        return (
            self.find_slot_conflict(package_id, event_date, start_time, end_time, extension_hours)
            is not None
        )

    def find_accepted_overlap(self, request: BookingRequest) -> Optional[BookingWindow]:
        """
        Re-check a request being accepted against the package's other accepted bookings.

        Runs inside the accept transaction, after the status flip, so the
        request itself is excluded.
        """
        candidate = self.window_for_request(request)
        others = self._windows(
            self.repository.get_bookings_for_conflict_check(
                request.package_id, request.event_date, exclude_request_id=request.id
            )
        )
        conflict = self.find_new_request_conflict(candidate, others)
        if conflict:
            prometheus_metrics.record_conflict("accept")
        return conflict

    @BaseService.measure_operation("check_extension_conflict")
    def find_extension_conflict(
        self, confirmed_booking: ConfirmedBooking, proposed_total_hours: int
    ) -> Optional[BookingWindow]:
        """
        Find the booking an extension would collide with.

        The booking being extended is never compared with itself.
        """
        request = confirmed_booking.request
        target = self.window_for_request(request)
        others = self._windows(
            self.repository.get_bookings_for_conflict_check(
                request.package_id, request.event_date, exclude_request_id=request.id
            )
        )
        conflict = self.find_window_extension_conflict(target, proposed_total_hours, others)
        if conflict:
            prometheus_metrics.record_conflict("extension")
            self.logger.warning(
                f"Extending booking {confirmed_booking.id} to {proposed_total_hours}h collides "
                f"with booking on {conflict.event_date} at {format_minutes(conflict.start_minute)}"
            )
        return conflict

    def conflicts_extension(
        self, confirmed_booking: ConfirmedBooking, proposed_total_hours: int
    ) -> bool:
        return self.find_extension_conflict(confirmed_booking, proposed_total_hours) is not None

    def _windows(self, requests: Iterable[BookingRequest]) -> List[BookingWindow]:
        return [self.window_for_request(request) for request in requests]


def span_exceeds_day(window: BookingWindow) -> bool:
    """A core span of a full day or more cannot be stored as a wall-clock end time."""
    return window.core_end_minute - window.start_minute >= MINUTES_PER_DAY
