# litrato/services/availability_service.py
"""
Availability Service for the Litrato scheduling engine.

Builds the daily calendar shown to customers and admins: for every active
package, the accepted bookings of the day, the merged ranges they block,
and the windows in which a new event may still start.

The result is advisory. It is deliberately stricter than the conflict
checker (a new event must fit its own setup buffer inside a free gap), and
the conflict checker remains the authority when a request is accepted.
"""

from datetime import date, datetime, timezone
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import SchedulingSettings
from ..domain.booking_window import BookingWindow
from ..domain.intervals import Interval, complement, merge_intervals
from ..models.booking_request import BookingRequest
from ..models.package import Package
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from ..schemas.availability import (
    AvailabilityConstraints,
    DailyAvailability,
    ExistingBooking,
    PackageAvailability,
    TimeRange,
)
from ..utils.time_utils import MINUTES_PER_DAY, format_minutes, minutes_to_time_str
from .base import BaseService
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    """Computes per-package daily availability from accepted bookings."""

    def __init__(
        self,
        db: Session,
        config: Optional[SchedulingSettings] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        repository: Optional[ConflictCheckerRepository] = None,
    ):
        super().__init__(db, config)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)
        self.package_repository = RepositoryFactory.create_package_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(
            db, self.config, repository=self.repository
        )

    @BaseService.measure_operation("compute_daily_availability")
    def compute_daily_availability(self, target_date: date) -> DailyAvailability:
        """
        Compute availability for every active package on a date.

        Args:
            target_date: The event date

        Returns:
            DailyAvailability with one entry per active package; a day with
            no bookings yields fully available packages
        """
        packages = self.package_repository.get_active_packages()
        bookings = self.repository.get_bookings_for_date(target_date)

        by_package: dict[str, List[BookingRequest]] = {}
        for booking in bookings:
            by_package.setdefault(booking.package_id, []).append(booking)

        results = [
            self._package_availability(package, by_package.get(package.id, []))
            for package in packages
        ]

        self.logger.debug(
            f"Computed availability for {target_date}: {len(results)} packages, "
            f"{len(bookings)} accepted bookings"
        )

        return DailyAvailability(
            date=target_date,
            generated_at=datetime.now(timezone.utc),
            constraints=AvailabilityConstraints(
                buffer_hours=self.config.buffer_hours,
                potential_extension_hours=self.config.extension_ceiling_hours,
                business_hours_start=format_minutes(self.config.business_start_minutes),
                business_hours_end=format_minutes(self.config.business_end_minutes),
            ),
            packages=results,
        )

    def _package_availability(
        self, package: Package, bookings: List[BookingRequest]
    ) -> PackageAvailability:
        buffer_minutes = self.config.buffer_minutes
        ceiling = self.config.extension_ceiling_hours
        duration_hours = package.duration_hours or self.config.default_duration_hours

        windows = [self.conflict_checker.window_for_request(booking) for booking in bookings]
        blocks = [window.blocked_interval(buffer_minutes, ceiling) for window in windows]

        blocked = [
            clipped
            for clipped in (block.clip(0, MINUTES_PER_DAY) for block in merge_intervals(blocks))
            if clipped is not None
        ]
        start_windows = self.compute_start_windows(blocked, duration_hours * 60)

        if not windows:
            status = "available"
        elif start_windows:
            status = "limited"
        else:
            status = "unavailable"

        return PackageAvailability(
            package_id=package.id,
            package_name=package.name,
            duration_hours=duration_hours,
            status=status,
            existing_bookings=[self._describe_booking(window) for window in windows],
            blocked_windows=[
                TimeRange(start=minutes_to_time_str(b.start), end=minutes_to_time_str(b.end))
                for b in blocked
            ],
            start_windows=[
                TimeRange(start=format_minutes(w.start), end=format_minutes(w.end))
                for w in start_windows
            ],
        )

    def compute_start_windows(
        self, blocked: List[Interval], event_duration_minutes: int
    ) -> List[Interval]:
        """
        Ranges of admissible start minutes inside the free gaps of a day.

        A new event starts no earlier than one buffer into a gap. It must
        also end, with the full extension ceiling and teardown buffer, before
        the next block; a gap that runs to midnight only needs the buffer.
        Results are clipped to business hours and inclusive at both ends.
        """
        buffer_minutes = self.config.buffer_minutes
        ceiling_minutes = self.config.extension_ceiling_hours * 60
        day_open = self.config.business_start_minutes
        day_close = self.config.business_end_minutes

        windows: List[Interval] = []
        for gap in complement(blocked, 0, MINUTES_PER_DAY):
            earliest = gap.start + buffer_minutes
            if gap.end >= MINUTES_PER_DAY:
                latest = gap.end - buffer_minutes
            else:
                latest = gap.end - (event_duration_minutes + ceiling_minutes + buffer_minutes)

            earliest = max(earliest, day_open)
            latest = min(latest, day_close)
            if earliest <= latest:
                windows.append(Interval(earliest, latest))
        return windows

    def _describe_booking(self, window: BookingWindow) -> ExistingBooking:
        block = window.blocked_interval(self.config.buffer_minutes, self.config.extension_ceiling_hours)
        return ExistingBooking(
            request_id=window.request_id,
            event_name=window.event_name,
            status=window.status,
            event_start=format_minutes(window.start_minute),
            event_end=format_minutes(window.core_end_minute),
            buffer_start=format_minutes(block.start),
            buffer_end=format_minutes(block.end),
        )
