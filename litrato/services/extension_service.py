# litrato/services/extension_service.py
"""
Booking Extension Service for the Litrato scheduling engine.

Changes how many extension hours a confirmed booking has and moves its end
time to match. The conflict check runs in the same transaction that
writes the change, with the booking row locked, so nothing can be accepted
into the freed-up gap between checking and committing.
"""

from dataclasses import dataclass
import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..core.config import SchedulingSettings
from ..core.exceptions import BusinessRuleException, NotFoundException, ValidationException
from ..domain.booking_window import BookingWindow
from ..models.confirmed_booking import ConfirmedBooking
from ..repositories import RepositoryFactory
from ..utils.time_utils import MINUTES_PER_DAY, format_minutes, minutes_to_time
from .base import BaseService
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)


@dataclass
class ExtensionOutcome:
    """Result of an extension attempt; ``conflict`` is set when it was blocked."""

    booking: ConfirmedBooking
    applied: bool
    previous_hours: int
    requested_hours: int
    conflict: Optional[BookingWindow] = None
    forced: bool = False


class BookingExtensionService(BaseService):
    def __init__(
        self,
        db: Session,
        config: Optional[SchedulingSettings] = None,
        conflict_checker: Optional[ConflictChecker] = None,
    ):
        super().__init__(db, config)
        self.confirmed_repository = RepositoryFactory.create_confirmed_booking_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db, self.config)

    @BaseService.measure_operation("preflight_extension")
    def preflight_extension(
        self, confirmed_booking_id: str, total_hours: int
    ) -> Optional[BookingWindow]:
        """
        Report the booking an extension would collide with, without changing anything.

        Returns:
            The first conflicting booking, or None when the extension fits
        """
        self._validate_hours(total_hours)
        booking = self._get_booking(confirmed_booking_id)
        return self.conflict_checker.find_extension_conflict(booking, total_hours)

    @BaseService.measure_operation("set_extension")
    def set_extension(
        self, confirmed_booking_id: str, total_hours: int, force: bool = False
    ) -> ExtensionOutcome:
        """
        Set a confirmed booking's total extension hours.

        Args:
            confirmed_booking_id: Booking to change
            total_hours: New total extension (not a delta)
            force: Apply even when another booking would be run into

        Returns:
            ExtensionOutcome; ``applied`` is False when a conflict blocked the change

        Raises:
            ValidationException: negative hours, or a span of a day or more
            NotFoundException: unknown booking
            BusinessRuleException: the booking is cancelled
        """
        self._validate_hours(total_hours)
        return self._apply(confirmed_booking_id, lambda current: total_hours, force)

    @BaseService.measure_operation("extend_by")
    def extend_by(
        self, confirmed_booking_id: str, add_hours: int, force: bool = False
    ) -> ExtensionOutcome:
        """Add hours on top of the extension the locked booking row holds."""
        if isinstance(add_hours, bool) or not isinstance(add_hours, int) or add_hours <= 0:
            raise ValidationException(
                "Hours to add must be a positive whole number",
                details={"add_hours": add_hours},
            )
        return self._apply(confirmed_booking_id, lambda current: current + add_hours, force)

    def _apply(
        self,
        confirmed_booking_id: str,
        compute_total: Callable[[int], int],
        force: bool,
    ) -> ExtensionOutcome:
        """Lock the booking, derive the new total from its current hours, check and write."""
        with self.transaction():
            booking = self.confirmed_repository.get_for_update(confirmed_booking_id)
            if not booking:
                raise NotFoundException(f"Confirmed booking {confirmed_booking_id} not found")
            if booking.is_cancelled:
                raise BusinessRuleException(
                    "Cannot extend a cancelled booking", code="BOOKING_CANCELLED"
                )

            previous_hours = booking.request.effective_extension_hours
            total_hours = compute_total(previous_hours)
            window = self.conflict_checker.window_for_request(booking.request)
            extended = self.conflict_checker.extended_window(window, total_hours)
            span = extended.core_end_minute - extended.start_minute
            if span <= 0 or span >= MINUTES_PER_DAY:
                raise ValidationException(
                    f"Extension to {total_hours}h gives an event length outside one day",
                    details={"requested_hours": total_hours},
                )

            conflict = self.conflict_checker.find_extension_conflict(booking, total_hours)
            if conflict and not force:
                self.logger.info(
                    f"Extension of booking {booking.id} to {total_hours}h blocked by "
                    f"booking at {format_minutes(conflict.start_minute)}"
                )
                return ExtensionOutcome(
                    booking=booking,
                    applied=False,
                    previous_hours=previous_hours,
                    requested_hours=total_hours,
                    conflict=conflict,
                )

            self.confirmed_repository.apply_extension(
                booking, total_hours, minutes_to_time(extended.core_end_minute)
            )

        if conflict:
            self.logger.warning(
                f"Extension of booking {booking.id} to {total_hours}h forced past a conflict"
            )
        self.log_operation(
            "set_extension",
            confirmed_booking_id=booking.id,
            previous_hours=previous_hours,
            new_hours=total_hours,
        )
        return ExtensionOutcome(
            booking=booking,
            applied=True,
            previous_hours=previous_hours,
            requested_hours=total_hours,
            conflict=conflict,
            forced=conflict is not None,
        )

    def _get_booking(self, confirmed_booking_id: str) -> ConfirmedBooking:
        booking = self.confirmed_repository.get_by_id(confirmed_booking_id)
        if not booking:
            raise NotFoundException(f"Confirmed booking {confirmed_booking_id} not found")
        return booking

    @staticmethod
    def _validate_hours(total_hours: int) -> None:
        if isinstance(total_hours, bool) or not isinstance(total_hours, int) or total_hours < 0:
            raise ValidationException(
                "Extension hours must be a whole number of zero or more",
                details={"requested_hours": total_hours},
            )
