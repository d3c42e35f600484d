# litrato/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository.

Loads the accepted bookings that act as obstacles for conflict checks and
daily availability. A request counts as an obstacle while it is accepted
and its confirmed booking (if any) has not been cancelled.
"""

from datetime import date
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking_request import BookingRequest, BookingRequestStatus
from ..models.confirmed_booking import ConfirmedBooking, ConfirmedBookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConflictCheckerRepository(BaseRepository[BookingRequest]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        """Initialize with BookingRequest model as primary."""
        super().__init__(db, BookingRequest)
        self.logger = logging.getLogger(__name__)

    def _active_accepted_query(self) -> Query:
        return (
            self.db.query(BookingRequest)
            .options(
                joinedload(BookingRequest.package),
                joinedload(BookingRequest.confirmed_booking),
            )
            .filter(
                BookingRequest.status == BookingRequestStatus.ACCEPTED.value,
                ~BookingRequest.confirmed_booking.has(
                    ConfirmedBooking.booking_status == ConfirmedBookingStatus.CANCELLED.value
                ),
            )
        )

    def get_bookings_for_conflict_check(
        self,
        package_id: str,
        check_date: date,
        exclude_request_id: Optional[str] = None,
    ) -> List[BookingRequest]:
        """
        Get accepted bookings that could conflict on a package and date.

        Args:
            package_id: The package to check
            check_date: The event date
            exclude_request_id: Request to leave out (the booking being extended)

        Returns:
            Accepted requests with package and confirmed booking loaded
        """
        try:
            query = self._active_accepted_query().filter(
                BookingRequest.package_id == package_id,
                BookingRequest.event_date == check_date,
            )
            if exclude_request_id:
                query = query.filter(BookingRequest.id != exclude_request_id)

            return cast(List[BookingRequest], query.order_by(BookingRequest.start_time).all())

        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}")

    def get_bookings_for_date(self, target_date: date) -> List[BookingRequest]:
        """
        Get accepted bookings across all packages on a date.

        Returns:
            Accepted requests ordered by package and start time
        """
        try:
            return cast(
                List[BookingRequest],
                self._active_accepted_query()
                .filter(BookingRequest.event_date == target_date)
                .order_by(BookingRequest.package_id, BookingRequest.start_time)
                .all(),
            )

        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for date: {str(e)}")
            raise RepositoryException(f"Failed to get bookings: {str(e)}")
