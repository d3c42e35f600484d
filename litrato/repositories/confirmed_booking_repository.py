# litrato/repositories/confirmed_booking_repository.py
"""
ConfirmedBooking Repository.

``apply_extension`` is the only writer of the schedule fields: it sets the
confirmed booking's owned values and the request's mirror in one flush.
"""

from datetime import time
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking_request import BookingRequest
from ..models.confirmed_booking import ConfirmedBooking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConfirmedBookingRepository(BaseRepository[ConfirmedBooking]):
    def __init__(self, db: Session):
        super().__init__(db, ConfirmedBooking)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(ConfirmedBooking.request).joinedload(BookingRequest.package)
        )

    def get_by_request_id(self, request_id: str) -> Optional[ConfirmedBooking]:
        return self.find_one_by(request_id=request_id)

    def get_for_update(self, booking_id: str) -> Optional[ConfirmedBooking]:
        """
        Load a confirmed booking with a row lock held until the transaction ends.

        SQLite has no row locks and ignores FOR UPDATE; its single-writer lock
        serializes the committing transaction instead.
        """
        try:
            booking = (
                self.db.query(ConfirmedBooking)
                .filter(ConfirmedBooking.id == booking_id)
                .populate_existing()
                .with_for_update()
                .first()
            )
            if booking is not None:
                # Related rows loaded separately; FOR UPDATE cannot be combined with outer joins
                self.db.refresh(booking.request)
            return booking
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking confirmed booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock confirmed booking: {str(e)}")

    def apply_extension(
        self,
        booking: ConfirmedBooking,
        extension_hours: int,
        event_end_time: time,
    ) -> ConfirmedBooking:
        """Persist new extension hours and end time on the booking and its request mirror."""
        try:
            booking.extension_hours = extension_hours
            booking.event_end_time = event_end_time
            booking.request.extension_hours = extension_hours
            booking.request.end_time = event_end_time
            self.db.flush()
            return booking
        except SQLAlchemyError as e:
            self.logger.error(f"Error applying extension to booking {booking.id}: {str(e)}")
            raise RepositoryException(f"Failed to apply extension: {str(e)}")
