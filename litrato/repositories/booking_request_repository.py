# litrato/repositories/booking_request_repository.py
"""
BookingRequest Repository.

Holds the conditional status updates the acceptance service relies on.
Each transition is a single UPDATE guarded by the expected current status,
so concurrent callers race inside the database rather than in Python and
the loser observes zero affected rows.
"""

from datetime import date, time
import logging
from typing import List, Optional

from sqlalchemy import and_, exists, func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session, aliased, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking_request import BookingRequest, BookingRequestStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

PENDING = BookingRequestStatus.PENDING.value
ACCEPTED = BookingRequestStatus.ACCEPTED.value
REJECTED = BookingRequestStatus.REJECTED.value
CANCELLED = BookingRequestStatus.CANCELLED.value


def _append_note(note: str):
    """SQL expression appending a line to ``notes`` (NULL-safe)."""
    return func.coalesce(BookingRequest.notes + "\n", "") + note


class BookingRequestRepository(BaseRepository[BookingRequest]):
    """Data access for booking requests and their status transitions."""

    def __init__(self, db: Session):
        super().__init__(db, BookingRequest)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(BookingRequest.package),
            joinedload(BookingRequest.confirmed_booking),
        )

    def get_status(self, request_id: str) -> Optional[str]:
        """Current status straight from the database, bypassing the identity map."""
        return self._execute_scalar(
            self.db.query(BookingRequest.status).filter(BookingRequest.id == request_id)
        )

    def find_accepted_for_slot(
        self,
        package_id: str,
        event_date: date,
        start_time: time,
        exclude_request_id: Optional[str] = None,
    ) -> Optional[BookingRequest]:
        """The accepted request holding an exact (package, date, start) slot, if any."""
        try:
            query = self.db.query(BookingRequest).filter(
                BookingRequest.package_id == package_id,
                BookingRequest.event_date == event_date,
                BookingRequest.start_time == start_time,
                BookingRequest.status == ACCEPTED,
            )
            if exclude_request_id:
                query = query.filter(BookingRequest.id != exclude_request_id)
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding accepted request for slot: {str(e)}")
            raise RepositoryException(f"Failed to find accepted request: {str(e)}")

    def accept_if_slot_free(self, request_id: str) -> bool:
        """
        Flip a pending request to accepted in one statement.

        The row is updated only if it is still pending and no other request
        already holds ``accepted`` for the same package, date and start time.

        Returns:
            True when exactly this request was accepted, False otherwise

        Raises:
            RepositoryException: flagged ``integrity_error`` when the accepted-slot
                unique index rejected a concurrent winner
        """
        rival = aliased(BookingRequest)
        slot_taken = exists().where(
            and_(
                rival.package_id == BookingRequest.package_id,
                rival.event_date == BookingRequest.event_date,
                rival.start_time == BookingRequest.start_time,
                rival.status == ACCEPTED,
                rival.id != BookingRequest.id,
            )
        )
        stmt = (
            update(BookingRequest)
            .where(
                BookingRequest.id == request_id,
                BookingRequest.status == PENDING,
                ~slot_taken,
            )
            .values(status=ACCEPTED, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            return result.rowcount == 1
        except IntegrityError as e:
            self.logger.warning(f"Accepted-slot constraint rejected request {request_id}: {e}")
            raise RepositoryException(
                f"Slot already accepted: {str(e)}", integrity_error=True
            ) from e
        except SQLAlchemyError as e:
            self.logger.error(f"Error accepting request {request_id}: {str(e)}")
            raise RepositoryException(f"Failed to accept request: {str(e)}")

    def reject_if_pending(self, request_id: str, reason: Optional[str] = None) -> bool:
        """Conditionally move a pending request to rejected, appending the reason to notes."""
        values = {"status": REJECTED, "updated_at": func.now()}
        if reason:
            values["notes"] = _append_note(f"Rejected: {reason}")
        return self._transition_if_pending(request_id, values)

    def cancel_if_pending(self, request_id: str) -> bool:
        """Conditionally move a pending request to cancelled."""
        return self._transition_if_pending(
            request_id, {"status": CANCELLED, "updated_at": func.now()}
        )

    def get_pending_rivals(self, request: BookingRequest) -> List[BookingRequest]:
        """Other pending requests competing for the same exact slot."""
        try:
            return (
                self.db.query(BookingRequest)
                .filter(
                    BookingRequest.package_id == request.package_id,
                    BookingRequest.event_date == request.event_date,
                    BookingRequest.start_time == request.start_time,
                    BookingRequest.status == PENDING,
                    BookingRequest.id != request.id,
                )
                .order_by(BookingRequest.created_at, BookingRequest.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading rival requests for {request.id}: {str(e)}")
            raise RepositoryException(f"Failed to load rival requests: {str(e)}")

    def reject_pending_rivals(self, request: BookingRequest, note: str) -> List[BookingRequest]:
        """
        Reject every other pending request for the accepted request's slot.

        Returns:
            The rejected requests, refreshed, for notification
        """
        rivals = self.get_pending_rivals(request)
        if not rivals:
            return []

        stmt = (
            update(BookingRequest)
            .where(
                BookingRequest.id.in_([rival.id for rival in rivals]),
                BookingRequest.status == PENDING,
            )
            .values(status=REJECTED, notes=_append_note(note), updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        try:
            self.db.execute(stmt)
            for rival in rivals:
                self.db.refresh(rival)
        except SQLAlchemyError as e:
            self.logger.error(f"Error cascading rejection for {request.id}: {str(e)}")
            raise RepositoryException(f"Failed to reject rival requests: {str(e)}")

        rejected = [rival for rival in rivals if rival.status == REJECTED]
        self.logger.info(
            f"Cascade-rejected {len(rejected)} pending request(s) for slot "
            f"{request.package_id} {request.event_date} {request.start_time}"
        )
        return rejected

    def _transition_if_pending(self, request_id: str, values: dict) -> bool:
        stmt = (
            update(BookingRequest)
            .where(BookingRequest.id == request_id, BookingRequest.status == PENDING)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            return result.rowcount == 1
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating status of request {request_id}: {str(e)}")
            raise RepositoryException(f"Failed to update request status: {str(e)}")
