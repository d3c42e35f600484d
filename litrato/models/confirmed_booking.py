# litrato/models/confirmed_booking.py
"""
Confirmed booking model.

Created exactly once, when its request is accepted. From then on this row
owns the event end time and extension hours; the request keeps a mirrored
copy that is written in the same flush.
"""

from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class ConfirmedBookingStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ConfirmedBooking(Base):
    __tablename__ = "confirmed_bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    request_id = Column(
        String(26), ForeignKey("booking_requests.id"), nullable=False, unique=True
    )

    booking_status = Column(
        String(20), nullable=False, default=ConfirmedBookingStatus.SCHEDULED.value, index=True
    )

    # Owned schedule fields; NULL means "use the request's value"
    event_end_time = Column(Time, nullable=True)
    extension_hours = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    request = relationship("BookingRequest", back_populates="confirmed_booking")

    __table_args__ = (
        CheckConstraint(
            "booking_status IN ('scheduled', 'in_progress', 'completed', 'cancelled')",
            name="ck_confirmed_bookings_status",
        ),
        CheckConstraint(
            "extension_hours IS NULL OR extension_hours >= 0",
            name="ck_confirmed_bookings_extension",
        ),
    )

    @property
    def is_cancelled(self) -> bool:
        return self.booking_status == ConfirmedBookingStatus.CANCELLED.value

    def __repr__(self) -> str:
        return f"<ConfirmedBooking {self.id} request={self.request_id} {self.booking_status}>"
