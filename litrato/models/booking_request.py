# litrato/models/booking_request.py
"""
Booking request model.

A request is created by a customer (or by an admin on their behalf) and is
moved out of ``pending`` only by the acceptance service. At most one
request may be accepted for the same package, date and start time; the
partial unique index below backs the conditional update that enforces it.
"""

from datetime import time
from enum import Enum
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class BookingRequestStatus(str, Enum):
    """Request lifecycle statuses."""

    PENDING = "pending"
    ACCEPTED = "accepted"  # Terminal here; the confirmed booking takes over
    REJECTED = "rejected"
    CANCELLED = "cancelled"  # Withdrawn by the customer


class BookingRequest(Base):
    """Customer request for a package on a date and start time."""

    __tablename__ = "booking_requests"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    package_id = Column(String(26), ForeignKey("packages.id"), nullable=False)

    customer_name = Column(String(200), nullable=True)
    customer_email = Column(String(255), nullable=True)

    event_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=True)
    # Mirror of the confirmed booking once accepted; written together with it
    extension_hours = Column(Integer, nullable=False, default=0)

    event_name = Column(String(200), nullable=True)
    event_address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    status = Column(
        String(20), nullable=False, default=BookingRequestStatus.PENDING.value, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    package = relationship("Package", back_populates="booking_requests")
    confirmed_booking = relationship(
        "ConfirmedBooking", back_populates="request", uselist=False
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected', 'cancelled')",
            name="ck_booking_requests_status",
        ),
        CheckConstraint("extension_hours >= 0", name="ck_booking_requests_extension"),
        Index("ix_booking_requests_package_date", "package_id", "event_date"),
        Index(
            "uq_booking_requests_accepted_slot",
            "package_id",
            "event_date",
            "start_time",
            unique=True,
            sqlite_where=text("status = 'accepted'"),
            postgresql_where=text("status = 'accepted'"),
        ),
    )

    @property
    def is_pending(self) -> bool:
        return self.status == BookingRequestStatus.PENDING.value

    @property
    def effective_end_time(self) -> Optional[time]:
        """End time with the confirmed booking's override taking precedence."""
        if self.confirmed_booking is not None and self.confirmed_booking.event_end_time:
            return self.confirmed_booking.event_end_time
        return self.end_time

    @property
    def effective_extension_hours(self) -> int:
        if (
            self.confirmed_booking is not None
            and self.confirmed_booking.extension_hours is not None
        ):
            return self.confirmed_booking.extension_hours
        return self.extension_hours or 0

    def __repr__(self) -> str:
        return (
            f"<BookingRequest {self.id} {self.package_id} "
            f"{self.event_date} {self.start_time} {self.status}>"
        )
