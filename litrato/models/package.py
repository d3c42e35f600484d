# litrato/models/package.py
"""
Package model.

A package is the rentable resource (a booth with its inclusions). Conflicts
and availability are computed per package; package CRUD lives elsewhere.
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Package(Base):
    """Rentable photo-booth package."""

    __tablename__ = "packages"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)

    # Base event length; None falls back to the configured default duration
    duration_hours = Column(Integer, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    is_visible = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    booking_requests = relationship("BookingRequest", back_populates="package")

    def __repr__(self) -> str:
        return f"<Package {self.id} {self.name!r}>"
