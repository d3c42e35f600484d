# tests/conftest.py
"""
Pytest configuration.

Every test gets a fresh in-memory SQLite database and a real session, so
services run their actual transactions. Resend is patched globally so no
test can send a real email.
"""

import os

# Set test environment BEFORE any litrato imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("EMAIL_PROVIDER", "console")
os.environ.setdefault("ENVIRONMENT", "test")

import unittest.mock

global_resend_mock = unittest.mock.patch("resend.Emails.send")
mocked_send = global_resend_mock.start()
mocked_send.return_value = {"id": "test-email-id"}

from datetime import date, time
from decimal import Decimal
from typing import Optional
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from litrato.core.config import SchedulingSettings
from litrato.database import Base
import litrato.models  # noqa: F401
from litrato.models.booking_request import BookingRequest
from litrato.models.confirmed_booking import ConfirmedBooking
from litrato.models.package import Package
from litrato.services.notification_service import NotificationService

EVENT_DATE = date(2026, 12, 12)


def clock(value: Optional[str]) -> Optional[time]:
    """Convert "HH:MM" to a time for building fixtures."""
    if value is None:
        return None
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def pytest_sessionfinish(session, exitstatus):
    global_resend_mock.stop()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def scheduling_config() -> SchedulingSettings:
    """Business defaults: 2h buffer, 2h extension ceiling, 2h base duration."""
    return SchedulingSettings(
        buffer_minutes=120,
        extension_ceiling_hours=2,
        default_duration_hours=2,
        business_hours_start="08:00",
        business_hours_end="21:59",
        extension_hourly_rate=Decimal("2000.00"),
        enforce_buffer_on_accept=True,
    )


@pytest.fixture
def notifier() -> Mock:
    return Mock(spec=NotificationService)


@pytest.fixture
def make_package(db):
    def _make(
        name: str = "Classic Booth",
        duration_hours: Optional[int] = 2,
        is_active: bool = True,
        price: Decimal = Decimal("5000.00"),
    ) -> Package:
        package = Package(
            name=name, duration_hours=duration_hours, is_active=is_active, price=price
        )
        db.add(package)
        db.commit()
        return package

    return _make


@pytest.fixture
def package(make_package) -> Package:
    return make_package()


@pytest.fixture
def make_request(db, package):
    def _make(
        start: str = "10:00",
        end: Optional[str] = None,
        *,
        target_package: Optional[Package] = None,
        event_date: date = EVENT_DATE,
        status: str = "pending",
        extension_hours: int = 0,
        customer_email: Optional[str] = "guest@example.com",
        customer_name: Optional[str] = "Guest",
        event_name: Optional[str] = "Debut",
        notes: Optional[str] = None,
    ) -> BookingRequest:
        request = BookingRequest(
            package_id=(target_package or package).id,
            event_date=event_date,
            start_time=clock(start),
            end_time=clock(end),
            extension_hours=extension_hours,
            status=status,
            customer_email=customer_email,
            customer_name=customer_name,
            event_name=event_name,
            notes=notes,
        )
        db.add(request)
        db.commit()
        return request

    return _make


@pytest.fixture
def make_confirmed(db, make_request):
    """Accepted request plus its confirmed booking, inserted directly."""

    def _make(
        start: str = "10:00",
        end: Optional[str] = None,
        *,
        booking_status: str = "scheduled",
        extension_hours: Optional[int] = None,
        event_end: Optional[str] = None,
        **request_kwargs,
    ) -> ConfirmedBooking:
        request = make_request(start, end, status="accepted", **request_kwargs)
        booking = ConfirmedBooking(
            request_id=request.id,
            booking_status=booking_status,
            extension_hours=extension_hours,
            event_end_time=clock(event_end),
        )
        db.add(booking)
        db.commit()
        db.refresh(request)
        return booking

    return _make


@pytest.fixture
def event_date() -> date:
    return EVENT_DATE
