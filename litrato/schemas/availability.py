# litrato/schemas/availability.py
"""Daily availability payloads."""

from datetime import date as date_type, datetime
from typing import Dict, List, Literal, Optional

from .base import StandardizedModel

AvailabilityStatus = Literal["available", "limited", "unavailable"]


class TimeRange(StandardizedModel):
    start: str
    end: str


class ExistingBooking(StandardizedModel):
    """An accepted booking as shown on the availability calendar."""

    request_id: str
    event_name: Optional[str] = None
    status: str
    event_start: str
    event_end: str
    buffer_start: str
    buffer_end: str


class PackageAvailability(StandardizedModel):
    package_id: str
    package_name: str
    duration_hours: int
    status: AvailabilityStatus
    existing_bookings: List[ExistingBooking]
    blocked_windows: List[TimeRange]
    start_windows: List[TimeRange]


class AvailabilityConstraints(StandardizedModel):
    buffer_hours: float
    potential_extension_hours: int
    business_hours_start: str
    business_hours_end: str


class DailyAvailability(StandardizedModel):
    date: date_type
    generated_at: datetime
    constraints: AvailabilityConstraints
    packages: List[PackageAvailability]

    def by_package(self) -> Dict[str, PackageAvailability]:
        return {package.package_id: package for package in self.packages}
