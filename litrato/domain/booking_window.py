# litrato/domain/booking_window.py
"""
Snapshot of a booking's time footprint used by conflict and availability math.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from ..utils.time_utils import format_minutes
from .intervals import Interval


@dataclass(frozen=True)
class BookingWindow:
    """
    Where a booking sits on its event date.

    ``core_end_minute`` already includes the approved extension; the
    remaining headroom up to the planning ceiling is reserved on top of it
    when the booking is treated as an obstacle.
    """

    request_id: str
    package_id: str
    event_date: date
    start_minute: int
    core_end_minute: int
    extension_hours: int = 0
    event_name: Optional[str] = None
    status: str = "accepted"

    @property
    def core_interval(self) -> Interval:
        return Interval(self.start_minute, self.core_end_minute)

    def remaining_headroom(self, ceiling_hours: int) -> int:
        """Minutes of extension still possible before the ceiling is reached."""
        return max(0, ceiling_hours - (self.extension_hours or 0)) * 60

    def reserved_end(self, ceiling_hours: int) -> int:
        return self.core_end_minute + self.remaining_headroom(ceiling_hours)

    def reserved_interval(self, ceiling_hours: int) -> Interval:
        return Interval(self.start_minute, self.reserved_end(ceiling_hours))

    def blocked_interval(self, buffer_minutes: int, ceiling_hours: int) -> Interval:
        """Reserved span plus setup and teardown buffers."""
        return self.reserved_interval(ceiling_hours).expand(buffer_minutes, buffer_minutes)

    def describe(self) -> Dict[str, Any]:
        """Customer-safe description of the booking's slot."""
        return {
            "event_date": self.event_date.isoformat(),
            "event_time": format_minutes(self.start_minute),
        }
