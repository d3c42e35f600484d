# litrato/domain/intervals.py
"""
Interval model for booking schedules.

All values are minutes since midnight of the booking's event date.
Intervals are half-open: [start, end). Touching intervals never overlap.

Midnight: an end time that is not after its start belongs to the next
day, so core spans may run past 1440. Each event date is evaluated on
its own; nothing spills over from the previous day.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..utils.time_utils import MINUTES_PER_DAY


@dataclass(frozen=True)
class Interval:
    """Half-open span of minutes [start, end)."""

    start: int
    end: int

    def overlaps(self, other: "Interval") -> bool:
        return not (self.end <= other.start or self.start >= other.end)

    def expand(self, before: int, after: int) -> "Interval":
        return Interval(self.start - before, self.end + after)

    def clip(self, lower: int, upper: int) -> Optional["Interval"]:
        """Intersect with [lower, upper); None when nothing is left."""
        start = max(self.start, lower)
        end = min(self.end, upper)
        if start >= end:
            return None
        return Interval(start, end)

    @property
    def duration(self) -> int:
        return self.end - self.start


def build_buffered(core_start: int, core_end: int, buffer_minutes: int) -> Interval:
    """Expand a core span by the setup/teardown buffer on both sides."""
    return Interval(core_start, core_end).expand(buffer_minutes, buffer_minutes)


def normalize_end(start_minute: int, end_minute: int) -> int:
    """Place an end time that is not after the start on the following day."""
    if end_minute <= start_minute:
        return end_minute + MINUTES_PER_DAY
    return end_minute


def resolve_core_end(
    start_minute: int,
    end_minute: Optional[int],
    duration_hours: Optional[int],
    extension_hours: Optional[int],
    default_duration_hours: int,
) -> int:
    """
    Work out where a booking's core event ends.

    An explicit end time wins. Without one, the end is synthesized from
    the package's base duration (or the configured default when the
    package has none) plus the approved extension.
    """
    if end_minute is not None:
        return normalize_end(start_minute, end_minute)

    base_hours = duration_hours if duration_hours else default_duration_hours
    return start_minute + (base_hours + (extension_hours or 0)) * 60


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Merge overlapping or touching intervals.

    Sorted by start; an interval is folded into the previous one when it
    starts at or before the previous end.
    """
    merged: List[Interval] = []
    for interval in sorted(intervals, key=lambda i: (i.start, i.end)):
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = Interval(last.start, max(last.end, interval.end))
        else:
            merged.append(interval)
    return merged


def complement(
    intervals: Iterable[Interval],
    day_start: int = 0,
    day_end: int = MINUTES_PER_DAY,
) -> List[Interval]:
    """Free gaps of [day_start, day_end) not covered by the given intervals."""
    gaps: List[Interval] = []
    cursor = day_start
    for interval in merge_intervals(intervals):
        clipped = interval.clip(day_start, day_end)
        if clipped is None:
            continue
        if clipped.start > cursor:
            gaps.append(Interval(cursor, clipped.start))
        cursor = max(cursor, clipped.end)
    if cursor < day_end:
        gaps.append(Interval(cursor, day_end))
    return gaps
