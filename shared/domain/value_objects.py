"""
Common Value Objects

Value objects used across multiple domains:
- TimeRange: Represents a half-open range of instants (start to end)
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from django.utils import timezone


@dataclass(frozen=True)
class TimeRange:
    """
    Time range value object

    Represents a range from start (inclusive) to end (exclusive).
    Used for room bookings, availability checks, etc.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        # Validation
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range overlaps with another

        Two ranges overlap if they share any instant.
        Note: end is exclusive, so back-to-back ranges don't overlap.

        Examples:
            - TimeRange(10:00, 11:00) overlaps with TimeRange(10:30, 11:30) -> True
            - TimeRange(10:00, 11:00) overlaps with TimeRange(11:00, 12:00) -> False (adjacent)
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")

        # Overlap formula: start1 < end2 AND end1 > start2
        return (self.start < other.end and
                self.end > other.start)

    def contains(self, instant: datetime) -> bool:
        """
        Check if an instant is within this range

        Note: start is inclusive, end is exclusive
        """
        return self.start <= instant < self.end

    def starts_on(self, day: date) -> bool:
        """True when start falls on day in the current time zone"""
        start = timezone.localtime(self.start) if timezone.is_aware(self.start) else self.start
        return start.date() == day

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def __str__(self):
        return f"{self.start.strftime('%d.%m.%Y %H:%M')} - {self.end.strftime('%d.%m.%Y %H:%M')}"

    def __repr__(self):
        return f"TimeRange({self.start.isoformat()}, {self.end.isoformat()})"
