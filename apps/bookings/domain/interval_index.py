"""
IntervalIndex

Answers one question: does a proposed time range collide with a booking
that still holds the room? This is the domain-level guard against double
bookings; the Django repository adds a row lock on the room so two
concurrent creates cannot both pass it.

Overlap is half-open: a booking ending at 11:00 does not conflict with
one starting at 11:00. REJECTED and CANCELLED bookings never conflict.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable
from uuid import UUID

from apps.bookings.domain.entities import Booking
from apps.bookings.domain.repository import BookingFilter, BookingRepository
from shared.domain.value_objects import TimeRange


def find_conflict(
    bookings: Iterable[Booking],
    room_id: UUID,
    period: TimeRange,
    *,
    exclude_booking_id: UUID | None = None,
) -> Booking | None:
    """First blocking booking of room_id overlapping period, if any."""
    for booking in bookings:
        if booking.room_id != room_id:
            continue
        if exclude_booking_id is not None and booking.id == exclude_booking_id:
            continue
        if not booking.blocks_room():
            continue
        if booking.period.overlaps_with(period):
            return booking
    return None


def has_conflict(
    bookings: Iterable[Booking],
    room_id: UUID,
    period: TimeRange,
    *,
    exclude_booking_id: UUID | None = None,
) -> bool:
    return find_conflict(bookings, room_id, period, exclude_booking_id=exclude_booking_id) is not None


class IntervalIndex:
    """Conflict detection over the bookings stored in a repository."""

    def __init__(self, repository: BookingRepository):
        self.repository = repository

    def has_conflict(
        self,
        room_id: UUID,
        start: datetime,
        end: datetime,
        exclude_booking_id: UUID | None = None,
    ) -> bool:
        """
        True when [start, end) overlaps a PENDING or APPROVED booking of room_id

        The caller validates start < end beforehand; a malformed range
        raises ValueError here instead of being reported as a conflict.
        """
        period = TimeRange(start, end)
        bookings = self.repository.list_bookings(BookingFilter(room_id=room_id))
        return has_conflict(bookings, room_id, period, exclude_booking_id=exclude_booking_id)
