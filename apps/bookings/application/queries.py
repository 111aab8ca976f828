"""
Booking Queries

Stateless filtering, sorting and summaries over bookings already fetched
from the repository. Nothing here performs I/O, so list semantics do not
depend on what the storage backend can query natively.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Iterable, Mapping
from uuid import UUID

from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.exceptions import BookingValidationError

ALL = 'ALL'

SORT_KEYS: dict[str, Callable[[Booking], Any]] = {
    'created_at': lambda b: b.created_at,
    'start': lambda b: b.start,
    'end': lambda b: b.end,
    'title': lambda b: b.title.casefold(),
    'status': lambda b: b.status.value,
    # Computed from joined data, not native booking fields
    'room_name': lambda b: b.room_name.casefold(),
    'requester_name': lambda b: b.requester_name.casefold(),
}

UNASSIGNED_ROOM = 'Unassigned'
TOP_ROOMS_LIMIT = 5


def _parse_uuid(value: Any, field_name: str) -> UUID | None:
    if value in (None, '', ALL):
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise BookingValidationError(f"'{value}' is not a valid id.", field=field_name)


def parse_status(value: Any) -> BookingStatus | None:
    """None for ALL/empty, otherwise the matching status (case-insensitive)."""
    if value is None or isinstance(value, BookingStatus):
        return value
    text = str(value).strip().upper()
    if text in ('', ALL):
        return None
    try:
        return BookingStatus(text)
    except ValueError:
        raise BookingValidationError(f"Unknown status '{value}'.", field='status')


@dataclass(frozen=True)
class BookingQuery:
    """
    Composable list query

    Predicates combine with AND. status=None means "ALL". Sorting uses
    one key; Python's sort is stable so ties keep their incoming order.
    """
    status: BookingStatus | None = None
    room_id: UUID | None = None
    user_id: UUID | None = None
    search: str = ''
    sort_by: str = 'created_at'
    descending: bool = True

    def __post_init__(self):
        if self.sort_by not in SORT_KEYS:
            raise BookingValidationError(f"Cannot sort by '{self.sort_by}'.", field='ordering')

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> 'BookingQuery':
        """Build a query from request parameters (status, room, user, search, ordering)."""
        ordering = (params.get('ordering') or '-created_at').strip()
        descending = ordering.startswith('-')
        return cls(
            status=parse_status(params.get('status')),
            room_id=_parse_uuid(params.get('room'), 'room'),
            user_id=_parse_uuid(params.get('user'), 'user'),
            search=(params.get('search') or '').strip(),
            sort_by=ordering.lstrip('-+'),
            descending=descending,
        )

    def matches(self, booking: Booking) -> bool:
        if self.status is not None and booking.status != self.status:
            return False
        if self.room_id is not None and booking.room_id != self.room_id:
            return False
        if self.user_id is not None and booking.requester_id != self.user_id:
            return False
        if self.search:
            needle = self.search.casefold()
            haystacks = (booking.title, booking.requester_name, booking.room_name)
            if not any(needle in (text or '').casefold() for text in haystacks):
                return False
        return True

    def apply(self, bookings: Iterable[Booking]) -> list[Booking]:
        selected = [b for b in bookings if self.matches(b)]
        return sorted(selected, key=SORT_KEYS[self.sort_by], reverse=self.descending)


def pending_for_approval(bookings: Iterable[Booking]) -> list[Booking]:
    """Requests waiting for a decision, earliest meeting first."""
    return BookingQuery(status=BookingStatus.PENDING, sort_by='start', descending=False).apply(bookings)


def bookings_for_user(bookings: Iterable[Booking], user_id: UUID) -> list[Booking]:
    """A member's own bookings, newest request first."""
    return BookingQuery(user_id=user_id).apply(bookings)


def bookings_for_day(bookings: Iterable[Booking], day: date) -> list[Booking]:
    """Bookings that still hold a room and start on day, in start order."""
    selected = [b for b in bookings if b.blocks_room() and b.starts_on(day)]
    return sorted(selected, key=SORT_KEYS['start'])


@dataclass
class DashboardSummary:
    total_bookings: int = 0
    pending_count: int = 0
    top_rooms: list[dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            'total_bookings': self.total_bookings,
            'pending_count': self.pending_count,
            'top_rooms': list(self.top_rooms),
        }


def summarize(bookings: Iterable[Booking], *, limit: int = TOP_ROOMS_LIMIT) -> DashboardSummary:
    """Totals plus the most booked rooms; equal counts keep first-seen order."""
    bookings = list(bookings)
    per_room = Counter(b.room_name or UNASSIGNED_ROOM for b in bookings)
    # Counter.most_common orders equal counts by insertion
    top_rooms = [{'name': name, 'count': count} for name, count in per_room.most_common(limit)]
    return DashboardSummary(
        total_bookings=len(bookings),
        pending_count=sum(1 for b in bookings if b.status == BookingStatus.PENDING),
        top_rooms=top_rooms,
    )
