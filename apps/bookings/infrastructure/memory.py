"""In-memory booking repository used by tests and the demo data set."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, time, timedelta
from uuid import UUID

from django.utils import timezone

from apps.bookings.domain.entities import (
    Booking,
    BookingStatus,
    Member,
    Role,
    RoomEntity,
)
from apps.bookings.domain.exceptions import BookingNotFoundError, BookingTransitionError
from apps.bookings.domain.repository import BookingFilter, BookingRepository
from shared.domain.value_objects import TimeRange

logger = logging.getLogger(__name__)


class InMemoryBookingRepository(BookingRepository):
    """
    Dictionary-backed implementation of the repository contract.

    Entities are copied on the way in and out so callers can never
    mutate stored state without going through the contract.
    """

    def __init__(self):
        self.bookings: dict[UUID, Booking] = {}
        self.rooms: dict[UUID, RoomEntity] = {}
        self.users: dict[UUID, Member] = {}
        self.passwords: dict[UUID, str] = {}

    # ----- helpers -----

    def _joined(self, booking: Booking) -> Booking:
        room = self.rooms.get(booking.room_id)
        requester = self.users.get(booking.requester_id)
        return replace(
            booking,
            room_name=room.name if room else '',
            requester_name=requester.display_name if requester else '',
        )

    def _store_booking(self, booking: Booking) -> Booking:
        stored = replace(booking)
        self.bookings[stored.id] = stored
        return self._joined(stored)

    # ----- bookings -----

    def list_bookings(self, booking_filter: BookingFilter | None = None) -> list[Booking]:
        booking_filter = booking_filter or BookingFilter()
        matching = [b for b in self.bookings.values() if booking_filter.matches(b)]
        matching.sort(key=lambda b: b.created_at, reverse=True)
        return [self._joined(b) for b in matching]

    def get_booking(self, booking_id: UUID) -> Booking:
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found.")
        return self._joined(booking)

    def create_booking(self, draft: Booking) -> Booking:
        if draft.status != BookingStatus.PENDING:
            raise ValueError("New bookings must be PENDING")
        return self._store_booking(draft)

    def update_booking_status(
        self,
        booking_id: UUID,
        status: BookingStatus,
        actor_id: UUID,
        *,
        expected_status: BookingStatus | None = None,
        decided_at: datetime | None = None,
    ) -> Booking:
        stored = self.bookings.get(booking_id)
        if stored is None:
            raise BookingNotFoundError(f"Booking {booking_id} not found.")
        if expected_status is not None and stored.status != expected_status:
            raise BookingTransitionError(
                f"Booking changed to {stored.status.value} before this update was applied."
            )

        now = decided_at or timezone.now()
        changes = {'status': status, 'updated_at': now}
        if status in (BookingStatus.APPROVED, BookingStatus.REJECTED):
            changes.update(approver_id=actor_id, approved_at=now)
        else:
            changes.update(approver_id=None, approved_at=None)
        updated = replace(stored, **changes)
        self.bookings[booking_id] = updated
        return self._joined(updated)

    def insert_booking(self, booking: Booking) -> Booking:
        return self._store_booking(booking)

    # ----- rooms -----

    def list_rooms(self) -> list[RoomEntity]:
        return [replace(r) for r in sorted(self.rooms.values(), key=lambda r: r.name)]

    def get_room(self, room_id: UUID, *, lock: bool = False) -> RoomEntity | None:
        room = self.rooms.get(room_id)
        return replace(room) if room else None

    def create_room(self, room: RoomEntity) -> RoomEntity:
        self.rooms[room.id] = replace(room)
        return replace(room)

    def update_room(self, room: RoomEntity) -> RoomEntity:
        if room.id not in self.rooms:
            raise LookupError(f"Room {room.id} not found")
        self.rooms[room.id] = replace(room, updated_at=timezone.now())
        return replace(self.rooms[room.id])

    def delete_room(self, room_id: UUID) -> None:
        self.rooms.pop(room_id, None)

    # ----- users -----

    def get_user(self, user_id: UUID) -> Member | None:
        user = self.users.get(user_id)
        return replace(user) if user else None

    def get_user_by_username(self, username: str) -> Member | None:
        for user in self.users.values():
            if user.username == username:
                return replace(user)
        return None

    def upsert_user_by_username(self, member: Member, *, password: str = '') -> tuple[Member, bool]:
        existing = self.get_user_by_username(member.username)
        if existing is not None:
            stored = replace(member, id=existing.id, created_at=existing.created_at, updated_at=timezone.now())
            created = False
        else:
            stored = replace(member)
            created = True
        self.users[stored.id] = stored
        if password:
            self.passwords[stored.id] = password
        return replace(stored), created

    def add_user(self, member: Member) -> Member:
        self.users[member.id] = replace(member)
        return replace(member)

    # ----- demo data -----

    @classmethod
    def with_sample_data(cls, day=None) -> 'InMemoryBookingRepository':
        """
        Three users (one per role), three rooms and two bookings on day

        Mirrors the offline data set the service falls back to in demos.
        """
        repo = cls()
        day = day or timezone.localdate()
        tz = timezone.get_current_timezone()

        repo.add_user(Member(username='admin', full_name='Administrator', role=Role.ADMIN))
        repo.add_user(Member(username='approver', full_name='Approver', role=Role.APPROVER))
        member = repo.add_user(Member(username='user', full_name='Regular User', role=Role.MEMBER))

        room_a = repo.create_room(RoomEntity(name='Meeting Room A', location='Building 1', capacity=10, equipment='Projector'))
        room_b = repo.create_room(RoomEntity(name='Lecture Room B', location='Building 2', capacity=50, equipment='Sound system'))
        repo.create_room(RoomEntity(name='Small Room C', location='Building 1', capacity=6, equipment='TV'))

        def at(hour: int) -> datetime:
            return timezone.make_aware(datetime.combine(day, time(hour)), tz)

        repo.insert_booking(Booking(
            room_id=room_a.id,
            requester_id=member.id,
            title='Weekly team sync',
            purpose='Weekly status update',
            period=TimeRange(at(10), at(11)),
            status=BookingStatus.APPROVED,
        ))
        repo.insert_booking(Booking(
            room_id=room_b.id,
            requester_id=member.id,
            title='Physics guest lecture',
            purpose='Physics 101',
            period=TimeRange(at(13), at(13) + timedelta(hours=2)),
        ))
        logger.debug("Seeded in-memory repository with sample data")
        return repo
