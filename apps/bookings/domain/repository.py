"""
Booking Repository Contract

The booking workflow, the IntervalIndex and the reconciliation importer
only talk to storage through this interface. Two implementations ship:
the Django ORM repository used by the service and an in-memory one used
by tests and demos.

Every method may raise BookingPersistenceError when storage fails.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from apps.bookings.domain.entities import Booking, BookingStatus, Member, RoomEntity


@dataclass(frozen=True)
class BookingFilter:
    """Native repository filter; every given field must match."""
    room_id: UUID | None = None
    user_id: UUID | None = None
    status: BookingStatus | None = None

    def matches(self, booking: Booking) -> bool:
        if self.room_id is not None and booking.room_id != self.room_id:
            return False
        if self.user_id is not None and booking.requester_id != self.user_id:
            return False
        if self.status is not None and booking.status != self.status:
            return False
        return True


class BookingRepository(ABC):
    """Storage contract for bookings, rooms and users."""

    # ----- bookings -----

    @abstractmethod
    def list_bookings(self, booking_filter: BookingFilter | None = None) -> list[Booking]:
        """Bookings matching booking_filter, newest created first."""

    @abstractmethod
    def get_booking(self, booking_id: UUID) -> Booking:
        """Raises BookingNotFoundError when missing."""

    @abstractmethod
    def create_booking(self, draft: Booking) -> Booking:
        """Persist a new PENDING booking built by the workflow."""

    @abstractmethod
    def update_booking_status(
        self,
        booking_id: UUID,
        status: BookingStatus,
        actor_id: UUID,
        *,
        expected_status: BookingStatus | None = None,
        decided_at: datetime | None = None,
    ) -> Booking:
        """
        Write a new status

        APPROVED/REJECTED also stamp approver=actor_id and approved_at.
        When expected_status is given the write only happens if the stored
        status still equals it; otherwise BookingTransitionError is raised.
        Raises BookingNotFoundError when the booking no longer exists.
        """

    @abstractmethod
    def insert_booking(self, booking: Booking) -> Booking:
        """Persist an imported booking exactly as given (any status)."""

    # ----- rooms -----

    @abstractmethod
    def list_rooms(self) -> list[RoomEntity]:
        """All rooms ordered by name."""

    @abstractmethod
    def get_room(self, room_id: UUID, *, lock: bool = False) -> RoomEntity | None:
        """
        Room by id, or None

        lock=True serializes concurrent booking creation for the room
        until the surrounding transaction ends.
        """

    @abstractmethod
    def create_room(self, room: RoomEntity) -> RoomEntity:
        pass

    @abstractmethod
    def update_room(self, room: RoomEntity) -> RoomEntity:
        pass

    @abstractmethod
    def delete_room(self, room_id: UUID) -> None:
        """Remove the room; bookings referencing it are kept."""

    # ----- users -----

    @abstractmethod
    def get_user(self, user_id: UUID) -> Member | None:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Member | None:
        pass

    @abstractmethod
    def upsert_user_by_username(self, member: Member, *, password: str = '') -> tuple[Member, bool]:
        """
        Insert or update the user whose username equals member.username

        Returns (user, created). An existing user keeps its identity.
        """
