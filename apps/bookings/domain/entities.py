"""
Booking Domain Entities

Core business entities for the room booking domain:
- Booking: Main aggregate representing a room reservation
- BookingStatus: FSM states for booking lifecycle
- RoomEntity / Member: read models of the rooms and users a booking references
- Actor: whoever asks for a status change
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from shared.domain.base import Aggregate, Entity
from shared.domain.value_objects import TimeRange


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> APPROVED (approver accepted the request)
    - PENDING -> REJECTED (approver declined the request)
    - PENDING -> CANCELLED (requester or approver withdrew it)
    - APPROVED -> CANCELLED (requester or approver withdrew it)
    REJECTED and CANCELLED are terminal.
    """
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'
    CANCELLED = 'CANCELLED'


class Role(Enum):
    MEMBER = 'MEMBER'
    APPROVER = 'APPROVER'
    ADMIN = 'ADMIN'


class AccountStatus(Enum):
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'


class RoomStatus(Enum):
    ACTIVE = 'ACTIVE'
    MAINTENANCE = 'MAINTENANCE'


# Only these statuses hold room time
BLOCKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.APPROVED})
TERMINAL_STATUSES = frozenset({BookingStatus.REJECTED, BookingStatus.CANCELLED})
REVIEWER_ROLES = frozenset({Role.APPROVER, Role.ADMIN})


@dataclass(eq=False)
class RoomEntity(Entity):
    """A bookable meeting room."""
    name: str
    location: str = ''
    capacity: int = 1
    equipment: str = ''
    image_url: str = ''
    status: RoomStatus = RoomStatus.ACTIVE

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError("Room capacity must be at least 1")

    @property
    def is_bookable(self) -> bool:
        return self.status == RoomStatus.ACTIVE


@dataclass(eq=False)
class Member(Entity):
    """A user of the booking system."""
    username: str
    full_name: str
    email: str = ''
    role: Role = Role.MEMBER
    status: AccountStatus = AccountStatus.ACTIVE

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def is_reviewer(self) -> bool:
        return self.role in REVIEWER_ROLES

    def as_actor(self) -> 'Actor':
        return Actor(id=self.id, role=self.role, status=self.status)


@dataclass(frozen=True)
class Actor:
    """Identity and permissions of whoever requests a transition."""
    id: UUID
    role: Role
    status: AccountStatus = AccountStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def is_reviewer(self) -> bool:
        return self.role in REVIEWER_ROLES


@dataclass(eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a member's request to occupy a room for a time range.

    Key invariants:
    - period is a valid half-open range (start < end)
    - approver/approved_at are set only on APPROVED or REJECTED;
      cancelling clears them
    - PENDING and APPROVED bookings of one room never overlap
      (enforced by the workflow through IntervalIndex)
    """

    room_id: UUID
    requester_id: UUID
    title: str
    period: TimeRange
    purpose: str = ''
    status: BookingStatus = BookingStatus.PENDING
    approver_id: UUID | None = None
    approved_at: datetime | None = None

    # Joined display data, never written back
    room_name: str = field(default='', compare=False)
    requester_name: str = field(default='', compare=False)

    @classmethod
    def request(
        cls,
        *,
        room: RoomEntity,
        requester: Member,
        title: str,
        purpose: str,
        period: TimeRange,
    ) -> 'Booking':
        """Build a new PENDING booking and record BookingCreated."""
        from apps.bookings.domain.events import BookingCreated

        booking = cls(
            room_id=room.id,
            requester_id=requester.id,
            title=title,
            purpose=purpose,
            period=period,
            room_name=room.name,
            requester_name=requester.display_name,
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            room_id=room.id,
            requester_id=requester.id,
            period=period,
        ))
        return booking

    def transition_to(self, new_status: BookingStatus, actor: Actor, *, at: datetime) -> BookingStatus:
        """
        Move to new_status on behalf of actor

        Raises BookingTransitionError / BookingAuthorizationError when the
        change is illegal. Returns the previous status.
        Events: BookingStatusChanged (for changes that notify the requester)
        """
        from apps.bookings.domain.events import BookingStatusChanged
        from apps.bookings.domain.workflow import check_transition, notifies_requester

        check_transition(self, new_status, actor)

        old_status = self.status
        self.status = new_status
        self.updated_at = at
        if new_status in (BookingStatus.APPROVED, BookingStatus.REJECTED):
            self.approver_id = actor.id
            self.approved_at = at
        else:
            self.approver_id = None
            self.approved_at = None

        if notifies_requester(old_status, new_status):
            self.add_event(BookingStatusChanged(
                aggregate_id=self.id,
                booking_id=self.id,
                old_status=old_status.value,
                new_status=new_status.value,
                actor_id=actor.id,
            ))
        return old_status

    @property
    def start(self) -> datetime:
        return self.period.start

    @property
    def end(self) -> datetime:
        return self.period.end

    def blocks_room(self) -> bool:
        """Only PENDING and APPROVED bookings hold room time."""
        return self.status in BLOCKING_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def is_owned_by(self, user_id: UUID) -> bool:
        return self.requester_id == user_id

    def starts_on(self, day: date) -> bool:
        return self.period.starts_on(day)

    def __str__(self):
        return f"Booking {self.title!r} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, room_id={self.room_id}, "
            f"status={self.status.value}, period={self.period!r})"
        )
