"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits and are the
only input of the notification side channel.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import TimeRange


class NotificationType(Enum):
    """Notification kinds understood by the external dispatcher."""
    NEW_BOOKING = 'NEW_BOOKING'
    BOOKING_STATUS_UPDATE = 'BOOKING_STATUS_UPDATE'


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A new booking request was created (PENDING)

    Triggers:
    - Email active approvers that a request awaits review
    """
    booking_id: UUID
    room_id: UUID
    requester_id: UUID
    period: TimeRange

    notification_type = NotificationType.NEW_BOOKING

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'room_id': str(self.room_id),
            'start': self.period.start.isoformat(),
            'end': self.period.end.isoformat(),
        })
        return data


@dataclass
class BookingStatusChanged(DomainEvent):
    """
    Event: A booking was approved, rejected or withdrawn while pending

    Triggers:
    - Email the requester about the decision
    """
    booking_id: UUID
    old_status: str
    new_status: str
    actor_id: UUID

    notification_type = NotificationType.BOOKING_STATUS_UPDATE

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'old_status': self.old_status,
            'new_status': self.new_status,
        })
        return data
