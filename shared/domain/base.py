"""
Domain building blocks shared by bookings, rooms and members.

Entities carry identity and audit timestamps, aggregates buffer the events
a unit of work publishes after commit.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4

from django.utils import timezone


@dataclass
class Entity(ABC):
    """
    Identity-compared domain object.

    id and the timestamps are keyword-only so subclasses can declare
    required fields first.
    """
    id: UUID = field(default_factory=uuid4, kw_only=True)
    created_at: datetime = field(default_factory=timezone.now, kw_only=True)
    updated_at: datetime = field(default_factory=timezone.now, kw_only=True)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(eq=False)
class Aggregate(Entity):
    """Entity that records domain events until a unit of work collects them."""
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False, compare=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        return self._events.copy()


@dataclass
class DomainEvent:
    """Something that happened to an aggregate; published after commit."""
    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(default_factory=timezone.now, kw_only=True)
    aggregate_id: UUID | None = field(default=None, kw_only=True)

    def to_dict(self) -> dict:
        """Log-friendly representation; subclasses add their own fields."""
        return {
            'event_type': self.__class__.__name__,
            'event_id': str(self.event_id),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
            'occurred_at': self.occurred_at.isoformat(),
        }
