from datetime import datetime, time

import pytest
from django.utils import timezone

from apps.bookings.application.command_handlers import BookingWorkflow
from apps.bookings.infrastructure.memory import InMemoryBookingRepository
from shared.application.message_bus import MessageBus
from shared.application.uow import InMemoryUnitOfWork

BOOKING_DAY = datetime(2030, 1, 15).date()


@pytest.fixture
def booking_day():
    return BOOKING_DAY


@pytest.fixture
def at(booking_day):
    """at(10) or at(10, 30): an aware datetime on the booking day."""

    def make(hour: int, minute: int = 0):
        return timezone.make_aware(datetime.combine(booking_day, time(hour, minute)))

    return make


@pytest.fixture
def bus():
    return MessageBus()


@pytest.fixture
def published(bus):
    """Every event published on the test bus, in order."""
    from apps.bookings.domain.events import BookingCreated, BookingStatusChanged

    events = []
    bus.register_event_handler(BookingCreated, events.append)
    bus.register_event_handler(BookingStatusChanged, events.append)
    return events


@pytest.fixture
def repo(booking_day):
    return InMemoryBookingRepository.with_sample_data(day=booking_day)


@pytest.fixture
def workflow(repo, bus):
    return BookingWorkflow(repo, uow_factory=lambda: InMemoryUnitOfWork(bus))


@pytest.fixture
def users(repo):
    return {user.username: user for user in repo.users.values()}


@pytest.fixture
def rooms(repo):
    return {room.name: room for room in repo.rooms.values()}
