"""
Wiring of the booking workflow

Builds the workflow on top of the Django repository and registers its
command handlers on the message bus, so views and management commands
only ever send commands.
"""

from __future__ import annotations

from shared.application.message_bus import MessageBus

from apps.bookings.application.command_handlers import (
    BookingWorkflow,
    ChangeBookingStatusCommand,
    ChangeBookingStatusHandler,
    CreateBookingCommand,
    CreateBookingHandler,
)
from apps.bookings.domain.repository import BookingRepository


def get_repository() -> BookingRepository:
    from apps.bookings.infrastructure.django_repository import DjangoBookingRepository

    return DjangoBookingRepository()


def build_workflow(repository: BookingRepository | None = None) -> BookingWorkflow:
    return BookingWorkflow(repository or get_repository())


def register_handlers(bus: MessageBus, repository: BookingRepository | None = None) -> None:
    repository = repository or get_repository()
    bus.register_command_handler(
        CreateBookingCommand,
        CreateBookingHandler(repository).handle,
        replace=True,
    )
    bus.register_command_handler(
        ChangeBookingStatusCommand,
        ChangeBookingStatusHandler(repository).handle,
        replace=True,
    )
