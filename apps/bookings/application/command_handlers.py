"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Request a room for a time range (PENDING)
- ChangeBookingStatusCommand: Approve, reject or cancel a booking

BookingWorkflow bundles both handlers behind the create / set_status
entry points used by views, management commands and tests.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID
import logging

from django.utils import timezone

from apps.bookings.domain.entities import Booking, BookingStatus, Member
from apps.bookings.domain.exceptions import (
    BookingAuthorizationError,
    BookingConflictError,
    BookingValidationError,
)
from apps.bookings.domain.interval_index import IntervalIndex
from apps.bookings.domain.repository import BookingRepository
from shared.application.uow import AbstractUnitOfWork, DjangoUnitOfWork
from shared.domain.value_objects import TimeRange

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
Clock = Callable[[], datetime]


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    This is the primary entry point for reserving a room.
    """
    room_id: UUID
    requester_id: UUID
    title: str
    start: datetime
    end: datetime
    purpose: str = ''


@dataclass
class ChangeBookingStatusCommand:
    """Command to approve, reject or cancel a booking"""
    booking_id: UUID
    new_status: BookingStatus
    actor_id: UUID


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Strategy:
    1. Validate the request locally (fields, start < end)
    2. Start the unit of work (database transaction)
    3. Load the room with a row lock so concurrent creates for the same
       room queue up behind each other
    4. Ask IntervalIndex for a conflicting PENDING/APPROVED booking
    5. Persist the new PENDING booking
    6. Publish BookingCreated after commit
    """

    def __init__(self, repository: BookingRepository, uow_factory: UnitOfWorkFactory = DjangoUnitOfWork):
        self.repository = repository
        self.uow_factory = uow_factory
        self.interval_index = IntervalIndex(repository)

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Handle booking creation

        Returns: the persisted Booking

        Raises:
            BookingValidationError: missing fields, bad interval, unknown or
                unavailable room, unknown requester
            BookingAuthorizationError: requester account is inactive
            BookingConflictError: the room is taken for part of the range
            BookingPersistenceError: storage failed
        """
        title = (command.title or '').strip()
        purpose = (command.purpose or '').strip()
        period = self._validate(command, title)

        logger.info(
            f"Creating booking for room {command.room_id}, "
            f"requester {command.requester_id}, period {period}"
        )

        requester = self._load_requester(command.requester_id)

        with self.uow_factory() as uow:
            room = self.repository.get_room(command.room_id, lock=True)
            if room is None:
                raise BookingValidationError("Room not found.", field="room")
            if not room.is_bookable:
                raise BookingValidationError("Room is not available for booking.", field="room")

            if self.interval_index.has_conflict(room.id, period.start, period.end):
                logger.info(f"Booking request for room {room.id} rejected: {period} is taken")
                raise BookingConflictError()

            draft = Booking.request(
                room=room,
                requester=requester,
                title=title,
                purpose=purpose,
                period=period,
            )
            booking = self.repository.create_booking(draft)
            uow.collect_events(draft)

        logger.info(f"Booking created successfully: {booking.id}")
        return booking

    def _validate(self, command: CreateBookingCommand, title: str) -> TimeRange:
        if not command.room_id:
            raise BookingValidationError("Room is required.", field="room")
        if not title:
            raise BookingValidationError("Title is required.", field="title")
        if command.start is None:
            raise BookingValidationError("Start time is required.", field="start")
        if command.end is None:
            raise BookingValidationError("End time is required.", field="end")
        if command.start >= command.end:
            raise BookingValidationError("End time must be after start time.", field="end")
        return TimeRange(command.start, command.end)

    def _load_requester(self, requester_id: UUID) -> Member:
        requester = self.repository.get_user(requester_id) if requester_id else None
        if requester is None:
            raise BookingValidationError("Requester not found.", field="requester")
        if not requester.is_active:
            raise BookingAuthorizationError("Inactive accounts cannot book rooms.")
        return requester


class ChangeBookingStatusHandler:
    """
    Handler for status changes

    The transition is validated on the loaded booking and then written
    conditionally: if another request changed the status in between, the
    write is refused with BookingTransitionError instead of silently
    overriding it.
    """

    def __init__(
        self,
        repository: BookingRepository,
        uow_factory: UnitOfWorkFactory = DjangoUnitOfWork,
        clock: Clock = timezone.now,
    ):
        self.repository = repository
        self.uow_factory = uow_factory
        self.clock = clock

    def handle(self, command: ChangeBookingStatusCommand) -> Booking:
        """Apply the status change and return the updated booking"""
        logger.info(
            f"Changing booking {command.booking_id} to {command.new_status.value} "
            f"by {command.actor_id}"
        )

        actor = self.repository.get_user(command.actor_id)
        if actor is None:
            raise BookingAuthorizationError("Unknown user.")

        with self.uow_factory() as uow:
            booking = self.repository.get_booking(command.booking_id)

            now = self.clock()
            old_status = booking.transition_to(command.new_status, actor.as_actor(), at=now)

            updated = self.repository.update_booking_status(
                booking.id,
                command.new_status,
                actor.id,
                expected_status=old_status,
                decided_at=now,
            )
            uow.collect_events(booking)

        logger.info(
            f"Booking {updated.id} changed from {old_status.value} to {updated.status.value}"
        )
        return updated


class BookingWorkflow:
    """
    The booking lifecycle entry points

    create() validates and reserves; set_status() applies role-gated
    transitions. Notifications go out through domain events after the
    unit of work commits and never affect the outcome.
    """

    def __init__(
        self,
        repository: BookingRepository,
        uow_factory: UnitOfWorkFactory = DjangoUnitOfWork,
        clock: Clock = timezone.now,
    ):
        self.repository = repository
        self.create_handler = CreateBookingHandler(repository, uow_factory)
        self.status_handler = ChangeBookingStatusHandler(repository, uow_factory, clock)

    def create(
        self,
        room_id: UUID,
        requester_id: UUID,
        title: str,
        purpose: str,
        start: datetime,
        end: datetime,
    ) -> Booking:
        return self.create_handler.handle(CreateBookingCommand(
            room_id=room_id,
            requester_id=requester_id,
            title=title,
            purpose=purpose,
            start=start,
            end=end,
        ))

    def set_status(self, booking_id: UUID, new_status: BookingStatus, actor_id: UUID) -> Booking:
        return self.status_handler.handle(ChangeBookingStatusCommand(
            booking_id=booking_id,
            new_status=new_status,
            actor_id=actor_id,
        ))
