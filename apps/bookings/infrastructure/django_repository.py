"""Django ORM implementation of the booking repository contract."""

from __future__ import annotations

import functools
import logging
from datetime import datetime
from uuid import UUID

from django.contrib.auth.hashers import identify_hasher, make_password  # type: ignore
from django.db import DatabaseError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.entities import (
    AccountStatus,
    Booking,
    BookingStatus,
    Member,
    Role,
    RoomEntity,
    RoomStatus,
)
from apps.bookings.domain.exceptions import (
    BookingError,
    BookingNotFoundError,
    BookingPersistenceError,
    BookingTransitionError,
)
from apps.bookings.domain.repository import BookingFilter, BookingRepository
from apps.bookings.models import Booking as BookingModel
from apps.rooms.models import Room as RoomModel
from apps.users.models import CustomUser
from shared.domain.value_objects import TimeRange

logger = logging.getLogger(__name__)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def translate_database_errors(method):
    """Surface storage failures as BookingPersistenceError."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except BookingError:
            raise
        except DatabaseError as exc:
            logger.error(f"Repository call {method.__name__} failed: {exc}", exc_info=True)
            raise BookingPersistenceError() from exc

    return wrapper


def encode_password(value: str) -> str:
    """Keep values that already are Django password hashes, hash the rest."""
    try:
        identify_hasher(value)
    except ValueError:
        return make_password(value)
    return value


# ----- mapping -----

def booking_to_entity(model: BookingModel) -> Booking:
    room = model.room
    requester = model.requester
    return Booking(
        id=model.id,
        created_at=model.created_at,
        updated_at=model.updated_at,
        room_id=model.room_id,
        requester_id=model.requester_id,
        title=model.title,
        purpose=model.purpose,
        period=TimeRange(model.start_at, model.end_at),
        status=BookingStatus(model.status),
        approver_id=model.approver_id,
        approved_at=model.approved_at,
        room_name=room.name if room else '',
        requester_name=requester.display_name if requester else '',
    )


def room_to_entity(model: RoomModel) -> RoomEntity:
    return RoomEntity(
        id=model.id,
        created_at=model.created_at,
        updated_at=model.updated_at,
        name=model.name,
        location=model.location,
        capacity=model.capacity,
        equipment=model.equipment,
        image_url=model.image_url,
        status=RoomStatus(model.status),
    )


def user_to_entity(model: CustomUser) -> Member:
    return Member(
        id=model.id,
        created_at=model.created_at,
        updated_at=model.updated_at,
        username=model.username,
        full_name=model.full_name,
        email=model.email or '',
        role=Role(model.role),
        status=AccountStatus(model.status),
    )


class DjangoBookingRepository(BookingRepository):
    """Repository backed by the project database."""

    def _bookings(self):
        return BookingModel.objects.select_related("room", "requester")

    # ----- bookings -----

    @translate_database_errors
    def list_bookings(self, booking_filter: BookingFilter | None = None) -> list[Booking]:
        qs = self._bookings()
        if booking_filter is not None:
            if booking_filter.room_id is not None:
                qs = qs.filter(room_id=booking_filter.room_id)
            if booking_filter.user_id is not None:
                qs = qs.filter(requester_id=booking_filter.user_id)
            if booking_filter.status is not None:
                qs = qs.filter(status=booking_filter.status.value)
        return [booking_to_entity(b) for b in qs.order_by("-created_at")]

    @translate_database_errors
    def get_booking(self, booking_id: UUID) -> Booking:
        try:
            return booking_to_entity(self._bookings().get(pk=booking_id))
        except BookingModel.DoesNotExist:
            raise BookingNotFoundError(f"Booking {booking_id} not found.")

    @translate_database_errors
    def create_booking(self, draft: Booking) -> Booking:
        if draft.status != BookingStatus.PENDING:
            raise ValueError("New bookings must be PENDING")
        return self._insert(draft)

    @translate_database_errors
    def insert_booking(self, booking: Booking) -> Booking:
        return self._insert(booking)

    def _insert(self, booking: Booking) -> Booking:
        with transaction.atomic():
            BookingModel.objects.create(
                id=booking.id,
                room_id=booking.room_id,
                requester_id=booking.requester_id,
                title=booking.title,
                purpose=booking.purpose,
                start_at=booking.start,
                end_at=booking.end,
                status=booking.status.value,
                approver_id=booking.approver_id,
                approved_at=booking.approved_at,
                created_at=booking.created_at,
            )
        return self.get_booking(booking.id)

    @translate_database_errors
    def update_booking_status(
        self,
        booking_id: UUID,
        status: BookingStatus,
        actor_id: UUID,
        *,
        expected_status: BookingStatus | None = None,
        decided_at: datetime | None = None,
    ) -> Booking:
        now = decided_at or timezone.now()
        changes: dict = {"status": status.value, "updated_at": now}
        if status in (BookingStatus.APPROVED, BookingStatus.REJECTED):
            changes.update(approver_id=actor_id, approved_at=now)
        else:
            changes.update(approver_id=None, approved_at=None)

        qs = BookingModel.objects.filter(pk=booking_id)
        if expected_status is not None:
            qs = qs.filter(status=expected_status.value)

        # Conditional write: zero rows means missing or changed concurrently
        if qs.update(**changes) == 0:
            current = BookingModel.objects.filter(pk=booking_id).values_list("status", flat=True).first()
            if current is None:
                raise BookingNotFoundError(f"Booking {booking_id} not found.")
            raise BookingTransitionError(
                f"Booking changed to {current} before this update was applied."
            )
        return self.get_booking(booking_id)

    # ----- rooms -----

    @translate_database_errors
    def list_rooms(self) -> list[RoomEntity]:
        return [room_to_entity(r) for r in RoomModel.objects.order_by("name")]

    @translate_database_errors
    def get_room(self, room_id: UUID, *, lock: bool = False) -> RoomEntity | None:
        qs = RoomModel.objects.filter(pk=room_id)
        if lock:
            qs = _lock_queryset_if_possible(qs)
        room = qs.first()
        return room_to_entity(room) if room else None

    @translate_database_errors
    def create_room(self, room: RoomEntity) -> RoomEntity:
        model = RoomModel.objects.create(
            id=room.id,
            name=room.name,
            location=room.location,
            capacity=room.capacity,
            equipment=room.equipment,
            image_url=room.image_url,
            status=room.status.value,
        )
        return room_to_entity(model)

    @translate_database_errors
    def update_room(self, room: RoomEntity) -> RoomEntity:
        try:
            model = RoomModel.objects.get(pk=room.id)
        except RoomModel.DoesNotExist:
            raise LookupError(f"Room {room.id} not found")
        model.name = room.name
        model.location = room.location
        model.capacity = room.capacity
        model.equipment = room.equipment
        model.image_url = room.image_url
        model.status = room.status.value
        model.save()
        return room_to_entity(model)

    @translate_database_errors
    def delete_room(self, room_id: UUID) -> None:
        RoomModel.objects.filter(pk=room_id).delete()

    # ----- users -----

    @translate_database_errors
    def get_user(self, user_id: UUID) -> Member | None:
        user = CustomUser.objects.filter(pk=user_id).first()
        return user_to_entity(user) if user else None

    @translate_database_errors
    def get_user_by_username(self, username: str) -> Member | None:
        user = CustomUser.objects.filter(username=username).first()
        return user_to_entity(user) if user else None

    @translate_database_errors
    def upsert_user_by_username(self, member: Member, *, password: str = '') -> tuple[Member, bool]:
        defaults = {
            "full_name": member.full_name,
            "email": member.email,
            "role": member.role.value,
            "status": member.status.value,
        }
        if password:
            defaults["password"] = encode_password(password)

        with transaction.atomic():
            user, created = CustomUser.objects.update_or_create(
                username=member.username,
                defaults=defaults,
            )
            if created and not password:
                user.set_unusable_password()
                user.save(update_fields=["password"])
        return user_to_entity(user), created
