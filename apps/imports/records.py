"""
Typed import records

parse_user_row / parse_booking_row turn a raw CSV row into a validated
record or raise RowValidationError with a human readable reason. They
check shape only (required columns, enums, ids, timestamps); whether
the referenced room and user exist is decided by the importer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Mapping, TypeVar
from uuid import UUID

from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import validate_email  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.dateparse import parse_datetime  # type: ignore

from apps.bookings.domain.entities import AccountStatus, Booking, BookingStatus, Member, Role
from apps.bookings.domain.workflow import DECISION_STATUSES
from shared.domain.value_objects import TimeRange

USER_COLUMNS = ('username', 'password_hash', 'email', 'full_name', 'role', 'status')
USER_REQUIRED = ('username', 'full_name')

BOOKING_COLUMNS = (
    'room_id', 'user_id', 'title', 'purpose', 'start_datetime',
    'end_datetime', 'status', 'approver_id', 'approved_at',
)
BOOKING_REQUIRED = ('room_id', 'user_id', 'title', 'start_datetime', 'end_datetime')

# Older exports spell the member role USER
ROLE_ALIASES = {'USER': Role.MEMBER}

E = TypeVar('E', bound=Enum)


class RowValidationError(ValueError):
    """A single import row is malformed; the batch continues."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


@dataclass(frozen=True)
class UserRecord:
    username: str
    full_name: str
    email: str = ''
    password: str = ''
    role: Role = Role.MEMBER
    status: AccountStatus = AccountStatus.ACTIVE

    def to_member(self) -> Member:
        return Member(
            username=self.username,
            full_name=self.full_name,
            email=self.email,
            role=self.role,
            status=self.status,
        )


@dataclass(frozen=True)
class BookingRecord:
    room_id: UUID
    user_id: UUID
    title: str
    period: TimeRange
    purpose: str = ''
    status: BookingStatus = BookingStatus.PENDING
    approver_id: UUID | None = None
    approved_at: datetime | None = None

    def to_booking(self) -> Booking:
        return Booking(
            room_id=self.room_id,
            requester_id=self.user_id,
            title=self.title,
            purpose=self.purpose,
            period=self.period,
            status=self.status,
            approver_id=self.approver_id,
            approved_at=self.approved_at,
        )


def require_columns(row: Mapping[str, str], columns: tuple[str, ...]) -> None:
    missing = [column for column in columns if not row.get(column)]
    if missing:
        raise RowValidationError(f"missing required field(s): {', '.join(missing)}")


def parse_choice(value: str, enum_type: type[E], default: E, column: str, aliases: Mapping[str, E] | None = None) -> E:
    """Case-insensitive enum lookup; blank means default."""
    text = (value or '').strip().upper()
    if not text:
        return default
    if aliases and text in aliases:
        return aliases[text]
    try:
        return enum_type(text)
    except ValueError:
        allowed = ', '.join(member.value for member in enum_type)
        raise RowValidationError(f"invalid {column} '{value}' (expected one of {allowed})")


def parse_uuid(value: str, column: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise RowValidationError(f"{column} '{value}' is not a valid UUID")


def parse_timestamp(value: str, column: str) -> datetime:
    """ISO-8601 timestamp; naive values are read in the project time zone."""
    try:
        parsed = parse_datetime(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise RowValidationError(f"{column} '{value}' is not an ISO-8601 timestamp")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_default_timezone())
    return parsed


def parse_user_row(row: Mapping[str, str]) -> UserRecord:
    require_columns(row, USER_REQUIRED)

    email = row.get('email', '')
    if email:
        try:
            validate_email(email)
        except ValidationError:
            raise RowValidationError(f"invalid email '{email}'")

    return UserRecord(
        username=row['username'],
        full_name=row['full_name'],
        email=email,
        password=row.get('password_hash', ''),
        role=parse_choice(row.get('role', ''), Role, Role.MEMBER, 'role', ROLE_ALIASES),
        status=parse_choice(row.get('status', ''), AccountStatus, AccountStatus.ACTIVE, 'status'),
    )


def parse_booking_row(row: Mapping[str, str]) -> BookingRecord:
    require_columns(row, BOOKING_REQUIRED)

    status = parse_choice(row.get('status', ''), BookingStatus, BookingStatus.PENDING, 'status')
    start = parse_timestamp(row['start_datetime'], 'start_datetime')
    end = parse_timestamp(row['end_datetime'], 'end_datetime')
    if start >= end:
        raise RowValidationError("end_datetime must be after start_datetime")

    approver_id = parse_uuid(row['approver_id'], 'approver_id') if row.get('approver_id') else None
    approved_at = parse_timestamp(row['approved_at'], 'approved_at') if row.get('approved_at') else None
    if (approver_id or approved_at) and status not in DECISION_STATUSES:
        raise RowValidationError("approver_id and approved_at are only allowed on APPROVED or REJECTED bookings")

    return BookingRecord(
        room_id=parse_uuid(row['room_id'], 'room_id'),
        user_id=parse_uuid(row['user_id'], 'user_id'),
        title=row['title'],
        purpose=row.get('purpose', ''),
        period=TimeRange(start, end),
        status=status,
        approver_id=approver_id,
        approved_at=approved_at,
    )
