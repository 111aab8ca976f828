"""CSV exports and import templates."""

from __future__ import annotations

import csv
from typing import IO

from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.users.models import CustomUser

from .importer import ImportKind
from .records import BOOKING_COLUMNS, USER_COLUMNS

USER_EXPORT_COLUMNS = ['id', 'username', 'email', 'full_name', 'role', 'status', 'created_at']
BOOKING_EXPORT_COLUMNS = [
    'id', 'room_id', 'room_name', 'user_id', 'username', 'user_full_name',
    'title', 'purpose', 'start_datetime', 'end_datetime', 'status',
    'approver_id', 'approved_at', 'created_at',
]

TEMPLATE_ROWS = {
    ImportKind.USERS: [
        ['john_doe', 'password123', 'john@example.com', 'John Doe', 'MEMBER', 'ACTIVE'],
        ['jane_smith', 'password456', 'jane@example.com', 'Jane Smith', 'APPROVER', 'ACTIVE'],
    ],
    ImportKind.BOOKINGS: [
        ['[ROOM_UUID]', '[USER_UUID]', 'Team meeting', 'Weekly sync',
         '2024-01-15T09:00:00', '2024-01-15T10:00:00', 'PENDING', '', ''],
    ],
}
TEMPLATE_HEADERS = {
    ImportKind.USERS: list(USER_COLUMNS),
    ImportKind.BOOKINGS: list(BOOKING_COLUMNS),
}


def _iso(value) -> str:
    return value.isoformat() if value else ''


def export_users(stream: IO[str]) -> int:
    """Write all users newest first. Password hashes are never exported."""
    writer = csv.writer(stream)
    writer.writerow(USER_EXPORT_COLUMNS)
    count = 0
    for user in CustomUser.objects.order_by('-created_at').iterator():
        writer.writerow([
            user.id,
            user.username,
            user.email,
            user.full_name,
            user.role,
            user.status,
            _iso(user.created_at),
        ])
        count += 1
    return count


def export_bookings(stream: IO[str]) -> int:
    """Write all bookings newest first with room and requester names joined in."""
    writer = csv.writer(stream)
    writer.writerow(BOOKING_EXPORT_COLUMNS)
    count = 0
    queryset = Booking.objects.select_related('room', 'requester').order_by('-created_at')
    for booking in queryset:
        writer.writerow([
            booking.id,
            booking.room_id or '',
            booking.room.name if booking.room else '',
            booking.requester_id,
            booking.requester.username,
            booking.requester.full_name,
            booking.title,
            booking.purpose,
            _iso(booking.start_at),
            _iso(booking.end_at),
            booking.status,
            booking.approver_id or '',
            _iso(booking.approved_at),
            _iso(booking.created_at),
        ])
        count += 1
    return count


EXPORTERS = {
    ImportKind.USERS: export_users,
    ImportKind.BOOKINGS: export_bookings,
}


def export_csv(kind: ImportKind | str, stream: IO[str]) -> int:
    return EXPORTERS[ImportKind(kind)](stream)


def write_template(kind: ImportKind | str, stream: IO[str]) -> None:
    kind = ImportKind(kind)
    writer = csv.writer(stream)
    writer.writerow(TEMPLATE_HEADERS[kind])
    writer.writerows(TEMPLATE_ROWS[kind])


def export_filename(kind: ImportKind | str) -> str:
    stamp = timezone.localtime().strftime('%Y-%m-%d')
    return f"{ImportKind(kind).value}_export_{stamp}.csv"


def template_filename(kind: ImportKind | str) -> str:
    return f"{ImportKind(kind).value}_template.csv"
