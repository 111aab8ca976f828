"""
ReconciliationImporter

Bulk loads of users and bookings. Rows are processed strictly in order,
each one on its own: a failing row is recorded as "{key}: {reason}" and
the next row is attempted. There is no batch transaction, so a partially
applied batch is a normal outcome and the result says exactly which rows
did not make it.

Users are reconciled by username (update when present, insert
otherwise). Bookings are always inserted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from apps.bookings.domain.entities import BLOCKING_STATUSES
from apps.bookings.domain.exceptions import BookingConflictError, BookingError
from apps.bookings.domain.interval_index import IntervalIndex
from apps.bookings.domain.repository import BookingRepository

from .parsers import RawRow, parse_csv
from .records import RowValidationError, parse_booking_row, parse_user_row

logger = logging.getLogger(__name__)


class ImportKind(Enum):
    USERS = 'users'
    BOOKINGS = 'bookings'


@dataclass
class ImportResult:
    success_count: int = 0
    failed_count: int = 0
    errors: list[str] = field(default_factory=list)

    def record_success(self) -> None:
        self.success_count += 1

    def record_failure(self, key: str, reason: str) -> None:
        self.failed_count += 1
        self.errors.append(f"{key}: {reason}")

    def as_dict(self) -> dict:
        return {
            'success_count': self.success_count,
            'failed_count': self.failed_count,
            'errors': list(self.errors),
        }


def _row_key(row: RawRow, column: str) -> str:
    return row.get(column) or f"row {row.number}"


class ReconciliationImporter:
    """
    Reconcile parsed rows against a BookingRepository

    check_conflicts=False keeps the historical behavior of loading
    bookings as given. With check_conflicts=True a PENDING or APPROVED
    row that overlaps a blocking booking of the same room (including
    rows imported earlier in the batch) fails like an interactive
    create would.
    """

    def __init__(self, repository: BookingRepository, *, check_conflicts: bool = False):
        self.repository = repository
        self.check_conflicts = check_conflicts
        self.interval_index = IntervalIndex(repository)

    def import_csv(self, kind: ImportKind | str, content: bytes | str) -> ImportResult:
        """Parse content and import it; ImportParseError aborts before any row."""
        kind = ImportKind(kind)
        rows = parse_csv(content)
        if kind == ImportKind.USERS:
            return self.import_users(rows)
        return self.import_bookings(rows)

    def import_users(self, rows: Iterable[RawRow]) -> ImportResult:
        return self._run(rows, 'username', self._import_user, 'users')

    def import_bookings(self, rows: Iterable[RawRow]) -> ImportResult:
        return self._run(rows, 'title', self._import_booking, 'bookings')

    def _run(
        self,
        rows: Iterable[RawRow],
        key_column: str,
        apply_row: Callable[[RawRow], None],
        label: str,
    ) -> ImportResult:
        result = ImportResult()
        for row in rows:
            key = _row_key(row, key_column)
            try:
                apply_row(row)
            except RowValidationError as exc:
                result.record_failure(key, exc.reason)
            except BookingError as exc:
                result.record_failure(key, exc.message)
            except ValueError as exc:
                result.record_failure(key, str(exc))
            else:
                result.record_success()

        logger.info(
            f"Imported {label}: {result.success_count} succeeded, {result.failed_count} failed"
        )
        return result

    def _import_user(self, row: RawRow) -> None:
        record = parse_user_row(row.values)
        user, created = self.repository.upsert_user_by_username(
            record.to_member(),
            password=record.password,
        )
        logger.debug(f"{'Created' if created else 'Updated'} user {user.username} from row {row.number}")

    def _import_booking(self, row: RawRow) -> None:
        record = parse_booking_row(row.values)

        if self.repository.get_room(record.room_id) is None:
            raise RowValidationError(f"room {record.room_id} does not exist")
        if self.repository.get_user(record.user_id) is None:
            raise RowValidationError(f"user {record.user_id} does not exist")
        if record.approver_id and self.repository.get_user(record.approver_id) is None:
            raise RowValidationError(f"approver {record.approver_id} does not exist")

        if self.check_conflicts and record.status in BLOCKING_STATUSES:
            if self.interval_index.has_conflict(record.room_id, record.period.start, record.period.end):
                raise BookingConflictError()

        booking = self.repository.insert_booking(record.to_booking())
        logger.debug(f"Inserted booking {booking.id} from row {row.number}")
