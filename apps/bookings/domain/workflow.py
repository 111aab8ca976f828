"""
Booking Transition Rules

Pure functions deciding whether a status change is legal and who may
request it. No I/O: the command handlers load the booking and the
actor, call check_transition() and persist the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from apps.bookings.domain.entities import Actor, BookingStatus
from apps.bookings.domain.exceptions import BookingAuthorizationError, BookingTransitionError

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.domain.entities import Booking


ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.APPROVED,
        BookingStatus.REJECTED,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.APPROVED: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

DECISION_STATUSES = frozenset({BookingStatus.APPROVED, BookingStatus.REJECTED})


def can_transition(current: BookingStatus, new_status: BookingStatus) -> bool:
    return new_status in ALLOWED_TRANSITIONS[current]


def notifies_requester(old_status: BookingStatus, new_status: BookingStatus) -> bool:
    """Decisions and withdrawals of pending requests are announced."""
    if new_status in DECISION_STATUSES:
        return True
    return old_status == BookingStatus.PENDING and new_status == BookingStatus.CANCELLED


def check_transition(booking: "Booking", new_status: BookingStatus, actor: Actor) -> None:
    """
    Validate a status change for actor

    Raises:
        BookingAuthorizationError: inactive actor, non-reviewer deciding,
            or a stranger cancelling someone else's booking
        BookingTransitionError: new_status is not reachable from the
            booking's current status
    """
    if not actor.is_active:
        raise BookingAuthorizationError("Inactive accounts cannot change bookings.")

    if not can_transition(booking.status, new_status):
        raise BookingTransitionError(
            f"Cannot change booking from {booking.status.value} to {new_status.value}."
        )

    if new_status in DECISION_STATUSES and not actor.is_reviewer:
        raise BookingAuthorizationError("Only approvers and administrators can approve or reject bookings.")

    if new_status == BookingStatus.CANCELLED:
        if not (actor.is_reviewer or booking.is_owned_by(actor.id)):
            raise BookingAuthorizationError("Only the requester or an approver can cancel this booking.")
