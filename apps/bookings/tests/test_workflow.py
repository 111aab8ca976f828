"""Booking lifecycle against the in-memory repository."""

from uuid import uuid4

import pytest

from apps.bookings.domain.entities import AccountStatus, BookingStatus, Member, Role, RoomEntity, RoomStatus
from apps.bookings.domain.events import BookingCreated, BookingStatusChanged, NotificationType
from apps.bookings.domain.exceptions import (
    BookingAuthorizationError,
    BookingConflictError,
    BookingNotFoundError,
    BookingTransitionError,
    BookingValidationError,
)


@pytest.fixture
def member(users):
    return users["user"]


@pytest.fixture
def approver(users):
    return users["approver"]


@pytest.fixture
def room_a(rooms):
    return rooms["Meeting Room A"]


@pytest.fixture
def pending(workflow, room_a, member, at):
    return workflow.create(room_a.id, member.id, "Planning", "Quarter plan", at(14), at(15))


# ===== create =====

def test_create_returns_pending_booking(workflow, repo, room_a, member, at):
    booking = workflow.create(room_a.id, member.id, "  Design review  ", "", at(14), at(15))

    assert booking.status == BookingStatus.PENDING
    assert booking.title == "Design review"
    assert booking.room_name == "Meeting Room A"
    assert booking.requester_name == "Regular User"
    assert booking.approver_id is None
    assert repo.get_booking(booking.id).status == BookingStatus.PENDING


def test_overlapping_request_is_rejected_and_adjacent_one_succeeds(workflow, repo, room_a, member, at):
    # Room A already has an APPROVED booking 10:00-11:00
    before = len(repo.bookings)

    with pytest.raises(BookingConflictError):
        workflow.create(room_a.id, member.id, "Overlap", "", at(10, 30), at(11, 30))
    assert len(repo.bookings) == before

    booking = workflow.create(room_a.id, member.id, "Right after", "", at(11), at(12))
    assert booking.status == BookingStatus.PENDING


def test_second_pending_request_for_same_slot_conflicts(workflow, pending, room_a, approver, at):
    with pytest.raises(BookingConflictError):
        workflow.create(room_a.id, approver.id, "Same slot", "", at(14, 30), at(15, 30))


@pytest.mark.parametrize("start_hour, end_hour", [(12, 12), (13, 12)])
def test_malformed_interval_never_reaches_interval_index(workflow, room_a, member, at, monkeypatch, start_hour, end_hour):
    def fail(*args, **kwargs):
        raise AssertionError("IntervalIndex must not be consulted")

    monkeypatch.setattr(workflow.create_handler.interval_index, "has_conflict", fail)

    with pytest.raises(BookingValidationError) as excinfo:
        workflow.create(room_a.id, member.id, "Bad", "", at(start_hour), at(end_hour))
    assert excinfo.value.field == "end"


def test_blank_title_is_a_validation_error(workflow, room_a, member, at):
    with pytest.raises(BookingValidationError) as excinfo:
        workflow.create(room_a.id, member.id, "   ", "", at(16), at(17))
    assert excinfo.value.as_dict() == {"title": ["Title is required."]}


def test_unknown_room_is_a_validation_error(workflow, member, at):
    with pytest.raises(BookingValidationError) as excinfo:
        workflow.create(uuid4(), member.id, "Ghost room", "", at(16), at(17))
    assert excinfo.value.field == "room"


def test_room_under_maintenance_cannot_be_booked(workflow, repo, member, at):
    room = repo.create_room(RoomEntity(name="Closed", status=RoomStatus.MAINTENANCE))

    with pytest.raises(BookingValidationError):
        workflow.create(room.id, member.id, "Closed room", "", at(16), at(17))


def test_unknown_requester_is_a_validation_error(workflow, room_a, at):
    with pytest.raises(BookingValidationError) as excinfo:
        workflow.create(room_a.id, uuid4(), "Nobody", "", at(16), at(17))
    assert excinfo.value.field == "requester"


def test_inactive_requester_cannot_book(workflow, repo, room_a, at):
    inactive = repo.add_user(Member(username="gone", full_name="Gone", status=AccountStatus.INACTIVE))

    with pytest.raises(BookingAuthorizationError):
        workflow.create(room_a.id, inactive.id, "Late", "", at(16), at(17))


def test_create_publishes_new_booking_event(workflow, published, room_a, member, at):
    booking = workflow.create(room_a.id, member.id, "Announce me", "", at(16), at(17))

    assert len(published) == 1
    event = published[0]
    assert isinstance(event, BookingCreated)
    assert event.booking_id == booking.id
    assert event.notification_type == NotificationType.NEW_BOOKING
    assert event.to_dict()["booking_id"] == str(booking.id)
    assert event.to_dict()["event_type"] == "BookingCreated"


def test_failed_create_publishes_nothing(workflow, published, room_a, member, at):
    with pytest.raises(BookingConflictError):
        workflow.create(room_a.id, member.id, "Overlap", "", at(10), at(11))

    assert published == []


# ===== set_status =====

def test_approver_approves_pending_booking(workflow, pending, approver, at):
    decided_at = at(12)
    workflow.status_handler.clock = lambda: decided_at

    booking = workflow.set_status(pending.id, BookingStatus.APPROVED, approver.id)

    assert booking.status == BookingStatus.APPROVED
    assert booking.approver_id == approver.id
    assert booking.approved_at == decided_at


def test_decided_booking_cannot_be_decided_again(workflow, pending, approver):
    workflow.set_status(pending.id, BookingStatus.APPROVED, approver.id)

    with pytest.raises(BookingTransitionError):
        workflow.set_status(pending.id, BookingStatus.REJECTED, approver.id)


def test_reject_stamps_approver(workflow, pending, users):
    admin = users["admin"]

    booking = workflow.set_status(pending.id, BookingStatus.REJECTED, admin.id)

    assert booking.status == BookingStatus.REJECTED
    assert booking.approver_id == admin.id
    assert booking.approved_at is not None


def test_member_cannot_approve_someone_elses_booking(workflow, repo, room_a, approver, users, at):
    booking = workflow.create(room_a.id, approver.id, "Approver's meeting", "", at(16), at(17))

    with pytest.raises(BookingAuthorizationError):
        workflow.set_status(booking.id, BookingStatus.APPROVED, users["user"].id)
    assert repo.get_booking(booking.id).status == BookingStatus.PENDING


def test_member_cannot_approve_own_booking(workflow, pending, member):
    with pytest.raises(BookingAuthorizationError):
        workflow.set_status(pending.id, BookingStatus.APPROVED, member.id)


def test_member_cancels_own_pending_booking(workflow, pending, member):
    booking = workflow.set_status(pending.id, BookingStatus.CANCELLED, member.id)

    assert booking.status == BookingStatus.CANCELLED
    assert booking.approver_id is None


def test_member_cannot_cancel_someone_elses_booking(workflow, pending, repo):
    other = repo.add_user(Member(username="other", full_name="Other Member", role=Role.MEMBER))

    with pytest.raises(BookingAuthorizationError):
        workflow.set_status(pending.id, BookingStatus.CANCELLED, other.id)


def test_approver_cancels_approved_booking(workflow, pending, approver):
    workflow.set_status(pending.id, BookingStatus.APPROVED, approver.id)

    booking = workflow.set_status(pending.id, BookingStatus.CANCELLED, approver.id)

    assert booking.status == BookingStatus.CANCELLED
    assert booking.approver_id is None
    assert booking.approved_at is None


@pytest.mark.parametrize("terminal", [BookingStatus.REJECTED, BookingStatus.CANCELLED])
def test_terminal_statuses_accept_no_transition(workflow, pending, approver, terminal):
    workflow.set_status(pending.id, terminal, approver.id)

    for target in BookingStatus:
        with pytest.raises(BookingTransitionError):
            workflow.set_status(pending.id, target, approver.id)


def test_transition_to_current_status_is_rejected(workflow, pending, approver):
    with pytest.raises(BookingTransitionError):
        workflow.set_status(pending.id, BookingStatus.PENDING, approver.id)


def test_inactive_approver_cannot_decide(workflow, repo, pending):
    retired = repo.add_user(Member(
        username="retired",
        full_name="Retired Approver",
        role=Role.APPROVER,
        status=AccountStatus.INACTIVE,
    ))

    with pytest.raises(BookingAuthorizationError):
        workflow.set_status(pending.id, BookingStatus.APPROVED, retired.id)


def test_unknown_booking_is_not_found(workflow, approver):
    with pytest.raises(BookingNotFoundError):
        workflow.set_status(uuid4(), BookingStatus.APPROVED, approver.id)


def test_unknown_actor_is_not_authorized(workflow, pending):
    with pytest.raises(BookingAuthorizationError):
        workflow.set_status(pending.id, BookingStatus.APPROVED, uuid4())


def test_stale_status_write_is_refused(workflow, repo, pending, approver, users):
    # Another reviewer rejects between our read and our write
    original_update = repo.update_booking_status

    def racing_update(booking_id, status, actor_id, **kwargs):
        original_update(booking_id, BookingStatus.REJECTED, users["admin"].id)
        return original_update(booking_id, status, actor_id, **kwargs)

    repo.update_booking_status = racing_update

    with pytest.raises(BookingTransitionError):
        workflow.set_status(pending.id, BookingStatus.APPROVED, approver.id)
    assert repo.bookings[pending.id].status == BookingStatus.REJECTED


def test_cancelled_slot_can_be_booked_again(workflow, pending, member, room_a, at):
    workflow.set_status(pending.id, BookingStatus.CANCELLED, member.id)

    booking = workflow.create(room_a.id, member.id, "Second try", "", at(14), at(15))

    assert booking.status == BookingStatus.PENDING


# ===== notifications =====

@pytest.mark.parametrize("new_status", [BookingStatus.APPROVED, BookingStatus.REJECTED, BookingStatus.CANCELLED])
def test_decisions_and_pending_cancellation_notify_requester(workflow, pending, approver, published, new_status):
    published.clear()

    workflow.set_status(pending.id, new_status, approver.id)

    assert len(published) == 1
    event = published[0]
    assert isinstance(event, BookingStatusChanged)
    assert event.old_status == "PENDING"
    assert event.new_status == new_status.value
    assert event.notification_type == NotificationType.BOOKING_STATUS_UPDATE


def test_cancelling_approved_booking_does_not_notify(workflow, pending, approver, published):
    workflow.set_status(pending.id, BookingStatus.APPROVED, approver.id)
    published.clear()

    workflow.set_status(pending.id, BookingStatus.CANCELLED, approver.id)

    assert published == []


def test_failing_notification_handler_does_not_revert_status(workflow, bus, repo, pending, approver):
    def broken(event):
        raise RuntimeError("mail server down")

    bus.register_event_handler(BookingStatusChanged, broken)

    booking = workflow.set_status(pending.id, BookingStatus.APPROVED, approver.id)

    assert booking.status == BookingStatus.APPROVED
    assert repo.get_booking(pending.id).status == BookingStatus.APPROVED
