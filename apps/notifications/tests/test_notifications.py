"""Booking notification delivery."""

from datetime import datetime

import pytest
from django.utils import timezone

from apps.bookings.bootstrap import build_workflow
from apps.bookings.domain.entities import BookingStatus
from apps.bookings.domain.events import BookingCreated, NotificationType
from apps.bookings.models import Booking
from apps.notifications import handlers
from apps.notifications.services import NotificationDispatcher, approver_emails
from apps.notifications.tasks import send_booking_notification
from apps.rooms.models import Room
from apps.users.models import User
from shared.domain.value_objects import TimeRange

pytestmark = pytest.mark.django_db


def aware(hour):
    return timezone.make_aware(datetime(2030, 5, 6, hour))


def created_event(booking):
    return BookingCreated(
        booking_id=booking.id,
        room_id=booking.room_id,
        requester_id=booking.requester_id,
        period=TimeRange(booking.start_at, booking.end_at),
    )


@pytest.fixture
def member():
    return User.objects.create_user(
        username="member", email="member@example.com", password="pass", full_name="Mia Member",
    )


@pytest.fixture
def approvers():
    active = User.objects.create_user(
        username="approver", email="approver@example.com", password="pass",
        role=User.RoleChoices.APPROVER,
    )
    User.objects.create_user(
        username="retired", email="retired@example.com", password="pass",
        role=User.RoleChoices.APPROVER, status=User.StatusChoices.INACTIVE,
    )
    User.objects.create_user(username="silent", password="pass", role=User.RoleChoices.APPROVER)
    return active


@pytest.fixture
def booking(member):
    room = Room.objects.create(name="Aurora", capacity=8)
    return Booking.objects.create(
        room=room, requester=member, title="Kickoff", start_at=aware(9), end_at=aware(10),
    )


def test_only_active_approvers_with_email_are_recipients(approvers):
    assert approver_emails() == ["approver@example.com"]


def test_new_booking_goes_to_active_approvers(approvers, booking, mailoutbox):
    sent = NotificationDispatcher().dispatch(NotificationType.NEW_BOOKING, booking.id)

    assert sent is True
    assert len(mailoutbox) == 1
    message = mailoutbox[0]
    assert message.to == ["approver@example.com"]
    assert message.subject == "[Meeting rooms] New booking request: Kickoff"
    assert "Mia Member" in message.body
    assert "http://testserver/approval" in message.body


def test_user_text_is_escaped_in_html_part(approvers, member, mailoutbox):
    member.full_name = "<b>Eve</b>"
    member.save()
    room = Room.objects.create(name="Aurora", capacity=8)
    booking = Booking.objects.create(
        room=room, requester=member, title='<a href="http://evil">Click</a>',
        start_at=aware(9), end_at=aware(10),
    )

    NotificationDispatcher().dispatch(NotificationType.NEW_BOOKING, booking.id)

    html_message = mailoutbox[0].alternatives[0][0]
    assert '<a href="http://evil">' not in html_message
    assert "&lt;a href=&quot;http://evil&quot;&gt;Click&lt;/a&gt;" in html_message
    assert "&lt;b&gt;Eve&lt;/b&gt;" in html_message
    assert '<a href="http://testserver/approval">' in html_message


def test_status_update_text_part_links_to_my_bookings(booking, mailoutbox):
    booking.status = Booking.Status.REJECTED
    booking.save()

    NotificationDispatcher().dispatch(NotificationType.BOOKING_STATUS_UPDATE, booking.id)

    assert "Your booking is now rejected" in mailoutbox[0].body
    assert "http://testserver/my-bookings" in mailoutbox[0].body


def test_status_update_goes_to_requester(booking, mailoutbox):
    booking.status = Booking.Status.APPROVED
    booking.save()

    sent = NotificationDispatcher().dispatch(NotificationType.BOOKING_STATUS_UPDATE, booking.id)

    assert sent is True
    assert mailoutbox[0].to == ["member@example.com"]
    assert mailoutbox[0].subject == "[Meeting rooms] Booking Kickoff: Approved"


def test_no_recipients_sends_nothing(booking, mailoutbox):
    assert NotificationDispatcher().dispatch(NotificationType.NEW_BOOKING, booking.id) is False
    assert mailoutbox == []


def test_missing_booking_is_skipped(mailoutbox):
    assert NotificationDispatcher().dispatch(NotificationType.NEW_BOOKING, "00000000-0000-0000-0000-000000000000") is False
    assert mailoutbox == []


def test_mail_failure_is_logged_not_raised(approvers, booking, monkeypatch):
    def broken_send(*args, **kwargs):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr("apps.notifications.services.send_mail", broken_send)

    assert send_booking_notification(NotificationType.NEW_BOOKING.value, str(booking.id)) is False


def test_workflow_emails_after_commit(approvers, member, mailoutbox, django_capture_on_commit_callbacks):
    room = Room.objects.create(name="Boardroom", capacity=12)
    workflow = build_workflow()

    with django_capture_on_commit_callbacks(execute=True):
        created = workflow.create(room.id, member.id, "Budget", "", aware(11), aware(12))
    assert [m.to for m in mailoutbox] == [["approver@example.com"]]

    with django_capture_on_commit_callbacks(execute=True):
        workflow.set_status(created.id, BookingStatus.REJECTED, approvers.id)
    assert mailoutbox[-1].to == ["member@example.com"]
    assert "Rejected" in mailoutbox[-1].subject


def test_disabled_notifications_enqueue_nothing(settings, monkeypatch, booking):
    settings.BOOKING_NOTIFICATIONS_ENABLED = False
    calls = []
    monkeypatch.setattr(handlers.send_booking_notification, "delay", lambda *args: calls.append(args))

    handlers.enqueue_booking_notification(created_event(booking))

    assert calls == []


def test_broker_failure_does_not_propagate(monkeypatch, booking):
    def broken_delay(*args):
        raise OSError("broker unreachable")

    monkeypatch.setattr(handlers.send_booking_notification, "delay", broken_delay)

    handlers.enqueue_booking_notification(created_event(booking))
