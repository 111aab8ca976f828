"""Notification services for booking emails."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from apps.bookings.domain.events import NotificationType
from apps.bookings.models import Booking
from apps.users.models import CustomUser

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipients: "Sequence[str]",
    subject: str,
    html_message: str,
    text_message: str | None = None,
) -> bool:
    """
    Send one email to all recipients.

    Returns:
        bool: True if the message was handed to the mail backend
    """
    try:
        send_mail(
            subject=subject,
            message=text_message or strip_tags(html_message),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=list(recipients),
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {len(recipients)} recipient(s): {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email '{subject}': {e}", exc_info=True)
        return False


def _format_datetime(value) -> str:
    return timezone.localtime(value).strftime("%d.%m.%Y %H:%M")


def _site_link(path: str) -> str:
    return f"{settings.SITE_URL.rstrip('/')}{path}"


def approver_emails() -> list[str]:
    """Addresses of active approvers; accounts without email are skipped."""
    return list(
        CustomUser.objects.filter(
            role=CustomUser.RoleChoices.APPROVER,
            status=CustomUser.StatusChoices.ACTIVE,
        )
        .exclude(email="")
        .order_by("username")
        .values_list("email", flat=True)
    )


def _render_email(template_name: str, context: dict) -> tuple[str, str]:
    """Render the HTML and plain-text parts of one email."""
    html_message = render_to_string(f"notifications/{template_name}.html", context)
    text_message = render_to_string(f"notifications/{template_name}.txt", context)
    return html_message, text_message


def _booking_context(booking: Booking) -> dict:
    return {
        "title": booking.title,
        "purpose": booking.purpose,
        "room_name": booking.room.name if booking.room else "Unassigned",
        "requester_name": booking.requester.display_name,
        "start": _format_datetime(booking.start_at),
        "end": _format_datetime(booking.end_at),
    }


def build_new_booking_email(booking: Booking) -> tuple[str, str, str]:
    subject = f"[Meeting rooms] New booking request: {booking.title}"
    context = _booking_context(booking)
    context["link"] = _site_link("/approval")
    return (subject, *_render_email("new_booking", context))


def build_status_update_email(booking: Booking) -> tuple[str, str, str]:
    status_text = booking.get_status_display()
    subject = f"[Meeting rooms] Booking {booking.title}: {status_text}"
    context = _booking_context(booking)
    context.update(status=status_text, link=_site_link("/my-bookings"))
    return (subject, *_render_email("status_update", context))


class NotificationDispatcher:
    """
    Resolves recipients and content for a booking notification.

    NEW_BOOKING goes to every active approver with an email address,
    BOOKING_STATUS_UPDATE goes to the requester.
    """

    def dispatch(self, notification_type: NotificationType, booking_id) -> bool:
        booking = (
            Booking.objects.select_related("room", "requester")
            .filter(pk=booking_id)
            .first()
        )
        if booking is None:
            logger.warning(f"Booking {booking_id} vanished before {notification_type.value} was sent")
            return False

        if notification_type == NotificationType.NEW_BOOKING:
            recipients = approver_emails()
            subject, html_message, text_message = build_new_booking_email(booking)
        else:
            recipients = [booking.requester.email] if booking.requester.email else []
            subject, html_message, text_message = build_status_update_email(booking)

        if not recipients:
            logger.info(f"No recipients for {notification_type.value} of booking {booking.id}")
            return False

        return send_email_notification(recipients, subject, html_message, text_message)
