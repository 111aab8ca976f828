"""Message bus handlers that turn booking events into notification tasks."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore

from apps.bookings.domain.events import BookingCreated, BookingStatusChanged
from shared.application.message_bus import MessageBus

from .tasks import send_booking_notification

logger = logging.getLogger(__name__)


def enqueue_booking_notification(event: BookingCreated | BookingStatusChanged) -> None:
    if not getattr(settings, "BOOKING_NOTIFICATIONS_ENABLED", True):
        logger.debug(f"Notifications disabled, skipping {event.notification_type.value}")
        return

    try:
        send_booking_notification.delay(event.notification_type.value, str(event.booking_id))
        logger.info(f"Queued {event.notification_type.value} notification: {event.to_dict()}")
    except Exception as exc:
        # Broker unavailable: the booking change stands, the email is lost
        logger.error(
            f"Could not enqueue {event.notification_type.value} for booking {event.booking_id}: {exc}",
            exc_info=True,
        )


def register_handlers(bus: MessageBus) -> None:
    bus.register_event_handler(BookingCreated, enqueue_booking_notification)
    bus.register_event_handler(BookingStatusChanged, enqueue_booking_notification)
