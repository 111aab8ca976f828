"""Celery tasks for booking notifications."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from apps.bookings.domain.events import NotificationType

from .services import NotificationDispatcher

logger = logging.getLogger(__name__)


@shared_task(name="notifications.send_booking_notification")
def send_booking_notification(notification_type: str, booking_id: str) -> bool:
    """Deliver one booking notification. Failures are logged, never raised."""
    try:
        return NotificationDispatcher().dispatch(NotificationType(notification_type), booking_id)
    except Exception as exc:
        logger.error(
            f"Notification {notification_type} for booking {booking_id} failed: {exc}",
            exc_info=True,
        )
        return False
