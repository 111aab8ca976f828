"""Booking ORM models.

Domain rules live in ``apps.bookings.domain``; this model is the storage
shape the Django repository maps to and from.
"""

from __future__ import annotations

import uuid

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Booking(models.Model):
    """A request to occupy a room for a half-open time range."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending approval")
        APPROVED = "APPROVED", _("Approved")
        REJECTED = "REJECTED", _("Rejected")
        CANCELLED = "CANCELLED", _("Cancelled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Advisory reference: deleting a room keeps its historical bookings
    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        related_name="bookings",
    )
    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    title = models.CharField(_("Title"), max_length=255)
    purpose = models.TextField(_("Purpose"), blank=True)
    start_at = models.DateTimeField(_("Start"))
    end_at = models.DateTimeField(_("End"))
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    approver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_bookings",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_at__gt=models.F("start_at")),
                name="booking_valid_interval",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "start_at", "end_at"], name="booking_room_period_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.status})"
