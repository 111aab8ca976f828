"""Room models.

Rooms are created, edited and archived by administrators. Deleting a
room keeps the historical bookings that reference it.
"""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Room(models.Model):
    """A shared meeting room members can reserve."""

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", _("Active")
        MAINTENANCE = "MAINTENANCE", _("Under maintenance")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("Name"), max_length=255)
    location = models.CharField(_("Location"), max_length=255, blank=True)
    capacity = models.PositiveIntegerField(_("Capacity"), default=1)
    equipment = models.TextField(_("Equipment"), blank=True)
    image_url = models.URLField(_("Image URL"), max_length=500, blank=True)
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gt=0),
                name="room_positive_capacity",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.location})" if self.location else self.name

    @property
    def is_bookable(self) -> bool:
        return self.status == self.Status.ACTIVE
