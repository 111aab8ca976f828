"""User domain models.

Members book rooms, approvers decide on pending requests and
administrators manage rooms and bulk data loads. ``username`` is the
stable natural key used when reconciling imported user lists.
"""

from __future__ import annotations

import uuid
from typing import Any

from django.contrib.auth.models import AbstractUser, UserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(UserManager):
    """User manager that assigns booking roles on creation."""

    use_in_migrations = True

    def create_user(self, username: str, email: str | None = None, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("role", CustomUser.RoleChoices.MEMBER)
        return super().create_user(username, email, password, **extra_fields)

    def create_superuser(self, username: str, email: str | None = None, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class CustomUser(AbstractUser):
    """A person who books rooms, reviews requests or administers the system."""

    class RoleChoices(models.TextChoices):
        MEMBER = "MEMBER", _("Member")
        APPROVER = "APPROVER", _("Approver")
        ADMIN = "ADMIN", _("Administrator")

    class StatusChoices(models.TextChoices):
        ACTIVE = "ACTIVE", _("Active")
        INACTIVE = "INACTIVE", _("Inactive")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    full_name = models.CharField(_("Full name"), max_length=255, blank=True)
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.MEMBER,
    )
    status = models.CharField(
        _("Status"),
        max_length=20,
        choices=StatusChoices.choices,
        default=StatusChoices.ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["role", "status"], name="user_role_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.username} ({self.get_role_display()})"

    def save(self, *args, **kwargs):  # type: ignore
        # Account status drives Django's own login switch
        self.is_active = self.status == self.StatusChoices.ACTIVE
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "status" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"is_active"}
        super().save(*args, **kwargs)

    # --- Domain helpers ------------------------------------------------------
    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    def is_approver(self) -> bool:
        return self.role == self.RoleChoices.APPROVER

    def is_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_superuser

    def is_reviewer(self) -> bool:
        return self.is_approver() or self.is_admin()


# Short alias
User = CustomUser
