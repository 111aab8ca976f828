"""Permission classes shared by the booking APIs."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def _is_admin(user) -> bool:  # type: ignore
    if not user or not user.is_authenticated:
        return False
    if getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_admin") and user.is_admin()


class IsAdminRole(permissions.BasePermission):
    """
    Permission class that only allows administrators.

    Used for data management endpoints (bulk import and export).
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _is_admin(request.user)


class IsAdminRoleOrReadOnly(permissions.BasePermission):
    """
    Allow administrators to write, but anyone authenticated can read.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False

        # Read-only for safe methods
        if request.method in permissions.SAFE_METHODS:
            return True

        return _is_admin(user)


class IsReviewer(permissions.BasePermission):
    """Approvers and administrators: the people who decide on requests."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        return hasattr(user, "is_reviewer") and user.is_reviewer()
