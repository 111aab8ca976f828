"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "room",
        "requester",
        "status",
        "start_at",
        "end_at",
        "approver",
        "created_at",
    )
    list_filter = ("status", "start_at")
    list_select_related = ("room", "requester", "approver")
    search_fields = ("title", "purpose", "room__name", "requester__username", "requester__full_name")
    readonly_fields = ("created_at", "updated_at", "approver", "approved_at")
    date_hierarchy = "start_at"
