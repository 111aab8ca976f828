"""Admin registration for rooms."""

from __future__ import annotations

from django.contrib import admin

from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "capacity", "status", "updated_at")
    list_filter = ("status", "location")
    search_fields = ("name", "location", "equipment")
    readonly_fields = ("created_at", "updated_at")
