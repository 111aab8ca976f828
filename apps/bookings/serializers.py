"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class BookingSerializer(serializers.Serializer):
    """Read representation of a domain Booking."""

    id = serializers.UUIDField(read_only=True)
    room_id = serializers.UUIDField(read_only=True, allow_null=True)
    room_name = serializers.CharField(read_only=True)
    requester_id = serializers.UUIDField(read_only=True)
    requester_name = serializers.CharField(read_only=True)
    title = serializers.CharField(read_only=True)
    purpose = serializers.CharField(read_only=True)
    start = serializers.DateTimeField(read_only=True)
    end = serializers.DateTimeField(read_only=True)
    status = serializers.CharField(source="status.value", read_only=True)
    approver_id = serializers.UUIDField(read_only=True, allow_null=True)
    approved_at = serializers.DateTimeField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from the signed-in member."""

    room = serializers.UUIDField()
    title = serializers.CharField(max_length=255)
    purpose = serializers.CharField(required=False, allow_blank=True, default="")
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()


class DashboardSummarySerializer(serializers.Serializer):
    total_bookings = serializers.IntegerField()
    pending_count = serializers.IntegerField()
    top_rooms = serializers.ListField(child=serializers.DictField())
