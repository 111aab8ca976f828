"""Serializers for the room catalogue."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    """Room card shown in the catalogue and managed by administrators."""

    capacity = serializers.IntegerField(min_value=1)

    class Meta:
        model = Room
        fields = [
            "id",
            "name",
            "location",
            "capacity",
            "equipment",
            "image_url",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Room name is required.")
        return value
