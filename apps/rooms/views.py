"""API views for the room catalogue."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import viewsets  # type: ignore

from apps.users.permissions import IsAdminRoleOrReadOnly

from .filters import RoomFilterSet
from .models import Room
from .serializers import RoomSerializer

logger = logging.getLogger(__name__)


class RoomViewSet(viewsets.ModelViewSet):
    """Everyone signed in can browse rooms; administrators manage them."""

    queryset = Room.objects.all()
    serializer_class = RoomSerializer
    permission_classes = [IsAdminRoleOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = RoomFilterSet

    def perform_create(self, serializer):  # type: ignore
        room = serializer.save()
        logger.info(f"Room {room.id} ({room.name}) created by {self.request.user.username}")

    def perform_update(self, serializer):  # type: ignore
        room = serializer.save()
        logger.info(f"Room {room.id} ({room.name}) updated by {self.request.user.username}")

    def perform_destroy(self, instance):  # type: ignore
        # Bookings keep their room reference; the FK carries no DB constraint
        logger.info(f"Room {instance.id} ({instance.name}) deleted by {self.request.user.username}")
        instance.delete()
