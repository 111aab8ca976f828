"""Integration tests for room catalogue endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.rooms.models import Room
from apps.users.models import User


class RoomAPITests(APITestCase):
    """Members browse the catalogue, administrators manage it."""

    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            username="admin",
            password="AdminPass123",
            full_name="Ada Admin",
            role=User.RoleChoices.ADMIN,
        )
        self.member = User.objects.create_user(
            username="member",
            password="MemberPass123",
            full_name="Mia Member",
        )
        self.aurora = Room.objects.create(
            name="Aurora", location="Building 1", capacity=10, equipment="Projector",
        )
        self.hall = Room.objects.create(
            name="Lecture Hall", location="Building 2", capacity=50, equipment="Sound system",
        )
        self.closet = Room.objects.create(
            name="Focus Booth",
            location="Building 1",
            capacity=2,
            status=Room.Status.MAINTENANCE,
        )
        self.list_url = reverse("room-list")

    def _names(self, response) -> list[str]:
        return [room["name"] for room in response.data]

    def test_member_lists_rooms_by_name(self) -> None:
        self.client.force_authenticate(self.member)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self._names(response), ["Aurora", "Focus Booth", "Lecture Hall"])

    def test_filters(self) -> None:
        self.client.force_authenticate(self.member)

        by_capacity = self.client.get(self.list_url, {"min_capacity": 10})
        by_status = self.client.get(self.list_url, {"status": "MAINTENANCE"})
        by_search = self.client.get(self.list_url, {"search": "sound"})
        by_location = self.client.get(self.list_url, {"location": "building 1"})

        self.assertEqual(self._names(by_capacity), ["Aurora", "Lecture Hall"])
        self.assertEqual(self._names(by_status), ["Focus Booth"])
        self.assertEqual(self._names(by_search), ["Lecture Hall"])
        self.assertEqual(self._names(by_location), ["Aurora", "Focus Booth"])

    def test_member_cannot_create_room(self) -> None:
        self.client.force_authenticate(self.member)

        response = self.client.post(self.list_url, {"name": "Annex", "capacity": 4}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Room.objects.filter(name="Annex").exists())

    def test_admin_creates_and_updates_room(self) -> None:
        self.client.force_authenticate(self.admin)

        created = self.client.post(
            self.list_url,
            {"name": "  Annex  ", "location": "Building 3", "capacity": 4},
            format="json",
        )
        self.assertEqual(created.status_code, status.HTTP_201_CREATED, created.data)
        self.assertEqual(created.data["name"], "Annex")
        self.assertEqual(created.data["status"], "ACTIVE")

        detail_url = reverse("room-detail", args=[created.data["id"]])
        updated = self.client.patch(detail_url, {"status": "MAINTENANCE"}, format="json")
        self.assertEqual(updated.status_code, status.HTTP_200_OK, updated.data)
        self.assertEqual(Room.objects.get(name="Annex").status, Room.Status.MAINTENANCE)

    def test_capacity_must_be_positive(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.post(self.list_url, {"name": "Broom cupboard", "capacity": 0}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("capacity", response.data)

    def test_deleting_room_keeps_its_bookings(self) -> None:
        start = timezone.make_aware(datetime.combine(timezone.localdate() + timedelta(days=3), datetime.min.time())) + timedelta(hours=9)
        booking = Booking.objects.create(
            room=self.aurora,
            requester=self.member,
            title="Planning",
            start_at=start,
            end_at=start + timedelta(hours=1),
        )
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("room-detail", args=[self.aurora.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Room.objects.filter(pk=self.aurora.id).exists())
        self.assertTrue(Booking.objects.filter(pk=booking.pk).exists())

        self.client.force_authenticate(self.member)
        mine = self.client.get(reverse("booking-mine"))
        self.assertEqual(mine.data[0]["room_name"], "")
