"""Integration tests for dashboard figures."""

from __future__ import annotations

from datetime import datetime, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.rooms.models import Room
from apps.users.models import User


class DashboardSummaryAPITests(APITestCase):
    def setUp(self) -> None:
        self.member = User.objects.create_user(username="member", password="pass", full_name="Mia Member")
        self.other = User.objects.create_user(username="other", password="pass", full_name="Oscar Other")
        self.approver = User.objects.create_user(
            username="approver",
            password="pass",
            full_name="Avery Approver",
            role=User.RoleChoices.APPROVER,
        )
        aurora = Room.objects.create(name="Aurora", capacity=8)
        hall = Room.objects.create(name="Hall", capacity=40)
        start = timezone.make_aware(datetime(2030, 6, 3, 9))

        def book(room, requester, title, offset, booking_status=Booking.Status.PENDING):
            return Booking.objects.create(
                room=room,
                requester=requester,
                title=title,
                start_at=start + timedelta(hours=offset),
                end_at=start + timedelta(hours=offset + 1),
                status=booking_status,
            )

        book(aurora, self.member, "Standup", 0, Booking.Status.APPROVED)
        book(aurora, self.member, "Planning", 1)
        book(hall, self.other, "Town hall", 0)
        orphan_room = Room.objects.create(name="Temporary", capacity=4)
        book(orphan_room, self.other, "Pop-up", 2, Booking.Status.REJECTED)
        orphan_room.delete()
        self.url = reverse("analytics-summary")

    def test_reviewers_see_system_wide_figures(self) -> None:
        self.client.force_authenticate(self.approver)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total_bookings"], 4)
        self.assertEqual(response.data["pending_count"], 2)
        self.assertEqual(response.data["top_rooms"][0], {"name": "Aurora", "count": 2})
        self.assertIn({"name": "Unassigned", "count": 1}, response.data["top_rooms"])

    def test_members_see_their_own_figures(self) -> None:
        self.client.force_authenticate(self.member)

        response = self.client.get(self.url)

        self.assertEqual(response.data["total_bookings"], 2)
        self.assertEqual(response.data["pending_count"], 1)
        self.assertEqual(response.data["top_rooms"], [{"name": "Aurora", "count": 2}])

    def test_requires_authentication(self) -> None:
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
