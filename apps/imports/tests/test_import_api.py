"""Integration tests for the data management endpoints."""

from __future__ import annotations

from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class ImportAPITests(APITestCase):
    """Upload, export and template downloads are for administrators only."""

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
        self.client.force_authenticate(self.admin)

    def _upload(self, content: str, **extra):
        upload = SimpleUploadedFile("users.csv", content.encode("utf-8"), content_type="text/csv")
        return self.client.post(
            reverse("import-data", args=["users"]),
            {"file": upload, **extra},
            format="multipart",
        )

    def test_admin_imports_users_with_partial_failures(self) -> None:
        response = self._upload(
            "username,full_name,email\n"
            "bob,Bob Jones,bob@example.com\n"
            "carol,,carol@example.com\n"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["success_count"], 1)
        self.assertEqual(response.data["failed_count"], 1)
        self.assertEqual(response.data["errors"], ["carol: missing required field(s): full_name"])
        self.assertTrue(User.objects.filter(username="bob").exists())

    def test_missing_file_is_a_bad_request(self) -> None:
        response = self.client.post(reverse("import-data", args=["users"]), {}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("file", response.data)

    def test_malformed_file_is_a_bad_request(self) -> None:
        response = self._upload("")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("file", response.data)

    def test_members_cannot_import(self) -> None:
        self.client.force_authenticate(self.member)

        response = self._upload("username,full_name\nbob,Bob Jones\n")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(User.objects.filter(username="bob").exists())

    def test_export_users_as_csv_attachment(self) -> None:
        response = self.client.get(reverse("export-data", args=["users"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Content-Type"], "text/csv; charset=utf-8")
        self.assertIn('attachment; filename="users_export_', response["Content-Disposition"])
        body = response.content.decode("utf-8")
        self.assertTrue(body.startswith("id,username,email,full_name,role,status,created_at"))
        self.assertIn("member", body)

    def test_booking_template_lists_import_columns(self) -> None:
        response = self.client.get(reverse("import-template", args=["bookings"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Content-Disposition"], 'attachment; filename="bookings_template.csv"')
        header = response.content.decode("utf-8").splitlines()[0]
        self.assertEqual(
            header,
            "room_id,user_id,title,purpose,start_datetime,end_datetime,status,approver_id,approved_at",
        )
