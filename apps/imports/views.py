"""Admin endpoints for bulk import, export and CSV templates."""

from __future__ import annotations

import io
import logging

from django.conf import settings  # type: ignore
from django.http import HttpResponse  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.parsers import FormParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.bootstrap import get_repository
from apps.users.permissions import IsAdminRole

from .exporters import export_csv, export_filename, template_filename, write_template
from .importer import ReconciliationImporter
from .parsers import ImportParseError

logger = logging.getLogger(__name__)


def _csv_response(content: str, filename: str) -> HttpResponse:
    response = HttpResponse(content, content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


def _as_bool(value, default: bool) -> bool:
    if value in (None, ""):
        return default
    return str(value).lower() in ("1", "true", "yes", "on")


class ImportView(APIView):
    """Upload a CSV file (multipart field ``file``) and reconcile it row by row."""

    permission_classes = [IsAdminRole]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, kind: str):  # type: ignore
        upload = request.FILES.get("file")
        if upload is None:
            return Response({"file": ["A CSV file is required."]}, status=status.HTTP_400_BAD_REQUEST)

        check_conflicts = _as_bool(request.data.get("check_conflicts"), settings.IMPORT_CHECK_CONFLICTS)
        importer = ReconciliationImporter(get_repository(), check_conflicts=check_conflicts)
        try:
            result = importer.import_csv(kind, upload.read())
        except ImportParseError as exc:
            return Response({"file": [str(exc)]}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(
            f"User {request.user.pk} imported {kind}: "
            f"{result.success_count} ok, {result.failed_count} failed"
        )
        return Response(result.as_dict(), status=status.HTTP_200_OK)


class ExportView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request, kind: str):  # type: ignore
        buffer = io.StringIO()
        export_csv(kind, buffer)
        return _csv_response(buffer.getvalue(), export_filename(kind))


class TemplateView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request, kind: str):  # type: ignore
        buffer = io.StringIO()
        write_template(kind, buffer)
        return _csv_response(buffer.getvalue(), template_filename(kind))
