"""URL routing for data management endpoints."""

from django.urls import re_path  # type: ignore

from .views import ExportView, ImportView, TemplateView

KIND = r"(?P<kind>users|bookings)"

urlpatterns = [
    re_path(rf"^{KIND}/$", ImportView.as_view(), name="import-data"),
    re_path(rf"^{KIND}/export/$", ExportView.as_view(), name="export-data"),
    re_path(rf"^{KIND}/template/$", TemplateView.as_view(), name="import-template"),
]
