"""API views for analytics.

Dashboard figures for the booking system: total bookings, requests
waiting for review and the most booked rooms.
"""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.application.queries import summarize
from apps.bookings.bootstrap import get_repository
from apps.bookings.domain.exceptions import BookingError
from apps.bookings.domain.repository import BookingFilter
from apps.bookings.serializers import DashboardSummarySerializer
from apps.bookings.views import booking_error_response


class DashboardSummaryView(APIView):
    """Return dashboard figures for the whole system or the member's own bookings."""

    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):  # type: ignore
        user = request.user
        # Approvers and administrators see all bookings, members only their own
        if hasattr(user, "is_reviewer") and user.is_reviewer():
            booking_filter = None
        else:
            booking_filter = BookingFilter(user_id=user.pk)

        try:
            bookings = get_repository().list_bookings(booking_filter)
        except BookingError as exc:
            return booking_error_response(exc)

        summary = summarize(bookings)
        return Response(DashboardSummarySerializer(summary.as_dict()).data)
