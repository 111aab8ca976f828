"""API views for the booking domain."""

from __future__ import annotations

import logging
from uuid import UUID

from django.http import Http404  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus

from apps.users.permissions import IsReviewer

from .application.command_handlers import ChangeBookingStatusCommand, CreateBookingCommand
from .application.queries import BookingQuery, bookings_for_user, pending_for_approval
from .bootstrap import get_repository
from .domain.entities import Booking, BookingStatus
from .domain.exceptions import (
    BookingAuthorizationError,
    BookingConflictError,
    BookingError,
    BookingNotFoundError,
    BookingPersistenceError,
    BookingTransitionError,
    BookingValidationError,
)
from .domain.repository import BookingFilter
from .serializers import BookingCreateSerializer, BookingSerializer

logger = logging.getLogger(__name__)


def booking_error_response(exc: BookingError) -> Response:
    """Map a workflow failure to its HTTP status."""
    if isinstance(exc, BookingValidationError):
        return Response(exc.as_dict(), status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, BookingAuthorizationError):
        return Response({"detail": exc.message}, status=status.HTTP_403_FORBIDDEN)
    if isinstance(exc, BookingNotFoundError):
        return Response({"detail": exc.message}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, (BookingConflictError, BookingTransitionError)):
        return Response({"detail": exc.message}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, BookingPersistenceError):
        return Response({"detail": exc.message}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({"detail": exc.message}, status=status.HTTP_400_BAD_REQUEST)


def _can_see_all(user) -> bool:  # type: ignore
    return hasattr(user, "is_reviewer") and user.is_reviewer()


class BookingViewSet(viewsets.ViewSet):
    """
    Booking requests and their review.

    Members see and cancel their own bookings; approvers and
    administrators see everything and decide on pending requests.
    """

    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, BookingError):
            return booking_error_response(exc)
        return super().handle_exception(exc)

    @property
    def repository(self):
        return get_repository()

    def _serialize(self, bookings: list[Booking]) -> Response:
        return Response(BookingSerializer(bookings, many=True).data)

    def _visible_bookings(self) -> list[Booking]:
        user = self.request.user
        if _can_see_all(user):
            return self.repository.list_bookings()
        return self.repository.list_bookings(BookingFilter(user_id=user.pk))

    def list(self, request):  # type: ignore
        query = BookingQuery.from_params(request.query_params)
        return self._serialize(query.apply(self._visible_bookings()))

    def retrieve(self, request, pk=None):  # type: ignore
        booking = self.repository.get_booking(UUID(pk))
        if not (_can_see_all(request.user) or booking.is_owned_by(request.user.pk)):
            raise Http404
        return Response(BookingSerializer(booking).data)

    def create(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = message_bus.handle_command(CreateBookingCommand(
            room_id=data["room"],
            requester_id=request.user.pk,
            title=data["title"],
            purpose=data["purpose"],
            start=data["start"],
            end=data["end"],
        ))
        logger.info(f"User {request.user.pk} requested booking {booking.id}")
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def _set_status(self, request, pk, new_status: BookingStatus) -> Response:  # type: ignore
        booking = message_bus.handle_command(ChangeBookingStatusCommand(
            booking_id=UUID(pk),
            new_status=new_status,
            actor_id=request.user.pk,
        ))
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        return self._set_status(request, pk, BookingStatus.APPROVED)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        return self._set_status(request, pk, BookingStatus.REJECTED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        return self._set_status(request, pk, BookingStatus.CANCELLED)

    @action(detail=False, methods=["get"], permission_classes=[IsReviewer])
    def pending(self, request):  # type: ignore
        bookings = self.repository.list_bookings(BookingFilter(status=BookingStatus.PENDING))
        return self._serialize(pending_for_approval(bookings))

    @action(detail=False, methods=["get"])
    def mine(self, request):  # type: ignore
        bookings = self.repository.list_bookings(BookingFilter(user_id=request.user.pk))
        return self._serialize(bookings_for_user(bookings, request.user.pk))
