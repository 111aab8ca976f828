"""FilterSet definitions for the room catalogue."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Room


class RoomFilterSet(django_filters.FilterSet):
    """Filters used by the room list and the booking form's room picker."""

    status = django_filters.ChoiceFilter(field_name="status", choices=Room.Status.choices)
    location = django_filters.CharFilter(field_name="location", lookup_expr="icontains")
    min_capacity = django_filters.NumberFilter(field_name="capacity", lookup_expr="gte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Room
        fields = ["status", "location"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(location__icontains=value) | Q(equipment__icontains=value)
        )
