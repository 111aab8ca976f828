"""Bookings app package.

This app encapsulates the room booking domain: the booking model, the
interval conflict check, the approval workflow and the list queries.
Domain code lives in ``domain`` and ``application``; ``infrastructure``
holds the Django ORM and in-memory repositories.
"""
