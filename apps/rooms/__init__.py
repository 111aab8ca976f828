"""Rooms app package.

Meeting rooms that members can book. Administrators manage them through
the API and the Django admin.
"""
