"""Notifications app package.

Delivers booking notifications by email. Domain events published on the
message bus enqueue a Celery task, so delivery never blocks or reverts
a booking change.
"""
