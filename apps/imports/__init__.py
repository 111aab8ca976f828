"""Imports app package.

Bulk CSV loads of users and bookings, CSV exports and templates. Each
row is validated and reconciled on its own, so one bad row never aborts
a batch.
"""
