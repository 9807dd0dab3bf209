"""Bookings app package.

This app holds the booking transaction engine: creating, cancelling and
checking out bookings as single atomic units of work that keep homestay
availability, the user's booking flag and the payment state consistent.
Overlapping stays are rejected by an overlap query and, under
concurrency, by the unique (homestay, night) constraint.
"""
