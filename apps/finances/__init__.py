"""Finances app package.

Holds the payment created alongside every booking and the income
reporting used by administrators. Payments change state only inside
the booking engine's transactions.
"""
