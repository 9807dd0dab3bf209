"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
They are recorded inside the unit of work and published after commit.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A new booking was validated and its payment is awaiting checkout

    Triggers:
    - Booking audit entry (Celery task)
    """
    booking_id: str
    username: str
    homestay_id: int
    checkin_date: date
    checkout_date: date
    total_amount: Decimal


@dataclass
class BookingCancelled(DomainEvent):
    """
    Event: The guest cancelled before checkout; the dates are free again
    """
    booking_id: str
    username: str
    homestay_id: int


@dataclass
class BookingCheckedOut(DomainEvent):
    """
    Event: The booking was completed and its payment settled
    """
    booking_id: str
    username: str
    homestay_id: int
    amount: Decimal
    pay_method: str
