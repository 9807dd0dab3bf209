"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.bookings.application.command_handlers import BookingEngine, CreateBookingCommand
from apps.bookings.gateway import DjangoBookingGateway
from apps.homestays.models import Homestay, Promotion
from apps.users.models import User
from shared.application.message_bus import message_bus

FIXED_NOW = timezone.make_aware(datetime(2026, 3, 1, 12, 0))
CHECKIN = date(2026, 3, 10)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def engine():
    return BookingEngine(DjangoBookingGateway(), clock=lambda: FIXED_NOW)


@pytest.fixture
def homestay(db):
    return Homestay.objects.create(
        address="12 Hang Bac, Hanoi",
        description="Old quarter room",
        number_of_bed=1,
        capacity=2,
        price=Decimal("100.00"),
    )


@pytest.fixture
def guest(db):
    return User.objects.create_user(username="guest", password="GuestPass123")


@pytest.fixture
def other_guest(db):
    return User.objects.create_user(username="other", password="OtherPass123")


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username="manager",
        password="ManagerPass123",
        role=User.RoleChoices.ADMIN,
    )


@pytest.fixture
def promotion(db):
    return Promotion.objects.create(
        title="SPRING10",
        discount_percent=Decimal("10.00"),
        start_date=FIXED_NOW - timedelta(days=30),
        end_date=FIXED_NOW + timedelta(days=30),
    )


@pytest.fixture
def expired_promotion(db):
    return Promotion.objects.create(
        title="WINTER20",
        discount_percent=Decimal("20.00"),
        start_date=FIXED_NOW - timedelta(days=90),
        end_date=FIXED_NOW - timedelta(days=1),
    )


@pytest.fixture
def create_command():
    def build(user, homestay, **overrides):
        fields = {
            "username": user.username,
            "homestay_id": homestay.pk,
            "checkin_date": CHECKIN,
            "number_of_days": 3,
            "number_of_guests": 2,
        }
        fields.update(overrides)
        return CreateBookingCommand(**fields)

    return build


@pytest.fixture
def isolated_message_bus():
    """Message bus without the app handlers, restored afterwards."""
    saved = {event_type: list(handlers) for event_type, handlers in message_bus._event_handlers.items()}
    message_bus.clear()
    yield message_bus
    message_bus.clear()
    message_bus._event_handlers.update(saved)
