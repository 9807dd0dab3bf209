"""Tests for income reporting and the monthly snapshot task."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.bookings.application.command_handlers import (
    BookingEngine,
    CheckoutBookingCommand,
    CreateBookingCommand,
)
from apps.bookings.gateway import DjangoBookingGateway
from apps.finances.models import IncomeSnapshot, Payment
from apps.finances.services import (
    monthly_income,
    previous_month,
    record_income_snapshot,
    total_income,
    unpaid_payments,
    yearly_income,
)
from apps.finances.tasks import snapshot_previous_month_income

pytestmark = pytest.mark.django_db


def _local(*args):
    return timezone.make_aware(datetime(*args))


def _book(user, homestay, at, checkout=True):
    engine = BookingEngine(DjangoBookingGateway(), clock=lambda: at)
    booking = engine.create_booking(CreateBookingCommand(
        username=user.username,
        homestay_id=homestay.pk,
        checkin_date=at.date(),
        number_of_days=3,
        number_of_guests=2,
    )).booking
    if checkout:
        engine.checkout_booking(CheckoutBookingCommand(
            username=user.username,
            homestay_id=homestay.pk,
            booking_id=booking.booking_id,
        ))
    return booking


def test_monthly_income_sums_paid_payments_in_the_month(guest, other_guest, homestay):
    _book(guest, homestay, _local(2026, 3, 1, 0, 0))
    _book(guest, homestay, _local(2026, 3, 31, 23, 30))
    _book(guest, homestay, _local(2026, 4, 1, 0, 0))
    _book(other_guest, homestay, _local(2026, 3, 15, 12, 0), checkout=False)

    report = monthly_income(2026, 3)

    assert report.total_income == Decimal("858.00")
    assert report.payments_count == 2
    assert report.to_dict()["start"] == "2026-03-01"
    assert report.to_dict()["end"] == "2026-03-31"


def test_yearly_and_range_income(guest, homestay):
    _book(guest, homestay, _local(2025, 12, 31, 10, 0))
    _book(guest, homestay, _local(2026, 2, 10, 10, 0))

    assert yearly_income(2026).total_income == Decimal("429.00")
    assert total_income(date(2025, 12, 31), date(2026, 2, 10)).payments_count == 2
    assert yearly_income(2024).total_income == Decimal("0.00")


def test_invalid_report_ranges_are_rejected():
    with pytest.raises(ValueError):
        total_income(date(2026, 3, 2), date(2026, 3, 1))
    with pytest.raises(ValueError):
        monthly_income(2026, 13)


def test_unpaid_payments_can_be_filtered_by_user(guest, other_guest, homestay):
    mine = _book(guest, homestay, _local(2026, 3, 1, 9, 0), checkout=False)
    _book(other_guest, homestay, _local(2026, 3, 20, 9, 0), checkout=False)

    assert unpaid_payments().count() == 2
    assert [payment.booking_id for payment in unpaid_payments("guest")] == [mine.booking_id]
    assert all(payment.status == Payment.Status.UNPAID for payment in unpaid_payments())


def test_snapshot_is_refreshed_not_duplicated(guest, homestay):
    _book(guest, homestay, _local(2026, 3, 5, 9, 0))
    record_income_snapshot(2026, 3)
    _book(guest, homestay, _local(2026, 3, 9, 9, 0))

    snapshot = record_income_snapshot(2026, 3)

    assert IncomeSnapshot.objects.count() == 1
    assert snapshot.total_income == Decimal("858.00")
    assert snapshot.payments_count == 2


def test_previous_month_wraps_the_year():
    assert previous_month(date(2026, 1, 15)) == (2025, 12)
    assert previous_month(date(2026, 3, 1)) == (2026, 2)


def test_snapshot_task_records_last_month(guest, homestay, monkeypatch):
    _book(guest, homestay, _local(2026, 2, 14, 9, 0))
    monkeypatch.setattr("apps.finances.tasks.timezone.localdate", lambda: date(2026, 3, 1))

    result = snapshot_previous_month_income()

    assert result == {"year": 2026, "month": 2, "total_income": "429.00", "payments_count": 1}
