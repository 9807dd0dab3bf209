"""Income reporting services."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.db.models import Count, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from .models import IncomeSnapshot, Payment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomeReport:
    start: date
    end: date
    total_income: Decimal
    payments_count: int

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "total_income": str(self.total_income),
            "payments_count": self.payments_count,
        }


def _day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Aware datetimes covering ``start`` 00:00 up to (not including) the day after ``end``."""
    tz = timezone.get_current_timezone()
    lower = timezone.make_aware(datetime.combine(start, time.min), tz)
    upper = timezone.make_aware(datetime.combine(end + timedelta(days=1), time.min), tz)
    return lower, upper


def total_income(start: date, end: date) -> IncomeReport:
    """
    Sum of paid payments whose ``pay_date`` falls within ``start``..``end``.

    Both bounds are inclusive calendar days in the current time zone.
    """
    if start > end:
        raise ValueError("Report start must not be after its end")

    lower, upper = _day_bounds(start, end)
    aggregate = Payment.objects.filter(
        status=Payment.Status.PAID,
        pay_date__gte=lower,
        pay_date__lt=upper,
    ).aggregate(total=Sum("amount"), count=Count("id"))

    return IncomeReport(
        start=start,
        end=end,
        total_income=aggregate["total"] or Decimal("0.00"),
        payments_count=aggregate["count"] or 0,
    )


def monthly_income(year: int, month: int) -> IncomeReport:
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return total_income(date(year, month, 1), date(year, month, last_day))


def yearly_income(year: int) -> IncomeReport:
    return total_income(date(year, 1, 1), date(year, 12, 31))


def unpaid_payments(username: str | None = None):
    """Unpaid payments, optionally restricted to the bookings of one user."""
    qs = Payment.objects.select_related("booking", "booking__user", "booking__homestay").filter(
        status=Payment.Status.UNPAID,
    )
    if username is not None:
        qs = qs.filter(booking__user__username=username)
    return qs.order_by("created_at")


def record_income_snapshot(year: int, month: int) -> IncomeSnapshot:
    """Store (or refresh) the income of a finished month."""
    report = monthly_income(year, month)
    snapshot, created = IncomeSnapshot.objects.update_or_create(
        year=year,
        month=month,
        defaults={
            "total_income": report.total_income,
            "payments_count": report.payments_count,
        },
    )
    logger.info(
        f"{'Recorded' if created else 'Refreshed'} income snapshot {year}-{month:02d}: "
        f"{report.total_income} from {report.payments_count} payments"
    )
    return snapshot


def previous_month(today: date) -> tuple[int, int]:
    first = today.replace(day=1)
    last_of_previous = first - timedelta(days=1)
    return last_of_previous.year, last_of_previous.month
