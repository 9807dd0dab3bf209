"""Celery tasks for the finance domain."""

from __future__ import annotations

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from .services import previous_month, record_income_snapshot


@shared_task(name="finances.snapshot_previous_month_income")
def snapshot_previous_month_income() -> dict[str, str | int]:
    """
    Record last month's income.

    Runs on the first day of every month through Celery Beat. Running it
    again refreshes the same snapshot instead of creating a new one.

    Returns:
        dict: {"year", "month", "total_income", "payments_count"}
    """
    year, month = previous_month(timezone.localdate())
    snapshot = record_income_snapshot(year, month)
    return {
        "year": snapshot.year,
        "month": snapshot.month,
        "total_income": str(snapshot.total_income),
        "payments_count": snapshot.payments_count,
    }
