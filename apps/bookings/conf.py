"""Booking settings with project-level overrides.

Values come from the ``HOMESTAY_BOOKING`` dict in Django settings and
fall back to the defaults below.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore

DEFAULTS: dict[str, Any] = {
    "SERVICE_FEE_PER_GUEST_NIGHT": Decimal("15"),
    "SURCHARGE_PER_EXTRA_GUEST": Decimal("10"),
    "TAX_RATE": Decimal("0.10"),
    "DEFAULT_PAY_METHOD": "cash",
    "BOOKING_CODE_LENGTH": 8,
    "MAX_NUMBER_OF_DAYS": 365,
    "MAX_NUMBER_OF_GUESTS": 50,
}

# Booking.tax is DecimalField(max_digits=4, decimal_places=3)
TAX_RATE_PLACES = 3
TAX_RATE_LIMIT = Decimal("10")


def _check_tax_rate(value: Decimal) -> Decimal:
    if (
        not value.is_finite()
        or not Decimal("0") <= value < TAX_RATE_LIMIT
        or -value.as_tuple().exponent > TAX_RATE_PLACES
    ):
        raise ImproperlyConfigured(
            f"HOMESTAY_BOOKING['TAX_RATE'] must be in [0, {TAX_RATE_LIMIT}) "
            f"with at most {TAX_RATE_PLACES} decimal places, got {value}"
        )
    return value


def booking_setting(name: str) -> Any:
    overrides = getattr(settings, "HOMESTAY_BOOKING", {}) or {}
    if name not in DEFAULTS:
        raise KeyError(f"Unknown booking setting: {name}")
    value = overrides.get(name, DEFAULTS[name])
    if isinstance(DEFAULTS[name], Decimal):
        try:
            value = Decimal(str(value))
        except InvalidOperation as exc:
            raise ImproperlyConfigured(f"HOMESTAY_BOOKING[{name!r}] is not a number: {value!r}") from exc
        if name == "TAX_RATE":
            return _check_tax_rate(value)
    return value
