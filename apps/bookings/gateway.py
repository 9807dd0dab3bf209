"""Persistence gateway used by the booking engine.

Plain reads and writes for homestays, users, promotions, bookings and
payments, plus the date-range overlap query. No business rules live
here; the engine decides what to do with what it reads.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol

from django.contrib.auth import get_user_model  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.finances.models import Payment
from apps.homestays.models import Homestay, Promotion
from shared.domain.errors import DateRangeConflict, NotFound
from shared.domain.value_objects import DateRange

from .models import BookedNight, Booking


class BookingGateway(Protocol):
    """Everything the booking engine needs from storage."""

    def get_homestay(self, homestay_id: int, *, lock: bool = False) -> Homestay: ...

    def get_user(self, username: str, *, lock: bool = False): ...

    def get_promotion(self, code: str) -> Promotion: ...

    def get_booking(self, booking_id: str, *, lock: bool = False) -> Booking: ...

    def get_payment_for_booking(self, booking_id: str, *, lock: bool = False) -> Payment: ...

    def booking_id_exists(self, booking_id: str) -> bool: ...

    def find_bookings_for_homestay_in_range(self, homestay_id: int, start: date, end: date) -> list[Booking]: ...

    def insert_booking(self, **fields) -> Booking: ...

    def insert_payment(self, booking: Booking, amount: Decimal) -> Payment: ...

    def save_booking(self, booking: Booking, update_fields: list[str]) -> None: ...

    def release_nights(self, booking: Booking) -> None: ...

    def save_payment(self, payment: Payment, update_fields: list[str]) -> None: ...

    def set_user_booking_flag(self, user, is_booking: bool) -> None: ...


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class DjangoBookingGateway:
    """``BookingGateway`` backed by the Django ORM."""

    def _get(self, queryset, entity: str, key, lock: bool):
        if lock:
            queryset = _lock_queryset_if_possible(queryset)
        obj = queryset.first()
        if obj is None:
            raise NotFound(entity, key)
        return obj

    # --- Lookups ---------------------------------------------------------

    def get_homestay(self, homestay_id: int, *, lock: bool = False) -> Homestay:
        return self._get(Homestay.objects.filter(pk=homestay_id), "homestay", homestay_id, lock)

    def get_user(self, username: str, *, lock: bool = False):
        user_model = get_user_model()
        return self._get(user_model.objects.filter(username=username), "user", username, lock)

    def get_promotion(self, code: str) -> Promotion:
        return self._get(Promotion.objects.filter(title=code), "promotion", code, False)

    def get_booking(self, booking_id: str, *, lock: bool = False) -> Booking:
        return self._get(Booking.objects.filter(pk=booking_id), "booking", booking_id, lock)

    def get_payment_for_booking(self, booking_id: str, *, lock: bool = False) -> Payment:
        return self._get(Payment.objects.filter(booking_id=booking_id), "payment", booking_id, lock)

    def booking_id_exists(self, booking_id: str) -> bool:
        return Booking.objects.filter(pk=booking_id).exists()

    def find_bookings_for_homestay_in_range(self, homestay_id: int, start: date, end: date) -> list[Booking]:
        """Validated bookings whose [checkin, checkout) intersects [start, end)."""
        qs = Booking.objects.filter(
            homestay_id=homestay_id,
            status=Booking.Status.VALIDATED,
            checkin_date__lt=end,
            checkout_date__gt=start,
        )
        return list(_lock_queryset_if_possible(qs))

    # --- Writes ----------------------------------------------------------

    def insert_booking(self, **fields) -> Booking:
        """
        Insert a validated booking and claim each of its nights.

        A constraint violation means a concurrent booking won the same
        nights; it is reported as ``DateRangeConflict``.
        """
        try:
            with transaction.atomic():
                booking = Booking.objects.create(**fields)
                BookedNight.objects.bulk_create(
                    BookedNight(booking=booking, homestay_id=booking.homestay_id, night=night)
                    for night in DateRange(booking.checkin_date, booking.checkout_date).nights()
                )
        except IntegrityError as exc:
            raise DateRangeConflict(
                f"Homestay {fields.get('homestay_id', fields.get('homestay'))} has been booked "
                f"in this time (constraint: {exc})"
            ) from exc
        return booking

    def insert_payment(self, booking: Booking, amount: Decimal) -> Payment:
        return Payment.objects.create(
            booking=booking,
            amount=amount,
            status=Payment.Status.UNPAID,
        )

    def save_booking(self, booking: Booking, update_fields: list[str]) -> None:
        booking.save(update_fields=[*update_fields, "updated_at"])

    def release_nights(self, booking: Booking) -> None:
        BookedNight.objects.filter(booking=booking).delete()

    def save_payment(self, payment: Payment, update_fields: list[str]) -> None:
        payment.save(update_fields=[*update_fields, "updated_at"])

    def set_user_booking_flag(self, user, is_booking: bool) -> None:
        user.is_booking = is_booking
        user.save(update_fields=["is_booking", "updated_at"])
