"""Booking models for the homestay platform."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import DateRange

from .conf import booking_setting
from .domain.pricing import PricingBreakdown, calculate_pricing


class Booking(models.Model):
    """Reservation of one homestay for one date range by one user."""

    class Status(models.TextChoices):
        VALIDATED = "validated", _("Validated")
        CANCEL = "cancel", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    booking_id = models.CharField(max_length=16, primary_key=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    homestay = models.ForeignKey(
        "homestays.Homestay",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    promotion = models.ForeignKey(
        "homestays.Promotion",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
        help_text=_("Empty when the booking was made without a promotion code."),
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.VALIDATED)
    booking_date = models.DateTimeField(default=timezone.now)
    checkin_date = models.DateField(
        null=True,
        blank=True,
        help_text=_("Cleared when the booking is cancelled."),
    )
    checkout_date = models.DateField(
        null=True,
        blank=True,
        help_text=_("Exclusive. Cleared when the booking is cancelled."),
    )
    number_of_days = models.PositiveSmallIntegerField()
    number_of_guest = models.PositiveSmallIntegerField()
    service_fee = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    tax = models.DecimalField(
        max_digits=4,
        decimal_places=3,
        default=Decimal("0.10"),
        help_text=_("Tax rate fixed when the booking was created."),
    )
    discount = models.DecimalField(
        max_digits=6,
        decimal_places=4,
        default=Decimal("0"),
        help_text=_("Promotion discount rate fixed when the booking was created."),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-booking_date"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(checkin_date__isnull=True, checkout_date__isnull=True)
                    | models.Q(checkout_date__gt=models.F("checkin_date"))
                ),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=~models.Q(status="validated", checkin_date__isnull=True),
                name="validated_booking_has_dates",
            ),
        ]
        indexes = [
            models.Index(
                fields=["homestay", "status", "checkin_date", "checkout_date"],
                name="booking_homestay_dates_idx",
            ),
            models.Index(fields=["user", "status"], name="booking_user_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.booking_id} ({self.status})"

    @property
    def stay(self) -> DateRange | None:
        if self.checkin_date is None or self.checkout_date is None:
            return None
        return DateRange(self.checkin_date, self.checkout_date)

    @property
    def is_validated(self) -> bool:
        return self.status == self.Status.VALIDATED

    def pricing(self) -> PricingBreakdown:
        """Recompute the price breakdown from the values fixed on this booking."""
        return calculate_pricing(
            number_of_days=self.number_of_days,
            number_of_guests=self.number_of_guest,
            price=self.homestay.price,
            capacity=self.homestay.capacity,
            tax_rate=self.tax,
            discount=self.discount,
            service_fee=self.service_fee,
            surcharge_per_guest=booking_setting("SURCHARGE_PER_EXTRA_GUEST"),
        )


class BookedNight(models.Model):
    """
    One occupied night of a validated booking.

    The unique (homestay, night) pair stops two validated bookings from
    sharing a night even when two requests pass the overlap check at the
    same time. Rows are removed when their booking is cancelled or completed.
    """

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="nights")
    homestay = models.ForeignKey(
        "homestays.Homestay",
        on_delete=models.PROTECT,
        related_name="booked_nights",
    )
    night = models.DateField()

    class Meta:
        verbose_name = _("Booked night")
        verbose_name_plural = _("Booked nights")
        ordering = ["homestay", "night"]
        constraints = [
            models.UniqueConstraint(fields=["homestay", "night"], name="unique_homestay_night"),
        ]

    def __str__(self) -> str:
        return f"{self.homestay_id} @ {self.night} ({self.booking_id})"
