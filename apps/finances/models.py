"""Financial domain models for the homestay platform."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """The single payment record of a booking."""

    class Status(models.TextChoices):
        UNPAID = "unpaid", _("Unpaid")
        PAID = "paid", _("Paid")
        INVALIDATED = "invalidated", _("Invalidated")

    class Method(models.TextChoices):
        CASH = "cash", _("Cash")
        CARD = "card", _("Bank card")
        TRANSFER = "transfer", _("Bank transfer")

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="payment",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.UNPAID)
    pay_date = models.DateTimeField(null=True, blank=True)
    pay_method = models.CharField(max_length=20, choices=Method.choices, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gte=0),
                name="payment_amount_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "pay_date"], name="payment_status_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Payment {self.booking_id} ({self.status})"


class IncomeSnapshot(models.Model):
    """Income of one calendar month, recorded by the periodic Celery task."""

    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()
    total_income = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    payments_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Income snapshot")
        verbose_name_plural = _("Income snapshots")
        ordering = ["-year", "-month"]
        constraints = [
            models.UniqueConstraint(fields=["year", "month"], name="unique_income_snapshot_month"),
        ]

    def __str__(self) -> str:
        return f"{self.year}-{self.month:02d}: {self.total_income}"
