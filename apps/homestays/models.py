"""Homestay and promotion models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Homestay(models.Model):
    """A homestay listed for nightly rental."""

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        BOOKED = "booked", _("Booked")
        UNAVAILABLE = "unavailable", _("Unavailable")

    description = models.TextField(blank=True)
    address = models.CharField(max_length=255)
    number_of_bed = models.PositiveSmallIntegerField(default=1)
    capacity = models.PositiveSmallIntegerField(
        default=1,
        help_text=_("Guests included in the nightly price."),
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Price per night."),
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    main_image = models.URLField(blank=True)
    first_image = models.URLField(blank=True)
    second_image = models.URLField(blank=True)
    third_image = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Homestay")
        verbose_name_plural = _("Homestays")
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="homestay_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"Homestay #{self.pk} ({self.address})"

    @property
    def is_available(self) -> bool:
        return self.status == self.Status.AVAILABLE


class Promotion(models.Model):
    """Percentage discount code valid until ``end_date``."""

    title = models.CharField(max_length=100, unique=True, help_text=_("Code entered by the guest."))
    description = models.TextField(blank=True)
    discount_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("99.99"))],
    )
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField()

    class Meta:
        verbose_name = _("Promotion")
        verbose_name_plural = _("Promotions")
        ordering = ["-end_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(discount_percent__gte=0) & models.Q(discount_percent__lt=100),
                name="promotion_discount_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} (-{self.discount_percent}%)"

    def is_valid_at(self, moment: datetime) -> bool:
        return moment <= self.end_date

    @property
    def discount(self) -> Decimal:
        """Discount as a rate in [0, 1)"""
        return self.discount_percent / Decimal("100")
