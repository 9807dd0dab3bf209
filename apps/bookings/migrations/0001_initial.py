from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("homestays", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("booking_id", models.CharField(editable=False, max_length=16, primary_key=True, serialize=False)),
                (
                    "status",
                    models.CharField(
                        choices=[("validated", "Validated"), ("cancel", "Cancelled"), ("completed", "Completed")],
                        default="validated",
                        max_length=20,
                    ),
                ),
                ("booking_date", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "checkin_date",
                    models.DateField(blank=True, help_text="Cleared when the booking is cancelled.", null=True),
                ),
                (
                    "checkout_date",
                    models.DateField(
                        blank=True, help_text="Exclusive. Cleared when the booking is cancelled.", null=True
                    ),
                ),
                ("number_of_days", models.PositiveSmallIntegerField()),
                ("number_of_guest", models.PositiveSmallIntegerField()),
                ("service_fee", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                (
                    "tax",
                    models.DecimalField(
                        decimal_places=3,
                        default=Decimal("0.10"),
                        help_text="Tax rate fixed when the booking was created.",
                        max_digits=4,
                    ),
                ),
                (
                    "discount",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0"),
                        help_text="Promotion discount rate fixed when the booking was created.",
                        max_digits=6,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "homestay",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="homestays.homestay",
                    ),
                ),
                (
                    "promotion",
                    models.ForeignKey(
                        blank=True,
                        help_text="Empty when the booking was made without a promotion code.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to="homestays.promotion",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-booking_date"],
                "indexes": [
                    models.Index(
                        fields=["homestay", "status", "checkin_date", "checkout_date"],
                        name="booking_homestay_dates_idx",
                    ),
                    models.Index(fields=["user", "status"], name="booking_user_status_idx"),
                ],
                "constraints": [
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
                ],
            },
        ),
        migrations.CreateModel(
            name="BookedNight",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("night", models.DateField()),
                (
                    "booking",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="nights",
                        to="bookings.booking",
                    ),
                ),
                (
                    "homestay",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="booked_nights",
                        to="homestays.homestay",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booked night",
                "verbose_name_plural": "Booked nights",
                "ordering": ["homestay", "night"],
                "constraints": [
                    models.UniqueConstraint(fields=("homestay", "night"), name="unique_homestay_night"),
                ],
            },
        ),
    ]
