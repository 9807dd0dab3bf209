from decimal import Decimal

import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Homestay",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("description", models.TextField(blank=True)),
                ("address", models.CharField(max_length=255)),
                ("number_of_bed", models.PositiveSmallIntegerField(default=1)),
                (
                    "capacity",
                    models.PositiveSmallIntegerField(default=1, help_text="Guests included in the nightly price."),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Price per night.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("available", "Available"), ("booked", "Booked"), ("unavailable", "Unavailable")],
                        default="available",
                        max_length=20,
                    ),
                ),
                ("main_image", models.URLField(blank=True)),
                ("first_image", models.URLField(blank=True)),
                ("second_image", models.URLField(blank=True)),
                ("third_image", models.URLField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Homestay",
                "verbose_name_plural": "Homestays",
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(price__gte=0),
                        name="homestay_price_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Promotion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(help_text="Code entered by the guest.", max_length=100, unique=True)),
                ("description", models.TextField(blank=True)),
                (
                    "discount_percent",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00")),
                            django.core.validators.MaxValueValidator(Decimal("99.99")),
                        ],
                    ),
                ),
                ("start_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("end_date", models.DateTimeField()),
            ],
            options={
                "verbose_name": "Promotion",
                "verbose_name_plural": "Promotions",
                "ordering": ["-end_date"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(discount_percent__gte=0) & models.Q(discount_percent__lt=100),
                        name="promotion_discount_range",
                    ),
                ],
            },
        ),
    ]
