from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "status",
                    models.CharField(
                        choices=[("unpaid", "Unpaid"), ("paid", "Paid"), ("invalidated", "Invalidated")],
                        default="unpaid",
                        max_length=20,
                    ),
                ),
                ("pay_date", models.DateTimeField(blank=True, null=True)),
                (
                    "pay_method",
                    models.CharField(
                        blank=True,
                        choices=[("cash", "Cash"), ("card", "Bank card"), ("transfer", "Bank transfer")],
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "booking",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment",
                        to="bookings.booking",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "pay_date"], name="payment_status_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gte=0),
                        name="payment_amount_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="IncomeSnapshot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("year", models.PositiveSmallIntegerField()),
                ("month", models.PositiveSmallIntegerField()),
                ("total_income", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("payments_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Income snapshot",
                "verbose_name_plural": "Income snapshots",
                "ordering": ["-year", "-month"],
                "constraints": [
                    models.UniqueConstraint(fields=("year", "month"), name="unique_income_snapshot_month"),
                ],
            },
        ),
    ]
