"""Admin registration for payments and income snapshots."""

from __future__ import annotations

from django.contrib import admin

from .models import IncomeSnapshot, Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("booking", "amount", "status", "pay_method", "pay_date", "created_at")
    list_filter = ("status", "pay_method")
    search_fields = ("booking__booking_id", "booking__user__username")
    readonly_fields = ("created_at", "updated_at")


@admin.register(IncomeSnapshot)
class IncomeSnapshotAdmin(admin.ModelAdmin):
    list_display = ("year", "month", "total_income", "payments_count", "updated_at")
    list_filter = ("year",)
