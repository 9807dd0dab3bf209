"""Admin registrations for homestays and promotions."""

from __future__ import annotations

from django.contrib import admin

from .models import Homestay, Promotion


@admin.register(Homestay)
class HomestayAdmin(admin.ModelAdmin):
    list_display = ("id", "address", "capacity", "number_of_bed", "price", "status", "updated_at")
    list_filter = ("status", "capacity")
    search_fields = ("address", "description")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = ("title", "discount_percent", "start_date", "end_date")
    search_fields = ("title", "description")
    date_hierarchy = "end_date"
