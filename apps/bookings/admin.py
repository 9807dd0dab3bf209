"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import BookedNight, Booking


class BookedNightInline(admin.TabularInline):
    model = BookedNight
    extra = 0
    readonly_fields = ("homestay", "night")
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_id",
        "homestay",
        "user",
        "status",
        "checkin_date",
        "checkout_date",
        "number_of_guest",
        "booking_date",
    )
    list_filter = ("status", "checkin_date", "checkout_date")
    search_fields = ("booking_id", "user__username", "homestay__address")
    readonly_fields = (
        "booking_id",
        "booking_date",
        "updated_at",
        "service_fee",
        "tax",
        "discount",
    )
    inlines = [BookedNightInline]
