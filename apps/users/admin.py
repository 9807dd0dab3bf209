"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = BaseUserAdmin.fieldsets + (
        (_("Profile"), {"fields": ("full_name", "phone", "role")}),
        (_("Booking"), {"fields": ("is_booking",)}),
    )
    list_display = ("username", "email", "full_name", "role", "is_booking", "is_active")
    list_filter = ("role", "is_booking", "is_active", "is_staff")
    search_fields = ("username", "email", "full_name", "phone")
    readonly_fields = ("is_booking", "created_at", "updated_at")
