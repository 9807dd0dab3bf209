"""Permissions for booking endpoints."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_homestay_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_homestay_admin") and user.is_homestay_admin()


class IsHomestayAdmin(permissions.BasePermission):
    """Only homestay administrators (or Django staff)."""

    def has_permission(self, request, view):  # type: ignore
        return is_homestay_admin(request.user)


class IsBookingOwnerOrAdmin(permissions.BasePermission):
    """Guests see their own bookings, administrators see all of them."""

    def has_object_permission(self, request, view, obj):  # type: ignore
        if is_homestay_admin(request.user):
            return True
        return obj.user_id == request.user.id
