"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .conf import booking_setting
from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Validates a booking request before it reaches the engine."""

    homestay_id = serializers.IntegerField(min_value=1)
    checkin_date = serializers.DateField()
    number_of_days = serializers.IntegerField(min_value=1)
    number_of_guests = serializers.IntegerField(min_value=1)
    promotion_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)

    def _at_most(self, value: int, setting: str, label: str) -> int:
        limit = booking_setting(setting)
        if value > limit:
            raise serializers.ValidationError(f"{label} must be at most {limit}.")
        return value

    def validate_number_of_days(self, value):  # type: ignore
        return self._at_most(value, "MAX_NUMBER_OF_DAYS", "Number of days")

    def validate_number_of_guests(self, value):  # type: ignore
        return self._at_most(value, "MAX_NUMBER_OF_GUESTS", "Number of guests")

    def validate_promotion_code(self, value):  # type: ignore
        if value is None:
            return None
        return value.strip() or None


class BookingResolveSerializer(serializers.Serializer):
    """Identifies the booking to cancel or check out."""

    homestay_id = serializers.IntegerField(min_value=1)
    username = serializers.CharField(required=False)


class BookingCheckoutSerializer(BookingResolveSerializer):
    pay_method = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class BookingSerializer(serializers.ModelSerializer):
    """Read model of a booking with its price breakdown and payment state."""

    username = serializers.CharField(source="user.username", read_only=True)
    homestay_id = serializers.IntegerField(read_only=True)
    promotion_code = serializers.SerializerMethodField()
    pricing = serializers.SerializerMethodField()
    payment_status = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "booking_id",
            "username",
            "homestay_id",
            "promotion_code",
            "status",
            "booking_date",
            "checkin_date",
            "checkout_date",
            "number_of_days",
            "number_of_guest",
            "service_fee",
            "tax",
            "discount",
            "pricing",
            "payment_status",
        ]
        read_only_fields = fields

    def get_promotion_code(self, obj: Booking):  # type: ignore
        return obj.promotion.title if obj.promotion_id else None

    def get_pricing(self, obj: Booking):  # type: ignore
        return obj.pricing().to_dict()

    def get_payment_status(self, obj: Booking):  # type: ignore
        payment = getattr(obj, "payment", None)
        return payment.status if payment is not None else None


class ConfirmationSerializer(serializers.Serializer):
    booking_id = serializers.CharField()
    status = serializers.CharField()
    message = serializers.CharField()
