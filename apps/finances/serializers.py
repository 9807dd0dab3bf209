"""Serializers for payments and income reports."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import IncomeSnapshot, Payment


class PaymentSerializer(serializers.ModelSerializer):
    booking_id = serializers.CharField(read_only=True)
    username = serializers.CharField(source="booking.user.username", read_only=True)
    homestay_id = serializers.IntegerField(source="booking.homestay_id", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "booking_id",
            "username",
            "homestay_id",
            "amount",
            "status",
            "pay_date",
            "pay_method",
            "created_at",
        ]
        read_only_fields = fields


class MonthlyIncomeQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)


class YearlyIncomeQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1, max_value=9999)


class IncomeSnapshotSerializer(serializers.ModelSerializer):
    class Meta:
        model = IncomeSnapshot
        fields = ["year", "month", "total_income", "payments_count", "updated_at"]
        read_only_fields = fields
