"""API views for payments and income reporting.

Payments are created and settled only by the booking engine; these
endpoints are read-only.
"""

from __future__ import annotations

from rest_framework import permissions  # type: ignore
from rest_framework.exceptions import PermissionDenied  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.permissions import IsHomestayAdmin, is_homestay_admin
from shared.domain.errors import NotFound

from .models import IncomeSnapshot, Payment
from .serializers import (
    IncomeSnapshotSerializer,
    MonthlyIncomeQuerySerializer,
    PaymentSerializer,
    YearlyIncomeQuerySerializer,
)
from .services import monthly_income, unpaid_payments, yearly_income


class PaymentDetailView(APIView):
    """Payment of one booking, visible to its guest and to administrators."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, booking_id: str):  # type: ignore
        payment = (
            Payment.objects.select_related("booking", "booking__user")
            .filter(booking_id=booking_id)
            .first()
        )
        if payment is None:
            raise NotFound("payment", booking_id)
        if not is_homestay_admin(request.user) and payment.booking.user_id != request.user.id:
            raise PermissionDenied("You can only view payments of your own bookings.")
        return Response(PaymentSerializer(payment).data)


class UnpaidPaymentListView(APIView):
    """
    Unpaid payments.

    Guests get their own; administrators get everyone's and may filter
    with ``?username=``.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        if is_homestay_admin(request.user):
            username = request.query_params.get("username") or None
        else:
            username = request.user.username
        payments = unpaid_payments(username)
        return Response(PaymentSerializer(payments, many=True).data)


class MonthlyIncomeView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsHomestayAdmin]

    def get(self, request):  # type: ignore
        query = MonthlyIncomeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        report = monthly_income(query.validated_data["year"], query.validated_data["month"])
        return Response(report.to_dict())


class YearlyIncomeView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsHomestayAdmin]

    def get(self, request):  # type: ignore
        query = YearlyIncomeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        report = yearly_income(query.validated_data["year"])
        return Response(report.to_dict())


class IncomeSnapshotListView(APIView):
    """Monthly income recorded by the periodic snapshot task."""

    permission_classes = [permissions.IsAuthenticated, IsHomestayAdmin]

    def get(self, request):  # type: ignore
        snapshots = IncomeSnapshot.objects.all()
        year = request.query_params.get("year")
        if year:
            snapshots = snapshots.filter(year=year)
        return Response(IncomeSnapshotSerializer(snapshots, many=True).data)
