"""URL routing for the finance domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    IncomeSnapshotListView,
    MonthlyIncomeView,
    PaymentDetailView,
    UnpaidPaymentListView,
    YearlyIncomeView,
)

urlpatterns = [
    path("payments/unpaid/", UnpaidPaymentListView.as_view(), name="payments-unpaid"),
    path("payments/<str:booking_id>/", PaymentDetailView.as_view(), name="payment-detail"),
    path("income/monthly/", MonthlyIncomeView.as_view(), name="income-monthly"),
    path("income/yearly/", YearlyIncomeView.as_view(), name="income-yearly"),
    path("income/snapshots/", IncomeSnapshotListView.as_view(), name="income-snapshots"),
]
