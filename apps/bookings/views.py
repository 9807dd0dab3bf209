"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import PermissionDenied  # type: ignore
from rest_framework.response import Response  # type: ignore

from .application.command_handlers import (
    CancelBookingCommand,
    CheckoutBookingCommand,
    CreateBookingCommand,
    get_booking_engine,
)
from .models import Booking
from .permissions import IsBookingOwnerOrAdmin, IsHomestayAdmin, is_homestay_admin
from .serializers import (
    BookingCheckoutSerializer,
    BookingCreateSerializer,
    BookingResolveSerializer,
    BookingSerializer,
    ConfirmationSerializer,
)


class BookingViewSet(mixins.RetrieveModelMixin, mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Create, cancel and check out bookings.

    Writes go through the booking engine; failures are rendered by the
    project exception handler (404 / 400 / 409 / 500 by error kind).
    """

    queryset = Booking.objects.select_related("user", "homestay", "promotion", "payment").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, IsBookingOwnerOrAdmin]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if is_homestay_admin(user):
            return qs
        return qs.filter(user=user)

    def _acting_username(self, requested: str | None) -> str:
        """Guests act for themselves; administrators may act for any user."""
        user = self.request.user
        if not requested or requested == user.username:
            return user.username
        if not is_homestay_admin(user):
            raise PermissionDenied("Only administrators can act for other users.")
        return requested

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = get_booking_engine().create_booking(
            CreateBookingCommand(
                username=self._acting_username(request.data.get("username")),
                homestay_id=data["homestay_id"],
                checkin_date=data["checkin_date"],
                number_of_days=data["number_of_days"],
                number_of_guests=data["number_of_guests"],
                promotion_code=data["promotion_code"],
            )
        )
        body = BookingSerializer(result.booking, context=self.get_serializer_context()).data
        body["payment_status"] = result.payment.status
        body["pricing"] = result.pricing.to_dict()
        return Response(body, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = BookingResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        confirmation = get_booking_engine().cancel_booking(
            CancelBookingCommand(
                username=self._acting_username(data.get("username")),
                homestay_id=data["homestay_id"],
                booking_id=pk,
            )
        )
        return Response(ConfirmationSerializer(confirmation).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated, IsHomestayAdmin])
    def checkout(self, request, pk=None):  # type: ignore
        serializer = BookingCheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        confirmation = get_booking_engine().checkout_booking(
            CheckoutBookingCommand(
                username=data.get("username") or request.user.username,
                homestay_id=data["homestay_id"],
                booking_id=pk,
                pay_method=data["pay_method"] or None,
            )
        )
        return Response(ConfirmationSerializer(confirmation).data, status=status.HTTP_200_OK)
