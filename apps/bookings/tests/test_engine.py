"""Tests for the booking transaction engine."""

from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from apps.bookings.application.command_handlers import (
    BOOKING_CODE_ALPHABET,
    BookingEngine,
    CancelBookingCommand,
    CheckoutBookingCommand,
    ResolveBookingHandler,
)
from apps.bookings.domain.events import BookingCancelled, BookingCheckedOut, BookingCreated
from apps.bookings.gateway import DjangoBookingGateway
from apps.bookings.models import BookedNight, Booking
from apps.finances.models import Payment
from apps.homestays.models import Homestay
from apps.users.models import User
from shared.domain.errors import (
    BookingError,
    BookingNotCancellable,
    DateRangeConflict,
    FatalError,
    HomestayUnavailable,
    InvalidBookingRequest,
    NotFound,
    PaymentNotCancellable,
    PromotionExpired,
    PromotionNotFound,
    UserAlreadyBooking,
    UserNotBooking,
)

pytestmark = pytest.mark.django_db


def _cancel(user, booking):
    return CancelBookingCommand(
        username=user.username,
        homestay_id=booking.homestay_id,
        booking_id=booking.booking_id,
    )


def _checkout(user, booking, pay_method=None):
    return CheckoutBookingCommand(
        username=user.username,
        homestay_id=booking.homestay_id,
        booking_id=booking.booking_id,
        pay_method=pay_method,
    )


def _assert_nothing_written(user):
    user.refresh_from_db()
    assert not user.is_booking
    assert Booking.objects.count() == 0
    assert Payment.objects.count() == 0
    assert BookedNight.objects.count() == 0


# --- Create ------------------------------------------------------------------


def test_create_booking_reserves_and_prices_the_stay(engine, guest, homestay, create_command, now):
    result = engine.create_booking(create_command(guest, homestay))

    booking = Booking.objects.get(pk=result.booking.booking_id)
    assert booking.status == Booking.Status.VALIDATED
    assert booking.checkin_date.isoformat() == "2026-03-10"
    assert booking.checkout_date.isoformat() == "2026-03-13"
    assert booking.booking_date == now
    assert booking.service_fee == Decimal("90.00")
    assert booking.tax == Decimal("0.100")
    assert booking.promotion is None
    assert len(booking.booking_id) == 8
    assert set(booking.booking_id) <= set(BOOKING_CODE_ALPHABET)
    assert booking.nights.count() == 3

    assert result.pricing.total_amount == Decimal("429.00")
    assert booking.payment.status == Payment.Status.UNPAID
    assert booking.payment.amount == Decimal("429.00")
    assert booking.pricing() == result.pricing

    guest.refresh_from_db()
    assert guest.is_booking


def test_create_booking_applies_promotion_after_tax(engine, guest, homestay, promotion, create_command):
    result = engine.create_booking(create_command(guest, homestay, promotion_code="SPRING10"))

    assert result.booking.promotion == promotion
    assert result.booking.discount == Decimal("0.1")
    assert result.payment.amount == Decimal("386.10")


def test_empty_promotion_code_means_no_discount(engine, guest, homestay, create_command):
    result = engine.create_booking(create_command(guest, homestay, promotion_code=""))

    assert result.booking.promotion is None
    assert result.payment.amount == Decimal("429.00")


def test_expired_promotion_rejects_without_writes(engine, guest, homestay, expired_promotion, create_command):
    with pytest.raises(PromotionExpired):
        engine.create_booking(create_command(guest, homestay, promotion_code="WINTER20"))

    _assert_nothing_written(guest)


def test_unknown_promotion_rejects_without_writes(engine, guest, homestay, create_command):
    with pytest.raises(PromotionNotFound):
        engine.create_booking(create_command(guest, homestay, promotion_code="NOPE"))

    _assert_nothing_written(guest)


def test_missing_homestay_and_user_are_not_found(engine, guest, homestay, create_command):
    with pytest.raises(NotFound) as excinfo:
        engine.create_booking(create_command(guest, homestay, homestay_id=homestay.pk + 100))
    assert excinfo.value.entity == "homestay"

    with pytest.raises(NotFound) as excinfo:
        engine.create_booking(create_command(guest, homestay, username="ghost"))
    assert excinfo.value.entity == "user"


def test_unavailable_homestay_cannot_be_booked(engine, guest, homestay, create_command):
    homestay.status = Homestay.Status.UNAVAILABLE
    homestay.save()

    with pytest.raises(HomestayUnavailable):
        engine.create_booking(create_command(guest, homestay))

    _assert_nothing_written(guest)


def test_user_with_active_booking_cannot_book_again(engine, guest, homestay, create_command):
    engine.create_booking(create_command(guest, homestay))
    other = Homestay.objects.create(address="2 Side street", price=Decimal("80.00"), capacity=2)

    with pytest.raises(UserAlreadyBooking):
        engine.create_booking(create_command(guest, other))

    assert Booking.objects.count() == 1


@pytest.mark.parametrize("field", ["number_of_days", "number_of_guests"])
def test_non_positive_counts_are_rejected(engine, guest, homestay, create_command, field):
    with pytest.raises(InvalidBookingRequest):
        engine.create_booking(create_command(guest, homestay, **{field: 0}))

    _assert_nothing_written(guest)


@pytest.mark.parametrize(
    "field, value",
    [("number_of_days", 366), ("number_of_days", 10_000_000), ("number_of_guests", 51)],
)
def test_counts_above_the_limit_are_rejected(engine, guest, homestay, create_command, field, value):
    with pytest.raises(InvalidBookingRequest):
        engine.create_booking(create_command(guest, homestay, **{field: value}))

    _assert_nothing_written(guest)


def test_stay_past_the_last_date_is_rejected(engine, guest, homestay, create_command):
    with pytest.raises(InvalidBookingRequest):
        engine.create_booking(create_command(guest, homestay, checkin_date=date.max - timedelta(days=1)))

    _assert_nothing_written(guest)


def test_day_limit_comes_from_settings(engine, guest, homestay, create_command, settings):
    settings.HOMESTAY_BOOKING = {"MAX_NUMBER_OF_DAYS": 2}

    with pytest.raises(InvalidBookingRequest):
        engine.create_booking(create_command(guest, homestay, number_of_days=3))

    result = engine.create_booking(create_command(guest, homestay, number_of_days=2))
    assert result.booking.nights.count() == 2


def test_stored_tax_rate_reproduces_the_charged_amount(engine, guest, homestay, create_command, settings):
    settings.HOMESTAY_BOOKING = {"TAX_RATE": "0.125"}

    result = engine.create_booking(create_command(guest, homestay))

    booking = Booking.objects.select_related("homestay").get(pk=result.booking.booking_id)
    assert booking.tax == Decimal("0.125")
    assert booking.pricing().total_amount == booking.payment.amount == Decimal("438.75")


def test_resolve_handler_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        ResolveBookingHandler(DjangoBookingGateway())


def test_overlapping_stay_is_a_conflict(engine, guest, other_guest, homestay, create_command):
    first = engine.create_booking(create_command(guest, homestay))

    with pytest.raises(DateRangeConflict):
        engine.create_booking(create_command(
            other_guest, homestay, checkin_date=first.booking.checkout_date - timedelta(days=1),
        ))

    other_guest.refresh_from_db()
    assert not other_guest.is_booking
    assert Booking.objects.count() == 1


def test_adjacent_stays_do_not_conflict(engine, guest, other_guest, homestay, create_command):
    first = engine.create_booking(create_command(guest, homestay))

    second = engine.create_booking(create_command(
        other_guest, homestay, checkin_date=first.booking.checkout_date,
    ))

    assert second.booking.is_validated


def test_night_constraint_catches_a_missed_overlap(guest, other_guest, homestay, create_command, now):
    class StaleReadGateway(DjangoBookingGateway):
        def find_bookings_for_homestay_in_range(self, homestay_id, start, end):
            return []

    engine = BookingEngine(StaleReadGateway(), clock=lambda: now)
    engine.create_booking(create_command(guest, homestay))

    with pytest.raises(DateRangeConflict):
        engine.create_booking(create_command(other_guest, homestay, number_of_days=5))

    other_guest.refresh_from_db()
    assert not other_guest.is_booking
    assert Booking.objects.count() == 1
    assert Payment.objects.count() == 1


def test_failure_after_insert_rolls_back_everything(engine, guest, homestay, create_command):
    with patch.object(DjangoBookingGateway, "insert_payment", side_effect=DatabaseError("disk full")):
        with pytest.raises(FatalError):
            engine.create_booking(create_command(guest, homestay))

    _assert_nothing_written(guest)


def test_booking_code_collision_is_retried(engine, guest, homestay, create_command):
    with patch.object(DjangoBookingGateway, "booking_id_exists", side_effect=[True, True, False]):
        result = engine.create_booking(create_command(guest, homestay))

    assert Booking.objects.filter(pk=result.booking.booking_id).exists()


def test_created_event_is_published_after_commit(
    engine, guest, homestay, create_command, isolated_message_bus, django_capture_on_commit_callbacks
):
    received = []
    isolated_message_bus.register_event_handler(BookingCreated, received.append)

    with django_capture_on_commit_callbacks(execute=True):
        result = engine.create_booking(create_command(guest, homestay))

    assert len(received) == 1
    assert received[0].booking_id == result.booking.booking_id
    assert received[0].total_amount == Decimal("429.00")


# --- Cancel ------------------------------------------------------------------


def test_cancel_frees_the_dates(engine, guest, other_guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking

    confirmation = engine.cancel_booking(_cancel(guest, booking))

    assert confirmation.status == Booking.Status.CANCEL
    assert confirmation.message == "Cancelling booking successfully"
    booking.refresh_from_db()
    assert booking.status == Booking.Status.CANCEL
    assert booking.checkin_date is None
    assert booking.checkout_date is None
    assert booking.nights.count() == 0
    assert booking.payment.status == Payment.Status.INVALIDATED
    guest.refresh_from_db()
    assert not guest.is_booking

    again = engine.create_booking(create_command(other_guest, homestay))
    assert again.booking.is_validated


def test_second_cancel_is_rejected(engine, guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking
    engine.cancel_booking(_cancel(guest, booking))

    with pytest.raises(UserNotBooking):
        engine.cancel_booking(_cancel(guest, booking))


def test_cancel_of_resolved_booking_while_booking_again(engine, guest, homestay, create_command):
    first = engine.create_booking(create_command(guest, homestay)).booking
    engine.cancel_booking(_cancel(guest, first))
    engine.create_booking(create_command(guest, homestay))

    with pytest.raises(BookingNotCancellable):
        engine.cancel_booking(_cancel(guest, first))


def test_cancel_someone_elses_booking_is_not_found(engine, guest, other_guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking
    engine.create_booking(create_command(
        other_guest, homestay, checkin_date=booking.checkout_date,
    ))

    with pytest.raises(NotFound):
        engine.cancel_booking(_cancel(other_guest, booking))

    booking.refresh_from_db()
    assert booking.is_validated


def test_cancel_on_wrong_homestay_is_not_found(engine, guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking
    other = Homestay.objects.create(address="3 Lake road", price=Decimal("70.00"))

    with pytest.raises(NotFound):
        engine.cancel_booking(CancelBookingCommand(
            username=guest.username, homestay_id=other.pk, booking_id=booking.booking_id,
        ))


def test_cancel_needs_an_operable_homestay(engine, guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking
    Homestay.objects.filter(pk=homestay.pk).update(status=Homestay.Status.UNAVAILABLE)

    with pytest.raises(HomestayUnavailable):
        engine.cancel_booking(_cancel(guest, booking))


def test_cancel_with_settled_payment_is_rejected(engine, guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking
    Payment.objects.filter(booking=booking).update(status=Payment.Status.PAID)

    with pytest.raises(PaymentNotCancellable):
        engine.cancel_booking(_cancel(guest, booking))

    booking.refresh_from_db()
    assert booking.is_validated


# --- Checkout ----------------------------------------------------------------


def test_checkout_completes_and_settles(engine, guest, homestay, create_command, now):
    booking = engine.create_booking(create_command(guest, homestay)).booking

    confirmation = engine.checkout_booking(_checkout(guest, booking))

    assert confirmation.status == Booking.Status.COMPLETED
    assert confirmation.message == "Checkout and pay the bill successfully"
    booking.refresh_from_db()
    assert booking.status == Booking.Status.COMPLETED
    assert booking.checkin_date is not None
    assert booking.nights.count() == 0
    payment = booking.payment
    assert payment.status == Payment.Status.PAID
    assert payment.pay_date == now
    assert payment.pay_method == Payment.Method.CASH
    guest.refresh_from_db()
    assert not guest.is_booking


def test_checkout_records_pay_method(engine, guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking

    engine.checkout_booking(_checkout(guest, booking, pay_method="card"))

    assert Payment.objects.get(booking=booking).pay_method == Payment.Method.CARD


def test_checkout_with_unknown_pay_method_changes_nothing(engine, guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking

    with pytest.raises(InvalidBookingRequest):
        engine.checkout_booking(_checkout(guest, booking, pay_method="bitcoin"))

    booking.refresh_from_db()
    assert booking.is_validated
    assert booking.payment.status == Payment.Status.UNPAID
    guest.refresh_from_db()
    assert guest.is_booking


def test_checkout_after_cancel_is_rejected(engine, guest, homestay, create_command):
    booking = engine.create_booking(create_command(guest, homestay)).booking
    engine.cancel_booking(_cancel(guest, booking))

    with pytest.raises(UserNotBooking):
        engine.checkout_booking(_checkout(guest, booking))


def test_resolve_events_are_published(
    engine, guest, other_guest, homestay, create_command, isolated_message_bus, django_capture_on_commit_callbacks
):
    received = []
    isolated_message_bus.register_event_handler(BookingCancelled, received.append)
    isolated_message_bus.register_event_handler(BookingCheckedOut, received.append)
    first = engine.create_booking(create_command(guest, homestay)).booking
    second = engine.create_booking(create_command(
        other_guest, homestay, checkin_date=first.checkout_date,
    )).booking

    with django_capture_on_commit_callbacks(execute=True):
        engine.cancel_booking(_cancel(guest, first))
        engine.checkout_booking(_checkout(other_guest, second, pay_method="transfer"))

    assert [type(event) for event in received] == [BookingCancelled, BookingCheckedOut]
    assert received[1].pay_method == "transfer"
    assert received[1].amount == Decimal("429.00")


# --- Invariants under arbitrary sequences -------------------------------------


def _assert_consistent():
    validated = list(Booking.objects.filter(status=Booking.Status.VALIDATED))
    for index, booking in enumerate(validated):
        assert booking.stay is not None
        assert booking.payment.status == Payment.Status.UNPAID
        assert booking.nights.count() == booking.number_of_days
        for other in validated[index + 1:]:
            if other.homestay_id == booking.homestay_id:
                assert not booking.stay.overlaps_with(other.stay)

    for user in User.objects.all():
        has_active = Booking.objects.filter(user=user, status=Booking.Status.VALIDATED).exists()
        assert user.is_booking == has_active

    assert not Booking.objects.filter(status=Booking.Status.CANCEL).exclude(
        payment__status=Payment.Status.INVALIDATED
    ).exists()
    assert not Booking.objects.filter(status=Booking.Status.COMPLETED).exclude(
        payment__status=Payment.Status.PAID
    ).exists()


def test_random_operation_sequences_keep_state_consistent(engine, homestay, create_command):
    rng = random.Random(20260310)
    users = [User.objects.create_user(username=f"guest{i}", password="x") for i in range(4)]
    homestays = [homestay, Homestay.objects.create(address="5 River bank", price=Decimal("60.00"))]

    for _ in range(60):
        user = rng.choice(users)
        target = rng.choice(homestays)
        operation = rng.choice(["create", "create", "cancel", "checkout"])
        try:
            if operation == "create":
                engine.create_booking(create_command(
                    user, target,
                    checkin_date=date(2026, 3, 10) + timedelta(days=rng.randint(0, 10)),
                    number_of_days=rng.randint(1, 4),
                    number_of_guests=rng.randint(1, 4),
                ))
            else:
                bookings = list(Booking.objects.filter(user=user).order_by("booking_date", "booking_id"))
                if not bookings:
                    continue
                booking = rng.choice(bookings)
                if operation == "cancel":
                    engine.cancel_booking(_cancel(user, booking))
                else:
                    engine.checkout_booking(_checkout(user, booking))
        except BookingError as exc:
            assert not isinstance(exc, FatalError)
        _assert_consistent()