"""
Booking Command Handlers

The booking transaction engine. Each command runs as one unit of work:
every precondition is checked and every write is made inside the same
transaction, so a failure at any step leaves no partial state behind.

Commands:
- CreateBookingCommand: Reserve a homestay and price the stay
- CancelBookingCommand: Cancel a validated booking before checkout
- CheckoutBookingCommand: Complete a validated booking and settle its payment
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable
import logging
import secrets

from django.utils import timezone

from apps.bookings.conf import booking_setting
from apps.bookings.domain.events import BookingCancelled, BookingCheckedOut, BookingCreated
from apps.bookings.domain.pricing import PricingBreakdown, calculate_pricing, service_fee_for
from apps.bookings.gateway import BookingGateway, DjangoBookingGateway
from apps.bookings.models import Booking
from apps.finances.models import Payment
from shared.application.uow import DjangoUnitOfWork, run_in_transaction
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
from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)

BOOKING_CODE_ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ123456789'
MAX_CODE_ATTEMPTS = 5


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``promotion_code`` is None when the guest books without a promotion;
    an empty string means the same thing.
    """
    username: str
    homestay_id: int
    checkin_date: date
    number_of_days: int
    number_of_guests: int
    promotion_code: str | None = None


@dataclass
class CancelBookingCommand:
    """Command to cancel a validated booking"""
    username: str
    homestay_id: int
    booking_id: str


@dataclass
class CheckoutBookingCommand:
    """Command to complete a booking and mark its payment as paid"""
    username: str
    homestay_id: int
    booking_id: str
    pay_method: str | None = None


# ===== Results =====

@dataclass
class BookingResult:
    booking: Booking
    payment: Payment
    pricing: PricingBreakdown


@dataclass
class Confirmation:
    booking_id: str
    status: str
    message: str


# ===== Command Handlers =====

class BookingHandler:
    """Common plumbing: gateway, clock and error logging around one unit of work."""

    action = 'booking'

    def __init__(self, gateway: BookingGateway, clock: Callable[[], datetime] = timezone.now):
        self.gateway = gateway
        self.clock = clock

    def _run(self, command, work):
        try:
            return run_in_transaction(work)
        except FatalError:
            logger.error(f"{self.action} failed fatally for {command}", exc_info=True)
            raise
        except BookingError as exc:
            logger.warning(f"{self.action} rejected ({exc.code}): {exc.message}")
            raise


class CreateBookingHandler(BookingHandler):
    """
    Handler for CreateBooking command

    Double booking prevention:
    1. Lock the homestay and user rows (SELECT FOR UPDATE where supported)
    2. Look for validated bookings overlapping the requested stay
    3. Insert the booking and one BookedNight row per night; the unique
       (homestay, night) constraint rejects a concurrent winner that
       slipped past step 2, reported as DateRangeConflict
    """

    action = 'create booking'

    def handle(self, command: CreateBookingCommand) -> BookingResult:
        """
        Handle booking creation

        Returns: BookingResult with the booking, its unpaid payment and the pricing

        Raises:
            NotFound: homestay or user missing
            HomestayUnavailable, UserAlreadyBooking, PromotionNotFound,
            PromotionExpired, InvalidBookingRequest: rejected request
            DateRangeConflict: the homestay is booked for an overlapping stay
        """
        logger.info(
            f"Creating booking for homestay {command.homestay_id}, user {command.username}, "
            f"{command.number_of_days} days from {command.checkin_date}"
        )
        result = self._run(command, lambda uow: self._create(uow, command))
        logger.info(
            f"Booking created successfully: {result.booking.booking_id} "
            f"(total {result.pricing.total_amount})"
        )
        return result

    def _validate(self, command: CreateBookingCommand) -> DateRange:
        """Reject out-of-range counts and return the requested stay"""
        max_days = booking_setting('MAX_NUMBER_OF_DAYS')
        max_guests = booking_setting('MAX_NUMBER_OF_GUESTS')
        if not 0 < command.number_of_days <= max_days:
            raise InvalidBookingRequest(f"Number of days must be between 1 and {max_days}")
        if not 0 < command.number_of_guests <= max_guests:
            raise InvalidBookingRequest(f"Number of guests must be between 1 and {max_guests}")
        try:
            return DateRange.for_stay(command.checkin_date, command.number_of_days)
        except OverflowError as exc:
            raise InvalidBookingRequest(
                f"Stay of {command.number_of_days} days from {command.checkin_date} is out of range"
            ) from exc

    def _create(self, uow: DjangoUnitOfWork, command: CreateBookingCommand) -> BookingResult:
        stay = self._validate(command)
        now = self.clock()

        homestay = self.gateway.get_homestay(command.homestay_id, lock=True)
        if not homestay.is_available:
            raise HomestayUnavailable(f"Homestay {homestay.pk} is {homestay.status}")

        user = self.gateway.get_user(command.username, lock=True)
        if user.is_booking:
            raise UserAlreadyBooking(f"User {user.username} has already booked a homestay")

        promotion, discount = self._resolve_promotion(command.promotion_code, now)

        overlapping = self.gateway.find_bookings_for_homestay_in_range(
            homestay.pk, stay.start_date, stay.end_date
        )
        if overlapping:
            raise DateRangeConflict(
                f"Homestay {homestay.pk} has been booked in {stay} "
                f"({len(overlapping)} overlapping booking(s))"
            )

        tax_rate = booking_setting('TAX_RATE')
        booking = self.gateway.insert_booking(
            booking_id=self._generate_booking_id(),
            user=user,
            homestay=homestay,
            promotion=promotion,
            status=Booking.Status.VALIDATED,
            booking_date=now,
            checkin_date=stay.start_date,
            checkout_date=stay.end_date,
            number_of_days=command.number_of_days,
            number_of_guest=command.number_of_guests,
            service_fee=service_fee_for(
                command.number_of_guests,
                command.number_of_days,
                booking_setting('SERVICE_FEE_PER_GUEST_NIGHT'),
            ),
            tax=tax_rate,
            discount=discount,
        )

        pricing = calculate_pricing(
            number_of_days=booking.number_of_days,
            number_of_guests=booking.number_of_guest,
            price=homestay.price,
            capacity=homestay.capacity,
            tax_rate=booking.tax,
            discount=discount,
            service_fee=booking.service_fee,
            surcharge_per_guest=booking_setting('SURCHARGE_PER_EXTRA_GUEST'),
        )

        payment = self.gateway.insert_payment(booking, pricing.total_amount)
        self.gateway.set_user_booking_flag(user, True)

        uow.record_event(BookingCreated(
            booking_id=booking.booking_id,
            username=user.username,
            homestay_id=homestay.pk,
            checkin_date=stay.start_date,
            checkout_date=stay.end_date,
            total_amount=pricing.total_amount,
        ))
        return BookingResult(booking=booking, payment=payment, pricing=pricing)

    def _resolve_promotion(self, code: str | None, now: datetime):
        """Return (promotion, discount rate); no code means no discount"""
        if not code:
            return None, Decimal('0')
        try:
            promotion = self.gateway.get_promotion(code)
        except NotFound as exc:
            raise PromotionNotFound(f"Promotion code {code!r} doesn't exist") from exc
        if not promotion.is_valid_at(now):
            raise PromotionExpired(f"Promotion code {code!r} expired at {promotion.end_date}")
        return promotion, promotion.discount

    def _generate_booking_id(self) -> str:
        """Random code such as ``K7QZ2M9A``, retried on the rare collision"""
        length = booking_setting('BOOKING_CODE_LENGTH')
        for attempt in range(MAX_CODE_ATTEMPTS):
            code = ''.join(secrets.choice(BOOKING_CODE_ALPHABET) for _ in range(length))
            if not self.gateway.booking_id_exists(code):
                return code
        raise FatalError(f"Could not generate a unique booking id in {MAX_CODE_ATTEMPTS} attempts")


class ResolveBookingHandler(BookingHandler, ABC):
    """
    Shared precondition check for cancel and checkout

    Both need: homestay operable, user currently booking, booking
    validated (and owned by that user for that homestay), payment unpaid.
    Subclasses only apply their terminal effects.
    """

    success_message = ''

    def handle(self, command) -> Confirmation:
        logger.info(f"{self.action}: booking {command.booking_id} of user {command.username}")
        confirmation = self._run(command, lambda uow: self._resolve(uow, command))
        logger.info(f"{self.action} succeeded: booking {confirmation.booking_id} is {confirmation.status}")
        return confirmation

    def _resolve(self, uow: DjangoUnitOfWork, command) -> Confirmation:
        homestay = self.gateway.get_homestay(command.homestay_id, lock=True)
        if not homestay.is_available:
            raise HomestayUnavailable(f"Homestay {homestay.pk} is {homestay.status}")

        user = self.gateway.get_user(command.username, lock=True)
        if not user.is_booking:
            raise UserNotBooking(f"User {user.username} hasn't booked any homestay")

        booking = self.gateway.get_booking(command.booking_id, lock=True)
        if booking.user_id != user.pk or booking.homestay_id != homestay.pk:
            raise NotFound(
                'booking', command.booking_id,
                f"Booking {command.booking_id!r} not found for user {user.username} "
                f"and homestay {homestay.pk}"
            )
        if not booking.is_validated:
            raise BookingNotCancellable(f"Booking {booking.booking_id} is {booking.status}")

        payment = self.gateway.get_payment_for_booking(booking.booking_id, lock=True)
        if payment.status != Payment.Status.UNPAID:
            raise PaymentNotCancellable(f"Payment of booking {booking.booking_id} is {payment.status}")

        self._apply(uow, command, user, booking, payment)
        return Confirmation(
            booking_id=booking.booking_id,
            status=booking.status,
            message=self.success_message,
        )

    @abstractmethod
    def _apply(self, uow, command, user, booking: Booking, payment: Payment):
        """Write the terminal state of the booking and its payment"""
        pass


class CancelBookingHandler(ResolveBookingHandler):
    """Handler for cancelling a booking; frees its dates"""

    action = 'cancel booking'
    success_message = 'Cancelling booking successfully'

    def _apply(self, uow, command, user, booking, payment):
        booking.status = Booking.Status.CANCEL
        booking.checkin_date = None
        booking.checkout_date = None
        self.gateway.save_booking(booking, ['status', 'checkin_date', 'checkout_date'])
        self.gateway.release_nights(booking)

        self.gateway.set_user_booking_flag(user, False)

        payment.status = Payment.Status.INVALIDATED
        self.gateway.save_payment(payment, ['status'])

        uow.record_event(BookingCancelled(
            booking_id=booking.booking_id,
            username=user.username,
            homestay_id=booking.homestay_id,
        ))


class CheckoutBookingHandler(ResolveBookingHandler):
    """Handler for checking out: completes the booking and settles the payment"""

    action = 'checkout booking'
    success_message = 'Checkout and pay the bill successfully'

    def _apply(self, uow, command, user, booking, payment):
        pay_method = command.pay_method or booking_setting('DEFAULT_PAY_METHOD')
        if pay_method not in Payment.Method.values:
            raise InvalidBookingRequest(f"Unsupported pay method {pay_method!r}")

        booking.status = Booking.Status.COMPLETED
        self.gateway.save_booking(booking, ['status'])
        self.gateway.release_nights(booking)

        self.gateway.set_user_booking_flag(user, False)

        payment.status = Payment.Status.PAID
        payment.pay_date = self.clock()
        payment.pay_method = pay_method
        self.gateway.save_payment(payment, ['status', 'pay_date', 'pay_method'])

        uow.record_event(BookingCheckedOut(
            booking_id=booking.booking_id,
            username=user.username,
            homestay_id=booking.homestay_id,
            amount=payment.amount,
            pay_method=payment.pay_method,
        ))


class BookingEngine:
    """
    Entry point for the request-handling layer

    Construct once per process with a gateway and pass it where needed.
    """

    def __init__(self, gateway: BookingGateway, clock: Callable[[], datetime] = timezone.now):
        self.gateway = gateway
        self._create = CreateBookingHandler(gateway, clock)
        self._cancel = CancelBookingHandler(gateway, clock)
        self._checkout = CheckoutBookingHandler(gateway, clock)

    def create_booking(self, command: CreateBookingCommand) -> BookingResult:
        return self._create.handle(command)

    def cancel_booking(self, command: CancelBookingCommand) -> Confirmation:
        return self._cancel.handle(command)

    def checkout_booking(self, command: CheckoutBookingCommand) -> Confirmation:
        return self._checkout.handle(command)


_default_engine: BookingEngine | None = None


def get_booking_engine() -> BookingEngine:
    """Process-wide engine backed by the Django ORM gateway"""
    global _default_engine
    if _default_engine is None:
        _default_engine = BookingEngine(DjangoBookingGateway())
    return _default_engine
