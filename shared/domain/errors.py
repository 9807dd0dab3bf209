"""
Booking Error Taxonomy

Every failure of a booking workflow is reported as a ``BookingError``
subclass. The ``kind`` tells the caller how to classify the outcome
(and which HTTP status to map it to); the ``code`` distinguishes the
concrete case programmatically.

    BookingError
    ├── NotFound                      (NOT_FOUND)
    ├── PreconditionFailed            (PRECONDITION_FAILED)
    │   ├── HomestayUnavailable
    │   ├── UserAlreadyBooking
    │   ├── UserNotBooking
    │   ├── BookingNotCancellable
    │   ├── PaymentNotCancellable
    │   ├── PromotionExpired
    │   ├── PromotionNotFound
    │   └── InvalidBookingRequest
    ├── DateRangeConflict             (DATE_RANGE_CONFLICT)
    └── FatalError                    (FATAL)
        └── TransactionRollbackError
"""

from enum import Enum


class ErrorKind(Enum):
    """Classification of booking failures"""
    NOT_FOUND = 'not_found'
    PRECONDITION_FAILED = 'precondition_failed'
    DATE_RANGE_CONFLICT = 'date_range_conflict'
    FATAL = 'fatal'


class BookingError(Exception):
    """Base class for all classified booking failures"""

    kind: ErrorKind = ErrorKind.FATAL
    code: str = 'booking_error'
    default_message: str = 'Booking operation failed'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'code': self.code,
            'message': self.message,
        }


class NotFound(BookingError):
    """A homestay, user, promotion, booking or payment does not exist"""

    kind = ErrorKind.NOT_FOUND
    code = 'not_found'

    def __init__(self, entity: str, key, message: str | None = None):
        self.entity = entity
        self.key = key
        super().__init__(message or f"{entity} {key!r} not found")

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload['entity'] = self.entity
        payload['key'] = str(self.key)
        return payload


class PreconditionFailed(BookingError):
    kind = ErrorKind.PRECONDITION_FAILED
    code = 'precondition_failed'
    default_message = 'Booking precondition failed'


class HomestayUnavailable(PreconditionFailed):
    code = 'homestay_unavailable'
    default_message = "Homestay can't be booked"


class UserAlreadyBooking(PreconditionFailed):
    code = 'user_already_booking'
    default_message = 'User has already booked a homestay'


class UserNotBooking(PreconditionFailed):
    code = 'user_not_booking'
    default_message = "User hasn't booked any homestay"


class BookingNotCancellable(PreconditionFailed):
    code = 'booking_not_cancellable'
    default_message = "Booking isn't validated"


class PaymentNotCancellable(PreconditionFailed):
    code = 'payment_not_cancellable'
    default_message = 'Payment is already settled or invalidated'


class PromotionExpired(PreconditionFailed):
    code = 'promotion_expired'
    default_message = 'Promotion code has expired'


class PromotionNotFound(PreconditionFailed):
    code = 'promotion_not_found'
    default_message = "Promotion code doesn't exist"


class InvalidBookingRequest(PreconditionFailed):
    code = 'invalid_booking_request'
    default_message = 'Booking request is invalid'


class DateRangeConflict(BookingError):
    """The homestay is already booked for an overlapping date range"""

    kind = ErrorKind.DATE_RANGE_CONFLICT
    code = 'date_range_conflict'
    default_message = 'This homestay has been booked in this time'


class FatalError(BookingError):
    """Transaction begin/commit failure or unexpected persistence error"""

    kind = ErrorKind.FATAL
    code = 'fatal'
    default_message = 'Internal booking error'


class TransactionRollbackError(FatalError):
    """
    Rolling back failed after the unit of work had already failed.

    Both errors are kept: ``original`` is what aborted the unit of work,
    ``rollback_error`` is what went wrong while undoing it.
    """

    code = 'rollback_failed'

    def __init__(self, original: BaseException, rollback_error: BaseException):
        self.original = original
        self.rollback_error = rollback_error
        super().__init__(f"tx err: {original}, rb err: {rollback_error}")
