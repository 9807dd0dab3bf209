"""
Booking Pricing

Pure price computation for a stay. No database access: callers pass the
homestay rate and capacity, the tax rate fixed on the booking and the
resolved promotion discount.

Order of operations (tax is applied before the discount):

    homestay_fee       = days * price
    service_fee        = 15 * guests * days
    capacity_surcharge = (guests - capacity) * 10   if guests > capacity
    pre_tax_amount     = homestay_fee + service_fee + capacity_surcharge
    tax_amount         = tax_rate * pre_tax_amount
    amount_after_tax   = pre_tax_amount + tax_amount
    discount_amount    = discount * amount_after_tax
    total_amount       = amount_after_tax - discount_amount
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.base import ValueObject

SERVICE_FEE_PER_GUEST_NIGHT = Decimal('15')
SURCHARGE_PER_EXTRA_GUEST = Decimal('10')

CENT = Decimal('0.01')


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PricingBreakdown(ValueObject):
    """Every intermediate amount of a booking price, rounded to cents"""
    number_of_days: int
    number_of_guests: int
    homestay_fee: Decimal
    service_fee: Decimal
    capacity_surcharge: Decimal
    pre_tax_amount: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    amount_after_tax: Decimal
    discount: Decimal
    discount_amount: Decimal
    total_amount: Decimal

    def to_dict(self) -> dict:
        return {
            'number_of_days': self.number_of_days,
            'number_of_guests': self.number_of_guests,
            'homestay_fee': str(self.homestay_fee),
            'service_fee': str(self.service_fee),
            'capacity_surcharge': str(self.capacity_surcharge),
            'pre_tax_amount': str(self.pre_tax_amount),
            'tax_rate': str(self.tax_rate),
            'tax_amount': str(self.tax_amount),
            'amount_after_tax': str(self.amount_after_tax),
            'discount': str(self.discount),
            'discount_amount': str(self.discount_amount),
            'total_amount': str(self.total_amount),
        }


def service_fee_for(number_of_guests: int, number_of_days: int,
                    fee_per_guest_night=SERVICE_FEE_PER_GUEST_NIGHT) -> Decimal:
    """Flat fee per guest per night, fixed on the booking when it is created"""
    return _cents(_to_decimal(fee_per_guest_night) * number_of_guests * number_of_days)


def capacity_surcharge_for(number_of_guests: int, capacity: int,
                           surcharge_per_guest=SURCHARGE_PER_EXTRA_GUEST) -> Decimal:
    if number_of_guests <= capacity:
        return Decimal('0')
    return _to_decimal(surcharge_per_guest) * (number_of_guests - capacity)


def calculate_pricing(
    *,
    number_of_days: int,
    number_of_guests: int,
    price,
    capacity: int,
    tax_rate,
    discount=Decimal('0'),
    service_fee=None,
    fee_per_guest_night=SERVICE_FEE_PER_GUEST_NIGHT,
    surcharge_per_guest=SURCHARGE_PER_EXTRA_GUEST,
) -> PricingBreakdown:
    """
    Compute the price of a stay.

    ``service_fee`` is the amount stored on the booking; when omitted it is
    derived from ``fee_per_guest_night``. Rounding to cents happens only on
    the returned amounts, never on intermediate values.

    Raises:
        ValueError: non-positive days/guests, negative price or tax,
            or a discount outside [0, 1)
    """
    if number_of_days <= 0:
        raise ValueError("Number of days must be positive")
    if number_of_guests <= 0:
        raise ValueError("Number of guests must be positive")

    price = _to_decimal(price)
    tax_rate = _to_decimal(tax_rate)
    discount = _to_decimal(discount)

    if price < 0:
        raise ValueError("Price cannot be negative")
    if tax_rate < 0:
        raise ValueError("Tax rate cannot be negative")
    if not (Decimal('0') <= discount < Decimal('1')):
        raise ValueError(f"Discount must be in [0, 1), got {discount}")

    if service_fee is None:
        service_fee = _to_decimal(fee_per_guest_night) * number_of_guests * number_of_days
    else:
        service_fee = _to_decimal(service_fee)

    homestay_fee = price * number_of_days
    capacity_surcharge = capacity_surcharge_for(number_of_guests, capacity, surcharge_per_guest)
    pre_tax_amount = homestay_fee + service_fee + capacity_surcharge
    tax_amount = tax_rate * pre_tax_amount
    amount_after_tax = pre_tax_amount + tax_amount
    discount_amount = discount * amount_after_tax
    total_amount = amount_after_tax - discount_amount

    return PricingBreakdown(
        number_of_days=number_of_days,
        number_of_guests=number_of_guests,
        homestay_fee=_cents(homestay_fee),
        service_fee=_cents(service_fee),
        capacity_surcharge=_cents(capacity_surcharge),
        pre_tax_amount=_cents(pre_tax_amount),
        tax_rate=tax_rate,
        tax_amount=_cents(tax_amount),
        amount_after_tax=_cents(amount_after_tax),
        discount=discount,
        discount_amount=_cents(discount_amount),
        total_amount=_cents(total_amount),
    )
