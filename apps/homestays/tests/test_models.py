from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from apps.homestays.models import Homestay, Promotion


def test_promotion_is_valid_until_its_end(promotion, now):
    assert promotion.is_valid_at(now)
    assert promotion.is_valid_at(promotion.end_date)
    assert not promotion.is_valid_at(promotion.end_date + timedelta(seconds=1))
    assert promotion.discount == Decimal("0.1")


def test_only_available_homestays_are_bookable(homestay):
    assert homestay.is_available

    homestay.status = Homestay.Status.BOOKED
    assert not homestay.is_available


@pytest.mark.django_db
def test_database_rejects_invalid_rows(now):
    with pytest.raises(IntegrityError), transaction.atomic():
        Homestay.objects.create(address="Nowhere", price=Decimal("-1.00"))

    with pytest.raises(IntegrityError), transaction.atomic():
        Promotion.objects.create(title="FREE", discount_percent=Decimal("100.00"), end_date=now)
