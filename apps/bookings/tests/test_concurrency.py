"""Two guests racing for the same nights on a real database server."""

from __future__ import annotations

import threading
from datetime import timedelta

import pytest
from django.db import connection

from apps.bookings.models import BookedNight, Booking
from shared.domain.errors import DateRangeConflict

pytestmark = [
    pytest.mark.django_db(transaction=True),
    pytest.mark.skipif(
        connection.vendor != "postgresql",
        reason="row locks need a server database; set DB_ENGINE to run",
    ),
]


def test_simultaneous_overlapping_requests_yield_one_booking(
    engine, guest, other_guest, homestay, create_command
):
    first = create_command(guest, homestay)
    commands = [
        first,
        create_command(other_guest, homestay, checkin_date=first.checkin_date + timedelta(days=1)),
    ]
    barrier = threading.Barrier(len(commands))
    outcomes = [None] * len(commands)

    def book(index):
        try:
            barrier.wait(timeout=10)
            outcomes[index] = engine.create_booking(commands[index])
        except Exception as exc:  # noqa: BLE001
            outcomes[index] = exc
        finally:
            connection.close()

    threads = [threading.Thread(target=book, args=(i,)) for i in range(len(commands))]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    conflicts = [o for o in outcomes if isinstance(o, DateRangeConflict)]
    winners = [o for o in outcomes if o is not None and not isinstance(o, Exception)]
    assert len(winners) == 1
    assert len(conflicts) == 1
    assert Booking.objects.count() == 1
    assert BookedNight.objects.count() == 3
