"""Handlers for committed booking events."""

from __future__ import annotations

from shared.application.message_bus import message_bus
from shared.domain.base import DomainEvent

from .domain.events import BookingCancelled, BookingCheckedOut, BookingCreated


def enqueue_booking_audit(event: DomainEvent) -> None:
    """Hand the event to Celery so request threads never wait on the audit trail."""
    from .tasks import record_booking_event

    record_booking_event.delay(event.to_dict())


def register_event_handlers() -> None:
    for event_type in (BookingCreated, BookingCancelled, BookingCheckedOut):
        message_bus.register_event_handler(event_type, enqueue_booking_audit)
