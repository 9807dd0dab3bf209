"""Celery tasks for the booking domain."""

from __future__ import annotations

import structlog
from celery import shared_task  # type: ignore

audit_logger = structlog.get_logger("apps.bookings.audit")


@shared_task(name="bookings.record_booking_event")
def record_booking_event(payload: dict) -> str:
    """
    Write one audit entry per committed booking event.

    ``payload`` is ``DomainEvent.to_dict()``; only JSON types reach the broker.

    Returns:
        str: the event type that was recorded
    """
    event = dict(payload)
    event_type = event.pop("event_type", "unknown")
    audit_logger.info("booking_event", booking_event_type=event_type, **event)
    return event_type
