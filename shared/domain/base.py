"""
Base Domain Classes

This module provides the foundational building blocks shared by the apps:
- ValueObject: Immutable objects compared by value
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


def _serialize(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, ValueObject):
        return {f.name: _serialize(getattr(value, f.name)) for f in fields(value)}
    return value


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    They are recorded inside a unit of work and published after commit.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert event to a JSON-friendly dictionary (used as Celery payload)"""
        payload = {
            f.name: _serialize(getattr(self, f.name))
            for f in fields(self)
        }
        payload['event_type'] = self.__class__.__name__
        return payload
