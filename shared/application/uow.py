"""
Unit of Work Pattern

Runs a sequence of persistence operations atomically: everything commits
together or nothing does. Domain events recorded during the unit of work
are published only after the transaction has committed.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, TypeVar
import logging

from django.db import DatabaseError, transaction

from shared.domain.base import DomainEvent
from shared.domain.errors import BookingError, FatalError, TransactionRollbackError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    @abstractmethod
    def record_event(self, event: DomainEvent):
        """Remember an event to publish once the work is committed"""
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Wraps ``transaction.atomic()``. Errors raised inside the block roll
    back every write made within it and then propagate unchanged;
    ``DatabaseError`` that is not already a ``BookingError`` is reported
    as ``FatalError``. A failure while rolling back is reported as
    ``TransactionRollbackError`` carrying both errors.

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = gateway.insert_booking(...)
            uow.record_event(BookingCreated(...))
        # Events are published after commit
    """

    def __init__(self, using: str | None = None):
        self.using = using
        self._events: List[DomainEvent] = []
        self._transaction = None
        self._outermost = False

    def __enter__(self):
        """Start database transaction"""
        connection = transaction.get_connection(self.using)
        self._outermost = not connection.in_atomic_block
        self._transaction = transaction.atomic(using=self.using)
        try:
            self._transaction.__enter__()
        except DatabaseError as exc:
            logger.error(f"Could not begin transaction: {exc}", exc_info=True)
            raise FatalError(f"Could not begin transaction: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        if exc_type is None:
            self.commit()
            try:
                self._transaction.__exit__(None, None, None)
            except DatabaseError as exc:
                logger.error(f"Transaction commit failed: {exc}", exc_info=True)
                raise FatalError(f"Transaction commit failed: {exc}") from exc
            return False

        self.rollback()
        try:
            self._transaction.__exit__(exc_type, exc_val, exc_tb)
        except Exception as rollback_error:
            logger.error(
                f"Rollback failed after {exc_type.__name__}: {rollback_error}",
                exc_info=True
            )
            raise TransactionRollbackError(exc_val, rollback_error) from exc_val

        # atomic() swallows a failed outermost rollback and drops the connection instead
        if self._outermost and transaction.get_connection(self.using).connection is None:
            rollback_error = DatabaseError("connection dropped while rolling back")
            logger.error(f"Rollback failed after {exc_type.__name__}: {rollback_error}")
            raise TransactionRollbackError(exc_val, rollback_error) from exc_val

        if isinstance(exc_val, DatabaseError) and not isinstance(exc_val, BookingError):
            logger.error(f"Unexpected persistence error: {exc_val}", exc_info=exc_val)
            raise FatalError(f"Unexpected persistence error: {exc_val}") from exc_val
        return False

    def commit(self):
        """
        Schedule event publishing for after the commit

        Callbacks registered with ``transaction.on_commit()`` are dropped
        by Django if the commit does not happen.
        """
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()

        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self.using)

    def rollback(self):
        """Discard recorded events; the database rollback is done by atomic()"""
        logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        self._events.clear()

    def record_event(self, event: DomainEvent):
        self._events.append(event)

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful transaction commit.
        """
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        message_bus.publish_events(events)


def run_in_transaction(unit_of_work: Callable[[DjangoUnitOfWork], T], using: str | None = None) -> T:
    """
    Run ``unit_of_work`` atomically and return its result.

    The callable receives the active unit of work so it can record events.
    No retries are attempted: the caller sees one definitive outcome.
    """
    with DjangoUnitOfWork(using=using) as uow:
        return unit_of_work(uow)
