"""
Unit of Work

One atomic write batch. A booking write, its fee and the back-reference on
the child all commit or roll back together. Domain events gathered while the
batch is open reach the message bus only once the database has committed.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from django.db import transaction  # type: ignore

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Context manager: commit on a clean exit, roll back on an exception"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        ...

    @abstractmethod
    def rollback(self):
        ...

    @abstractmethod
    def collect_events(self, aggregate):
        """Take ownership of the events pending on ``aggregate``"""


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Unit of work over ``transaction.atomic``

    Usage:
        with DjangoUnitOfWork() as uow:
            SettingsService.find_or_create_default(actor, lock=True)
            bookings.create(booking)
            relation.refresh(booking.id, None, booking.child_id)
            uow.collect_events(booking)
        # committed; events are on their way to the bus

    Nested inside an outer atomic block it becomes a savepoint, and its
    events wait for the outermost commit.
    """

    def __init__(self, bus=None):
        self._bus = bus
        self._atomic = None
        self._pending: List[DomainEvent] = []

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            if self._atomic is not None:
                self._atomic.__exit__(exc_type, exc_val, exc_tb)
                self._atomic = None

    def commit(self):
        events, self._pending = self._pending, []
        logger.debug(f"Batch done, {len(events)} event(s) wait for commit")

        # on_commit drops the callback when an enclosing transaction rolls back
        if events:
            transaction.on_commit(lambda: self._publish(events))

    def rollback(self):
        if self._pending:
            logger.warning(f"Batch rolled back, dropping {len(self._pending)} event(s)")
        self._pending = []

    def collect_events(self, aggregate):
        events = getattr(aggregate, 'events', None)
        if not events:
            return
        self._pending.extend(events)
        aggregate.clear_events()
        logger.debug(f"Collected {len(events)} event(s) from {type(aggregate).__name__} {aggregate.id}")

    def _publish(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        bus = self._bus or message_bus
        logger.info(f"Publishing {len(events)} committed event(s)")
        try:
            bus.publish_events(events)
        except Exception as e:
            # The write is durable; nothing to undo
            logger.error(f"Publishing committed events failed: {e}", exc_info=True)
