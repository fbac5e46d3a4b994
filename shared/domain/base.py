"""
Base Domain Classes

- Entity: a stored document, identified by its UUID
- Aggregate: an entity that records domain events until a unit of work takes them
- DomainEvent: a fact about a committed write
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4

from django.utils import timezone  # type: ignore


@dataclass(kw_only=True, eq=False)
class Entity(ABC):
    """
    Identity-bearing domain object

    Equality and hashing use ``id`` only, so a re-read copy of a booking
    equals the instance it was written from. The audit timestamps are set
    by the database and stay ``None`` on entities that were never stored.
    """
    id: UUID = field(default_factory=uuid4)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __eq__(self, other):
        return isinstance(other, type(self)) and self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(kw_only=True, eq=False)
class Aggregate(Entity):
    """Entity that buffers the events of the write being prepared"""
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Pending events, as a copy"""
        return list(self._events)


@dataclass(kw_only=True)
class DomainEvent:
    """Subclasses add their payload as keyword-only fields"""
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)
    aggregate_id: UUID | None = None

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        """Envelope used when logging the event"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.name,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
