"""
Booking Domain Entities

- Booking: Aggregate representing a child's stay
- BookingStatus: FSM states for booking lifecycle
- Photo: Attachment added by staff during a stay
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, List
from uuid import UUID

from shared.domain.base import Aggregate
from shared.domain.value_objects import Period


class BookingStatus(str, Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - BOOKED -> PROGRESS (child has arrived)
    - BOOKED -> CANCELLED
    - PROGRESS -> COMPLETED (child has been picked up)
    - PROGRESS -> CANCELLED
    COMPLETED and CANCELLED are terminal.
    """
    BOOKED = 'booked'
    PROGRESS = 'progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


# Statuses that occupy a place in the calendar
ACTIVE_STATUSES = frozenset({BookingStatus.BOOKED, BookingStatus.PROGRESS})


@dataclass(frozen=True)
class Photo:
    """Attachment reference. Two photos are the same photo if their ids match."""
    id: str
    name: str = ''
    url: str = ''

    def __eq__(self, other):
        if not isinstance(other, Photo):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    @classmethod
    def from_dict(cls, data: dict) -> 'Photo':
        return cls(id=str(data['id']), name=data.get('name', ''), url=data.get('url', ''))

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'url': self.url}


@dataclass(eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Key invariants:
    - owner_id equals the owner of the referenced child
    - arrival <= departure while the booking is BOOKED
    - fee is always derived from the period and the daily fee, never supplied
    - child_id is authoritative; the child's booking list only mirrors it
    """

    child_id: UUID
    owner_id: str
    arrival: datetime
    departure: datetime
    status: BookingStatus = BookingStatus.BOOKED
    fee: Decimal = Decimal('0.00')
    owner_notes: str = ''
    employee_notes: str = ''
    photos: List[Photo] = field(default_factory=list)
    import_hash: str | None = None

    # Populated on read, never written
    child: object | None = field(default=None, repr=False)

    @property
    def period(self) -> Period:
        return Period(self.arrival, self.departure)

    @property
    def is_active(self) -> bool:
        """Check if booking occupies a place (BOOKED or PROGRESS)"""
        return self.status in ACTIVE_STATUSES

    @property
    def photo_ids(self) -> set:
        return {photo.id for photo in self.photos}

    def photos_not_in(self, photo_ids: Iterable[str]) -> List[Photo]:
        """Photos of this booking whose ids are absent from ``photo_ids``"""
        known = set(photo_ids)
        return [photo for photo in self.photos if photo.id not in known]

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, child_id={self.child_id}, "
            f"status={self.status.value}, period={self.period!r})"
        )
