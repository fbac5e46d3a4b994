"""
Child Domain Entity
"""

from dataclasses import dataclass, field
from typing import List

from shared.domain.base import Entity


@dataclass(eq=False)
class Child(Entity):
    """
    A child that can be booked into the daycare

    ``booking_ids`` mirrors ``Booking.child_id`` and is read-only from the
    child's point of view: only the booking write path changes it.
    """
    owner_id: str
    name: str
    type: str = ''
    breed: str = ''
    size: str = ''
    booking_ids: List[str] = field(default_factory=list)
    import_hash: str | None = None

    def __str__(self):
        return f"Child {self.name} ({self.id})"
