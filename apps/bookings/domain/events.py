"""
Booking Domain Events

Published by the unit of work after the write has committed.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    booking_id: UUID
    child_id: UUID
    owner_id: str
    status: str


@dataclass(kw_only=True)
class BookingUpdated(DomainEvent):
    booking_id: UUID
    previous_status: str
    status: str


@dataclass(kw_only=True)
class BookingProgressUpdated(DomainEvent):
    """
    Event: Staff posted news about a stay in progress

    Raised when a PROGRESS booking gets new employee notes or new photos.

    Triggers:
    - Send the booking update email to the owner, in the writer's language
    """
    booking_id: UUID
    language: str


@dataclass(kw_only=True)
class BookingDestroyed(DomainEvent):
    booking_id: UUID
    child_id: UUID
