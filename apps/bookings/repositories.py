"""Persistence wiring for bookings."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from django.db.models import Q  # type: ignore

from apps.children.repositories import child_repository
from shared.infrastructure.repository import DjangoRepository

from .domain.entities import ACTIVE_STATUSES, Booking, BookingStatus, Photo
from .models import Booking as BookingModel


def booking_to_entity(instance: BookingModel) -> Booking:
    return Booking(
        id=instance.id,
        child_id=instance.child_id,
        owner_id=instance.owner_id,
        arrival=instance.arrival,
        departure=instance.departure,
        status=BookingStatus(instance.status),
        fee=instance.fee,
        owner_notes=instance.owner_notes,
        employee_notes=instance.employee_notes,
        photos=[Photo.from_dict(photo) for photo in instance.photos or []],
        import_hash=instance.import_hash,
        created_at=instance.created_at,
        updated_at=instance.updated_at,
    )


def booking_to_fields(booking: Booking) -> dict:
    return {
        "child_id": booking.child_id,
        "owner_id": booking.owner_id,
        "arrival": booking.arrival,
        "departure": booking.departure,
        "status": booking.status.value,
        "fee": booking.fee,
        "owner_notes": booking.owner_notes,
        "employee_notes": booking.employee_notes,
        "photos": [photo.to_dict() for photo in booking.photos],
        "import_hash": booking.import_hash,
    }


class BookingRepository:
    """
    Booking persistence plus the queries the admission and relation rules need

    Built on the generic document repository; this class only adds the
    booking-specific queries and population of the child reference.
    """

    def __init__(self, documents: DjangoRepository[Booking] | None = None, children=None):
        self.documents = documents or DjangoRepository(BookingModel, booking_to_entity, booking_to_fields)
        self.children = children or child_repository()

    def find_by_id(self, id: UUID, *, populate: bool = True) -> Booking:
        booking = self.documents.find_by_id(id)
        if populate:
            booking.child = self.children.find_optional(booking.child_id)
        return booking

    def create(self, booking: Booking, *, actor_id: str = "") -> Booking:
        return self.documents.create(booking, actor_id=actor_id)

    def update(self, booking: Booking, *, actor_id: str = "") -> Booking:
        return self.documents.update(booking, actor_id=actor_id)

    def delete(self, id: UUID) -> None:
        self.documents.delete(id)

    def count_active_in_period(self, start: datetime, end: datetime, exclude_id: UUID | None = None) -> int:
        """Active bookings with departure >= start and arrival <= end, minus ``exclude_id``"""
        conditions = []
        if exclude_id is not None:
            conditions.append(~Q(pk=exclude_id))

        return self.documents.count_where(
            *conditions,
            departure__gte=start,
            arrival__lte=end,
            status__in=[status.value for status in ACTIVE_STATUSES],
        )

    def exists_for_child(self, child_id: UUID) -> bool:
        return self.documents.exists_where(child_id=child_id)

    def exists_with_import_hash(self, import_hash: str) -> bool:
        return self.documents.exists_where(import_hash=import_hash)
