"""
Booking Command Handlers

The use cases of the booking domain. Each handler validates the command
against a fresh read of the current state, then performs every write in a
single unit of work.

Commands:
- CreateBookingCommand: Book a child in
- UpdateBookingCommand: Edit, progress, complete or cancel a booking
- DestroyBookingsCommand: Delete bookings as one batch
- ImportBookingCommand: Create a booking from an import row, once per hash
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4
import logging

from apps.children.repositories import child_repository
from apps.configuration.services import SettingsService
from shared.application.context import RequestContext
from shared.application.relations import TwoWayRelation
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import ForbiddenError, ValidationError

from apps.bookings.domain.capacity import admit
from apps.bookings.domain.entities import Booking, BookingStatus, Photo
from apps.bookings.domain.events import (
    BookingCreated,
    BookingDestroyed,
    BookingProgressUpdated,
    BookingUpdated,
)
from apps.bookings.domain.fees import calculate_fee
from apps.bookings.domain.period import validate_period
from apps.bookings.domain.transitions import (
    is_progress_update,
    validate_create,
    validate_update,
)
from apps.bookings.repositories import BookingRepository

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a booking

    There is no fee field: the fee is always computed.
    """
    child_id: UUID
    owner_id: str
    arrival: datetime
    departure: datetime
    status: BookingStatus = BookingStatus.BOOKED
    owner_notes: str = ''
    employee_notes: str = ''
    photos: List[Photo] = field(default_factory=list)


@dataclass
class UpdateBookingCommand:
    """Command carrying the full new state of a booking"""
    booking_id: UUID
    child_id: UUID
    owner_id: str
    arrival: datetime
    departure: datetime
    status: BookingStatus
    owner_notes: str = ''
    employee_notes: str = ''
    photos: List[Photo] = field(default_factory=list)


@dataclass
class DestroyBookingsCommand:
    booking_ids: List[UUID]


@dataclass
class ImportBookingCommand:
    booking: CreateBookingCommand
    import_hash: str | None


# ===== Shared steps =====

class _BookingWriteSteps:
    """Validation and admission steps shared by create and update"""

    def __init__(self, bookings, children, settings_provider):
        self.bookings = bookings
        self.children = children
        self.settings_provider = settings_provider

    def validate_child_and_owner_match(self, child_id: UUID, owner_id: str) -> None:
        """Runs inside the unit of work; the child row stays locked until commit"""
        child = self.children.find_by_id(child_id, lock=True)

        if child.owner_id != owner_id:
            raise ForbiddenError(reason='childOwnerMismatch')

    def admit_and_price(self, booking: Booking, context: RequestContext, exclude_id: UUID | None = None) -> None:
        """
        Admission check and fee, both against the locked settings row

        Must run inside the unit of work: the lock is what serializes two
        writers racing for the last place.
        """
        current = self.settings_provider.find_or_create_default(context.actor, lock=True)

        active = self.bookings.count_active_in_period(booking.arrival, booking.departure, exclude_id)
        admit(booking.status, active, current.capacity)

        booking.fee = calculate_fee(booking.arrival, booking.departure, current.daily_fee)


def _relation(children_documents) -> TwoWayRelation:
    return TwoWayRelation(children_documents, 'booking_ids')


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Steps:
    1. Role rules (child owners book for themselves, BOOKED only)
    2. Period sanity for BOOKED stays
    3. Unit of work: lock the child and check it belongs to the booking owner,
       lock settings, admission check, fee, insert, back-reference
    4. Commit, then events are published
    5. Re-read and return the stored booking
    """

    def __init__(
        self,
        bookings=None,
        children=None,
        settings_provider=SettingsService,
        uow_factory=DjangoUnitOfWork,
    ):
        self.bookings = bookings or BookingRepository()
        self.children = children or child_repository()
        self.relation = _relation(self.children)
        self.steps = _BookingWriteSteps(self.bookings, self.children, settings_provider)
        self.uow_factory = uow_factory

    def handle(self, command: CreateBookingCommand, context: RequestContext, *, import_hash: str | None = None) -> Booking:
        actor = context.actor
        logger.info(
            f"Creating booking for child {command.child_id} by {actor.id}, "
            f"period {command.arrival} - {command.departure}, status {command.status.value}"
        )

        validate_create(
            actor,
            status=command.status,
            owner_id=command.owner_id,
            employee_notes=command.employee_notes,
        )
        validate_period(command.status, command.arrival, command.departure, context.now())

        booking = Booking(
            id=uuid4(),
            child_id=command.child_id,
            owner_id=command.owner_id,
            arrival=command.arrival,
            departure=command.departure,
            status=command.status,
            owner_notes=command.owner_notes,
            employee_notes=command.employee_notes,
            photos=list(command.photos),
            import_hash=import_hash,
        )

        with self.uow_factory() as uow:
            self.steps.validate_child_and_owner_match(booking.child_id, booking.owner_id)
            self.steps.admit_and_price(booking, context)

            booking.add_event(BookingCreated(
                aggregate_id=booking.id,
                booking_id=booking.id,
                child_id=booking.child_id,
                owner_id=booking.owner_id,
                status=booking.status.value,
            ))

            self.bookings.create(booking, actor_id=actor.id)
            self.relation.refresh(booking.id, None, booking.child_id)

            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} created, fee {booking.fee}")

        return self.bookings.find_by_id(booking.id)


class UpdateBookingHandler:
    """
    Handler for UpdateBooking command

    The existing booking is always re-read here; the command never says
    what the previous state was. The progress-update notification is
    decided from that pre-write snapshot and the new state, and is only
    published once the write has committed.
    """

    def __init__(
        self,
        bookings=None,
        children=None,
        settings_provider=SettingsService,
        uow_factory=DjangoUnitOfWork,
    ):
        self.bookings = bookings or BookingRepository()
        self.children = children or child_repository()
        self.relation = _relation(self.children)
        self.steps = _BookingWriteSteps(self.bookings, self.children, settings_provider)
        self.uow_factory = uow_factory

    def handle(self, command: UpdateBookingCommand, context: RequestContext) -> Booking:
        actor = context.actor
        logger.info(
            f"Updating booking {command.booking_id} by {actor.id}, status {command.status.value}"
        )

        existing = self.bookings.find_by_id(command.booking_id, populate=False)

        owner_id = actor.id if actor.is_child_owner else command.owner_id

        validate_update(
            actor,
            existing,
            status=command.status,
            owner_id=owner_id,
            child_id=command.child_id,
            employee_notes=command.employee_notes,
        )
        validate_period(command.status, command.arrival, command.departure, context.now())

        booking = Booking(
            id=existing.id,
            child_id=command.child_id,
            owner_id=owner_id,
            arrival=command.arrival,
            departure=command.departure,
            status=command.status,
            owner_notes=command.owner_notes,
            employee_notes=command.employee_notes,
            photos=list(command.photos),
            import_hash=existing.import_hash,
            created_at=existing.created_at,
        )
        must_notify = is_progress_update(existing, booking)

        with self.uow_factory() as uow:
            self.steps.validate_child_and_owner_match(booking.child_id, booking.owner_id)
            self.steps.admit_and_price(booking, context, exclude_id=existing.id)

            booking.add_event(BookingUpdated(
                aggregate_id=booking.id,
                booking_id=booking.id,
                previous_status=existing.status.value,
                status=booking.status.value,
            ))
            if must_notify:
                booking.add_event(BookingProgressUpdated(
                    aggregate_id=booking.id,
                    booking_id=booking.id,
                    language=context.language,
                ))

            self.bookings.update(booking, actor_id=actor.id)
            self.relation.refresh(booking.id, existing.child_id, booking.child_id)

            uow.collect_events(booking)

        logger.info(
            f"Booking {booking.id} updated: {existing.status.value} -> {booking.status.value}, "
            f"fee {booking.fee}, progress update: {must_notify}"
        )

        return self.bookings.find_by_id(booking.id)


class DestroyBookingsHandler:
    """
    Handler for DestroyBookings command

    Every id is checked and deleted inside one unit of work, so a missing
    or forbidden id rolls back the deletions already made for the batch.
    """

    def __init__(self, bookings=None, children=None, uow_factory=DjangoUnitOfWork):
        self.bookings = bookings or BookingRepository()
        self.children = children or child_repository()
        self.relation = _relation(self.children)
        self.uow_factory = uow_factory

    def handle(self, command: DestroyBookingsCommand, context: RequestContext) -> None:
        actor = context.actor
        logger.info(f"Destroying {len(command.booking_ids)} bookings by {actor.id}")

        with self.uow_factory() as uow:
            for booking_id in command.booking_ids:
                booking = self.bookings.find_by_id(booking_id, populate=False)

                if actor.is_child_owner and booking.owner_id != actor.id:
                    raise ForbiddenError(reason='ownerMismatch')

                booking.add_event(BookingDestroyed(
                    aggregate_id=booking.id,
                    booking_id=booking.id,
                    child_id=booking.child_id,
                ))

                self.relation.detach(booking.id, booking.child_id)
                self.bookings.delete(booking.id)

                uow.collect_events(booking)

        logger.info(f"Destroyed bookings {[str(id) for id in command.booking_ids]}")


class ImportBookingHandler:
    """Creates a booking from an import row; each import hash is used once"""

    def __init__(self, bookings=None, create_handler: CreateBookingHandler | None = None):
        self.bookings = bookings or BookingRepository()
        self.create_handler = create_handler or CreateBookingHandler(bookings=self.bookings)

    def handle(self, command: ImportBookingCommand, context: RequestContext) -> Booking:
        if not command.import_hash:
            raise ValidationError('importer.errors.importHashRequired', code='importHashRequired')

        if self.bookings.exists_with_import_hash(command.import_hash):
            raise ValidationError('importer.errors.importHashExistent', code='importHashExistent')

        return self.create_handler.handle(command.booking, context, import_hash=command.import_hash)
