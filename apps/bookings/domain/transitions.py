"""
Booking status transitions and role rules

Graph:
    BOOKED   -> PROGRESS, CANCELLED
    PROGRESS -> COMPLETED, CANCELLED
    COMPLETED, CANCELLED: terminal

Saving a non-terminal booking in its current status is an edit, not a
transition, and is allowed. Nothing leaves or re-enters a terminal status.

Role rules are layered on top of the graph:
- child owners book and cancel their own stays, nothing else
- employees run the stay but cannot reopen it or move it to another child
  or owner once it has started
"""

from uuid import UUID

from shared.application.context import Actor
from shared.domain.exceptions import ForbiddenError

from .entities import Booking, BookingStatus

TRANSITIONS = {
    BookingStatus.BOOKED: frozenset({BookingStatus.PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})

OWNER_REQUESTABLE_STATUSES = frozenset({BookingStatus.BOOKED, BookingStatus.CANCELLED})


def can_transition(existing: BookingStatus, requested: BookingStatus) -> bool:
    if existing in TERMINAL_STATUSES:
        return False
    return requested == existing or requested in TRANSITIONS[existing]


def validate_create(actor: Actor, *, status: BookingStatus, owner_id: str, employee_notes: str = '') -> None:
    """
    Raises:
        ForbiddenError: a child owner books for someone else or in a
            status other than BOOKED, or an actor without a staff role
            writes staff notes
    """
    if actor.is_child_owner:
        if owner_id != actor.id:
            raise ForbiddenError(reason='ownerMismatch')

        if status != BookingStatus.BOOKED:
            raise ForbiddenError(reason='ownerStatus')

    if employee_notes and not actor.is_staff:
        raise ForbiddenError(reason='employeeNotes')


def validate_update(
    actor: Actor,
    existing: Booking,
    *,
    status: BookingStatus,
    owner_id: str,
    child_id: UUID,
    employee_notes: str = '',
) -> None:
    """
    Check a requested change against the freshly read ``existing`` booking

    ``owner_id`` must already be forced to the actor for child owners.

    Raises:
        ForbiddenError: the actor may not make this change
    """
    if not actor.is_staff and (employee_notes or '') != (existing.employee_notes or ''):
        raise ForbiddenError(reason='employeeNotes')

    if actor.is_child_owner:
        _validate_update_for_child_owner(actor, existing, status)

    if actor.is_employee:
        _validate_update_for_employee(existing, status, owner_id, child_id)

    if not can_transition(existing.status, status):
        raise ForbiddenError(
            reason='transition',
            existing=existing.status.value,
            requested=status.value,
        )


def _validate_update_for_child_owner(
    actor: Actor,
    existing: Booking,
    status: BookingStatus,
) -> None:
    if existing.owner_id != actor.id:
        raise ForbiddenError(reason='ownerMismatch')

    if existing.status != BookingStatus.BOOKED:
        raise ForbiddenError(reason='ownerStatus')

    if status not in OWNER_REQUESTABLE_STATUSES:
        raise ForbiddenError(reason='ownerStatus')


def _validate_update_for_employee(
    existing: Booking,
    status: BookingStatus,
    owner_id: str,
    child_id: UUID,
) -> None:
    if existing.status in TERMINAL_STATUSES:
        raise ForbiddenError(reason='terminal')

    if existing.status != BookingStatus.BOOKED:
        if status == BookingStatus.BOOKED:
            raise ForbiddenError(reason='reopen')

        if owner_id != existing.owner_id:
            raise ForbiddenError(reason='ownerChange')

        if child_id != existing.child_id:
            raise ForbiddenError(reason='childChange')


def is_progress_update(previous: Booking, updated: Booking) -> bool:
    """
    Whether a write is news for the owner of a stay in progress

    True when the updated booking is PROGRESS and either carries new
    employee notes or a photo the previous snapshot did not have.
    """
    if updated.status != BookingStatus.PROGRESS:
        return False

    if updated.employee_notes and updated.employee_notes != previous.employee_notes:
        return True

    return bool(updated.photos_not_in(previous.photo_ids))
