"""Application services for children.

Children are plain documents except for their booking back-references,
which this service never writes, and the destroy guard that keeps a child
alive while any booking points at it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable
from uuid import UUID, uuid4

from shared.application.context import RequestContext
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import ForbiddenError, ValidationError

from .domain.entities import Child
from .repositories import child_repository

logger = logging.getLogger(__name__)


@dataclass
class ChildData:
    owner_id: str
    name: str
    type: str = ''
    breed: str = ''
    size: str = ''


class ChildService:

    def __init__(self, children=None, bookings=None, uow_factory=DjangoUnitOfWork):
        if bookings is None:
            from apps.bookings.repositories import BookingRepository  # avoid circular import

            bookings = BookingRepository()
        self.children = children or child_repository()
        self.bookings = bookings
        self.uow_factory = uow_factory

    def create(self, data: ChildData, context: RequestContext, *, import_hash: str | None = None) -> Child:
        actor = context.actor
        if actor.is_child_owner and data.owner_id != actor.id:
            raise ForbiddenError()

        child = Child(
            id=uuid4(),
            owner_id=data.owner_id,
            name=data.name,
            type=data.type,
            breed=data.breed,
            size=data.size,
            import_hash=import_hash,
        )

        with self.uow_factory():
            self.children.create(child, actor_id=actor.id)

        logger.info(f"Child {child.id} created by {actor.id}")
        return self.children.find_by_id(child.id)

    def update(self, id: UUID, data: ChildData, context: RequestContext) -> Child:
        """
        Rewrite a child's own fields

        Bookings carry the owner of their child, so the owner of a child with
        bookings is fixed.
        """
        actor = context.actor
        existing = self.find_by_id(id, context)
        owner_id = actor.id if actor.is_child_owner else data.owner_id

        child = Child(
            id=existing.id,
            owner_id=owner_id,
            name=data.name,
            type=data.type,
            breed=data.breed,
            size=data.size,
            import_hash=existing.import_hash,
        )

        with self.uow_factory():
            # the booking write path locks the same row before attaching
            current = self.children.find_by_id(id, lock=True)
            if owner_id != current.owner_id and self.bookings.exists_for_child(id):
                raise ForbiddenError(reason='ownerChange')

            self.children.update(child, actor_id=actor.id)

        return self.children.find_by_id(id)

    def destroy_all(self, ids: Iterable[UUID], context: RequestContext) -> None:
        """Delete children as one batch; any failing id aborts all of them."""
        with self.uow_factory():
            for id in ids:
                self._validate_destroy(id, context)
                self.children.delete(id)

        logger.info(f"Children destroyed by {context.actor.id}")

    def _validate_destroy(self, id: UUID, context: RequestContext) -> None:
        self.find_by_id(id, context)

        if self.bookings.exists_for_child(id):
            raise ValidationError(
                'entities.child.validation.bookingExists',
                code='bookingExists',
            )

    def find_by_id(self, id: UUID, context: RequestContext) -> Child:
        child = self.children.find_by_id(id)
        actor = context.actor
        if actor.is_child_owner and child.owner_id != actor.id:
            raise ForbiddenError()
        return child

    def import_(self, data: ChildData, import_hash: str | None, context: RequestContext) -> Child:
        if not import_hash:
            raise ValidationError('importer.errors.importHashRequired', code='importHashRequired')

        if self.children.exists_where(import_hash=import_hash):
            raise ValidationError('importer.errors.importHashExistent', code='importHashExistent')

        return self.create(data, context, import_hash=import_hash)
