"""
Generic document repository over Django models.

One adapter serves every entity type: it is composed with a pair of mapper
functions (model instance -> entity, entity -> field dict) instead of being
subclassed per entity. Relation bookkeeping is not done here; see
``shared.application.relations``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterable, List, Type, TypeVar
from uuid import UUID

from django.db import models, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.exceptions import NotFoundError

logger = logging.getLogger(__name__)

E = TypeVar("E")


class DocumentModel(models.Model):
    """Abstract base for stored documents: UUID identity plus audit fields."""

    id = models.UUIDField(primary_key=True, editable=False)
    created_by = models.CharField(max_length=64, blank=True, default="")
    updated_by = models.CharField(max_length=64, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


def lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


class DjangoRepository(Generic[E]):
    """
    Persistence adapter parametrized by entity shape.

    Writes are expected to run inside a ``DjangoUnitOfWork`` so that they
    join the caller's atomic batch.
    """

    def __init__(
        self,
        model: Type[DocumentModel],
        to_entity: Callable[[Any], E],
        to_fields: Callable[[E], dict],
    ):
        self.model = model
        self.to_entity = to_entity
        self.to_fields = to_fields

    @property
    def name(self) -> str:
        return self.model._meta.model_name

    # ----- reads -----

    def find_by_id(self, id: UUID, *, lock: bool = False) -> E:
        queryset = self.model.objects.filter(pk=id)
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        instance = queryset.first()
        if instance is None:
            raise NotFoundError(entity=self.name, id=str(id))
        return self.to_entity(instance)

    def find_optional(self, id: UUID) -> E | None:
        instance = self.model.objects.filter(pk=id).first()
        return self.to_entity(instance) if instance is not None else None

    def query_by_range(self, field: str, lo=None, hi=None) -> List[E]:
        """Records whose ``field`` lies in ``[lo, hi]``; either bound may be open."""
        lookups = {}
        if lo is not None:
            lookups[f"{field}__gte"] = lo
        if hi is not None:
            lookups[f"{field}__lte"] = hi
        return self._map(self.model.objects.filter(**lookups))

    def query_equal(self, field: str, value) -> List[E]:
        return self._map(self.model.objects.filter(**{field: value}))

    def count_where(self, *conditions, **lookups) -> int:
        return self.model.objects.filter(*conditions, **lookups).count()

    def exists_where(self, *conditions, **lookups) -> bool:
        return self.model.objects.filter(*conditions, **lookups).exists()

    # ----- writes -----

    def create(self, entity: E, *, actor_id: str = "") -> E:
        instance = self.model.objects.create(
            id=entity.id,
            created_by=actor_id,
            updated_by=actor_id,
            **self.to_fields(entity),
        )
        logger.debug(f"Created {self.name} {instance.pk}")
        return self.to_entity(instance)

    def update(self, entity: E, *, actor_id: str = "") -> E:
        updated = self.model.objects.filter(pk=entity.id).update(
            updated_by=actor_id,
            updated_at=timezone.now(),
            **self.to_fields(entity),
        )
        if not updated:
            raise NotFoundError(entity=self.name, id=str(entity.id))
        logger.debug(f"Updated {self.name} {entity.id}")
        return self.find_by_id(entity.id)

    def update_fields(self, id: UUID, **fields) -> None:
        """Write a subset of columns without touching the audit trail."""
        updated = self.model.objects.filter(pk=id).update(**fields)
        if not updated:
            raise NotFoundError(entity=self.name, id=str(id))

    def delete(self, id: UUID) -> None:
        deleted, _ = self.model.objects.filter(pk=id).delete()
        if not deleted:
            raise NotFoundError(entity=self.name, id=str(id))
        logger.debug(f"Deleted {self.name} {id}")

    def _map(self, instances: Iterable) -> List[E]:
        return [self.to_entity(instance) for instance in instances]
