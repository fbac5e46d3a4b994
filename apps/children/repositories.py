"""Persistence wiring for children."""

from __future__ import annotations

from shared.infrastructure.repository import DjangoRepository

from .domain.entities import Child
from .models import Child as ChildModel


def child_to_entity(instance: ChildModel) -> Child:
    return Child(
        id=instance.id,
        owner_id=instance.owner_id,
        name=instance.name,
        type=instance.type,
        breed=instance.breed,
        size=instance.size,
        booking_ids=list(instance.booking_ids or []),
        import_hash=instance.import_hash,
        created_at=instance.created_at,
        updated_at=instance.updated_at,
    )


def child_to_fields(child: Child) -> dict:
    # booking_ids is owned by the relation synchronizer and never written here
    return {
        "owner_id": child.owner_id,
        "name": child.name,
        "type": child.type,
        "breed": child.breed,
        "size": child.size,
        "import_hash": child.import_hash,
    }


def child_repository() -> DjangoRepository[Child]:
    return DjangoRepository(ChildModel, child_to_entity, child_to_fields)
