"""
Two-way relation synchronization.

A one-to-many relation stored twice: the authoritative forward reference on
the record (``Booking.child_id``) and a denormalized list of record ids on
the target (``Child.booking_ids``). Nothing in the database keeps the two in
step, so every write of the forward reference must call ``refresh`` or
``detach`` inside the same unit of work.
"""

from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction  # type: ignore

from shared.domain.exceptions import NotFoundError
from shared.infrastructure.repository import DjangoRepository, lock_queryset_if_possible

logger = logging.getLogger(__name__)


class TwoWayRelation:
    """
    Keeps ``target.<back_reference>`` consistent with the record's forward reference.

    Both operations are idempotent: adding an id that is already present or
    removing one that is absent leaves the list untouched.
    """

    def __init__(self, targets: DjangoRepository, back_reference: str):
        self.targets = targets
        self.back_reference = back_reference

    def refresh(self, record_id: UUID, previous_target_id: UUID | None, target_id: UUID | None) -> None:
        """Point the back-reference at ``target_id``, moving it off the previous target."""
        self._require_batch()

        if previous_target_id and previous_target_id != target_id:
            self.detach(record_id, previous_target_id)

        if target_id:
            self._add(record_id, target_id)

    def detach(self, record_id: UUID, target_id: UUID | None) -> None:
        self._require_batch()
        if not target_id:
            return

        instance = self._locked_target(target_id)
        if instance is None:
            logger.warning(
                f"{self.targets.name} {target_id} is gone, nothing to detach for {record_id}"
            )
            return

        ids = list(getattr(instance, self.back_reference) or [])
        if str(record_id) not in ids:
            return

        ids.remove(str(record_id))
        self.targets.update_fields(target_id, **{self.back_reference: ids})
        logger.debug(f"Detached {record_id} from {self.targets.name} {target_id}")

    def _add(self, record_id: UUID, target_id: UUID) -> None:
        instance = self._locked_target(target_id)
        if instance is None:
            raise NotFoundError(entity=self.targets.name, id=str(target_id))

        ids = list(getattr(instance, self.back_reference) or [])
        if str(record_id) in ids:
            return

        ids.append(str(record_id))
        self.targets.update_fields(target_id, **{self.back_reference: ids})
        logger.debug(f"Attached {record_id} to {self.targets.name} {target_id}")

    def _locked_target(self, target_id: UUID):
        queryset = self.targets.model.objects.filter(pk=target_id)
        return lock_queryset_if_possible(queryset).first()

    @staticmethod
    def _require_batch() -> None:
        if not transaction.get_connection().in_atomic_block:
            raise RuntimeError("Relation updates must run inside a unit of work")
