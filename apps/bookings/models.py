"""Booking storage model."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.repository import DocumentModel


class Booking(DocumentModel):
    """Бронирование места в детском саду для ребёнка."""

    class Status(models.TextChoices):
        BOOKED = "booked", _("Booked")
        PROGRESS = "progress", _("In progress")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    # Document reference, kept in step with Child.booking_ids by the write path
    child_id = models.UUIDField(db_index=True)
    owner_id = models.CharField(max_length=64, db_index=True)
    arrival = models.DateTimeField()
    departure = models.DateTimeField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.BOOKED,
    )
    fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    owner_notes = models.TextField(blank=True)
    employee_notes = models.TextField(blank=True)
    photos = models.JSONField(default=list, blank=True)
    import_hash = models.CharField(max_length=255, null=True, blank=True, unique=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "departure", "arrival"], name="booking_status_period_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.pk} for child {self.child_id}"
