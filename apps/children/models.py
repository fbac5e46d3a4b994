"""Child storage model."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.repository import DocumentModel


class Child(DocumentModel):
    """Ребёнок, для которого оформляются бронирования."""

    class Type(models.TextChoices):
        BOY = "boy", _("Boy")
        GIRL = "girl", _("Girl")

    class Size(models.TextChoices):
        TODDLER = "toddler", _("Toddler")
        PRESCHOOLER = "preschooler", _("Preschooler")
        SCHOOL_AGED = "schoolAged", _("School aged")

    owner_id = models.CharField(max_length=64, db_index=True)
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=16, choices=Type.choices, blank=True)
    breed = models.CharField(max_length=255, blank=True)
    size = models.CharField(max_length=16, choices=Size.choices, blank=True)
    booking_ids = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Denormalized booking ids. Written only by the booking write path."),
    )
    import_hash = models.CharField(max_length=255, null=True, blank=True, unique=True)

    class Meta:
        verbose_name = _("Child")
        verbose_name_plural = _("Children")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name
