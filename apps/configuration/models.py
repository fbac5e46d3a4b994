"""Settings storage."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class DaycareSettings(models.Model):
    """Singleton row with the values the booking engine consumes."""

    DEFAULT_ID = "default"

    id = models.CharField(primary_key=True, max_length=32, default=DEFAULT_ID, editable=False)
    capacity = models.PositiveIntegerField(
        help_text=_("Maximum number of concurrently active bookings."),
    )
    daily_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    updated_by = models.CharField(max_length=64, blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Settings")
        verbose_name_plural = _("Settings")

    def __str__(self) -> str:
        return f"capacity={self.capacity}, daily_fee={self.daily_fee}"
