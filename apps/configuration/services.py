"""Settings provider consumed by the booking engine."""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings  # type: ignore

from shared.application.context import Actor
from shared.infrastructure.repository import lock_queryset_if_possible

from .models import DaycareSettings

logger = logging.getLogger(__name__)


class SettingsService:
    """
    Reads the singleton settings row, creating it with defaults on first use.

    Nothing is cached: capacity and fee may change between two calls.
    """

    @staticmethod
    def find_or_create_default(actor: Actor | None = None, *, lock: bool = False) -> DaycareSettings:
        """
        Return the current settings.

        With ``lock=True`` inside a transaction the row is selected for
        update; every admitting write takes this lock, which serializes
        capacity checks against the single shared calendar.
        """
        queryset = DaycareSettings.objects.filter(pk=DaycareSettings.DEFAULT_ID)
        if lock:
            queryset = lock_queryset_if_possible(queryset)

        current = queryset.first()
        if current is not None:
            return current

        current, created = DaycareSettings.objects.get_or_create(
            pk=DaycareSettings.DEFAULT_ID,
            defaults={
                "capacity": settings.DAYCARE_DEFAULT_CAPACITY,
                "daily_fee": Decimal(str(settings.DAYCARE_DEFAULT_DAILY_FEE)),
                "updated_by": actor.id if actor else "",
            },
        )
        if created:
            logger.info(
                f"Created default settings: capacity={current.capacity}, daily_fee={current.daily_fee}"
            )
        if lock:
            current = lock_queryset_if_possible(
                DaycareSettings.objects.filter(pk=DaycareSettings.DEFAULT_ID)
            ).get()
        return current

    @staticmethod
    def save(actor: Actor, *, capacity: int | None = None, daily_fee: Decimal | None = None) -> DaycareSettings:
        current = SettingsService.find_or_create_default(actor)
        if capacity is not None:
            current.capacity = capacity
        if daily_fee is not None:
            current.daily_fee = daily_fee
        current.updated_by = actor.id
        current.full_clean()
        current.save()
        return current
