"""Read-side operations on bookings."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from apps.configuration.services import SettingsService
from shared.application.context import RequestContext
from shared.domain.exceptions import ForbiddenError

from apps.bookings.domain.capacity import is_period_available
from apps.bookings.domain.entities import Booking
from apps.bookings.domain.fees import calculate_fee
from apps.bookings.repositories import BookingRepository


class BookingQueries:

    def __init__(self, bookings=None, settings_provider=SettingsService):
        self.bookings = bookings or BookingRepository()
        self.settings_provider = settings_provider

    def find_by_id(self, id: UUID, context: RequestContext) -> Booking:
        """Child owners only see their own bookings."""
        booking = self.bookings.find_by_id(id)
        actor = context.actor
        if actor.is_child_owner and booking.owner_id != actor.id:
            raise ForbiddenError(reason='ownerMismatch')
        return booking

    def count_active_overlapping(self, start: datetime, end: datetime, exclude_id: UUID | None = None) -> int:
        return self.bookings.count_active_in_period(start, end, exclude_id)

    def is_period_available(
        self,
        start: datetime,
        end: datetime,
        exclude_id: UUID | None,
        context: RequestContext,
    ) -> bool:
        capacity = self.settings_provider.find_or_create_default(context.actor).capacity
        return is_period_available(self.count_active_overlapping(start, end, exclude_id), capacity)

    def calculate_fee(self, arrival: datetime, departure: datetime, context: RequestContext) -> Decimal:
        daily_fee = self.settings_provider.find_or_create_default(context.actor).daily_fee
        return calculate_fee(arrival, departure, daily_fee)
