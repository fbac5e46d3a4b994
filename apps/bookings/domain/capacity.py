"""
Capacity admission

The daycare has a single calendar with a fixed number of places. A booking
is admitted while fewer than ``capacity`` other active bookings overlap it.
Only BOOKED and PROGRESS bookings compete for places; cancelling or
completing a stay never needs one.
"""

from datetime import datetime
from typing import Iterable
from uuid import UUID

from shared.domain.exceptions import PeriodFull
from shared.domain.value_objects import Period

from .entities import ACTIVE_STATUSES, Booking, BookingStatus


def requires_admission(status: BookingStatus) -> bool:
    return status in ACTIVE_STATUSES


def count_active_overlapping(
    bookings: Iterable[Booking],
    start: datetime,
    end: datetime,
    exclude_id: UUID | None = None,
) -> int:
    """
    Count active bookings intersecting ``[start, end]``

    Same rule as the repository query: departure >= start and arrival <= end.
    """
    period = Period(start, end)
    return sum(
        1
        for booking in bookings
        if booking.is_active
        and booking.id != exclude_id
        and booking.period.overlaps_with(period)
    )


def is_period_available(active_count: int, capacity: int) -> bool:
    return active_count < capacity


def admit(status: BookingStatus, active_count: int, capacity: int) -> None:
    """
    Raises:
        PeriodFull: the status needs a place and none is left
    """
    if not requires_admission(status):
        return

    if not is_period_available(active_count, capacity):
        raise PeriodFull(active=active_count, capacity=capacity)
