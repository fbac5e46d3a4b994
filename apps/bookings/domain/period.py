"""
Period evaluation

Temporal sanity of a stay. Pure functions of their arguments; the current
instant is always passed in.
"""

from datetime import datetime

from shared.domain.exceptions import InvalidPeriod, PastPeriod
from shared.domain.value_objects import Period

from .entities import BookingStatus


def is_future_period(arrival: datetime, departure: datetime, now: datetime) -> bool:
    """True when the period is ordered and does not start before ``now``."""
    return arrival <= departure and arrival >= now


def periods_overlap(first: Period, second: Period) -> bool:
    return first.overlaps_with(second)


def validate_period(status: BookingStatus, arrival: datetime, departure: datetime, now: datetime) -> None:
    """
    Validate the period of a booking that is (or becomes) BOOKED

    Other statuses describe stays that have started or ended, so their
    periods are not checked.

    Raises:
        InvalidPeriod: arrival is after departure
        PastPeriod: arrival is before now
    """
    if status != BookingStatus.BOOKED:
        return

    if arrival > departure:
        raise InvalidPeriod(arrival=arrival.isoformat(), departure=departure.isoformat())

    if arrival < now:
        raise PastPeriod(arrival=arrival.isoformat())
