"""
Common Value Objects

- Period: a stay from arrival to departure, both ends inclusive
"""

from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone  # type: ignore


@dataclass(frozen=True)
class Period:
    """
    Stay period value object

    Unlike a hotel night range, both ends are inclusive: a child dropped off
    on the morning another child is picked up occupies a place on that day.
    Construction does not enforce ordering; an inverted period is a valid
    value for cancelled or completed bookings and is rejected by the period
    evaluator only when it matters.
    """
    arrival: datetime
    departure: datetime

    @property
    def is_inverted(self) -> bool:
        return self.arrival > self.departure

    def overlaps_with(self, other: 'Period') -> bool:
        """
        Check if this period shares any instant with another

        Overlap formula: departure1 >= arrival2 AND arrival1 <= departure2

        Examples:
            - [Jan1, Jan5] overlaps with [Jan3, Jan4] -> True
            - [Jan1, Jan5] overlaps with [Jan5, Jan9] -> True (touching)
            - [Jan1, Jan5] overlaps with [Jan6, Jan9] -> False
        """
        if not isinstance(other, Period):
            raise TypeError("Can only check overlap with another Period")

        return (self.departure >= other.arrival and
                self.arrival <= other.departure)

    @property
    def calendar_days(self) -> int:
        """
        Number of calendar days the stay touches

        Arrival and departure days both count. Dates are taken in the
        current time zone, an inverted period spans no days.
        """
        if self.is_inverted:
            return 0
        arrival_day = timezone.localtime(self.arrival).date() if timezone.is_aware(self.arrival) else self.arrival.date()
        departure_day = (
            timezone.localtime(self.departure).date() if timezone.is_aware(self.departure) else self.departure.date()
        )
        return (departure_day - arrival_day).days + 1

    def __str__(self):
        return f"{self.arrival:%d.%m.%Y %H:%M} - {self.departure:%d.%m.%Y %H:%M}"

    def __repr__(self):
        return f"Period({self.arrival.isoformat()}, {self.departure.isoformat()})"
