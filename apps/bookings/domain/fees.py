"""
Fee calculation

fee = billable days x daily fee, where billable days are the calendar days
the stay touches, arrival day and departure day included.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from shared.domain.value_objects import Period

CENTS = Decimal('0.01')


def billable_days(arrival: datetime, departure: datetime) -> int:
    return Period(arrival, departure).calendar_days


def calculate_fee(arrival: datetime, departure: datetime, daily_fee) -> Decimal:
    """
    Compute the fee of a stay

    Examples (daily fee 10):
        - Jan1 09:00 -> Jan1 18:00 = 10.00 (one day)
        - Jan1 18:00 -> Jan2 08:00 = 20.00 (two calendar days)
        - Jan5 -> Jan1 (inverted) = 0.00
    """
    rate = Decimal(str(daily_fee))
    return (rate * billable_days(arrival, departure)).quantize(CENTS, rounding=ROUND_HALF_UP)
