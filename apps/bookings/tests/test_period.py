import pytest

from apps.bookings.domain.entities import BookingStatus
from apps.bookings.domain.period import is_future_period, periods_overlap, validate_period
from shared.domain.exceptions import InvalidPeriod, PastPeriod, ValidationError
from shared.domain.value_objects import Period


def test_future_period(at, now):
    assert is_future_period(at(1), at(2), now)
    assert not is_future_period(at(2), at(1), now)
    assert not is_future_period(at(1, year=2030, month=11), at(2), now)


def test_arrival_after_departure_is_invalid(at, now):
    with pytest.raises(InvalidPeriod) as error:
        validate_period(BookingStatus.BOOKED, at(5), at(1), now)

    assert error.value.code == "invalidPeriod"
    assert isinstance(error.value, ValidationError)


def test_arrival_in_the_past_is_rejected(at, now):
    with pytest.raises(PastPeriod) as error:
        validate_period(BookingStatus.BOOKED, at(30, month=11, year=2030), at(5), now)

    assert error.value.code == "pastPeriod"


def test_same_instant_period_is_valid(now):
    validate_period(BookingStatus.BOOKED, now, now, now)


@pytest.mark.parametrize(
    "status",
    [BookingStatus.PROGRESS, BookingStatus.COMPLETED, BookingStatus.CANCELLED],
)
def test_only_booked_periods_are_checked(at, now, status):
    validate_period(status, at(5, year=2029), at(1, year=2029), now)


def test_touching_periods_overlap(at):
    assert periods_overlap(Period(at(1), at(5)), Period(at(5), at(9)))
    assert not periods_overlap(Period(at(1), at(5)), Period(at(6), at(9)))
