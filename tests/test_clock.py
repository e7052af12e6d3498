import pytest
from django.core.exceptions import ValidationError

from realm_calendar.clock import Time


def test_set_time_reports_overflowing_days():
    t = Time()
    assert t.set_time(25, 0, 0) == 1
    assert (t.hour, t.minute, t.second) == (1, 0, 0)


def test_change_time_backwards_borrows_a_day():
    t = Time()
    assert t.change_time(hours=-1) == -1
    assert t.hour == 23


def test_change_time_by_seconds_carries_into_minutes():
    t = Time(hour=10, minute=59, second=30)
    assert t.change_time(seconds=45) == 0
    assert (t.hour, t.minute, t.second) == (11, 0, 15)


def test_split_negative_seconds():
    assert Time().split_seconds(-1) == (-1, 23, 59, 59)


def test_custom_day_length():
    t = Time(hours_in_day=10, minutes_in_hour=100, seconds_in_minute=100)
    assert t.seconds_per_day == 100_000
    assert t.to_seconds(2, 1, 1, 1) == 200_000 + 10_000 + 100 + 1


def test_current_time_is_zero_padded():
    assert Time(hour=3, minute=7, second=0).current_time() == {"hour": "03", "minute": "07", "second": "00"}


def test_validate_rejects_non_positive_units():
    with pytest.raises(ValidationError) as exc:
        Time(hours_in_day=0, seconds_in_minute=-1).validate()
    assert len(exc.value.messages) == 2
