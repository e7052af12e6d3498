import pytest

from realm_calendar.core import DateTimeParts
from tests.calendar_helpers import make_gregorian, make_intercalary, make_two_month


def test_two_month_calendar_scenario():
    cal = make_two_month()
    assert cal.date_to_days(0, 1, 1) == 1
    assert cal.day_of_the_week(0, 1, 1) == 0
    assert cal.date_to_days(0, 2, 1) == 16
    assert cal.total_number_of_days() == 31


def test_weekdays_repeat_every_cycle():
    cal = make_two_month()
    for day in range(1, 11):
        assert cal.day_of_the_week(0, 1, day) == cal.day_of_the_week(0, 1, day + 5)


def test_weekday_fallback_without_weekdays():
    cal = make_two_month()
    cal.weekdays = []
    assert cal.day_of_the_week(3, 2, 7) == 0


def test_leap_day_is_counted():
    cal = make_gregorian()
    assert cal.date_to_days(2024, 3, 1) - cal.date_to_days(2024, 2, 28) == 2
    assert cal.date_to_days(2023, 3, 1) - cal.date_to_days(2023, 2, 28) == 1
    assert cal.date_to_days(2025, 1, 1) - cal.date_to_days(2024, 1, 1) == 366


def test_year_boundaries_in_seconds():
    cal = make_gregorian()
    assert cal.seconds_to_date(0) == DateTimeParts(0, 1, 1, 0, 0, 0)
    assert cal.seconds_to_date(-1) == DateTimeParts(-1, 12, 31, 23, 59, 59)
    assert cal.date_to_seconds(0, 1, 2) == 86_400


@pytest.mark.parametrize("seconds", [0, 1, 86_399, 5_097_600, 63_871_286_399, -86_401, -31_622_400, -12_345_678_901])
def test_seconds_round_trip(seconds):
    cal = make_gregorian()
    parts = cal.seconds_to_date(seconds)
    assert cal.date_to_seconds(
        parts.year, parts.month, parts.day, parts.hour, parts.minute, parts.second
    ) == seconds


def test_linear_days_increase_by_one_across_years():
    cal = make_intercalary()
    previous = None
    for year in range(-3, 6):
        leap = cal.is_leap_year(year)
        for month in cal.months:
            if not month.is_counted():
                continue
            for day in range(1, month.day_count(leap) + 1):
                linear = cal.date_to_days(year, month.numeric, day)
                if previous is not None:
                    assert linear == previous + 1
                previous = linear


def test_intercalary_months_are_not_counted():
    cal = make_intercalary()
    assert cal.total_number_of_days(False) == cal.total_number_of_days(True) == 20
    assert cal.total_number_of_days(False, ignore_intercalary_rules=True) == 23
    assert cal.total_number_of_days(True, ignore_intercalary_rules=True) == 24
    assert cal.date_to_days(1, 3, 1) == 31


def test_intercalary_months_restart_weekdays():
    cal = make_intercalary()
    assert cal.day_of_the_week(4, 2, 1) == 0
    assert cal.day_of_the_week(1, 4, 3) == 2


def test_seconds_never_land_in_uncounted_months():
    cal = make_intercalary()
    start = cal.date_to_seconds(4, 1, 1)
    for n in range(cal.total_number_of_days(True)):
        parts = cal.seconds_to_date(start + n * cal.time.seconds_per_day)
        assert parts.year == 4
        assert parts.month in (1, 3)


def test_month_lookup_fallbacks():
    cal = make_two_month()
    assert cal.month_index(9) == -1
    cal.reset_months()
    assert cal.get_month() is None
    assert cal.current_date() is None


def _numbers(week):
    return [cell["numeric"] if cell else None for cell in week]


@pytest.mark.parametrize("month_index, leading, trailing", [(0, 2, 2), (1, 5, 1)])
def test_days_into_weeks_pads_both_ends(month_index, leading, trailing):
    cal = make_gregorian()
    weeks = cal.days_into_weeks(month_index, 2024, 7)
    cells = [cell for week in weeks for cell in week]
    assert all(len(week) == 7 for week in weeks)
    assert cells[:leading] == [None] * leading
    assert cells[leading] is not None
    assert cells[len(cells) - trailing :] == [None] * trailing
    assert cells[len(cells) - trailing - 1] is not None
    days = [cell["numeric"] for cell in cells if cell]
    assert days == list(range(1, cal.months[month_index].day_count(True) + 1))


def test_january_2024_spans_five_weeks():
    weeks = make_gregorian().days_into_weeks(0, 2024, 7)
    assert len(weeks) == 5
    assert _numbers(weeks[0]) == [None, None, 1, 2, 3, 4, 5]


def test_uncounted_month_weeks_start_on_first_weekday():
    cal = make_intercalary()
    weeks = cal.days_into_weeks(3, 1, 7)
    assert len(weeks) == 1
    assert _numbers(weeks[0]) == [1, 2, 3, None, None, None, None]


def test_days_into_weeks_without_week_length():
    assert make_gregorian().days_into_weeks(0, 2024, 0) == []
