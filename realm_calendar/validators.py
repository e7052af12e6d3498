"""Validators for realm calendar definitions and dates."""

from __future__ import annotations

from django.core.exceptions import ValidationError

from .core import Calendar


def _collect(errors: list[str], check) -> None:
    try:
        check()
    except ValidationError as exc:
        errors.extend(exc.messages)


def validate_calendar(calendar: Calendar) -> None:
    """Raise :class:`ValidationError` listing every inconsistency found."""

    errors: list[str] = []
    if not calendar.months:
        errors.append("Month list is empty. At least one month is required.")
    ordinals = [m.numeric for m in calendar.months]
    if len(ordinals) != len(set(ordinals)):
        errors.append(f"Duplicate month ordinals: {sorted({n for n in ordinals if ordinals.count(n) > 1})}")
    for month in calendar.months:
        if month.number_of_days < 0 or month.number_of_leap_year_days < 0:
            errors.append(f"Month {month.name!r} has a negative number of days")
    if calendar.months:
        if calendar.total_number_of_days(False) <= 0:
            errors.append("A normal year has no counted days")
        if calendar.total_number_of_days(True) <= 0:
            errors.append("A leap year has no counted days")
    _collect(errors, calendar.time.validate)
    _collect(errors, calendar.leap_year_rule.validate)
    for season in calendar.seasons:
        if calendar.month_index(season.starting_month) < 0:
            errors.append(f"Season {season.name!r} starts in unknown month {season.starting_month}")
    for moon in calendar.moons:
        _collect(errors, moon.validate)
    if errors:
        raise ValidationError(errors)


def validate_date_parts(calendar: Calendar, year: int, month: int, day: int) -> None:
    """Validate a date against a calendar."""

    index = calendar.month_index(month)
    if index < 0:
        raise ValidationError(f"Unknown month {month}")
    max_day = calendar.months[index].day_count(calendar.is_leap_year(year))
    if not 1 <= day <= max_day:
        raise ValidationError(f"Month {month} has {max_day} days in year {year}")
