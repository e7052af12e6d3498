"""Loading and saving calendar definitions.

A definition is a plain mapping (usually read from JSON)::

    {
        "name": "Gregorian",
        "year": {"numeric": 2024, "prefix": "", "postfix": " AD"},
        "months": [{"numeric": 1, "name": "January", "number_of_days": 31}, ...],
        "weekdays": ["Sunday", "Monday", ...],
        "leap_year": {"rule": "gregorian", "custom_mod": 0},
        "time": {"hours_in_day": 24, "minutes_in_hour": 60, "seconds_in_minute": 60},
        "seasons": [{"name": "Spring", "starting_month": 3, "starting_day": 20}],
        "moons": [{"name": "Moon", "cycle_length": 29.53059, "phases": [...]}],
        "current_date": {"year": 2024, "month": 1, "day": 1},
    }

Every section except ``months`` is optional.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from django.core.exceptions import ValidationError

from .clock import Time
from .core import Calendar
from .leap import LeapYearRule, LeapYearRuleKind
from .moons import FirstNewMoon, Moon, MoonPhase
from .units import Month, Season, Weekday
from .validators import validate_calendar, validate_date_parts

logger = logging.getLogger(__name__)


def _month(data: dict[str, Any], position: int) -> Month:
    days = int(data.get("number_of_days", 0))
    leap_days = data.get("number_of_leap_year_days")
    return Month(
        numeric=int(data.get("numeric", position)),
        name=str(data.get("name", "")),
        number_of_days=days,
        number_of_leap_year_days=days if leap_days is None else int(leap_days),
        intercalary=bool(data.get("intercalary", False)),
        intercalary_include=bool(data.get("intercalary_include", False)),
    )


def _moon(data: dict[str, Any]) -> Moon:
    phases = [
        MoonPhase(
            name=str(p.get("name", "")),
            length=float(p.get("length", 0)),
            single_day=bool(p.get("single_day", False)),
            icon=str(p.get("icon", "")),
        )
        for p in data.get("phases", [])
    ]
    first = data.get("first_new_moon") or {}
    moon = Moon(
        name=str(data.get("name", "")),
        cycle_length=float(data.get("cycle_length", 0)),
        phases=phases,
        first_new_moon=FirstNewMoon(
            year_reset=first.get("year_reset", "none"),
            year_x=int(first.get("year_x", 0)),
            year=int(first.get("year", 0)),
            month=int(first.get("month", 1)),
            day=int(first.get("day", 1)),
        ),
        color=str(data.get("color", "#ffffff")),
        cycle_day_adjust=float(data.get("cycle_day_adjust", 0)),
    )
    moon.update_phase_length()
    return moon


def calendar_from_definition(data: dict[str, Any], validate: bool = True) -> Calendar:
    """Build a :class:`Calendar` from a definition mapping.

    Raises :class:`ValidationError` for malformed or inconsistent definitions.
    """

    if not isinstance(data, dict):
        raise ValidationError("Calendar definition must be a mapping")
    try:
        year = data.get("year") or {}
        leap = data.get("leap_year") or {}
        time = data.get("time") or {}
        calendar = Calendar(
            year=int(year.get("numeric", 0)),
            months=[_month(m, i) for i, m in enumerate(data.get("months") or [], start=1)],
            weekdays=[Weekday(i, str(name)) for i, name in enumerate(data.get("weekdays") or [], start=1)],
            leap_year_rule=LeapYearRule(
                rule=LeapYearRuleKind(leap.get("rule", "none")),
                custom_mod=int(leap.get("custom_mod", 0)),
            ),
            time=Time(
                hours_in_day=int(time.get("hours_in_day", 24)),
                minutes_in_hour=int(time.get("minutes_in_hour", 60)),
                seconds_in_minute=int(time.get("seconds_in_minute", 60)),
            ),
            seasons=[
                Season(
                    name=str(s.get("name", "")),
                    starting_month=int(s.get("starting_month", 1)),
                    starting_day=int(s.get("starting_day", 1)),
                    color=str(s.get("color", "#ffffff")),
                    custom_color=str(s.get("custom_color", "")),
                )
                for s in data.get("seasons") or []
            ],
            moons=[_moon(m) for m in data.get("moons") or []],
            name=str(data.get("name", "")),
            prefix=str(year.get("prefix", "")),
            postfix=str(year.get("postfix", "")),
            show_weekday_headings=bool(year.get("show_weekday_headings", True)),
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed calendar definition: {exc}") from exc

    if validate:
        validate_calendar(calendar)

    if calendar.months:
        current = data.get("current_date") or {}
        try:
            year, month, day = (
                int(current.get("year", calendar.year)),
                int(current.get("month", calendar.months[0].numeric)),
                int(current.get("day", 1)),
            )
            clock = [int(current.get(unit, 0)) for unit in ("hour", "minute", "second")]
        except (AttributeError, TypeError, ValueError) as exc:
            raise ValidationError(f"Malformed current date: {exc}") from exc
        if validate:
            validate_date_parts(calendar, year, month, day)
        calendar.set_date(year, month, day)
        calendar.time.set_time(*clock)
        for cursor in ("selected", "visible"):
            calendar.set_position(cursor, calendar.position("current"))
    logger.debug("Loaded calendar %r with %s months", calendar.name, len(calendar.months))
    return calendar


def definition_from_calendar(calendar: Calendar) -> dict[str, Any]:
    """Dump a calendar's shape (and current date) back to a definition mapping."""

    current = calendar.current_date()
    return {
        "name": calendar.name,
        "year": {
            "numeric": calendar.year,
            "prefix": calendar.prefix,
            "postfix": calendar.postfix,
            "show_weekday_headings": calendar.show_weekday_headings,
        },
        "months": [m.to_config() for m in calendar.months],
        "weekdays": [w.name for w in calendar.weekdays],
        "leap_year": calendar.leap_year_rule.to_config(),
        "time": calendar.time.to_config(),
        "seasons": [s.to_config() for s in calendar.seasons],
        "moons": [m.to_config() for m in calendar.moons],
        "current_date": current.to_dict() if current else {},
    }


def load_definition_file(path: str | Path) -> dict[str, Any]:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise ValidationError(f"Cannot read calendar definition {path}: {exc}") from exc
