"""Moons and their phase cycles."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError

from .cursors import Cursor

if TYPE_CHECKING:  # pragma: no cover
    from .core import Calendar

logger = logging.getLogger(__name__)

PHASE_SUM_TOLERANCE: float = 1e-6
PHASE_LENGTH_DIGITS: int = 6


class MoonYearReset(str, Enum):
    NONE = "none"
    LEAP_YEAR = "leap-year"
    X_YEARS = "x-years"


@dataclass
class MoonPhase:
    name: str
    length: float = 0.0
    single_day: bool = False
    icon: str = ""

    def to_template(self) -> dict:
        return {
            "name": self.name,
            "length": self.length,
            "single_day": self.single_day,
            "icon": self.icon,
        }


@dataclass
class FirstNewMoon:
    """Reference date of a new moon, optionally re-anchored every few years."""

    year_reset: MoonYearReset = MoonYearReset.NONE
    year_x: int = 0
    year: int = 0
    month: int = 1
    day: int = 1

    def __post_init__(self) -> None:
        self.year_reset = MoonYearReset(self.year_reset)

    def to_config(self) -> dict:
        return {
            "year_reset": self.year_reset.value,
            "year_x": self.year_x,
            "year": self.year,
            "month": self.month,
            "day": self.day,
        }


@dataclass
class Moon:
    name: str
    cycle_length: float
    phases: list[MoonPhase] = field(default_factory=list)
    first_new_moon: FirstNewMoon = field(default_factory=FirstNewMoon)
    color: str = "#ffffff"
    cycle_day_adjust: float = 0.0

    def update_phase_length(self) -> None:
        """Spread the cycle length over the phases.

        Single day phases last one day; the other phases share the rest
        evenly.  Shares are rounded to six significant digits and the last
        ordinary phase takes the remainder so the lengths add up to the
        cycle length.
        """

        single_days = sum(1 for p in self.phases if p.single_day)
        ordinary = [p for p in self.phases if not p.single_day]
        for p in self.phases:
            if p.single_day:
                p.length = 1
        if not ordinary:
            return
        share = float(f"{(self.cycle_length - single_days) / len(ordinary):.{PHASE_LENGTH_DIGITS}g}")
        for p in ordinary:
            p.length = share
        ordinary[-1].length = round(
            self.cycle_length - single_days - share * (len(ordinary) - 1), 12
        )

    def date_phase(self, calendar: Calendar, year: int, month: int, day: int) -> MoonPhase:
        """Return the phase on a date.

        The answer is within a day of the true phase change.
        """

        if not self.phases:
            raise ValueError(f"Moon {self.name!r} has no phases")
        first = self.first_new_moon
        reference = calendar.date_to_days(first.year, first.month, first.day, True, True)
        reset_adjustment = 0.0
        if first.year_reset is MoonYearReset.LEAP_YEAR:
            leap_year = calendar.leap_year_rule.previous_leap_year(year)
            if leap_year is not None:
                logger.debug("Resetting moon %s reference year to %s", self.name, leap_year)
                reference = calendar.date_to_days(leap_year, first.month, first.day, True, True)
                if year != leap_year:
                    reset_adjustment += calendar.leap_year_rule.fraction(year)
        elif first.year_reset is MoonYearReset.X_YEARS:
            reset_mod = year % first.year_x
            reference = calendar.date_to_days(year - reset_mod, first.month, first.day, True, True)
            if reset_mod:
                reset_adjustment += reset_mod / first.year_x

        days_so_far = calendar.date_to_days(year, month, day, True, True)
        days_since_reference = days_so_far - reference + reset_adjustment
        cycles = days_since_reference / self.cycle_length
        days_into_cycle = (cycles - math.floor(cycles)) * self.cycle_length + self.cycle_day_adjust

        phase_days = 0.0
        for phase in self.phases:
            next_phase_days = phase_days + phase.length
            if phase_days <= days_into_cycle < next_phase_days:
                return phase
            phase_days = next_phase_days
        return self.phases[0]

    def phase_for(self, calendar: Calendar, cursor: Cursor | str = Cursor.CURRENT, day: int | None = None) -> MoonPhase:
        """Return the phase on a cursor's date; ``day`` overrides the cursor's day."""

        if not self.phases:
            raise ValueError(f"Moon {self.name!r} has no phases")
        month = calendar.get_month(cursor)
        if month is None:
            return self.phases[0]
        if day is None:
            day = calendar.get_day_number(cursor) or 1
        return self.date_phase(calendar, calendar.year_of(cursor), month.numeric, day)

    def validate(self) -> None:
        errors: list[str] = []
        if self.cycle_length <= 0:
            errors.append(f"Moon {self.name!r} needs a cycle length greater than 0")
        if not self.phases:
            errors.append(f"Moon {self.name!r} needs at least one phase")
        elif abs(sum(p.length for p in self.phases) - self.cycle_length) > PHASE_SUM_TOLERANCE:
            errors.append(f"Phase lengths of moon {self.name!r} do not add up to its cycle length")
        if any(p.length <= 0 for p in self.phases if not p.single_day):
            errors.append(f"Phases of moon {self.name!r} must have a length greater than 0")
        if self.first_new_moon.year_reset is MoonYearReset.X_YEARS and self.first_new_moon.year_x <= 0:
            errors.append(f"Moon {self.name!r} resets every X years but X is not greater than 0")
        if errors:
            raise ValidationError(errors)

    def to_config(self) -> dict:
        return {
            "name": self.name,
            "cycle_length": self.cycle_length,
            "cycle_day_adjust": self.cycle_day_adjust,
            "color": self.color,
            "first_new_moon": self.first_new_moon.to_config(),
            "phases": [
                {"name": p.name, "length": p.length, "single_day": p.single_day, "icon": p.icon}
                for p in self.phases
            ],
        }
