"""Canonical realm calendar engine.

This module provides the single source of truth for day counting and cursor
navigation of a configurable calendar.  Dates are ``(year, month, day)``
tuples where ``month`` is the 1-based month ordinal and ``day`` the 1-based
day of that month.  The linear day count of the first day of year 0 is 1.

The calendar tracks three cursors (see :mod:`realm_calendar.cursors`):
``current`` is the authoritative date, ``selected`` and ``visible`` are UI
focus and browsing positions that move independently.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from .clock import Time
from .cursors import Cursor, CursorPosition
from .leap import LeapYearRule
from .seasons import resolve_season, season_display
from .units import Month, Season, Weekday

if TYPE_CHECKING:  # pragma: no cover
    from .moons import Moon

logger = logging.getLogger(__name__)

TIME_UNITS: tuple[str, ...] = ("hour", "minute", "second")


@dataclass(frozen=True)
class DateTimeParts:
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class Calendar:
    """A configured calendar plus its cursor state."""

    def __init__(
        self,
        year: int = 0,
        months: list[Month] | None = None,
        weekdays: list[Weekday] | None = None,
        leap_year_rule: LeapYearRule | None = None,
        time: Time | None = None,
        seasons: list[Season] | None = None,
        moons: list[Moon] | None = None,
        name: str = "",
        prefix: str = "",
        postfix: str = "",
        show_weekday_headings: bool = True,
    ) -> None:
        self.name = name
        self.prefix = prefix
        self.postfix = postfix
        self.show_weekday_headings = show_weekday_headings
        self.months: list[Month] = months or []
        self.weekdays: list[Weekday] = weekdays or []
        self.leap_year_rule = leap_year_rule or LeapYearRule()
        self.time = time or Time()
        self.seasons: list[Season] = seasons or []
        self.moons: list[Moon] = moons or []
        self.positions: dict[Cursor, CursorPosition] = {c: CursorPosition(year=year) for c in Cursor}
        # Set when this engine changed the clock and waits for the echo of
        # its own push; see realm_calendar.sync.
        self.time_change_triggered = False
        self.combat_change_triggered = False

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @property
    def year(self) -> int:
        return self.positions[Cursor.CURRENT].year

    @property
    def selected_year(self) -> int:
        return self.positions[Cursor.SELECTED].year

    @property
    def visible_year(self) -> int:
        return self.positions[Cursor.VISIBLE].year

    def position(self, cursor: Cursor | str = Cursor.CURRENT) -> CursorPosition:
        return self.positions[Cursor(cursor)]

    def year_of(self, cursor: Cursor | str = Cursor.CURRENT) -> int:
        return self.position(cursor).year

    def is_leap_year(self, year: int) -> bool:
        return self.leap_year_rule.is_leap_year(year)

    def month_index(self, month: int) -> int:
        """Return the list index of the month with ordinal ``month`` or ``-1``."""

        for i, m in enumerate(self.months):
            if m.numeric == month:
                return i
        return -1

    def get_month(self, cursor: Cursor | str = Cursor.CURRENT) -> Month | None:
        index = self.position(cursor).month
        if index is None or not 0 <= index < len(self.months):
            return None
        return self.months[index]

    def get_day_number(self, cursor: Cursor | str = Cursor.CURRENT) -> int | None:
        """Return the 1-based day flagged by ``cursor`` or ``None``."""

        pos = self.position(cursor)
        if pos.day is None or self.get_month(cursor) is None:
            return None
        return pos.day + 1

    def current_date(self) -> DateTimeParts | None:
        month = self.get_month(Cursor.CURRENT)
        if month is None:
            return None
        return DateTimeParts(
            year=self.year,
            month=month.numeric,
            day=self.get_day_number(Cursor.CURRENT) or 1,
            hour=self.time.hour,
            minute=self.time.minute,
            second=self.time.second,
        )

    def reset_months(self, cursor: Cursor | str = Cursor.CURRENT) -> None:
        pos = self.position(cursor)
        pos.month = None
        pos.day = None

    # ------------------------------------------------------------------
    # Day counting
    # ------------------------------------------------------------------
    def total_number_of_days(self, leap_year: bool = False, ignore_intercalary_rules: bool = False) -> int:
        """Return the number of counted days in a (leap) year."""

        return sum(
            m.day_count(leap_year) for m in self.months if m.is_counted(ignore_intercalary_rules)
        )

    def leap_year_day_difference(self, ignore_intercalary_rules: bool = False) -> int:
        return self.total_number_of_days(True, ignore_intercalary_rules) - self.total_number_of_days(
            False, ignore_intercalary_rules
        )

    def days_before_year(self, year: int, ignore_intercalary_rules: bool = False) -> int:
        """Return the counted days from the start of year 0 to the start of ``year``."""

        return self.total_number_of_days(False, ignore_intercalary_rules) * year + (
            self.leap_year_rule.leap_years_before(year)
            * self.leap_year_day_difference(ignore_intercalary_rules)
        )

    def date_to_days(
        self,
        year: int,
        month: int,
        day: int,
        add_leap_year_diff: bool = False,
        ignore_intercalary_rules: bool = False,
    ) -> int:
        """Convert a date to its linear day count.

        ``add_leap_year_diff`` adds the leap year day difference once more;
        only use it when two results computed the same way are subtracted.
        """

        days = self.days_before_year(year, ignore_intercalary_rules)
        leap = self.is_leap_year(year)
        month_index = self.month_index(month)
        for m in self.months[: max(month_index, 0)]:
            if m.is_counted(ignore_intercalary_rules):
                days += m.day_count(leap)
        days += max(day, 1)
        if add_leap_year_diff:
            days += self.leap_year_day_difference(ignore_intercalary_rules)
        return days

    def date_to_seconds(
        self, year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0
    ) -> int:
        """Convert a date and time to total seconds; inverse of :meth:`seconds_to_date`."""

        return self.time.to_seconds(self.date_to_days(year, month, day) - 1, hour, minute, second)

    def seconds_to_date(self, seconds: int) -> DateTimeParts:
        """Convert total seconds into a date and time."""

        days, hour, minute, second = self.time.split_seconds(seconds)
        normal = self.total_number_of_days(False)
        if normal <= 0 or self.total_number_of_days(True) <= 0:
            first = self.months[0].numeric if self.months else 1
            return DateTimeParts(0, first, 1, hour, minute, second)

        # The remaining day count is 1-indexed: day 1 is the first day.
        day_count = days + 1
        year = math.floor((day_count - 1) / normal)
        while self.days_before_year(year) >= day_count:
            year -= 1
        while self.days_before_year(year + 1) < day_count:
            year += 1
        day_count -= self.days_before_year(year)

        leap = self.is_leap_year(year)
        month = self.months[-1]
        for m in self.months:
            length = m.day_count(leap)
            if not m.is_counted() or length <= 0:
                continue
            month = m
            if day_count <= length:
                break
            day_count -= length
        return DateTimeParts(year, month.numeric, day_count, hour, minute, second)

    def day_of_the_week(self, year: int, month: int, day: int) -> int:
        """Return the weekday index of a date (0 without weekdays)."""

        count = len(self.weekdays)
        if not count:
            return 0
        index = self.month_index(month)
        if index >= 0 and not self.months[index].is_counted():
            # Uncounted intercalary months restart the weekday cycle.
            return (max(day, 1) - 1) % count
        days_so_far = self.date_to_days(year, month, day) - 1
        return (days_so_far % count + count) % count

    def starting_day_of_week(self, month: Month, year: int) -> int:
        if not month.is_counted():
            return 0
        return self.day_of_the_week(year, month.numeric, 1)

    def visible_month_starting_day_of_week(self) -> int:
        month = self.get_month(Cursor.VISIBLE)
        if month is None:
            return 0
        return self.starting_day_of_week(month, self.visible_year)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def change_year(
        self, amount: int, cursor: Cursor | str = Cursor.VISIBLE, update_month: bool = True
    ) -> None:
        """Move a cursor's year by ``amount``.

        With ``update_month`` the cursor lands on the first month (or the
        last one when moving backward).
        """

        cursor = Cursor(cursor)
        pos = self.positions[cursor]
        pos.year += amount
        if cursor is Cursor.CURRENT:
            self.positions[Cursor.VISIBLE].year = pos.year
            logger.debug("New current year: %s", pos.year)
        if update_month and self.months:
            index = len(self.months) - 1 if amount < 0 else 0
            self.update_month(index, cursor, amount > 0)

    def update_month(self, month_index: int, cursor: Cursor | str = Cursor.VISIBLE, forward: bool = True) -> None:
        """Point a cursor at the month with list index ``month_index``.

        ``-1`` means the last month.  Months without days in the cursor's
        year are skipped in the direction of travel.
        """

        cursor = Cursor(cursor)
        if not self.months:
            return
        pos = self.positions[cursor]
        count = len(self.months)
        if month_index == -1 or month_index >= count:
            month_index = count - 1
        elif month_index < 0:
            month_index = 0

        step = 1 if forward else -1
        year = pos.year
        for _ in range(2 * count + 1):
            if self.months[month_index].day_count(self.is_leap_year(year)) > 0:
                break
            logger.debug(
                'The month "%s" has no days, skipping to the %s month',
                self.months[month_index].name,
                "next" if forward else "previous",
            )
            month_index += step
            if month_index >= count:
                month_index = 0
                year += 1
            elif month_index < 0:
                month_index = count - 1
                year -= 1
        else:
            logger.warning("No month with days found for the %s cursor", cursor.value)

        pos.year = year
        pos.month = month_index
        pos.day = None
        if cursor is Cursor.CURRENT:
            month = self.months[month_index]
            length = month.day_count(self.is_leap_year(year))
            if length > 0:
                pos.day = 0 if forward else length - 1
            visible = self.positions[Cursor.VISIBLE]
            visible.year = year
            visible.month = month_index
            visible.day = None
            logger.debug("New current month: %s", month.name)

    def change_month(self, amount: int, cursor: Cursor | str = Cursor.VISIBLE) -> None:
        """Move a cursor by ``amount`` months, carrying into the year."""

        cursor = Cursor(cursor)
        pos = self.positions[cursor]
        if not amount or pos.month is None or not self.months:
            return
        years, index = divmod(pos.month + amount, len(self.months))
        if years:
            logger.debug(
                "Moving the %s month (%s) by %s crosses %s year(s)",
                cursor.value,
                pos.month,
                amount,
                years,
            )
            self.change_year(years, cursor, update_month=False)
        self.update_month(index, cursor, amount > 0)

    def change_day(self, amount: int, cursor: Cursor | str = Cursor.CURRENT) -> None:
        """Move the current or selected day by ``amount`` days."""

        cursor = Cursor(cursor)
        if cursor is Cursor.VISIBLE:
            raise ValueError("The visible cursor does not track a day")
        pos = self.positions[cursor]
        # Every month crossing consumes at least one day of ``amount``.
        for _ in range(abs(amount) + 2):
            month = self.get_month(cursor)
            if month is None:
                return
            last = month.day_count(self.is_leap_year(pos.year))
            if last <= 0:
                return
            current = min(pos.day + 1 if pos.day is not None else 1, last)
            if amount > 0 and current + amount > last:
                logger.debug(
                    "Moving the %s day (%s) by %s passes the end of the month (%s)",
                    cursor.value,
                    current,
                    amount,
                    last,
                )
                amount -= last - current + 1
                self.change_month(1, cursor)
                pos.day = 0
            elif amount < 0 and current + amount < 1:
                logger.debug(
                    "Moving the %s day (%s) by %s passes the start of the month",
                    cursor.value,
                    current,
                    amount,
                )
                amount += current
                self.change_month(-1, cursor)
                previous = self.get_month(cursor)
                length = previous.day_count(self.is_leap_year(pos.year)) if previous else 0
                pos.day = length - 1 if length > 0 else None
            else:
                pos.day = current + amount - 1
                return

    def change_time(self, forward: bool, unit: str, amount: int = 1) -> int:
        """Move the clock; whole days of overflow move the current day.

        Returns the day delta that was carried into the date.
        """

        unit = unit.lower()
        if unit not in TIME_UNITS:
            raise ValueError(f"Unknown time unit: {unit}")
        delta = amount if forward else -amount
        self.time_change_triggered = True
        if unit == "hour":
            day_change = self.time.change_time(hours=delta)
        elif unit == "minute":
            day_change = self.time.change_time(minutes=delta)
        else:
            day_change = self.time.change_time(seconds=delta)
        if day_change:
            self.change_day(day_change, Cursor.CURRENT)
        return day_change

    def set_date(self, year: int, month: int, day: int, cursor: Cursor | str = Cursor.CURRENT) -> None:
        """Point a cursor at a date given by ordinals."""

        cursor = Cursor(cursor)
        index = self.month_index(month)
        if index < 0:
            index = 0
        pos = self.positions[cursor]
        pos.year = year
        if cursor is Cursor.CURRENT:
            self.positions[Cursor.VISIBLE].year = year
        self.update_month(index, cursor, True)
        if cursor is Cursor.VISIBLE or pos.month is None:
            return
        length = self.months[pos.month].day_count(self.is_leap_year(pos.year))
        pos.day = min(max(day, 1), length) - 1 if length > 0 else None

    def apply_date_time(self, parts: DateTimeParts) -> None:
        """Set the current date and clock from parsed parts."""

        self.set_date(parts.year, parts.month, parts.day, Cursor.CURRENT)
        self.time.set_time(parts.hour, parts.minute, parts.second)

    def set_position(self, cursor: Cursor | str, position: CursorPosition) -> None:
        """Restore a stored cursor position, ignoring out-of-range indexes."""

        pos = self.position(cursor)
        pos.year = position.year
        if position.month is not None and 0 <= position.month < len(self.months):
            pos.month = position.month
            length = self.months[position.month].day_count(self.is_leap_year(position.year))
            if Cursor(cursor) is not Cursor.VISIBLE and position.day is not None and 0 <= position.day < length:
                pos.day = position.day
            else:
                pos.day = None
        else:
            pos.month = None
            pos.day = None

    # ------------------------------------------------------------------
    # Seasons
    # ------------------------------------------------------------------
    def season_for(self, month: int, day: int) -> Season | None:
        return resolve_season(self.seasons, month, day)

    def _day_in_visible_month(self) -> int:
        visible = self.positions[Cursor.VISIBLE]
        for cursor in (Cursor.SELECTED, Cursor.CURRENT):
            pos = self.positions[cursor]
            if pos.month == visible.month and pos.year == visible.year and pos.day is not None:
                return pos.day + 1
        return 1

    def current_season(self) -> tuple[str, str]:
        """Return ``(name, color)`` of the season shown with the visible month."""

        month = self.get_month(Cursor.VISIBLE)
        if month is None:
            return season_display(None)
        return season_display(self.season_for(month.numeric, self._day_in_visible_month()))

    # ------------------------------------------------------------------
    # Template projection
    # ------------------------------------------------------------------
    def display_name(self, selected: bool = False) -> str:
        year = self.selected_year if selected else self.visible_year
        return f"{self.prefix}{year}{self.postfix}"

    def _is_flagged(self, cursor: Cursor, year: int, month_index: int, day_index: int | None = None) -> bool:
        pos = self.positions[cursor]
        if pos.year != year or pos.month != month_index:
            return False
        return day_index is None or pos.day == day_index

    def month_to_template(self, month_index: int, year: int) -> dict:
        month = self.months[month_index]
        leap = self.is_leap_year(year)
        days = [
            {
                "numeric": d.numeric,
                "name": d.name,
                "current": self._is_flagged(Cursor.CURRENT, year, month_index, i),
                "selected": self._is_flagged(Cursor.SELECTED, year, month_index, i),
            }
            for i, d in enumerate(month.days_for(leap))
        ]
        return {
            "name": month.name,
            "numeric": month.numeric,
            "intercalary": month.intercalary,
            "intercalary_include": month.intercalary_include,
            "number_of_days": month.day_count(leap),
            "current": self._is_flagged(Cursor.CURRENT, year, month_index),
            "selected": self._is_flagged(Cursor.SELECTED, year, month_index),
            "visible": self._is_flagged(Cursor.VISIBLE, year, month_index),
            "days": days,
        }

    def days_into_weeks(self, month_index: int, year: int, week_length: int) -> list[list[dict | None]]:
        """Lay a month's days out in weeks; ``None`` marks cells without a day."""

        days = self.month_to_template(month_index, year)["days"]
        if not days or week_length <= 0:
            return []
        offset = self.starting_day_of_week(self.months[month_index], year) % week_length
        cells: list[dict | None] = [None] * offset + days
        if len(cells) % week_length:
            cells += [None] * (week_length - len(cells) % week_length)
        return [cells[i : i + week_length] for i in range(0, len(cells), week_length)]

    def year_meta(self, year: int) -> dict:
        leap = self.is_leap_year(year)
        return {
            "year": year,
            "display": f"{self.prefix}{year}{self.postfix}",
            "is_leap_year": leap,
            "month_names": [m.name for m in self.months],
            "month_lengths": [m.day_count(leap) for m in self.months],
            "year_length": self.total_number_of_days(leap),
        }

    def to_template(self) -> dict:
        """Return a read-only snapshot for presentation layers."""

        visible = self.positions[Cursor.VISIBLE]
        selected_month = self.get_month(Cursor.SELECTED)
        current_month = self.get_month(Cursor.CURRENT)
        s_month, s_day = "", ""
        if selected_month is not None:
            s_month = selected_month.name
            number = self.get_day_number(Cursor.SELECTED)
            if number:
                s_day = selected_month.days[number - 1].name
        elif current_month is not None:
            s_month = current_month.name
            number = self.get_day_number(Cursor.CURRENT)
            if number:
                s_day = current_month.days[number - 1].name

        visible_month = None
        weeks: list[list[dict | None]] = []
        if visible.month is not None and self.get_month(Cursor.VISIBLE) is not None:
            visible_month = self.month_to_template(visible.month, visible.year)
            weeks = self.days_into_weeks(visible.month, visible.year, len(self.weekdays))

        season_name, season_color = self.current_season()
        current = self.current_date()
        return {
            "name": self.name,
            "display": self.display_name(),
            "selected_display_year": self.display_name(True),
            "selected_display_month": s_month,
            "selected_display_day": s_day,
            "numeric": self.year,
            "current_date": current.to_dict() if current else None,
            "weekdays": [w.to_template() for w in self.weekdays],
            "show_weekday_headings": self.show_weekday_headings,
            "visible_month": visible_month,
            "current_time": self.time.current_time(),
            "current_season_name": season_name,
            "current_season_color": season_color,
            "weeks": weeks,
            "moons": [
                {"name": moon.name, "color": moon.color, "phase": moon.phase_for(self).to_template()}
                for moon in self.moons
            ],
        }
