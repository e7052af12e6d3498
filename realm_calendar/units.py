"""Structural building blocks of a realm calendar."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Weekday:
    numeric: int
    name: str

    def to_template(self) -> dict:
        return {"numeric": self.numeric, "name": self.name, "short": self.name[:2]}


@dataclass
class Day:
    numeric: int
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            self.name = str(self.numeric)


@dataclass
class Month:
    """A month of the calendar.

    ``numeric`` is the 1-based ordinal used in dates.  Intercalary months are
    left out of day counting and of the weekday cycle unless
    ``intercalary_include`` is set.
    """

    numeric: int
    name: str = ""
    number_of_days: int = 0
    number_of_leap_year_days: int | None = None
    intercalary: bool = False
    intercalary_include: bool = False
    days: list[Day] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = str(self.numeric)
        if self.number_of_leap_year_days is None:
            self.number_of_leap_year_days = self.number_of_days
        if not self.days:
            self.populate_days()

    def populate_days(self) -> None:
        longest = max(self.number_of_days, self.number_of_leap_year_days, 0)
        self.days = [Day(i) for i in range(1, longest + 1)]

    def day_count(self, leap_year: bool = False) -> int:
        return self.number_of_leap_year_days if leap_year else self.number_of_days

    def is_counted(self, ignore_intercalary_rules: bool = False) -> bool:
        """Whether this month takes part in day counting."""

        return ignore_intercalary_rules or not self.intercalary or self.intercalary_include

    def days_for(self, leap_year: bool = False) -> list[Day]:
        return self.days[: self.day_count(leap_year)]

    def to_config(self) -> dict:
        return {
            "numeric": self.numeric,
            "name": self.name,
            "number_of_days": self.number_of_days,
            "number_of_leap_year_days": self.number_of_leap_year_days,
            "intercalary": self.intercalary,
            "intercalary_include": self.intercalary_include,
        }


@dataclass
class Season:
    name: str
    starting_month: int = 1
    starting_day: int = 1
    color: str = "#ffffff"
    custom_color: str = ""

    @property
    def display_color(self) -> str:
        return self.custom_color if self.color == "custom" else self.color

    def to_config(self) -> dict:
        return {
            "name": self.name,
            "starting_month": self.starting_month,
            "starting_day": self.starting_day,
            "color": self.color,
            "custom_color": self.custom_color,
        }
