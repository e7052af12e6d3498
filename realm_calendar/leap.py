"""Leap year rules for realm calendars.

Every rule answers two questions that must stay consistent with each other:
whether a year is a leap year, and how many leap years precede it.  The
counting convention is anchored at year 0:

* for ``year >= 0`` :func:`LeapYearRule.leap_years_before` counts the leap
  years in ``[0, year)``;
* for ``year < 0`` it is the negated count of leap years in ``[year, 0)``.

With this convention ``leap_years_before(y + 1) - leap_years_before(y)`` is
``1`` exactly when ``is_leap_year(y)`` and ``0`` otherwise, for every integer
``y``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from django.core.exceptions import ValidationError

# Years checked when a function rule ships its own counter.
CONSISTENCY_WINDOW: tuple[int, int] = (-400, 401)
# How far back previous_leap_year searches for function rules.
PREVIOUS_LEAP_SEARCH: int = 10_000


class LeapYearRuleKind(str, Enum):
    NONE = "none"
    GREGORIAN = "gregorian"
    CUSTOM = "custom"
    FUNCTION = "function"


def _multiples_before(year: int, modulus: int) -> int:
    """Signed count of multiples of ``modulus`` before ``year`` (see module doc)."""

    return -(-year // modulus)


@dataclass
class LeapYearRule:
    """A leap year rule.

    ``custom_mod`` is the modulus of the ``custom`` rule.  The ``function``
    rule takes ``predicate`` and may also take ``counter`` (checked against
    the predicate by :meth:`validate`) and ``cycle`` (used by
    :meth:`fraction`).
    """

    rule: LeapYearRuleKind = LeapYearRuleKind.NONE
    custom_mod: int = 0
    predicate: Callable[[int], bool] | None = None
    counter: Callable[[int], int] | None = None
    cycle: int = 0

    def __post_init__(self) -> None:
        self.rule = LeapYearRuleKind(self.rule)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def is_leap_year(self, year: int) -> bool:
        if self.rule is LeapYearRuleKind.GREGORIAN:
            return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)
        if self.rule is LeapYearRuleKind.CUSTOM:
            return self.custom_mod > 0 and year % self.custom_mod == 0
        if self.rule is LeapYearRuleKind.FUNCTION and self.predicate is not None:
            return bool(self.predicate(year))
        return False

    def leap_years_before(self, year: int) -> int:
        """Return the signed number of leap years before ``year``."""

        if self.rule is LeapYearRuleKind.GREGORIAN:
            return (
                _multiples_before(year, 4)
                - _multiples_before(year, 100)
                + _multiples_before(year, 400)
            )
        if self.rule is LeapYearRuleKind.CUSTOM:
            if self.custom_mod <= 0:
                return 0
            return _multiples_before(year, self.custom_mod)
        if self.rule is LeapYearRuleKind.FUNCTION:
            if self.counter is not None:
                return int(self.counter(year))
            if year >= 0:
                return sum(1 for y in range(0, year) if self.is_leap_year(y))
            return -sum(1 for y in range(year, 0) if self.is_leap_year(y))
        return 0

    how_many_leap_years = leap_years_before

    def previous_leap_year(self, year: int) -> int | None:
        """Return the latest leap year at or before ``year``."""

        if self.rule is LeapYearRuleKind.CUSTOM:
            if self.custom_mod <= 0:
                return None
            return year - (year % self.custom_mod)
        if self.rule is LeapYearRuleKind.GREGORIAN:
            candidate = year - (year % 4)
            while not self.is_leap_year(candidate):
                candidate -= 4
            return candidate
        if self.rule is LeapYearRuleKind.FUNCTION:
            for candidate in range(year, year - PREVIOUS_LEAP_SEARCH, -1):
                if self.is_leap_year(candidate):
                    return candidate
        return None

    def modulus(self) -> int:
        if self.rule is LeapYearRuleKind.GREGORIAN:
            return 4
        if self.rule is LeapYearRuleKind.CUSTOM:
            return self.custom_mod
        if self.rule is LeapYearRuleKind.FUNCTION:
            return self.cycle
        return 0

    def fraction(self, year: int) -> float:
        """Return how far ``year`` lies past the previous leap year, in cycle lengths.

        Within a regular cycle the value is below 1; after a skipped leap year
        (a Gregorian century) it grows past 1, e.g. 1.75 for 1903.
        """

        mod = self.modulus()
        if mod <= 0:
            return 0.0
        previous = self.previous_leap_year(year)
        if previous is None:
            return 0.0
        return (year - previous) / mod

    # ------------------------------------------------------------------
    # Validation / serialization
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """Raise :class:`ValidationError` if the rule cannot count days reliably."""

        errors: list[str] = []
        if self.rule is LeapYearRuleKind.CUSTOM and self.custom_mod <= 0:
            errors.append("Custom leap year rule needs a modulus greater than 0")
        if self.rule is LeapYearRuleKind.FUNCTION:
            if self.predicate is None:
                errors.append("Function leap year rule needs a predicate")
            elif self.counter is not None:
                start, stop = CONSISTENCY_WINDOW
                for y in range(start, stop):
                    step = self.leap_years_before(y + 1) - self.leap_years_before(y)
                    if step != int(self.is_leap_year(y)):
                        errors.append(
                            f"Leap year counter disagrees with the leap year test at year {y}"
                        )
                        break
        if errors:
            raise ValidationError(errors)

    def to_config(self) -> dict:
        return {"rule": self.rule.value, "custom_mod": self.custom_mod}
