"""The three date cursors tracked by every calendar."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Cursor(str, Enum):
    CURRENT = "current"
    SELECTED = "selected"
    VISIBLE = "visible"


@dataclass
class CursorPosition:
    """Where a cursor points: a year plus month and day *indexes* (0-based).

    ``month`` and ``day`` are ``None`` when nothing is flagged; the visible
    cursor never carries a day.
    """

    year: int = 0
    month: int | None = None
    day: int | None = None

    def to_dict(self) -> dict:
        return {"year": self.year, "month": self.month, "day": self.day}

    @classmethod
    def from_dict(cls, data) -> CursorPosition | None:
        if not isinstance(data, dict):
            return None
        try:
            year = int(data.get("year", 0))
            month = data.get("month")
            day = data.get("day")
            return cls(
                year=year,
                month=None if month is None else int(month),
                day=None if day is None else int(day),
            )
        except (TypeError, ValueError):
            return None
