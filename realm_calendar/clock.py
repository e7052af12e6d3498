"""Clock primitive for realm calendars."""

from __future__ import annotations

from dataclasses import dataclass

from django.core.exceptions import ValidationError


@dataclass
class Time:
    """Time-of-day configuration and the current authoritative clock value.

    All arithmetic keeps ``hour``/``minute``/``second`` inside their ranges
    and reports whole days that overflowed as a signed day delta.
    """

    hours_in_day: int = 24
    minutes_in_hour: int = 60
    seconds_in_minute: int = 60
    hour: int = 0
    minute: int = 0
    second: int = 0

    @property
    def seconds_per_hour(self) -> int:
        return self.minutes_in_hour * self.seconds_in_minute

    @property
    def seconds_per_day(self) -> int:
        return self.hours_in_day * self.seconds_per_hour

    def seconds_of_day(self) -> int:
        return self.hour * self.seconds_per_hour + self.minute * self.seconds_in_minute + self.second

    def to_seconds(self, days: int, hour: int = 0, minute: int = 0, second: int = 0) -> int:
        """Total seconds for ``days`` whole days plus a time of day."""

        return (
            days * self.seconds_per_day
            + hour * self.seconds_per_hour
            + minute * self.seconds_in_minute
            + second
        )

    def total_seconds(self, days: int = 0) -> int:
        """Total seconds for ``days`` whole days plus the current clock."""

        return days * self.seconds_per_day + self.seconds_of_day()

    def split_seconds(self, total: int) -> tuple[int, int, int, int]:
        """Split ``total`` into ``(days, hour, minute, second)``.

        Uses floor division so negative totals land on a valid time of day
        of an earlier day.
        """

        days, rest = divmod(int(total), self.seconds_per_day)
        hour, rest = divmod(rest, self.seconds_per_hour)
        minute, second = divmod(rest, self.seconds_in_minute)
        return days, hour, minute, second

    def set_time(self, hour: int = 0, minute: int = 0, second: int = 0) -> int:
        """Set the clock, normalizing overflow; return the day delta."""

        days, self.hour, self.minute, self.second = self.split_seconds(
            self.to_seconds(0, hour, minute, second)
        )
        return days

    def change_time(self, hours: int = 0, minutes: int = 0, seconds: int = 0) -> int:
        """Move the clock by the given amounts; return the signed day delta."""

        return self.set_time(self.hour + hours, self.minute + minutes, self.second + seconds)

    def current_time(self) -> dict[str, str]:
        return {
            "hour": f"{self.hour:02d}",
            "minute": f"{self.minute:02d}",
            "second": f"{self.second:02d}",
        }

    def validate(self) -> None:
        errors = [
            f"{label} must be a positive integer"
            for label, value in (
                ("hours_in_day", self.hours_in_day),
                ("minutes_in_hour", self.minutes_in_hour),
                ("seconds_in_minute", self.seconds_in_minute),
            )
            if not isinstance(value, int) or value <= 0
        ]
        if errors:
            raise ValidationError(errors)

    def to_config(self) -> dict[str, int]:
        return {
            "hours_in_day": self.hours_in_day,
            "minutes_in_hour": self.minutes_in_hour,
            "seconds_in_minute": self.seconds_in_minute,
        }
