"""Realm date string helpers."""

from __future__ import annotations

import re
from typing import Any

from django.core.exceptions import ValidationError

from .core import Calendar
from .validators import validate_date_parts

DATE_RE = re.compile(r"(-?\d+)-(\d{1,2})-(\d{1,2})")


def parse_realm_date(value: Any, calendar: Calendar) -> tuple[int, int, int]:
    """Parse ``YYYY-MM-DD`` (year may be negative) and check it exists.

    Also accepts a ``(year, month, day)`` tuple or list.
    Raises :class:`django.core.exceptions.ValidationError` on invalid input.
    """

    err_msg = "Date must be in the format YYYY-MM-DD"

    if isinstance(value, list | tuple) and len(value) == 3:
        try:
            y, m, d = [int(v) for v in value]
        except (TypeError, ValueError) as exc:
            raise ValidationError(err_msg) from exc
    elif isinstance(value, str):
        match = DATE_RE.fullmatch(value.strip())
        if not match:
            raise ValidationError(err_msg)
        y, m, d = map(int, match.groups())
    else:
        raise ValidationError(err_msg)

    validate_date_parts(calendar, y, m, d)
    return y, m, d


def format_realm_date(year: int, month: int, day: int) -> str:
    """Return ``YYYY-MM-DD`` from components."""

    sign = "-" if year < 0 else ""
    return f"{sign}{abs(year):04d}-{month:02d}-{day:02d}"
