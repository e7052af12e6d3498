"""Season lookup for realm calendars."""

from __future__ import annotations

from collections.abc import Sequence

from .units import Season


def resolve_season(seasons: Sequence[Season], month: int, day: int) -> Season | None:
    """Return the season active on ``month``/``day`` (ordinals).

    Seasons are scanned in definition order and later matches win, so they
    should be defined in ascending month order.  A date before every season
    start belongs to the last season (the one wrapping around the new year).
    """

    if not seasons:
        return None
    current: Season | None = None
    for season in seasons:
        if season.starting_month == month and season.starting_day <= day:
            current = season
        elif season.starting_month < month:
            current = season
    if current is None:
        current = seasons[-1]
    return current


def season_display(season: Season | None) -> tuple[str, str]:
    """Return ``(name, color)`` for templates, empty strings without a season."""

    if season is None:
        return "", ""
    return season.name, season.display_color
