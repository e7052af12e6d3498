"""Django adapters around the calendar engine.

Each request builds a fresh :class:`Calendar` from the configured definition.
The authoritative current date lives in :class:`CalendarState`; the
selected and visible cursors are per-user UI state kept in the session.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from functools import lru_cache

from django.db import connections, transaction

from . import conf
from .core import Calendar, DateTimeParts
from .cursors import Cursor, CursorPosition
from .definition import calendar_from_definition, load_definition_file
from .models import CalendarState, WorldTime
from .sync import TimeIntegration, WorldTimeSync

logger = logging.getLogger(__name__)

Notify = Callable[[int, int, int], object]

UI_CURSORS = (Cursor.SELECTED, Cursor.VISIBLE)


def locked(qs):
    """SELECT FOR UPDATE where the backend supports it, plain queryset otherwise."""

    conn = connections[qs.db]
    if getattr(conn.features, "has_select_for_update", False):
        return qs.select_for_update()
    return qs


@lru_cache(maxsize=8)
def _read_definition(path: str) -> dict:
    return load_definition_file(path)


def get_definition(path=None) -> dict:
    """Return a private copy of the configured (cached) definition mapping."""

    return copy.deepcopy(_read_definition(str(path or conf.DEFINITION)))


def clear_definition_cache() -> None:
    _read_definition.cache_clear()


class DatabasePersistence:
    """Stores the authoritative current date in :class:`CalendarState`."""

    def __init__(self, user=None, key: str | None = None, primary: bool | None = None) -> None:
        self.user = user
        self.key = key or conf.STATE_KEY
        self.primary = conf.PRIMARY if primary is None else primary

    def is_elevated_user(self) -> bool:
        user = self.user
        return bool(user is not None and getattr(user, "is_active", False) and getattr(user, "is_staff", False))

    def is_primary_authority(self) -> bool:
        return bool(self.primary)

    def save_authoritative_date(self, calendar: Calendar) -> CalendarState | None:
        current = calendar.current_date()
        if current is None:
            logger.warning("Calendar %r has no current date, nothing saved", calendar.name)
            return None
        with transaction.atomic():
            CalendarState.objects.get_or_create(key=self.key)
            state = locked(CalendarState.objects.filter(key=self.key)).get()
            state.year = current.year
            state.month = current.month
            state.day = current.day
            state.hour = current.hour
            state.minute = current.minute
            state.second = current.second
            state.sequence += 1
            state.save()
        logger.info(
            "Saved current date %s-%s-%s (sequence %s)", state.year, state.month, state.day, state.sequence
        )
        return state


class DatabaseWorldClock:
    """Host world clock mirrored in :class:`WorldTime`.

    Every push bumps the row's sequence; after the surrounding transaction
    commits, ``notify`` receives ``(total_seconds, change_amount, sequence)``.
    """

    def __init__(self, notify: Notify | None = None, key: str | None = None) -> None:
        self.notify = notify
        self.key = key or conf.STATE_KEY

    def current(self) -> WorldTime | None:
        return WorldTime.objects.filter(key=self.key).first()

    def push_world_time(self, total_seconds: int) -> WorldTime:
        with transaction.atomic():
            WorldTime.objects.get_or_create(key=self.key)
            row = locked(WorldTime.objects.filter(key=self.key)).get()
            change_amount = total_seconds - row.total_seconds
            row.total_seconds = total_seconds
            row.sequence += 1
            row.save()
            sequence = row.sequence
            if self.notify is not None:
                notify = self.notify
                transaction.on_commit(lambda: notify(total_seconds, change_amount, sequence))
        logger.debug("World time set to %s (change %s, sequence %s)", total_seconds, change_amount, sequence)
        return row

    def record(self, total_seconds: int, sequence: int | None = None) -> WorldTime:
        """Mirror a time reported by the host without notifying anyone."""

        defaults = {"total_seconds": total_seconds}
        if sequence is not None:
            defaults["sequence"] = sequence
        row, _ = WorldTime.objects.update_or_create(key=self.key, defaults=defaults)
        return row


def _restore_current(calendar: Calendar, key: str) -> bool:
    state = CalendarState.objects.filter(key=key).first()
    if state is None:
        return False
    calendar.apply_date_time(
        DateTimeParts(state.year, state.month, state.day, state.hour, state.minute, state.second)
    )
    return True


def load_calendar(session=None, key: str | None = None) -> Calendar:
    """Build the request calendar.

    The current date comes from the database (or the definition when nothing
    was saved yet); the UI cursors come from ``session`` when given.
    """

    calendar = calendar_from_definition(get_definition())
    if _restore_current(calendar, key or conf.STATE_KEY):
        for cursor in UI_CURSORS:
            calendar.set_position(cursor, calendar.position(Cursor.CURRENT))
    if session is not None:
        stored = session.get(conf.SESSION_KEY) or {}
        for cursor in UI_CURSORS:
            position = CursorPosition.from_dict(stored.get(cursor.value))
            if position is not None:
                calendar.set_position(cursor, position)
    return calendar


def store_cursors(calendar: Calendar, session) -> None:
    session[conf.SESSION_KEY] = {c.value: calendar.position(c).to_dict() for c in UI_CURSORS}


def build_sync(calendar: Calendar, user=None, notify: Notify | None = None) -> WorldTimeSync:
    """Wire ``calendar`` to the database adapters.

    Without ``notify`` the world clock echoes pushes back into the returned
    sync, as a host clock owned by this calendar would.
    """

    world_clock = DatabaseWorldClock()
    mirror = world_clock.current()
    sync = WorldTimeSync(
        calendar,
        DatabasePersistence(user),
        world_clock,
        integration=conf.TIME_INTEGRATION,
        last_sequence=mirror.sequence if mirror else None,
    )
    world_clock.notify = notify or sync.reconcile_from_external_time
    return sync


def local_changes_allowed() -> bool:
    """Whether staff may move the current date from this process."""

    return TimeIntegration(conf.TIME_INTEGRATION) is not TimeIntegration.THIRD_PARTY


def receive_world_time(
    sync: WorldTimeSync,
    total_seconds: int,
    change_amount: int,
    sequence: int | None = None,
    combat: bool = False,
) -> bool:
    """Handle a notification from the host clock and mirror it when fresh.

    ``combat`` marks a change made by a combat turn, which an arbitrating
    calendar applies as well.
    """

    if combat:
        sync.mark_combat_change()

    stale = sync.is_stale(sequence)
    applied = sync.reconcile_from_external_time(total_seconds, change_amount, sequence)
    if not stale and isinstance(sync.world_clock, DatabaseWorldClock):
        sync.world_clock.record(total_seconds, sequence)
    return applied
