"""Reconciliation between a calendar and an externally owned world clock.

Both this engine and the host can change "the current time".  Whenever the
engine pushes a time of its own it sets ``time_change_triggered`` first, so
the echo of that push is recognised and not applied twice.  Each inbound
notification clears both reentrancy flags when it is done.

Notifications may carry a sequence number; anything not newer than the last
applied sequence is ignored.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from .core import Calendar

logger = logging.getLogger(__name__)


class TimeIntegration(str, Enum):
    NONE = "none"
    SELF = "self"
    THIRD_PARTY = "third-party"
    MIXED = "mixed"


ARBITER_MODES = {TimeIntegration.SELF, TimeIntegration.MIXED}
FOLLOWER_MODES = {TimeIntegration.THIRD_PARTY, TimeIntegration.MIXED}


class Persistence(Protocol):
    def save_authoritative_date(self, calendar: Calendar) -> object:
        ...  # pragma: no cover

    def is_primary_authority(self) -> bool:
        ...  # pragma: no cover

    def is_elevated_user(self) -> bool:
        ...  # pragma: no cover


class WorldClock(Protocol):
    def push_world_time(self, total_seconds: int) -> object:
        ...  # pragma: no cover


class WorldTimeSync:
    def __init__(
        self,
        calendar: Calendar,
        persistence: Persistence,
        world_clock: WorldClock,
        integration: TimeIntegration | str = TimeIntegration.SELF,
        last_sequence: int | None = None,
    ) -> None:
        self.calendar = calendar
        self.persistence = persistence
        self.world_clock = world_clock
        self.integration = TimeIntegration(integration)
        self.last_sequence = last_sequence
        self._reconciling = False

    def current_total_seconds(self) -> int:
        """Seconds representing the current date and clock."""

        current = self.calendar.current_date()
        if current is None:
            return self.calendar.time.total_seconds()
        return self.calendar.date_to_seconds(
            current.year, current.month, current.day, current.hour, current.minute, current.second
        )

    def is_stale(self, sequence: int | None) -> bool:
        """Whether a notification numbered ``sequence`` was already superseded."""

        return sequence is not None and self.last_sequence is not None and sequence <= self.last_sequence

    def mark_combat_change(self) -> None:
        self.calendar.combat_change_triggered = True

    def _can_persist(self) -> bool:
        return self.persistence.is_elevated_user() and self.persistence.is_primary_authority()

    def persist(self) -> bool:
        """Save the current date when this process may write it."""

        if not self._can_persist():
            return False
        self.persistence.save_authoritative_date(self.calendar)
        return True

    def sync_time(self) -> int | None:
        """Push the current date to the world clock.

        Only elevated users push, and only when this engine arbitrates time.
        Local state is already final; the push is not awaited or undone.
        """

        if self.integration not in ARBITER_MODES or not self.persistence.is_elevated_user():
            return None
        if self.calendar.current_date() is None:
            return None
        total_seconds = self.current_total_seconds()
        self.calendar.time_change_triggered = True
        logger.debug("Pushing world time %s", total_seconds)
        self.world_clock.push_world_time(total_seconds)
        return total_seconds

    @property
    def follows_host(self) -> bool:
        """Whether the host world clock alone owns the current date."""

        return self.integration is TimeIntegration.THIRD_PARTY

    def commit_local_change(self) -> int | None:
        """Persist a local change of the current date and push it.

        Nothing is saved when the host owns the date; the host time wins.
        """

        if self.follows_host:
            logger.warning("Local change of the current date ignored, the host world clock owns it")
            return None
        self.persist()
        return self.sync_time()

    def _apply(self, new_total_seconds: int) -> None:
        parts = self.calendar.seconds_to_date(new_total_seconds)
        self.calendar.apply_date_time(parts)
        logger.info(
            "Applied world time %s as %s-%s-%s %02d:%02d:%02d",
            new_total_seconds,
            parts.year,
            parts.month,
            parts.day,
            parts.hour,
            parts.minute,
            parts.second,
        )

    def _persist_reconciled(self, nested: bool) -> None:
        if nested:
            logger.debug("Nested reconciliation, not saving again")
            return
        if self.persist():
            logger.info("Saved reconciled date")

    def reconcile_from_external_time(
        self, new_total_seconds: int, change_amount: int, sequence: int | None = None
    ) -> bool:
        """Handle a world clock notification.

        Returns ``True`` when the new time was applied to the current date.
        """

        nested = self._reconciling
        self._reconciling = True
        applied = False
        calendar = self.calendar
        try:
            if self.is_stale(sequence):
                logger.warning(
                    "Ignoring stale world time %s (sequence %s <= %s)",
                    new_total_seconds,
                    sequence,
                    self.last_sequence,
                )
            else:
                if sequence is not None:
                    self.last_sequence = sequence
                if change_amount == 0:
                    pass
                elif self.integration in ARBITER_MODES and (
                    calendar.time_change_triggered or calendar.combat_change_triggered
                ):
                    logger.debug("Change requested by this calendar or a combat turn, applying")
                    if not calendar.time_change_triggered:
                        self._apply(new_total_seconds)
                        applied = True
                    self._persist_reconciled(nested)
                elif self.integration in FOLLOWER_MODES and not calendar.time_change_triggered:
                    logger.debug("External change, applying")
                    self._apply(new_total_seconds)
                    applied = True
                    self._persist_reconciled(nested)
                else:
                    logger.debug("Not applying world time %s", new_total_seconds)
        finally:
            logger.debug("Resetting time change triggers")
            calendar.time_change_triggered = False
            calendar.combat_change_triggered = False
            if not nested:
                self._reconciling = False
        return applied
