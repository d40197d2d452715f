"""Injectable clock used for retention windows and date buckets."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current instant and calendar date."""

    def now(self) -> datetime:
        """Return the current timezone-aware instant."""
        ...

    def today(self) -> date:
        """Return the current local calendar date."""
        ...


class SystemClock:
    """Wall-clock implementation backed by the local timezone."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).astimezone()

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Deterministic clock for tests; only moves when told to."""

    def __init__(self, current: datetime) -> None:
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        self._current = current

    def now(self) -> datetime:
        return self._current

    def today(self) -> date:
        return self._current.date()

    def set(self, current: datetime) -> None:
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        self._current = current

    def advance(self, delta: timedelta) -> datetime:
        self._current = self._current + delta
        return self._current


__all__ = ["Clock", "FixedClock", "SystemClock"]
