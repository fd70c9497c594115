# src/focusforge/core/clock.py

"""
Calendar-day helpers.

Streak and daily-reset decisions compare calendar-day keys (ISO dates),
never elapsed time. Day keys are computed in one configured timezone so a
device changing zones does not produce a different key for the same day.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def day_key(d: date) -> str:
    return d.isoformat()


def yesterday_of(d: date) -> date:
    return d - timedelta(days=1)


class SystemClock:
    """Wall clock pinned to one timezone (host local zone when tz is None)."""

    def __init__(self, tz: str | None = None) -> None:
        self._tz: ZoneInfo | None = None
        if tz:
            try:
                self._tz = ZoneInfo(tz)
            except (ZoneInfoNotFoundError, ValueError):
                logger.warning("Unknown timezone %r, falling back to local time.", tz)

    def today(self) -> date:
        if self._tz is None:
            return datetime.now().astimezone().date()
        return datetime.now(self._tz).date()


class FixedClock:
    """Manually advanced clock (tests, demos)."""

    def __init__(self, today: date) -> None:
        self._today = today

    def today(self) -> date:
        return self._today

    def set(self, today: date) -> None:
        self._today = today

    def advance(self, days: int = 1) -> None:
        self._today = self._today + timedelta(days=days)
