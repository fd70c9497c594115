# src/focusforge/core/sprint.py

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_SPRINT_MINUTES = 25

SprintTick = Callable[[int], None]


def format_time(seconds: int) -> str:
    """Render a countdown as m:ss (e.g. 25:00, 4:07)."""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"


class SprintControl:
    """Pause/resume switch shared between a running countdown and the console."""

    def __init__(self) -> None:
        self._running = asyncio.Event()
        self._running.set()
        self.remaining: int | None = None

    @property
    def paused(self) -> bool:
        return not self._running.is_set()

    def pause(self) -> None:
        self._running.clear()

    def resume(self) -> None:
        self._running.set()

    async def wait_running(self) -> None:
        await self._running.wait()


@dataclass
class ActiveSprint:
    """The sprint currently counting down in the background (one at a time)."""

    task_id: str
    title: str
    control: SprintControl = field(default_factory=SprintControl)
    runner: asyncio.Task[str] | None = None


async def run_sprint(
    duration_seconds: int,
    *,
    on_tick: SprintTick | None = None,
    tick_seconds: float = 1.0,
    control: SprintControl | None = None,
) -> int:
    """
    Count down a focus sprint.

    on_tick receives the remaining seconds after every tick (and 0 at the end).
    While `control` is paused no time is counted; a tick interrupted by a
    pause is discarded. Returns the sprint length in whole minutes (rounded
    up, at least 1), the value recorded as time spent. Cancellation
    propagates to the caller.
    """
    started = time.monotonic()
    remaining = max(0, int(duration_seconds))
    logger.info("Sprint started (%s)", format_time(remaining))
    if control is not None:
        control.remaining = remaining

    try:
        while remaining > 0:
            if control is not None:
                await control.wait_running()
            await asyncio.sleep(tick_seconds)
            if control is not None and control.paused:
                continue
            remaining -= 1
            if control is not None:
                control.remaining = remaining
            if on_tick is not None:
                on_tick(remaining)
    finally:
        elapsed = time.monotonic() - started
        logger.info("Sprint ended after %.0fs (remaining=%s)", elapsed, format_time(remaining))

    return max(1, -(-int(duration_seconds) // 60))
