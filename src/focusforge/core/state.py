# src/focusforge/core/state.py

"""
Application state store.

One AppStore per process holds the user's session. Readers use the
properties or snapshot(); writers go through the named actions only.

Every action follows the same shape:
1. assign the new in-memory values synchronously,
2. schedule the persistence writes on the running loop (fire-and-forget).

A failed write is logged by Storage and never rolls back memory. Actions
return a future covering their writes, and flush() awaits everything still
pending, for callers (mostly tests) that need durability before continuing.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import replace
from typing import Any

from ..llm.models import TaskPlan
from ..storage.keys import StorageKey
from .clock import day_key, yesterday_of
from .models import AppSnapshot, DailyTask, tasks_from_json, tasks_to_json
from .ports import Clock, KeyValueStore

logger = logging.getLogger(__name__)

FREE_SESSION_LIMIT = 5
SCORE_PER_TASK = 33
MAX_SCORE = 100
DEFAULT_IDENTITY = "General Creator"


def _as_bool(raw: Any, default: bool) -> bool:
    return raw if isinstance(raw, bool) else default


def _as_int(raw: Any, default: int) -> int:
    # bool is an int subclass; a stored true is not a counter.
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    return default


def _as_str(raw: Any, default: str | None) -> str | None:
    return raw if isinstance(raw, str) else default


class AppStore:
    def __init__(self, storage: KeyValueStore, clock: Clock) -> None:
        self._storage = storage
        self._clock = clock
        self._pending: set[asyncio.Future[Any]] = set()

        self._onboarding_complete = False
        self._dark_mode = False
        self._tasks: list[DailyTask] = []
        self._streak = 0
        self._session_count = 0
        self._execution_score = 0
        self._creator_identity = DEFAULT_IDENTITY
        self._is_premium = False
        self._strategic_assessment: str | None = None
        self._last_session_reset: str | None = None
        self._last_completed_date: str | None = None

    # ---- read access ----

    @property
    def onboarding_complete(self) -> bool:
        return self._onboarding_complete

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def tasks(self) -> tuple[DailyTask, ...]:
        return tuple(self._tasks)

    @property
    def streak(self) -> int:
        return self._streak

    @property
    def session_count(self) -> int:
        return self._session_count

    @property
    def execution_score(self) -> int:
        return self._execution_score

    @property
    def creator_identity(self) -> str:
        return self._creator_identity

    @property
    def is_premium(self) -> bool:
        return self._is_premium

    @property
    def strategic_assessment(self) -> str | None:
        return self._strategic_assessment

    @property
    def last_session_reset(self) -> str | None:
        return self._last_session_reset

    @property
    def last_completed_date(self) -> str | None:
        return self._last_completed_date

    def find_task(self, task_id: str) -> DailyTask | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def snapshot(self) -> AppSnapshot:
        return AppSnapshot(
            onboarding_complete=self._onboarding_complete,
            dark_mode=self._dark_mode,
            tasks=tuple(self._tasks),
            streak=self._streak,
            session_count=self._session_count,
            execution_score=self._execution_score,
            creator_identity=self._creator_identity,
            is_premium=self._is_premium,
            strategic_assessment=self._strategic_assessment,
            last_session_reset=self._last_session_reset,
            last_completed_date=self._last_completed_date,
        )

    # ---- persistence plumbing ----

    def _write(self, key: StorageKey, value: Any) -> Coroutine[Any, Any, None]:
        # None means "absent": drop the record instead of storing JSON null.
        if value is None:
            return self._storage.remove_item(key)
        return self._storage.set_item(key, value)

    def _persist(self, *writes: tuple[StorageKey, Any]) -> asyncio.Future[Any]:
        """Schedule writes without awaiting them; returns a handle for callers that care."""
        loop = asyncio.get_running_loop()
        tasks = [loop.create_task(self._write(key, value)) for key, value in writes]
        fut = asyncio.gather(*tasks)
        self._pending.add(fut)
        fut.add_done_callback(self._pending.discard)
        return fut

    async def flush(self) -> None:
        """Wait until every scheduled write has completed."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ---- actions ----

    def set_onboarding_complete(self, complete: bool) -> asyncio.Future[Any]:
        self._onboarding_complete = bool(complete)
        return self._persist((StorageKey.ONBOARDING_COMPLETE, self._onboarding_complete))

    def set_creator_identity(self, identity: str) -> asyncio.Future[Any]:
        self._creator_identity = identity
        return self._persist((StorageKey.CREATOR_IDENTITY, identity))

    def toggle_dark_mode(self) -> asyncio.Future[Any]:
        self._dark_mode = not self._dark_mode
        return self._persist((StorageKey.DARK_MODE, self._dark_mode))

    def set_tasks(self, tasks: list[DailyTask]) -> asyncio.Future[Any]:
        self._tasks = list(tasks)
        return self._persist((StorageKey.DAILY_TASKS, tasks_to_json(self._tasks)))

    def set_strategic_assessment(self, assessment: str | None) -> asyncio.Future[Any]:
        self._strategic_assessment = assessment
        return self._persist((StorageKey.STRATEGIC_ASSESSMENT, assessment))

    def apply_plan(self, plan: TaskPlan, now_ms: int) -> asyncio.Future[Any]:
        """Replace today's tasks with a freshly generated plan."""
        tasks = [
            DailyTask(id=f"task-{now_ms}-{i}", title=t.title, description=t.description)
            for i, t in enumerate(plan.tasks)
        ]
        futures = [self.set_tasks(tasks)]
        if plan.strategic_assessment:
            futures.append(self.set_strategic_assessment(plan.strategic_assessment))
        return asyncio.gather(*futures)

    def update_task(self, task_id: str, **changes: Any) -> asyncio.Future[Any]:
        """Merge `changes` into the matching task. Unknown ids leave the list as is."""
        self._tasks = [replace(t, **changes) if t.id == task_id else t for t in self._tasks]
        return self._persist((StorageKey.DAILY_TASKS, tasks_to_json(self._tasks)))

    def complete_task(self, task_id: str, time_spent: int) -> asyncio.Future[Any]:
        if not self._is_premium and self._session_count >= FREE_SESSION_LIMIT:
            logger.warning("Session limit reached for free user (task_id=%s)", task_id)
            return self._persist()

        self._tasks = [
            replace(t, completed=True, time_spent=time_spent) if t.id == task_id else t
            for t in self._tasks
        ]
        self._session_count += 1
        self._execution_score = min(MAX_SCORE, self._execution_score + SCORE_PER_TASK)

        fut = self._persist(
            (StorageKey.DAILY_TASKS, tasks_to_json(self._tasks)),
            (StorageKey.SESSION_COUNTER, self._session_count),
            (StorageKey.EXECUTION_SCORE, self._execution_score),
        )
        return asyncio.gather(fut, self.increment_streak())

    def set_premium(self, is_premium: bool) -> asyncio.Future[Any]:
        self._is_premium = bool(is_premium)
        return self._persist((StorageKey.SUBSCRIPTION_STATUS, self._is_premium))

    def toggle_premium_override(self) -> asyncio.Future[Any]:
        self._is_premium = not self._is_premium
        logger.info("Premium status toggled via override: %s", self._is_premium)
        return self._persist((StorageKey.SUBSCRIPTION_STATUS, self._is_premium))

    def reset_daily_counter(self) -> asyncio.Future[Any]:
        today = day_key(self._clock.today())
        self._session_count = 0
        self._last_session_reset = today
        self._tasks = []
        self._strategic_assessment = None
        return self._persist(
            (StorageKey.SESSION_COUNTER, 0),
            (StorageKey.LAST_SESSION_RESET, today),
            (StorageKey.DAILY_TASKS, []),
            (StorageKey.STRATEGIC_ASSESSMENT, None),
        )

    def increment_streak(self) -> asyncio.Future[Any]:
        today_d = self._clock.today()
        today = day_key(today_d)

        if self._last_completed_date == today:
            return self._persist()

        if self._last_completed_date == day_key(yesterday_of(today_d)):
            self._streak += 1
        else:
            self._streak = 1
        self._last_completed_date = today

        return self._persist(
            (StorageKey.STREAK_COUNT, self._streak),
            (StorageKey.LAST_COMPLETED_DATE, today),
        )

    def _apply_day_reset(self, previous: str | None, today: str) -> asyncio.Future[Any]:
        logger.info("Daily reset: last_session_reset=%s today=%s", previous, today)
        self._tasks = []
        self._session_count = 0
        self._execution_score = 0
        self._strategic_assessment = None
        self._last_session_reset = today
        return self._persist(
            (StorageKey.SESSION_COUNTER, 0),
            (StorageKey.EXECUTION_SCORE, 0),
            (StorageKey.LAST_SESSION_RESET, today),
            (StorageKey.DAILY_TASKS, []),
            (StorageKey.STRATEGIC_ASSESSMENT, None),
        )

    def ensure_today(self) -> asyncio.Future[Any]:
        """
        Apply the calendar-day reset if the day changed since the last load,
        for sessions that stay open past midnight. No-op until load_state ran.
        """
        today = day_key(self._clock.today())
        if self._last_session_reset is None or self._last_session_reset == today:
            return self._persist()
        return self._apply_day_reset(self._last_session_reset, today)

    async def load_state(self) -> None:
        """
        Hydrate from storage, then apply the daily reset.

        Reads run in parallel; each one that fails is treated as absent
        (Storage already maps errors to None).
        """
        (
            onboarding_complete,
            dark_mode,
            tasks_raw,
            streak,
            session_count,
            execution_score,
            creator_identity,
            is_premium,
            strategic_assessment,
            last_session_reset,
            last_completed_date,
        ) = await asyncio.gather(
            self._storage.get_item(StorageKey.ONBOARDING_COMPLETE),
            self._storage.get_item(StorageKey.DARK_MODE),
            self._storage.get_item(StorageKey.DAILY_TASKS),
            self._storage.get_item(StorageKey.STREAK_COUNT),
            self._storage.get_item(StorageKey.SESSION_COUNTER),
            self._storage.get_item(StorageKey.EXECUTION_SCORE),
            self._storage.get_item(StorageKey.CREATOR_IDENTITY),
            self._storage.get_item(StorageKey.SUBSCRIPTION_STATUS),
            self._storage.get_item(StorageKey.STRATEGIC_ASSESSMENT),
            self._storage.get_item(StorageKey.LAST_SESSION_RESET),
            self._storage.get_item(StorageKey.LAST_COMPLETED_DATE),
        )

        today = day_key(self._clock.today())

        # Durable fields: never touched by the daily reset.
        self._onboarding_complete = _as_bool(onboarding_complete, False)
        self._dark_mode = _as_bool(dark_mode, False)
        self._streak = _as_int(streak, 0)
        self._creator_identity = _as_str(creator_identity, None) or DEFAULT_IDENTITY
        self._is_premium = _as_bool(is_premium, False)
        self._last_completed_date = _as_str(last_completed_date, None)

        if last_session_reset != today:
            self._apply_day_reset(last_session_reset, today)
            return

        self._tasks = tasks_from_json(tasks_raw) or []
        self._session_count = _as_int(session_count, 0)
        self._execution_score = max(0, min(MAX_SCORE, _as_int(execution_score, 0)))
        self._strategic_assessment = _as_str(strategic_assessment, None)
        self._last_session_reset = today
        logger.info(
            "State loaded: tasks=%d sessions=%d score=%d streak=%d premium=%s",
            len(self._tasks),
            self._session_count,
            self._execution_score,
            self._streak,
            self._is_premium,
        )
