# src/focusforge/core/models.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DailyTask:
    """
    One 25-minute execution block.

    Stored as JSON with the camelCase wire names the mobile build used
    ("timeSpent"), so existing storage files keep loading.
    """

    id: str
    title: str
    description: str
    completed: bool = False
    time_spent: int = 0  # minutes

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "timeSpent": self.time_spent,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> DailyTask:
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title", "")),
            description=str(raw.get("description", "")),
            completed=bool(raw.get("completed", False)),
            time_spent=int(raw.get("timeSpent", raw.get("time_spent", 0)) or 0),
        )


def tasks_from_json(raw: Any) -> list[DailyTask] | None:
    """Decode a persisted task list; None when the payload is not a list."""
    if not isinstance(raw, list):
        return None
    out: list[DailyTask] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            out.append(DailyTask.from_dict(item))
        except (TypeError, ValueError):
            logger.warning("Skipping malformed persisted task: %r", item)
    return out


def tasks_to_json(tasks: list[DailyTask]) -> list[dict[str, Any]]:
    return [t.to_dict() for t in tasks]


@dataclass(frozen=True, slots=True)
class AppSnapshot:
    """Read-only copy of the store state handed to renderers."""

    onboarding_complete: bool
    dark_mode: bool
    tasks: tuple[DailyTask, ...]
    streak: int
    session_count: int
    execution_score: int
    creator_identity: str
    is_premium: bool
    strategic_assessment: str | None
    last_session_reset: str | None
    last_completed_date: str | None
