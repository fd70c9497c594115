# src/focusforge/llm/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ContentSource(StrEnum):
    REMOTE = "remote"
    CACHE = "cache"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class Generated(Generic[T]):
    """A generated value tagged with where it came from."""

    value: T
    source: ContentSource

    @property
    def is_fallback(self) -> bool:
        return self.source is ContentSource.FALLBACK


@dataclass(frozen=True, slots=True)
class PlannedTask:
    title: str
    description: str


@dataclass(frozen=True, slots=True)
class TaskPlan:
    """
    Task breakdown returned by the model.

    to_dict/from_dict use the same JSON shape the model is asked to emit
    ("tasks" + "strategicAssessment"), so a cached plan is byte-for-byte
    what a remote call returned.
    """

    tasks: tuple[PlannedTask, ...]
    strategic_assessment: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": [{"title": t.title, "description": t.description} for t in self.tasks],
            "strategicAssessment": self.strategic_assessment,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> TaskPlan:
        """Strict parse; raises ValueError on any shape mismatch."""
        if not isinstance(raw, dict):
            raise ValueError("plan must be a JSON object")

        items = raw.get("tasks")
        if not isinstance(items, list) or not items:
            raise ValueError("plan.tasks must be a non-empty list")

        tasks: list[PlannedTask] = []
        for item in items:
            if not isinstance(item, dict):
                raise ValueError("plan.tasks[] must be objects")
            title = item.get("title")
            description = item.get("description", "")
            if not isinstance(title, str) or not title.strip():
                raise ValueError("plan.tasks[].title must be a non-empty string")
            if not isinstance(description, str):
                raise ValueError("plan.tasks[].description must be a string")
            tasks.append(PlannedTask(title=title.strip(), description=description.strip()))

        assessment = raw.get("strategicAssessment", "")
        if not isinstance(assessment, str):
            raise ValueError("plan.strategicAssessment must be a string")

        return cls(tasks=tuple(tasks), strategic_assessment=assessment.strip())


@dataclass(frozen=True, slots=True)
class CoachingStats:
    sessions: int
    score: int
    identity: str
    streak: int
