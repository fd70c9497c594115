# src/focusforge/core/summary.py

from __future__ import annotations

from dataclasses import dataclass

from .models import AppSnapshot


@dataclass(frozen=True, slots=True)
class WeeklyStats:
    sessions: int
    execution_score: int
    streak: int

    @property
    def completion_rate(self) -> str:
        return "100%" if self.sessions > 0 else "0%"


def weekly_stats(snapshot: AppSnapshot) -> WeeklyStats:
    return WeeklyStats(
        sessions=snapshot.session_count,
        execution_score=snapshot.execution_score,
        streak=snapshot.streak,
    )


def build_report(stats: WeeklyStats) -> str:
    """Shareable plain-text progress report."""
    return (
        "FocusForge Report:\n"
        f"This week I completed {stats.sessions} deep work sessions "
        f"with a {stats.execution_score} execution score.\n"
        f"Current Streak: {stats.streak} days.\n"
        "#FocusForge #BuildInPublic"
    )


def greeting(hour: int) -> str:
    if hour < 12:
        return "Good morning"
    if hour < 18:
        return "Good afternoon"
    return "Good evening"
