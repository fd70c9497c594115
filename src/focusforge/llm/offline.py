# src/focusforge/llm/offline.py

"""
Deterministic fallback content.

Used when no generation API key is configured (offline / dev runs) and
whenever a remote call fails. The texts are fixed so tests can match them
verbatim.
"""

from __future__ import annotations

from .models import PlannedTask, TaskPlan

FALLBACK_PLAN = TaskPlan(
    tasks=(
        PlannedTask(
            title="Strategic Onboarding",
            description="Analyze your mission-critical constraints for the next 25 minutes.",
        ),
        PlannedTask(
            title="System Optimization",
            description="Refine your execution environment for maximum cognitive flow.",
        ),
        PlannedTask(
            title="Feedback Loop Analysis",
            description="Review your session output and identify the primary bottleneck.",
        ),
    ),
    strategic_assessment="Standard execution pattern. Focus on high-leverage tasks to maximize ROI.",
)

# No API key configured.
COACHING_OFFLINE = (
    "You're building momentum. Focus on consistent 25-minute sprints to maximize your creative output."
)
REFLECTION_OFFLINE = "Great job completing this task. How do you feel about your progress today?"

# Remote call failed.
COACHING_ON_ERROR = (
    "Strong execution pattern detected. Maintain this velocity to reach your creator milestones."
)
REFLECTION_ON_ERROR = "Sprint complete. What is one thing you learned during this session?"


def fallback_plan() -> TaskPlan:
    return FALLBACK_PLAN
