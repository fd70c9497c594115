# src/focusforge/llm/prompts.py

from __future__ import annotations

from .models import CoachingStats


def task_plan_system_prompt(identity: str) -> str:
    return (
        f"You are a Principal Executive Coach for a {identity}.\n"
        "Convert goals into 3 actionable 25-minute execution blocks.\n"
        'Also provide a "strategicAssessment" (20 words max) analyzing the goal\'s leverage.\n'
        "Return ONLY a JSON object with:\n"
        '1. "tasks": array of {title, description}\n'
        '2. "strategicAssessment": string assessment.'
    )


def task_plan_user_prompt(goal: str) -> str:
    return f"Goal: {goal}"


def coaching_system_prompt(identity: str) -> str:
    return (
        f"You are a Neuro-Performance Coach for an elite {identity}.\n"
        'Analyze their stats and provide one "Pro Insight" (max 30 words) on how to improve '
        "their execution loop.\n"
        "Be direct, analytical, and high-status."
    )


def coaching_user_prompt(stats: CoachingStats) -> str:
    return (
        f"Session Data: {stats.sessions} sessions this week, "
        f"Execution Score: {stats.score}, Streak: {stats.streak} days."
    )


def reflection_system_prompt(identity: str) -> str:
    return (
        f"You are a minimalist execution coach for a {identity}. "
        "Provide a single, short reflection question (max 12 words) for a user "
        "who just finished a 25-minute sprint."
    )


def reflection_user_prompt(task_title: str) -> str:
    return f"Reflection for task: {task_title}"
