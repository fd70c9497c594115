# src/focusforge/storage/keys.py

from __future__ import annotations

from enum import StrEnum


class StorageKey(StrEnum):
    """
    Fixed persisted key space. Each key is an independent record.

    The "@" prefix matches the keys written by the mobile build.
    """

    USER_GOALS = "@user_goals"
    DAILY_TASKS = "@daily_tasks"
    STREAK_COUNT = "@streak_count"
    LAST_COMPLETED_DATE = "@last_completed_date"
    SESSION_COUNTER = "@session_counter"
    EXECUTION_SCORE = "@execution_score"
    CREATOR_IDENTITY = "@creator_identity"
    LAST_SESSION_RESET = "@last_session_reset"
    DARK_MODE = "@dark_mode"
    ONBOARDING_COMPLETE = "@onboarding_complete"
    SUBSCRIPTION_STATUS = "@subscription_status"
    STRATEGIC_ASSESSMENT = "@strategic_assessment"
