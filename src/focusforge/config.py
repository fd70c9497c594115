# src/focusforge/config.py

"""
Settings for the whole app, read once from the environment (and .env).

Nothing is required at import time. Missing credentials simply leave the
content generator and the entitlement client on their offline paths.
Variable names from the mobile build (EXPO_PUBLIC_*) still work as
fallbacks so an existing .env can be reused.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from dotenv import load_dotenv

ENV_PREFIX = "FOCUSFORGE"

# Value shipped in template .env files; treated the same as "not set".
PLACEHOLDER_KEY = "placeholder_until_set"

N = TypeVar("N", int, float)

load_dotenv(override=False)


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _raw(name: str) -> str | None:
    """Env value, with blank strings read as unset."""
    v = os.getenv(name)
    if v is None or not v.strip():
        return None
    return v


def _env(name: str, default: str) -> str:
    v = _raw(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    """First non-blank value among `names` (new name first, legacy names after)."""
    return next((v for v in map(_raw, names) if v is not None), default)


def _env_number(name: str, default: N, cast: Callable[[str], N]) -> N:
    v = _raw(name)
    if v is None:
        return default
    try:
        return cast(v.strip())
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    v = _raw(name)
    return default if v is None else Path(v).expanduser()


def has_credential(value: str | None) -> bool:
    """True when an API key is set to something other than the template placeholder."""
    if not value or not value.strip():
        return False
    return value.strip() != PLACEHOLDER_KEY


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    timezone: str | None

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path

    # ---- Content generation (Groq, OpenAI-compatible) ----
    groq_api_key: str | None
    llm_base_url: str
    llm_model: str
    llm_timeout_seconds: float

    # ---- Entitlements (RevenueCat) ----
    revenuecat_api_key: str | None
    revenuecat_base_url: str
    revenuecat_app_user_id: str
    revenuecat_platform: str
    entitlement_id: str
    entitlement_poll_seconds: float
    http_timeout_seconds: float

    # ---- Focus sprint ----
    sprint_minutes: int

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/focusforge"))

        return Settings(
            app_name=_env(_k("APP_NAME"), "FocusForge"),
            log_level=_env(_k("LOG_LEVEL"), "WARNING"),
            timezone=_first_env(_k("TIMEZONE")),
            data_dir=data_dir,
            storage_path=_env_path(_k("STORAGE_PATH"), data_dir / "storage.sqlite3"),
            groq_api_key=_first_env(_k("GROQ_API_KEY"), "EXPO_PUBLIC_GROQ_API_KEY", "GROQ_API_KEY"),
            llm_base_url=_env(_k("LLM_BASE_URL"), "https://api.groq.com/openai/v1"),
            llm_model=_env(_k("LLM_MODEL"), "llama-3.3-70b-versatile"),
            llm_timeout_seconds=_env_number(_k("LLM_TIMEOUT_SECONDS"), 30.0, float),
            revenuecat_api_key=_first_env(
                _k("REVENUECAT_API_KEY"), "EXPO_PUBLIC_REVENUECAT_ANDROID_KEY"
            ),
            revenuecat_base_url=_env(_k("REVENUECAT_BASE_URL"), "https://api.revenuecat.com/v1"),
            revenuecat_app_user_id=_env(
                _k("REVENUECAT_APP_USER_ID"), "$RCAnonymousID:focusforge-local"
            ),
            revenuecat_platform=_env(_k("REVENUECAT_PLATFORM"), "android"),
            entitlement_id=_first_env(
                _k("REVENUECAT_ENTITLEMENT"),
                "EXPO_PUBLIC_REVENUECAT_ENTITLEMENT",
                default="premium_access",
            )
            or "premium_access",
            entitlement_poll_seconds=_env_number(_k("ENTITLEMENT_POLL_SECONDS"), 300.0, float),
            http_timeout_seconds=_env_number(_k("HTTP_TIMEOUT_SECONDS"), 15.0, float),
            sprint_minutes=max(1, _env_number(_k("SPRINT_MINUTES"), 25, int)),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
