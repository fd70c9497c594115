# tests/conftest.py

from __future__ import annotations

from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

from focusforge.cli.bootstrap import App, create_app
from focusforge.config import Settings
from focusforge.core.clock import FixedClock
from focusforge.core.state import AppStore
from focusforge.storage.sqlite_backend import SQLiteKeyValueBackend
from focusforge.storage.store import Storage

TODAY = date(2026, 10, 19)


def make_settings(tmp_path: Path, **overrides) -> Settings:
    """
    Settings built explicitly rather than from the environment, so unit tests
    never pick up a developer's real API keys.
    """
    base = Settings(
        app_name="FocusForge",
        log_level="WARNING",
        timezone="UTC",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.sqlite3",
        groq_api_key=None,
        llm_base_url="https://api.groq.com/openai/v1",
        llm_model="llama-3.3-70b-versatile",
        llm_timeout_seconds=5.0,
        revenuecat_api_key=None,
        revenuecat_base_url="https://api.revenuecat.com/v1",
        revenuecat_app_user_id="user-1",
        revenuecat_platform="android",
        entitlement_id="premium_access",
        entitlement_poll_seconds=0.01,
        http_timeout_seconds=5.0,
        sprint_minutes=25,
    )
    return replace(base, **overrides)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture()
def storage(settings: Settings) -> Storage:
    """Real SQLite storage in tmp_path: its behavior is part of what we test."""
    return Storage(SQLiteKeyValueBackend(settings.storage_path))


@pytest.fixture()
def store(storage: Storage, clock: FixedClock) -> AppStore:
    return AppStore(storage, clock)


@pytest.fixture()
def app(settings: Settings, clock: FixedClock) -> App:
    return create_app(settings=settings, clock=clock)
