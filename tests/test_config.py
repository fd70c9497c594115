# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from focusforge.config import Settings, has_credential
from focusforge.logging_setup import _ConsoleNoiseFilter, setup_logging

ENV_NAMES = (
    "FOCUSFORGE_GROQ_API_KEY",
    "EXPO_PUBLIC_GROQ_API_KEY",
    "GROQ_API_KEY",
    "FOCUSFORGE_REVENUECAT_API_KEY",
    "EXPO_PUBLIC_REVENUECAT_ANDROID_KEY",
    "FOCUSFORGE_REVENUECAT_ENTITLEMENT",
    "EXPO_PUBLIC_REVENUECAT_ENTITLEMENT",
    "FOCUSFORGE_DATA_DIR",
    "FOCUSFORGE_STORAGE_PATH",
    "FOCUSFORGE_SPRINT_MINUTES",
    "FOCUSFORGE_LLM_TIMEOUT_SECONDS",
)


@pytest.fixture()
def clean_env(monkeypatch) -> pytest.MonkeyPatch:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env) -> None:
    s = Settings.from_env()

    assert s.groq_api_key is None
    assert s.revenuecat_api_key is None
    assert s.entitlement_id == "premium_access"
    assert s.storage_path == Path(".local/focusforge") / "storage.sqlite3"
    assert s.sprint_minutes == 25


def test_prefixed_names_win_over_legacy_ones(clean_env) -> None:
    clean_env.setenv("EXPO_PUBLIC_GROQ_API_KEY", "gsk_legacy")
    assert Settings.from_env().groq_api_key == "gsk_legacy"

    clean_env.setenv("FOCUSFORGE_GROQ_API_KEY", "gsk_new")
    assert Settings.from_env().groq_api_key == "gsk_new"

    clean_env.setenv("EXPO_PUBLIC_REVENUECAT_ANDROID_KEY", "goog_x")
    clean_env.setenv("EXPO_PUBLIC_REVENUECAT_ENTITLEMENT", "pro")
    s = Settings.from_env()
    assert s.revenuecat_api_key == "goog_x"
    assert s.entitlement_id == "pro"


def test_bad_numbers_fall_back_to_defaults(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("FOCUSFORGE_SPRINT_MINUTES", "soon")
    clean_env.setenv("FOCUSFORGE_LLM_TIMEOUT_SECONDS", "")
    clean_env.setenv("FOCUSFORGE_DATA_DIR", str(tmp_path))

    s = Settings.from_env()

    assert s.sprint_minutes == 25
    assert s.llm_timeout_seconds == 30.0
    assert s.storage_path == tmp_path / "storage.sqlite3"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, False), ("", False), ("   ", False), ("placeholder_until_set", False), ("gsk_live", True)],
)
def test_has_credential(value, expected: bool) -> None:
    assert has_credential(value) is expected


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_levels() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("focusforge.core.state", logging.INFO))
    assert not f.filter(_record("focusforge.billing.entitlements", logging.INFO))
    assert f.filter(_record("focusforge.billing.entitlements", logging.WARNING))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert f.filter(_record("httpx", logging.ERROR))
    assert not f.filter(_record("py.warnings", logging.WARNING))


def test_setup_logging_writes_everything_to_the_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("focusforge.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "logs" / "focusforge.log"
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
