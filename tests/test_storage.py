# tests/test_storage.py

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from focusforge.storage.keys import StorageKey
from focusforge.storage.sqlite_backend import SQLiteKeyValueBackend
from focusforge.storage.store import Storage

from .fakes import FailingBackend, MemoryBackend


@pytest.mark.asyncio
async def test_values_round_trip_as_json(storage: Storage) -> None:
    await storage.set_item(StorageKey.STREAK_COUNT, 4)
    await storage.set_item(StorageKey.DARK_MODE, True)
    await storage.set_item(StorageKey.DAILY_TASKS, [{"id": "t1", "title": "Ship"}])

    assert await storage.get_item(StorageKey.STREAK_COUNT) == 4
    assert await storage.get_item(StorageKey.DARK_MODE) is True
    assert await storage.get_item(StorageKey.DAILY_TASKS) == [{"id": "t1", "title": "Ship"}]


@pytest.mark.asyncio
async def test_missing_key_reads_as_none(storage: Storage) -> None:
    assert await storage.get_item("@never_written") is None


@pytest.mark.asyncio
async def test_remove_and_clear(storage: Storage) -> None:
    await storage.set_item("a", 1)
    await storage.set_item("b", 2)

    await storage.remove_item("a")
    assert await storage.get_item("a") is None
    assert await storage.get_item("b") == 2

    await storage.clear()
    assert await storage.get_item("b") is None


@pytest.mark.asyncio
async def test_unicode_text_survives(storage: Storage) -> None:
    await storage.set_item(StorageKey.CREATOR_IDENTITY, "Écrivain ✍")
    assert await storage.get_item(StorageKey.CREATOR_IDENTITY) == "Écrivain ✍"


@pytest.mark.asyncio
async def test_values_survive_a_new_backend_instance(tmp_path: Path) -> None:
    path = tmp_path / "kv.sqlite3"
    first = Storage(SQLiteKeyValueBackend(path))
    await first.set_item(StorageKey.EXECUTION_SCORE, 66)

    second = Storage(SQLiteKeyValueBackend(path))
    assert await second.get_item(StorageKey.EXECUTION_SCORE) == 66


@pytest.mark.asyncio
async def test_unordered_concurrent_writes_land_in_issue_order() -> None:
    storage = Storage(MemoryBackend())

    await asyncio.gather(*(storage.set_item("k", i) for i in range(20)))

    assert await storage.get_item("k") == 19


@pytest.mark.asyncio
async def test_failing_backend_never_raises(caplog) -> None:
    storage = Storage(FailingBackend())

    assert await storage.get_item("k") is None
    await storage.set_item("k", 1)
    await storage.remove_item("k")
    await storage.clear()

    messages = [r.getMessage() for r in caplog.records]
    assert "Error loading k" in messages
    assert "Error saving k" in messages
    assert "Error removing k" in messages
    assert "Error clearing storage" in messages


@pytest.mark.asyncio
async def test_corrupt_json_reads_as_none() -> None:
    backend = MemoryBackend()
    backend.data["k"] = "{not json"
    storage = Storage(backend)

    assert await storage.get_item("k") is None


@pytest.mark.asyncio
async def test_unserializable_value_is_logged_not_raised() -> None:
    backend = MemoryBackend()
    storage = Storage(backend)

    await storage.set_item("k", object())

    assert "k" not in backend.data


def test_sqlite_backend_upserts(tmp_path: Path) -> None:
    backend = SQLiteKeyValueBackend(tmp_path / "nested" / "kv.sqlite3")

    backend.set("k", "1")
    backend.set("k", "2")

    assert backend.get("k") == "2"
    assert backend.count_keys() == 1
    assert backend.db_path.parent.is_dir()
