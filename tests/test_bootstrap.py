# tests/test_bootstrap.py

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path

import pytest

from focusforge.billing.entitlements import EntitlementClient
from focusforge.cli import commands
from focusforge.cli.bootstrap import App, create_app, shutdown_app, start_app
from focusforge.core.clock import FixedClock
from focusforge.storage.keys import StorageKey

from .conftest import make_settings
from .fakes import FakePurchasesProvider, customer


def _with_provider(app: App, provider: FakePurchasesProvider) -> App:
    app.settings = replace(app.settings, revenuecat_api_key="rc_test")
    app.entitlements = EntitlementClient(app.settings, provider_factory=lambda _s: provider)
    return app


def test_create_app_makes_local_dirs(tmp_path: Path, clock: FixedClock) -> None:
    data_dir = tmp_path / "data"
    settings = make_settings(tmp_path, data_dir=data_dir, storage_path=data_dir / "db" / "kv.sqlite3")

    app = create_app(settings=settings, clock=clock)

    assert data_dir.is_dir()
    assert (data_dir / "db" / "kv.sqlite3").exists()
    assert app.store.session_count == 0


@pytest.mark.asyncio
async def test_offline_start_keeps_persisted_premium(app: App) -> None:
    await app.storage.set_item(StorageKey.SUBSCRIPTION_STATUS, True)

    await start_app(app, watch=False)

    assert app.entitlements.configured is False
    assert app.store.is_premium is True
    assert app.watch_task is None
    await shutdown_app(app)


@pytest.mark.asyncio
async def test_start_syncs_premium_from_provider(app: App) -> None:
    _with_provider(app, FakePurchasesProvider(info=customer("premium_access")))

    await start_app(app, watch=False)
    await app.store.flush()

    assert app.store.is_premium is True
    assert await app.storage.get_item(StorageKey.SUBSCRIPTION_STATUS) is True
    await shutdown_app(app)


@pytest.mark.asyncio
async def test_start_revokes_lapsed_subscription(app: App) -> None:
    await app.storage.set_item(StorageKey.SUBSCRIPTION_STATUS, True)
    _with_provider(app, FakePurchasesProvider(info=customer()))

    await start_app(app, watch=False)

    assert app.store.is_premium is False
    await shutdown_app(app)


@pytest.mark.asyncio
async def test_watcher_pushes_entitlement_changes_into_the_store(app: App) -> None:
    provider = FakePurchasesProvider(info=customer())
    _with_provider(app, provider)

    await start_app(app, watch=True)
    assert app.store.is_premium is False
    assert app.watch_task is not None

    provider.info = customer("premium_access")
    await asyncio.sleep(0.05)
    assert app.store.is_premium is True

    await shutdown_app(app)
    assert app.watch_task is None
    assert provider.closed is True
    assert await app.storage.get_item(StorageKey.SUBSCRIPTION_STATUS) is True


@pytest.mark.asyncio
async def test_shutdown_drops_an_unfinished_sprint(app: App, monkeypatch) -> None:
    await start_app(app, watch=False)
    await commands.registry.handle(app, "/plan write")
    monkeypatch.setattr(commands, "SPRINT_TICK_SECONDS", 10)
    await commands.registry.handle(app, "/sprint 1")
    runner = app.sprint.runner

    await shutdown_app(app)

    assert runner.cancelled()
    assert app.sprint is None
    assert app.store.session_count == 0
    assert await app.storage.get_item(StorageKey.SESSION_COUNTER) == 0
