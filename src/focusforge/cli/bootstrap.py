# src/focusforge/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage, store, content generator and entitlement client into an App,
- runs the startup sequence (hydrate -> entitlement sync) and shutdown.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass

from ..billing.entitlements import EntitlementClient
from ..billing.models import CustomerInfo
from ..config import Settings, get_settings
from ..core.clock import SystemClock
from ..core.ports import Clock
from ..core.sprint import ActiveSprint
from ..core.state import AppStore
from ..llm.client import ContentGenerator
from ..storage.sqlite_backend import SQLiteKeyValueBackend
from ..storage.store import Storage

logger = logging.getLogger(__name__)


@dataclass
class App:
    settings: Settings
    storage: Storage
    store: AppStore
    generator: ContentGenerator
    entitlements: EntitlementClient
    watch_task: asyncio.Task[None] | None = None
    sprint: ActiveSprint | None = None


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_app(*, settings: Settings | None = None, clock: Clock | None = None) -> App:
    """
    Build the App from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = Storage(SQLiteKeyValueBackend(settings.storage_path))
    return App(
        settings=settings,
        storage=storage,
        store=AppStore(storage, clock or SystemClock(settings.timezone)),
        generator=ContentGenerator(settings, storage),
        entitlements=EntitlementClient(settings),
    )


async def start_app(app: App, *, watch: bool = True) -> None:
    """Hydrate state, then sync the subscription status from the entitlement provider."""
    await app.store.load_state()

    ent = app.entitlements
    ent.initialize()
    if not ent.configured:
        # Offline: keep the persisted status (including a manual override).
        return

    def _on_customer_info(info: CustomerInfo) -> None:
        app.store.set_premium(info.is_entitled(ent.entitlement_id))

    ent.add_listener(_on_customer_info)

    is_pro = await ent.check_entitlement()
    app.store.set_premium(is_pro)

    if watch:
        app.watch_task = asyncio.create_task(ent.watch(app.settings.entitlement_poll_seconds))


async def shutdown_app(app: App) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if app.watch_task is not None:
        app.watch_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await app.watch_task
        app.watch_task = None

    # An unfinished sprint is dropped, never logged.
    if app.sprint is not None and app.sprint.runner is not None:
        app.sprint.runner.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await app.sprint.runner
    app.sprint = None

    try:
        await app.store.flush()
    except Exception:
        logger.exception("Failed to flush pending writes.")

    try:
        await app.entitlements.aclose()
    except Exception:
        logger.debug("Entitlement client close failed.", exc_info=True)

    try:
        await app.generator.aclose()
    except Exception:
        logger.debug("Content generator close failed.", exc_info=True)
