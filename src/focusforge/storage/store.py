# src/focusforge/storage/store.py

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from ..core.ports import KeyValueBackend

logger = logging.getLogger(__name__)


class Storage:
    """
    Durable JSON key-value adapter.

    Contract:
    - values are JSON-encoded on write and decoded on read
    - get_item returns None on a miss AND on any error
    - set_item / remove_item / clear log failures and never raise
    - no transaction across keys

    Backend calls run in a worker thread. A lock keeps them in the order
    they were issued, so two fire-and-forget writes to one key land in
    scheduling order.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend
        self._lock = asyncio.Lock()

    async def _run(self, fn, *args: Any) -> Any:
        async with self._lock:
            return await asyncio.to_thread(fn, *args)

    async def get_item(self, key: str) -> Any | None:
        try:
            raw = await self._run(self._backend.get, str(key))
            return None if raw is None else json.loads(raw)
        except Exception:
            logger.exception("Error loading %s", key)
            return None

    async def set_item(self, key: str, value: Any) -> None:
        try:
            raw = json.dumps(value, ensure_ascii=False)
            await self._run(self._backend.set, str(key), raw)
        except Exception:
            logger.exception("Error saving %s", key)

    async def remove_item(self, key: str) -> None:
        try:
            await self._run(self._backend.delete, str(key))
        except Exception:
            logger.exception("Error removing %s", key)

    async def clear(self) -> None:
        try:
            await self._run(self._backend.clear)
        except Exception:
            logger.exception("Error clearing storage")
