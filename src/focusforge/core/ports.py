# src/focusforge/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the storage substrate, the entitlement provider and the clock
swappable and makes testing easier.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..billing.models import CustomerInfo, Offering, Package


class KeyValueBackend(Protocol):
    """Raw string key -> string value substrate. Calls may block; callers run them off-loop."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
    def clear(self) -> None: ...


class KeyValueStore(Protocol):
    """JSON-level async store used by the app store and the content cache."""

    async def get_item(self, key: str) -> Any | None: ...
    async def set_item(self, key: str, value: Any) -> None: ...
    async def remove_item(self, key: str) -> None: ...
    async def clear(self) -> None: ...


class PurchasesProvider(Protocol):
    """
    Remote subscription ledger.

    purchase_package raises billing.errors.PurchaseCancelledError when the user
    backs out; every other failure propagates as a regular exception.
    """

    async def get_customer_info(self) -> CustomerInfo: ...
    async def get_offerings(self) -> list[Offering]: ...
    async def purchase_package(self, package: Package, *, receipt_token: str | None = None) -> CustomerInfo: ...
    async def restore_purchases(self) -> CustomerInfo: ...
    async def aclose(self) -> None: ...


class Clock(Protocol):
    """Single source of "today" for streak and daily-reset logic."""

    def today(self) -> date: ...
