# src/focusforge/billing/entitlements.py

"""
Entitlement client.

Wraps a PurchasesProvider and degrades to "not entitled / unavailable"
whenever the provider is not configured or a call fails. Nothing here
raises to the caller.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from ..config import Settings, has_credential
from ..core.ports import PurchasesProvider
from .errors import PurchaseCancelledError
from .models import CustomerInfo, Offering, Package

logger = logging.getLogger(__name__)

CustomerInfoListener = Callable[[CustomerInfo], Awaitable[None] | None]
ProviderFactory = Callable[[Settings], PurchasesProvider]


def _default_factory(settings: Settings) -> PurchasesProvider:
    from .revenuecat import RevenueCatProvider

    return RevenueCatProvider(settings)


class EntitlementClient:
    def __init__(
        self,
        settings: Settings,
        provider_factory: ProviderFactory = _default_factory,
    ) -> None:
        self._settings = settings
        self._factory = provider_factory
        self._provider: PurchasesProvider | None = None
        self._listeners: list[CustomerInfoListener] = []
        self._last_entitled: bool | None = None

    @property
    def entitlement_id(self) -> str:
        return self._settings.entitlement_id

    @property
    def configured(self) -> bool:
        return self._provider is not None

    def initialize(self) -> None:
        """Configure the provider once per process. Missing key -> stays unconfigured."""
        if self._provider is not None:
            return

        if not has_credential(self._settings.revenuecat_api_key):
            logger.warning(
                "RevenueCat API key is missing or set to placeholder. "
                "Subscription features will be disabled."
            )
            return

        try:
            self._provider = self._factory(self._settings)
        except Exception:
            logger.exception("Failed to configure RevenueCat provider")
            self._provider = None
            return
        logger.info("RevenueCat initialized (entitlement=%s)", self.entitlement_id)

    # ---- listeners ----

    def add_listener(self, callback: CustomerInfoListener) -> None:
        if self._provider is None:
            return
        self._listeners.append(callback)

    def remove_listener(self, callback: CustomerInfoListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    async def _publish(self, info: CustomerInfo) -> None:
        """Notify listeners when the entitlement state changed since the last snapshot."""
        entitled = info.is_entitled(self.entitlement_id)
        if entitled == self._last_entitled:
            return
        self._last_entitled = entitled

        for cb in list(self._listeners):
            try:
                result = cb(info)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Customer info listener failed")

    async def _entitled_from(self, info: CustomerInfo) -> bool:
        await self._publish(info)
        return info.is_entitled(self.entitlement_id)

    # ---- operations ----

    async def get_offerings(self) -> Offering | None:
        if self._provider is None:
            return None
        try:
            offerings = await self._provider.get_offerings()
        except Exception:
            logger.exception("Error fetching offerings")
            return None
        for offering in offerings:
            if offering.is_current:
                return offering
        return None

    async def purchase_product(self, package: Package, receipt_token: str | None = None) -> bool:
        if self._provider is None:
            return False
        try:
            info = await self._provider.purchase_package(package, receipt_token=receipt_token)
        except PurchaseCancelledError:
            logger.info("Purchase cancelled by user (package=%s)", package.identifier)
            return False
        except Exception:
            logger.exception("Error purchasing package %s", package.identifier)
            return False
        return await self._entitled_from(info)

    async def restore_purchases(self) -> bool:
        if self._provider is None:
            return False
        try:
            info = await self._provider.restore_purchases()
        except Exception:
            logger.exception("Error restoring purchases")
            return False
        return await self._entitled_from(info)

    async def check_entitlement(self) -> bool:
        if self._provider is None:
            return False
        try:
            info = await self._provider.get_customer_info()
        except Exception:
            logger.exception("Error checking entitlement")
            return False
        return await self._entitled_from(info)

    async def watch(self, interval_seconds: float) -> None:
        """
        Poll customer info so listeners hear about renewals, expiries and
        purchases made elsewhere. Runs until cancelled.
        """
        if self._provider is None:
            return
        interval = max(0.01, float(interval_seconds))
        logger.info("Entitlement watcher started (interval=%.0fs)", interval)
        while True:
            await asyncio.sleep(interval)
            await self.check_entitlement()

    async def aclose(self) -> None:
        provider = self._provider
        self._provider = None
        self._listeners.clear()
        if provider is not None:
            try:
                await provider.aclose()
            except Exception:
                logger.debug("Provider close failed.", exc_info=True)
