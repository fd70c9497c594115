# src/focusforge/billing/revenuecat.py

"""
RevenueCat REST API v1 provider.

Endpoints used:
- GET  /subscribers/{app_user_id}            -> customer info
- GET  /subscribers/{app_user_id}/offerings  -> offerings
- POST /receipts                             -> register a store purchase token

The store checkout itself happens on the device; this side only receives
the resulting purchase token (receipt) and forwards it.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..config import Settings
from .errors import PurchaseCancelledError
from .models import CustomerInfo, Offering, Package

logger = logging.getLogger(__name__)


def _parse_offerings(payload: Any) -> list[Offering]:
    if not isinstance(payload, dict):
        raise ValueError("offerings response must be an object")

    current_id = payload.get("current_offering_id")
    out: list[Offering] = []
    for raw in payload.get("offerings") or []:
        if not isinstance(raw, dict) or not raw.get("identifier"):
            continue
        packages: list[Package] = []
        for p in raw.get("packages") or []:
            if not isinstance(p, dict) or not p.get("identifier"):
                continue
            product_id = str(p.get("platform_product_identifier") or p["identifier"])
            packages.append(
                Package(
                    identifier=str(p["identifier"]),
                    product_identifier=product_id,
                    title=product_id,
                )
            )
        out.append(
            Offering(
                identifier=str(raw["identifier"]),
                packages=tuple(packages),
                description=str(raw.get("description") or ""),
                is_current=raw["identifier"] == current_id,
            )
        )
    return out


class RevenueCatProvider:
    def __init__(self, settings: Settings, *, client: httpx.AsyncClient | None = None) -> None:
        self._app_user_id = settings.revenuecat_app_user_id
        self._client = client or httpx.AsyncClient(
            base_url=settings.revenuecat_base_url,
            timeout=settings.http_timeout_seconds,
        )
        self._headers = {
            "Authorization": f"Bearer {settings.revenuecat_api_key}",
            "X-Platform": settings.revenuecat_platform,
            "Content-Type": "application/json",
        }

    def _subscriber_path(self) -> str:
        return f"/subscribers/{quote(self._app_user_id, safe='')}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = await self._client.request(method, path, headers=self._headers, **kwargs)
        resp.raise_for_status()
        return resp.json()

    async def get_customer_info(self) -> CustomerInfo:
        payload = await self._request("GET", self._subscriber_path())
        return CustomerInfo.from_subscriber_payload(payload)

    async def get_offerings(self) -> list[Offering]:
        payload = await self._request("GET", f"{self._subscriber_path()}/offerings")
        return _parse_offerings(payload)

    async def purchase_package(self, package: Package, *, receipt_token: str | None = None) -> CustomerInfo:
        if not receipt_token:
            # No store receipt means the checkout was never completed.
            raise PurchaseCancelledError(f"no purchase token for package {package.identifier}")

        payload = await self._request(
            "POST",
            "/receipts",
            json={
                "app_user_id": self._app_user_id,
                "fetch_token": receipt_token,
                "product_id": package.product_identifier,
            },
        )
        logger.info("Receipt posted for product=%s", package.product_identifier)
        return CustomerInfo.from_subscriber_payload(payload)

    async def restore_purchases(self) -> CustomerInfo:
        # Purchases are attached to the app user id server-side; re-reading is the restore.
        return await self.get_customer_info()

    async def aclose(self) -> None:
        await self._client.aclose()
