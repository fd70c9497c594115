# src/focusforge/billing/models.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


def parse_rc_datetime(raw: Any) -> datetime | None:
    """Parse RevenueCat ISO-8601 timestamps ("2026-10-19T12:00:00Z")."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        dt = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unparseable RevenueCat timestamp: %r", raw)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True, slots=True)
class Entitlement:
    identifier: str
    product_identifier: str | None = None
    expires_at: datetime | None = None  # None = lifetime

    def is_active(self, now: datetime) -> bool:
        return self.expires_at is None or self.expires_at > now


@dataclass(frozen=True, slots=True)
class CustomerInfo:
    """Subscriber snapshot; only the entitlements that are active right now."""

    app_user_id: str
    active_entitlements: dict[str, Entitlement] = field(default_factory=dict)

    def is_entitled(self, entitlement_id: str) -> bool:
        return entitlement_id in self.active_entitlements

    @classmethod
    def from_subscriber_payload(cls, payload: dict[str, Any], *, now: datetime | None = None) -> CustomerInfo:
        """Build from a REST v1 `{"subscriber": {...}}` response body."""
        if now is None:
            now = datetime.now(timezone.utc)

        subscriber = payload.get("subscriber") if isinstance(payload, dict) else None
        if not isinstance(subscriber, dict):
            raise ValueError("response has no subscriber object")

        active: dict[str, Entitlement] = {}
        raw_ents = subscriber.get("entitlements") or {}
        if isinstance(raw_ents, dict):
            for ent_id, ent in raw_ents.items():
                if not isinstance(ent, dict):
                    continue
                entitlement = Entitlement(
                    identifier=str(ent_id),
                    product_identifier=ent.get("product_identifier"),
                    expires_at=parse_rc_datetime(ent.get("expires_date")),
                )
                if entitlement.is_active(now):
                    active[entitlement.identifier] = entitlement

        app_user_id = str(subscriber.get("original_app_user_id") or "")
        return cls(app_user_id=app_user_id, active_entitlements=active)


@dataclass(frozen=True, slots=True)
class Package:
    identifier: str
    product_identifier: str
    title: str = ""
    description: str = ""
    price: str = ""


@dataclass(frozen=True, slots=True)
class Offering:
    identifier: str
    packages: tuple[Package, ...]
    description: str = ""
    is_current: bool = False

    def package(self, identifier: str) -> Package | None:
        for p in self.packages:
            if p.identifier == identifier:
                return p
        return None


# Shown on the paywall when the provider has no current offering (dev builds).
DEMO_PACKAGES: tuple[Package, ...] = (
    Package(
        identifier="pkg_monthly",
        product_identifier="pkg_monthly",
        title="Elite Monthly",
        description="Full strategic OS + Neuro Insights",
        price="$4.99/mo",
    ),
    Package(
        identifier="pkg_yearly",
        product_identifier="pkg_yearly",
        title="Principal Yearly",
        description="The ultimate professional architecture for execution",
        price="$39.99/yr",
    ),
)
