# src/focusforge/billing/errors.py

from __future__ import annotations


class PurchaseCancelledError(Exception):
    """The user backed out of the purchase flow. Not an error condition for callers."""
