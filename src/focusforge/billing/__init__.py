"""
Subscription entitlements.

Components:
- entitlements.py: EntitlementClient (never raises, degrades to "not entitled")
- revenuecat.py: RevenueCat REST provider
- models.py: CustomerInfo, Offering, Package
- errors.py: PurchaseCancelledError
"""
