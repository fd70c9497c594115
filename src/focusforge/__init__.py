"""
FocusForge: daily execution planner.

Subpackages:
- core: app state store, clock, sprint and summary helpers
- storage: durable JSON key-value adapter (SQLite substrate)
- llm: task plans, coaching and reflection prompts with offline fallbacks
- billing: subscription entitlements (RevenueCat)
- cli: composition root and console connector
"""

__version__ = "0.1.0"
