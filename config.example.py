# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Put them in .env (local, gitignored).

Missing or "placeholder_until_set" API keys are fine: the content generator
falls back to fixed offline content and subscriptions are disabled.
"""

ENV_VARS = {
    # App / logging
    "FOCUSFORGE_APP_NAME": "App display name (default: FocusForge).",
    "FOCUSFORGE_LOG_LEVEL": "Console logging level (default: WARNING; the log file gets everything).",
    "FOCUSFORGE_TIMEZONE": "IANA zone used for calendar-day keys (default: host local zone).",
    # Paths (gitignored)
    "FOCUSFORGE_DATA_DIR": "Local data directory (default: .local/focusforge).",
    "FOCUSFORGE_STORAGE_PATH": "Key-value SQLite path (default: <data_dir>/storage.sqlite3).",
    # Content generation (Groq, OpenAI-compatible)
    "FOCUSFORGE_GROQ_API_KEY": "Groq API key (fallbacks: EXPO_PUBLIC_GROQ_API_KEY, GROQ_API_KEY).",
    "FOCUSFORGE_LLM_BASE_URL": "API base URL (default: https://api.groq.com/openai/v1).",
    "FOCUSFORGE_LLM_MODEL": "Model id (default: llama-3.3-70b-versatile).",
    "FOCUSFORGE_LLM_TIMEOUT_SECONDS": "Read timeout for one generation request (default: 30).",
    # Entitlements (RevenueCat)
    "FOCUSFORGE_REVENUECAT_API_KEY": "RevenueCat API key (fallback: EXPO_PUBLIC_REVENUECAT_ANDROID_KEY).",
    "FOCUSFORGE_REVENUECAT_BASE_URL": "REST base URL (default: https://api.revenuecat.com/v1).",
    "FOCUSFORGE_REVENUECAT_APP_USER_ID": "Subscriber id the purchases are attached to.",
    "FOCUSFORGE_REVENUECAT_PLATFORM": "X-Platform header for receipts (default: android).",
    "FOCUSFORGE_REVENUECAT_ENTITLEMENT": (
        "Entitlement that unlocks premium (default: premium_access; "
        "fallback: EXPO_PUBLIC_REVENUECAT_ENTITLEMENT)."
    ),
    "FOCUSFORGE_ENTITLEMENT_POLL_SECONDS": "Entitlement refresh interval (default: 300).",
    "FOCUSFORGE_HTTP_TIMEOUT_SECONDS": "RevenueCat request timeout (default: 15).",
    # Focus sprint
    "FOCUSFORGE_SPRINT_MINUTES": "Sprint length in minutes (default: 25).",
}
