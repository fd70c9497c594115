# src/focusforge/cli/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from .bootstrap import App
from .commands import IDENTITIES
from .commands import registry as command_registry

logger = logging.getLogger(__name__)

ONBOARDING_STEPS = [
    ("FocusForge AI", "The first AI-Powered minimalist execution OS built specifically for creator workflows."),
    ("Your Identity", "What kind of creator are you? We will personalize your AI coach."),
    ("Start Executing", "Break goals into 25-minute execution blocks. No fluff. Just progress."),
]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _ask(prompt: str) -> str:
    return (await asyncio.to_thread(input, prompt)).strip()


async def run_onboarding(app: App) -> None:
    """First-run flow: pick a creator identity, then mark onboarding complete."""
    for title, description in ONBOARDING_STEPS:
        print(f"\n== {title} ==\n{description}")

    print()
    for i, identity in enumerate(IDENTITIES, start=1):
        marker = "*" if identity == app.store.creator_identity else " "
        print(f" {marker} {i}. {identity}")

    choice = await _ask("Pick your identity [Enter keeps current]: ")
    if choice.isdigit() and 1 <= int(choice) <= len(IDENTITIES):
        app.store.set_creator_identity(IDENTITIES[int(choice) - 1])
    elif choice:
        for identity in IDENTITIES:
            if identity.lower() == choice.lower():
                app.store.set_creator_identity(identity)
                break

    app.store.set_onboarding_complete(True)
    logger.info("Onboarding complete (identity=%s)", app.store.creator_identity)


async def run_console_loop(app: App) -> None:
    logger.info("Console connector started.")

    if not app.store.onboarding_complete:
        await run_onboarding(app)

    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")
    print(await command_registry.handle(app, "/status"))

    while True:
        try:
            user_input = await _ask(">>> ")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a goal for today's plan.
            user_input = f"/plan {user_input}"

        try:
            reply = await command_registry.handle(app, user_input, emit=_print_ts)
        except Exception:
            logger.exception("Command failed: %s", user_input)
            reply = "Command failed (see log for details)."

        if reply:
            print(reply)
