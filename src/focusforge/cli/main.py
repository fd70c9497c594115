# src/focusforge/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the App, runs the startup sequence
(hydrate + entitlement sync), then hands over to the console connector.
"""

from __future__ import annotations

import asyncio
import logging

from ..config import get_settings
from ..logging_setup import setup_logging
from .bootstrap import create_app, shutdown_app, start_app
from .console_connector import run_console_loop

logger = logging.getLogger(__name__)


async def _run() -> None:
    settings = get_settings()
    app = create_app(settings=settings)
    try:
        await start_app(app)
        await run_console_loop(app)
    finally:
        await shutdown_app(app)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
