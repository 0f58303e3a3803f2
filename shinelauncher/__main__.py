"""Run the launcher session standalone: ``python -m shinelauncher``."""

import asyncio
import logging

from .plugin import Plugin

logger = logging.getLogger(__name__)


async def run() -> None:
    plugin = Plugin()
    await plugin._main()
    try:
        # Events and UI calls drive the session from here on
        await asyncio.Event().wait()
    finally:
        await plugin._unload()


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("[UNLOAD] Interrupted")


if __name__ == "__main__":
    main()
