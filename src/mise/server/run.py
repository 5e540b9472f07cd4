"""Helper for running the Mise ASGI application."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import uvicorn

from mise.store import get_store

logger = logging.getLogger(__name__)

APP_PATH = "mise.server.app:app"


async def _serve_for(server: uvicorn.Server, duration: float) -> None:
    """Serve until ``duration`` seconds have elapsed."""

    async def _stop_later() -> None:
        await asyncio.sleep(duration)
        server.should_exit = True

    asyncio.create_task(_stop_later())
    await server.serve()


def _parse_duration(value: str | None) -> Optional[float]:
    if not value:
        return None
    try:
        parsed = float(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid MISE_SERVER_DURATION '{value}': {exc}") from exc
    if parsed <= 0:
        raise SystemExit("MISE_SERVER_DURATION must be greater than 0 when provided.")
    return parsed


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid MISE_SERVER_PORT '{value}': {exc}") from exc
    if not 0 < port < 65536:
        raise SystemExit("MISE_SERVER_PORT must be between 1 and 65535.")
    return port


def main() -> None:
    """Entry point for the `mise-server` console script."""

    host = os.environ.get("MISE_SERVER_HOST", "127.0.0.1")
    port = _parse_port(os.environ.get("MISE_SERVER_PORT", "8000"))
    reload_enabled = os.environ.get("RELOAD") == "1"
    duration = _parse_duration(os.environ.get("MISE_SERVER_DURATION"))

    if reload_enabled and duration is not None:
        raise SystemExit("Use RELOAD=0 when specifying MISE_SERVER_DURATION.")

    if reload_enabled:
        uvicorn.run(APP_PATH, host=host, port=port, reload=True)
        return

    # Seed the store before the first request so fixture errors surface at startup.
    store = get_store()
    logger.info("Serving kitchen with %d inventory item(s)", len(store.snapshot.inventory))

    server = uvicorn.Server(uvicorn.Config(APP_PATH, host=host, port=port, reload=False))
    if duration is not None:
        asyncio.run(_serve_for(server, duration))
        return

    server.run()


if __name__ == "__main__":
    main()
