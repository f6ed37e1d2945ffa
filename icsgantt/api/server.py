"""icsgantt.api.server - aiohttp server hosting the timeline page and JSON API.

The server keeps one TimelineSession in memory. Routes are registered by
``icsgantt.api.routes`` and operate on that session.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from pathlib import Path
from typing import Any, Optional

from aiohttp import web

from ..config_manager import get_config_value
from ..fetcher import ICSFetcher
from ..loader import CalendarLoader
from ..logging_config import configure_logging
from ..session import TimelineSession
from .routes import register_api_routes, register_static_routes

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
MAX_PORT_ATTEMPTS = 10

SESSION_KEY = web.AppKey("session", TimelineSession)


def create_session(config: Any) -> TimelineSession:
    """Build a session wired to a fresh fetcher."""
    return TimelineSession(CalendarLoader(ICSFetcher(config)))


async def make_app(config: Any, session: Optional[TimelineSession] = None) -> web.Application:
    """Create the aiohttp application with routes wired to ``session``.

    The session's HTTP client is closed when the application is cleaned up.
    """
    session = session or create_session(config)

    app = web.Application()
    app[SESSION_KEY] = session
    register_static_routes(app, STATIC_DIR)
    register_api_routes(app, config, session)

    async def _close_fetcher(app: web.Application) -> None:
        await app[SESSION_KEY].loader.fetcher.close()

    app.on_cleanup.append(_close_fetcher)
    return app


async def _serve(config: Any, external_stop_event: asyncio.Event | None = None) -> None:
    """Run the web server until signalled to stop.

    Args:
        config: Server configuration object/dict.
        external_stop_event: Optional event to signal shutdown. If provided,
            signal handlers are not registered (caller owns signal handling).
    """
    stop_event = external_stop_event or asyncio.Event()

    app = await make_app(config)
    runner = web.AppRunner(app)
    await runner.setup()

    host = get_config_value(config, "server_bind", DEFAULT_HOST)
    configured_port = int(get_config_value(config, "server_port", DEFAULT_PORT))

    # Try configured port first, then increment if in use
    actual_port = configured_port
    for port_offset in range(MAX_PORT_ATTEMPTS):
        actual_port = configured_port + port_offset
        site = web.TCPSite(runner, host=host, port=actual_port)
        try:
            await site.start()
            break
        except OSError as e:
            if "address already in use" not in str(e).lower():
                logger.exception("Failed to start server on %s:%d", host, actual_port)
                await runner.cleanup()
                raise
            logger.debug("Port %d in use, trying next port", actual_port)
    else:
        await runner.cleanup()
        raise RuntimeError(
            f"No available port found in range {configured_port}-"
            f"{configured_port + MAX_PORT_ATTEMPTS - 1}"
        )

    if actual_port != configured_port:
        logger.warning(
            "Configured port %d was in use, using port %d instead", configured_port, actual_port
        )

    logger.info("Server started on http://%s:%d", host, actual_port)

    if external_stop_event is None:
        loop = asyncio.get_running_loop()

        def _on_signal() -> None:
            logger.info("Shutdown signal received")
            stop_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, _on_signal)

    await stop_event.wait()
    logger.info("Stop event received, shutting down")

    await runner.cleanup()
    logger.info("Server shutdown complete")


def start_server(config: Any) -> None:
    """Run the server in a new event loop, blocking until SIGINT/SIGTERM.

    Args:
        config: dict or attribute object with keys:
            - server_bind: host to bind (str, default 127.0.0.1)
            - server_port: port (int, default 8080)
            - offset_start / offset_end: default day offsets for the page
            - request_timeout: HTTP fetch timeout in seconds
            - origin_host: host used in exported UIDs (default: request Host)
            - debug_logging: enable debug logging for icsgantt (bool)
    """
    debug_mode = bool(get_config_value(config, "debug_logging", False))
    configure_logging(debug_mode=debug_mode)

    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
