"""Static file serving routes for the timeline page."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_STATIC_FILES = {
    "/": "index.html",
    "/app.js": "app.js",
    "/app.css": "app.css",
}


def register_static_routes(app: Any, static_dir: Path) -> None:
    """Register static file serving routes.

    Args:
        app: aiohttp web application
        static_dir: Directory holding index.html, app.js and app.css
    """
    from aiohttp import web

    def _make_handler(file_name: str) -> Any:
        async def serve_static(_request: Any) -> Any:
            path = static_dir / file_name
            if not path.exists():
                logger.error("Static file not found: %s", path)
                return web.Response(text=f"{file_name} not found", status=404)
            return web.FileResponse(path)

        return serve_static

    for route, file_name in _STATIC_FILES.items():
        app.router.add_get(route, _make_handler(file_name))

    logger.debug("Static routes registered")
