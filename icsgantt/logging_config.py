"""
Central logging levels for icsgantt.

Quiets the per-request and transport chatter from aiohttp and httpx while
keeping icsgantt's own modules at INFO (or DEBUG in debug mode).
"""

import logging
import os
from typing import Optional

_NOISY_LOGGERS: dict[str, int] = {
    "aiohttp.access": logging.WARNING,
    "aiohttp.server": logging.WARNING,
    "aiohttp.web": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "asyncio": logging.WARNING,
    "icalendar": logging.INFO,
}

_APP_MODULES = [
    "icsgantt",
    "icsgantt.api.server",
    "icsgantt.fetcher",
    "icsgantt.parser",
    "icsgantt.loader",
    "icsgantt.session",
]


def configure_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logger levels for the server.

    Args:
        debug_mode: Whether to enable debug logging for icsgantt modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        ICSGANTT_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        ICSGANTT_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("ICSGANTT_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("ICSGANTT_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    logger_config = dict(_NOISY_LOGGERS)
    app_level = logging.DEBUG if final_debug else logging.INFO
    for module in _APP_MODULES:
        logger_config[module] = app_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for icsgantt modules")
    else:
        root_logger.debug("Production logging configuration applied")


def get_logging_status() -> dict[str, str]:
    """Return the current level name of the root and key loggers."""
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in ("icsgantt", "aiohttp.access", "httpx", "asyncio"):
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
