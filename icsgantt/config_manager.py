"""Configuration management for the icsgantt server."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def parse_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file and return key-value pairs.

    Args:
        path: Path to .env file

    Returns:
        Dictionary of key-value pairs from the .env file.
        Empty dict if file doesn't exist or cannot be read.

    Note:
        - Skips empty lines and comments (lines starting with #)
        - Strips quotes (both single and double) from values
        - Handles KEY=VALUE format with optional whitespace
    """
    if not path.exists():
        return {}

    result: dict[str, str] = {}

    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        logger.debug("Failed to read .env file (continuing): %s", str(path), exc_info=True)
        return {}

    for raw_line in content.splitlines():
        line = raw_line.strip()

        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip('"').strip("'")

        if key:
            result[key] = val

    return result


# Environment variable -> (config key, converter)
_ENV_KEYS: dict[str, tuple[str, Any]] = {
    "ICSGANTT_WEB_HOST": ("server_bind", str),
    "ICSGANTT_WEB_PORT": ("server_port", int),
    "ICSGANTT_OFFSET_START": ("offset_start", int),
    "ICSGANTT_OFFSET_END": ("offset_end", int),
    "ICSGANTT_REQUEST_TIMEOUT": ("request_timeout", float),
    "ICSGANTT_ORIGIN_HOST": ("origin_host", str),
    "ICSGANTT_DEFAULT_URL": ("default_url", str),
    "ICSGANTT_LOG_LEVEL": ("log_level", str),
}


class ConfigManager:
    """Manages application configuration from environment variables and .env files."""

    def __init__(self, env_file_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Load .env file and set environment variables.

        Only sets variables that are not already in the environment.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        parsed = parse_env_file(self.env_file_path)

        set_keys = []
        for key, val in parsed.items():
            if key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build configuration dictionary from environment variables.

        Recognizes:
        - ICSGANTT_WEB_HOST -> 'server_bind'
        - ICSGANTT_WEB_PORT -> 'server_port' (int)
        - ICSGANTT_OFFSET_START / ICSGANTT_OFFSET_END -> default day offsets (int)
        - ICSGANTT_REQUEST_TIMEOUT -> 'request_timeout' (seconds, float)
        - ICSGANTT_ORIGIN_HOST -> host used in exported UIDs
        - ICSGANTT_DEFAULT_URL -> URL prefilled on the page
        - ICSGANTT_LOG_LEVEL -> 'log_level'

        Values that fail conversion are logged and ignored.
        """
        cfg: dict[str, Any] = {}

        for env_key, (cfg_key, convert) in _ENV_KEYS.items():
            raw = os.environ.get(env_key)
            if not raw:
                continue
            try:
                cfg[cfg_key] = convert(raw)
            except ValueError:
                logger.warning("Invalid %s=%r; ignoring", env_key, raw)

        return cfg

    def load_full_config(self) -> dict[str, Any]:
        """Load .env file and build configuration from environment."""
        self.load_env_file()
        return self.build_config_from_env()


def get_config_value(config: Any, key: str, default: Any = None) -> Any:
    """Get configuration value supporting both dict and attribute-style objects.

    Args:
        config: Configuration object (dict or object with attributes)
        key: Configuration key to retrieve
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    if isinstance(config, dict):
        return config.get(key, default)
    return getattr(config, key, default)
