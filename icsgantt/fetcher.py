"""HTTP client for downloading ICS calendar files."""

import logging
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from . import __version__
from .config_manager import get_config_value
from .exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": f"icsgantt/{__version__} ICS-Client",
    "Accept": "text/calendar, text/plain, */*",
    "Accept-Charset": "utf-8",
    "Cache-Control": "no-cache",
}


class ICSFetcher:
    """Async HTTP client that returns the raw text of an ICS resource.

    A single GET is issued per call. There is no retry: the first transport
    failure or non-success status is raised as FetchError.
    """

    def __init__(self, settings: Any = None, client: Optional[httpx.AsyncClient] = None) -> None:
        """Initialize ICS fetcher.

        Args:
            settings: Configuration dict or object (reads ``request_timeout``)
            client: Optional pre-built client; it is still closed by ``close()``
        """
        self.settings = settings if settings is not None else {}
        self.client: Optional[httpx.AsyncClient] = client
        self.request_timeout = float(
            get_config_value(self.settings, "request_timeout", DEFAULT_REQUEST_TIMEOUT)
        )

        logger.debug("ICS fetcher initialized (timeout=%.1fs)", self.request_timeout)

    async def __aenter__(self) -> "ICSFetcher":
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client exists."""
        if self.client is None or self.client.is_closed:
            timeout = httpx.Timeout(self.request_timeout, connect=10.0)
            self.client = httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                headers=DEFAULT_HEADERS,
            )
        return self.client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self.client is not None and not self.client.is_closed:
            await self.client.aclose()
            logger.debug("Closed HTTP client")
        self.client = None

    def _validate_url(self, url: str) -> bool:
        """Check that the URL is an absolute http(s) URL with a hostname."""
        try:
            parsed = urlparse(url)
        except ValueError as e:
            logger.debug("URL validation error for %s: %s", url, e)
            return False

        if parsed.scheme not in ("http", "https"):
            logger.debug("Blocked non-HTTP(S) URL: %s", url)
            return False

        if not parsed.hostname:
            logger.debug("Blocked URL with missing hostname: %s", url)
            return False

        return True

    async def fetch_text(self, url: str) -> str:
        """Download the resource at ``url`` and return its body as text.

        Args:
            url: HTTP(S) URL of the calendar

        Returns:
            Response body decoded by httpx (charset from headers, else utf-8)

        Raises:
            FetchError: URL rejected, transport failure, or non-success status.
                ``status_code`` is set only when the server answered.
        """
        if not self._validate_url(url):
            raise FetchError(f"Invalid calendar URL: {url!r}")

        client = self._ensure_client()
        logger.debug("Fetching ICS from %s", url)

        try:
            response = await client.get(url)
            response.raise_for_status()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("HTTP error fetching ICS from %s: %s", url, status)
            raise FetchError(f"HTTP error! Status: {status}", status) from e

        except httpx.TimeoutException as e:
            logger.warning("Timeout fetching ICS from %s", url)
            raise FetchError(f"Request timeout after {self.request_timeout:g}s") from e

        except httpx.TransportError as e:
            logger.warning("Network error fetching ICS from %s: %s", url, e)
            raise FetchError(f"Network error: {e}") from e

        except httpx.RequestError as e:
            # Redirect loops and undecodable bodies
            logger.warning("Request failed for %s: %s", url, e)
            raise FetchError(f"Request failed: {e}") from e

        except httpx.InvalidURL as e:
            logger.warning("Invalid URL rejected by HTTP client: %s", url)
            raise FetchError(f"Invalid calendar URL: {e}") from e

        content = response.text
        content_type = response.headers.get("content-type", "").lower()
        if content_type and not any(ct in content_type for ct in ("text/calendar", "text/plain")):
            logger.warning("Unexpected content type: %s", content_type)

        logger.debug("Fetched ICS content (%d chars) from %s", len(content), url)
        return content
