"""HTTP fetching with rate limiting and connection pooling."""

import logging
from typing import Optional

import httpx
from aiolimiter import AsyncLimiter

from outreach_assistant.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Fetcher:
    """Async HTTP fetcher with rate limiting.

    Each fetch is a single bounded attempt; callers treat a failure as
    missing data rather than retrying.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or get_settings()
        self._rate_limiter = AsyncLimiter(
            settings.rate_limit_requests_per_second, 1.0
        )
        self._timeout = settings.fetch_timeout_seconds
        self._user_agent = settings.fetch_user_agent
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "Fetcher":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            transport=self._transport,
            headers={
                "User-Agent": self._user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.5",
            },
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context."""
        if self._client:
            await self._client.aclose()

    async def fetch(self, url: str) -> tuple[Optional[str], Optional[str]]:
        """
        Fetch URL content.

        Returns:
            Tuple of (content, error_message). One will be None.
        """
        if not self._client:
            raise RuntimeError("Fetcher must be used as async context manager")

        # Ensure URL has protocol
        if not url.startswith(("http://", "https://")):
            url = f"https://{url}"

        try:
            async with self._rate_limiter:
                response = await self._client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException:
            return None, f"Timeout after {self._timeout}s"
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None, "Page not found (404)"
            return None, f"HTTP error: {e.response.status_code}"
        except httpx.RequestError as e:
            return None, f"Request error: {str(e)}"
        except (httpx.InvalidURL, ValueError) as e:
            logger.warning(f"Invalid URL {url!r}: {e}")
            return None, f"Invalid URL: {e}"

        # Check content type
        content_type = response.headers.get("content-type", "")
        if "text/html" not in content_type and "text/plain" not in content_type:
            return None, f"Non-HTML content type: {content_type}"

        logger.info(f"Fetched {url} ({len(response.text)} chars)")
        return response.text, None
