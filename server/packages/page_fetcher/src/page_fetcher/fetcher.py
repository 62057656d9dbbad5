import logging
from typing import Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from ingredient_extractor.exceptions import FetchFailedError, InvalidURLError

from .models import PageContent

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}
DEFAULT_TIMEOUT = 30.0


def validate_url(url: str) -> str:
    """
    Check that a user-supplied URL can be fetched.

    Args:
        url: The URL as typed or pasted

    Returns:
        The stripped URL

    Raises:
        InvalidURLError: If the URL is not an absolute http(s) URL with a host
    """
    candidate = (url or "").strip()
    parsed = urlparse(candidate)
    if parsed.scheme not in ("http", "https") or not parsed.netloc or not parsed.hostname:
        raise InvalidURLError(f"Invalid URL: {url!r}")
    return candidate


class PageFetcher:
    """Service for downloading recipe pages."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds
            client: Optional pre-built client (tests pass one backed by httpx.MockTransport)
        """
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            follow_redirects=True,
            timeout=timeout,
        )

    async def fetch(self, url: str) -> PageContent:
        """
        Download a page.

        Args:
            url: The URL to fetch

        Returns:
            PageContent with the raw HTML and its visible text

        Raises:
            InvalidURLError: If the URL is malformed (checked before any request)
            FetchFailedError: On network errors, timeouts and non-2xx statuses
        """
        url = validate_url(url)
        logger.info(f"Fetching {url}")
        try:
            response = await self.client.get(url)
        except httpx.HTTPError as e:
            raise FetchFailedError(f"Failed to fetch URL: {e}") from e

        if not response.is_success:
            raise FetchFailedError(
                f"Failed to fetch URL: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        html = response.text
        soup = BeautifulSoup(html, "html.parser")
        title = soup.title.get_text(strip=True) if soup.title else ""
        text = "\n".join(s for s in soup.stripped_strings if s)
        logger.debug(f"Fetched {len(html)} chars of HTML from {response.url}")

        return PageContent(
            url=url,
            final_url=str(response.url),
            status_code=response.status_code,
            html=html,
            text=text,
            title=title,
            soup=soup,
        )

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        """Support for async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Clean up resources."""
        await self.aclose()
