"""
Firecrawl client.

Scrapes a single URL through the Firecrawl v1 /scrape endpoint and returns
its title, description and main text. Used to enrich the keyword prompt
with the facility's website and Google Business Profile.

Crawl output is transient: it is passed to the prompt builder and never
stored or logged.
"""

import logging
import re
from typing import Any, Dict, Optional

import httpx

from backend.agents.keywords.types import CrawlResult
from backend.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

# Content is cut to this many characters after cleanup
MAX_CONTENT_CHARS = 3000

_HTML_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Strip HTML tags and collapse whitespace."""
    return _WHITESPACE.sub(" ", _HTML_TAG.sub(" ", text or "")).strip()


class CrawlClient:
    """
    Async client for Firecrawl.

    Args:
        api_key: Firecrawl API key (None disables crawling)
        base_url: Firecrawl API base URL
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.firecrawl.dev",
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _scrape(self, url: str) -> Dict[str, Any]:
        if not self.api_key:
            raise UpstreamError("Crawl API key is not configured")

        payload = {
            "url": url,
            "formats": ["markdown"],
            "onlyMainContent": True,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"{self.base_url}/v1/scrape",
                    json=payload,
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Crawl request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Crawl connection failed: {type(e).__name__}") from e

        if response.status_code != 200:
            raise UpstreamError(f"Crawl API returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError("Crawl API returned an invalid response (not JSON)") from e

        if not isinstance(body, dict):
            raise UpstreamError("Crawl API returned an invalid response (unexpected body)")

        if body.get("success") is False:
            raise UpstreamError(f"Crawl API returned an invalid response: {body.get('error')}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise UpstreamError("Crawl API returned an invalid response (missing data)")

        return data

    async def crawl(self, url: str) -> CrawlResult:
        """
        Scrape one URL.

        Returns:
            CrawlResult with cleaned, truncated content

        Raises:
            UpstreamError: On a missing API key, transport failure, non-200
                status or unexpected response body
        """
        data = await self._scrape(url)
        metadata = data.get("metadata") or {}

        result = CrawlResult(
            title=clean_text(str(metadata.get("title") or "")),
            description=clean_text(str(metadata.get("description") or "")),
            content=clean_text(str(data.get("markdown") or ""))[:MAX_CONTENT_CHARS],
        )

        logger.info(f"Crawl completed ({len(result.content)} chars of content)")
        return result

    async def crawl_website(self, url: str) -> CrawlResult:
        """Scrape the facility's official website."""
        logger.info("Crawling official website")
        return await self.crawl(url)

    async def crawl_business_profile(self, url: str) -> CrawlResult:
        """Scrape the facility's Google Business Profile page."""
        logger.info("Crawling Google Business Profile")
        return await self.crawl(url)
