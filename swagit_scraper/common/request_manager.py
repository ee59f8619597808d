"""Request manager implementing the page-fetch capability.

AsyncRequestManager owns an httpx.AsyncClient and turns a URL into a parsed
LxmlPageElement. It is the default PageFetcher used by the Crawler.

The request manager is responsible for:
- Maintaining the HTTP client lifecycle
- Mapping timeouts and unexpected status codes onto package exceptions
- Parsing response bodies into documents

It performs no retries; every failure propagates to the caller.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from swagit_scraper.common.exceptions import (
    HTMLResponseAssumptionException,
    RequestTimeoutException,
)
from swagit_scraper.common.lxml_page_element import LxmlPageElement

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "swagit-scraper/0.1"


class AsyncRequestManager:
    """Fetches archive pages over HTTP.

    Example::

        async with AsyncRequestManager(timeout=30.0) as manager:
            page = await manager.fetch("https://springfield.swagit.com/")
            print(page.title())
    """

    def __init__(
        self,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the request manager.

        Args:
            timeout: Request timeout in seconds. None means no timeout.
            headers: Headers sent with every request. A User-Agent is added
                when none is given.
            client: Pre-built httpx.AsyncClient owned by the caller. When
                given, ``headers`` are ignored and ``timeout`` is only
                reported in RequestTimeoutException.
        """
        self.timeout = timeout

        if client is not None:
            self._client = client
            self._owns_client = False
            return

        merged_headers = {"User-Agent": DEFAULT_USER_AGENT}
        merged_headers.update(headers or {})

        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers=merged_headers,
            follow_redirects=True,
        )
        self._owns_client = True

    async def close(self) -> None:
        """Close the HTTP client if this manager created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncRequestManager:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def fetch(self, url: str) -> LxmlPageElement:
        """Fetch *url* and parse the response as an HTML document.

        Links in the returned document resolve against the final URL, after
        any redirects.

        Args:
            url: Absolute URL to fetch.

        Returns:
            Root LxmlPageElement of the fetched document.

        Raises:
            RequestTimeoutException: If the request times out.
            HTMLResponseAssumptionException: If the status code is not 2xx.
            DocumentParseException: If the body is not a parsable document.
            httpx.HTTPError: For any other transport failure.
        """
        logger.debug(f"Fetching {url}")

        try:
            http_response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise RequestTimeoutException(
                url=url, timeout_seconds=self.timeout
            ) from e

        if not http_response.is_success:
            raise HTMLResponseAssumptionException(
                status_code=http_response.status_code,
                expected_codes=[200],
                url=url,
            )

        return LxmlPageElement.from_html(
            http_response.content,
            str(http_response.url),
            content_type=http_response.headers.get("content-type"),
            encoding=http_response.charset_encoding,
        )
