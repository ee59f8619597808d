"""Entry point for traversing a video archive.

Example::

    options = CrawlerOptions(archive_address="https://springfield.swagit.com/")
    async with Crawler(options) as crawler:
        archive = await crawler.get_archive()
        sections = archive.get_sections()
        section = await sections.get_section("city-council")
        videos = await section.get_page_videos(1)
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from swagit_scraper.archive import Archive
from swagit_scraper.common.page_element import PageFetcher
from swagit_scraper.common.request_manager import AsyncRequestManager
from swagit_scraper.models import CrawlerOptions

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


def archive_root(address: str) -> str:
    """Canonical archive root: scheme, host and port of *address*.

    Path, query, fragment and credentials are dropped and default ports are
    omitted, so "https://x.test:443/foo?bar" becomes "https://x.test/".
    """
    parts = urlsplit(address)
    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"

    netloc = host
    if parts.port is not None and parts.port != DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{parts.port}"

    return urlunsplit((scheme, netloc, "/", "", ""))


class Crawler:
    """Resolves the archive root described by CrawlerOptions.

    When no fetcher is supplied the crawler creates an AsyncRequestManager
    from the options and closes it on ``aclose()``. A supplied fetcher
    belongs to the caller and is left open.
    """

    def __init__(
        self,
        options: CrawlerOptions,
        fetcher: PageFetcher | None = None,
    ) -> None:
        self.options = options
        self.archive_address = archive_root(str(options.archive_address))

        self._owned_manager: AsyncRequestManager | None = None
        if fetcher is None:
            self._owned_manager = AsyncRequestManager(
                timeout=options.timeout,
                headers=options.request_headers(),
            )
            fetcher = self._owned_manager
        self.fetcher = fetcher

    async def aclose(self) -> None:
        if self._owned_manager is not None:
            await self._owned_manager.close()

    async def __aenter__(self) -> Crawler:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def get_archive(self) -> Archive:
        """Fetch the archive root and wrap it in an Archive.

        Performs exactly one fetch. Fetch failures propagate unchanged.
        """
        document = await self.fetcher.fetch(self.archive_address)
        archive = Archive(
            address=self.archive_address,
            document=document,
            fetcher=self.fetcher,
        )
        logger.info(f"Resolved archive {archive.name!r} at {archive.address}")
        return archive


async def resolve_archive(
    options: CrawlerOptions, fetcher: PageFetcher | None = None
) -> Archive:
    """Resolve the archive described by *options*.

    Without a *fetcher*, an AsyncRequestManager is built from the options
    and handed to the returned Archive for further traversal. It is closed
    here only if the root fetch fails; otherwise the caller closes it with
    ``await archive.fetcher.close()``.
    """
    if fetcher is not None:
        return await Crawler(options, fetcher).get_archive()

    manager = AsyncRequestManager(
        timeout=options.timeout, headers=options.request_headers()
    )
    try:
        return await Crawler(options, manager).get_archive()
    except BaseException:
        await manager.close()
        raise
