"""Test utilities for traversal tests.

This module provides an in-memory PageFetcher so traversal logic can be
tested without a server, plus small HTML builders for the archive markup.
"""

from swagit_scraper.common.exceptions import (
    HTMLResponseAssumptionException,
)
from swagit_scraper.common.lxml_page_element import LxmlPageElement


class RecordingFetcher:
    """PageFetcher serving canned HTML and recording every requested URL.

    Unknown URLs raise HTMLResponseAssumptionException with a 404, the same
    way AsyncRequestManager reports a missing page.

    Example:
        fetcher = RecordingFetcher({"https://x.test/": "<html>...</html>"})
        page = await fetcher.fetch("https://x.test/")
        assert fetcher.requests == ["https://x.test/"]
    """

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages
        self.requests: list[str] = []

    async def fetch(self, url: str) -> LxmlPageElement:
        self.requests.append(url)
        if url not in self.pages:
            raise HTMLResponseAssumptionException(
                status_code=404, expected_codes=[200], url=url
            )
        return LxmlPageElement.from_html(self.pages[url], url)


def parse(html_content: str, url: str = "https://x.test/") -> LxmlPageElement:
    return LxmlPageElement.from_html(html_content, url)


def archive_page(title: str, hrefs: list[str | None]) -> str:
    """Archive root HTML with one navigation tab per href.

    A None href renders an anchor without an href attribute.
    """
    tabs = []
    for i, href in enumerate(hrefs):
        attr = f' href="{href}"' if href is not None else ""
        tabs.append(f'<li role="presentation"><a{attr}>Tab {i}</a></li>')
    return (
        f"<html><head><title>{title}</title></head><body>"
        f'<ul class="nav-tabs-swagit">{"".join(tabs)}</ul>'
        "</body></html>"
    )


def listing_page(cells: list[str], pagination: list[str] | None = None) -> str:
    """Section listing HTML with one row per cell and optional pagination."""
    rows = "".join(f"<tr>{cell}</tr>" for cell in cells)
    links = ""
    if pagination is not None:
        anchors = "".join(f"<a href='#'>{label}</a>" for label in pagination)
        links = f'<div class="pagination">{anchors}</div>'
    return (
        "<html><head><title>Listing</title></head><body>"
        f'<div id="main"><table id="video-table">{rows}</table>{links}</div>'
        "</body></html>"
    )
