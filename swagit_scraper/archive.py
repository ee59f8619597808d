"""Archive, section and listing-page traversal.

An Archive wraps the fetched root document of one video archive. Its
SectionCollection reads the navigation tabs of that document, and each
Section reads the paginated video table of one tab. Every object here is
built fully before it is returned and never changes afterwards; the only
I/O is one fetch per resolving call.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from datetime import datetime

import httpx
from dateutil import parser as dateutil_parser

from swagit_scraper.common.page_element import (
    Link,
    PageElement,
    PageFetcher,
)
from swagit_scraper.models import Video

logger = logging.getLogger(__name__)

NAV_TAB_SELECTOR = ".nav-tabs-swagit > li[role=presentation] > a"
PAGINATION_SELECTOR = "div#main div.pagination > a"
VIDEO_CELL_SELECTOR = "table#video-table td"

LIVE_PATH = "/live"
PLAY_PREFIX = "/play/"
TITLE_SEPARATOR = " - "

# Distinct in year, month and day
FIRST_DATE_DEFAULT = datetime(2000, 1, 1)
SECOND_DATE_DEFAULT = datetime(2001, 2, 2)


def archive_name_from_title(title: str | None) -> str | None:
    """Derive the archive name from a page title.

    "Springfield - City Council Archive" becomes "City Council Archive".
    Only the first separator splits, so later dashes stay in the name.
    """
    if title is None:
        return None
    _, separator, name = title.partition(TITLE_SEPARATOR)
    if not separator:
        return None
    return name


def parse_listing_date(text: str) -> datetime | None:
    """Best-effort parse of a listing date such as "01/15/2024".

    The text is parsed against two different default dates. If the results
    disagree, the text lacks a year, month or day and is rejected, so "7" or
    "March" never pick up parts of some other date.

    Returns:
        The parsed datetime, or None when the text is not a complete date.
    """
    text = text.strip()
    try:
        first = dateutil_parser.parse(text, default=FIRST_DATE_DEFAULT)
        second = dateutil_parser.parse(text, default=SECOND_DATE_DEFAULT)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first


def highest_page_number(labels: list[str]) -> int:
    """Largest integer among pagination labels, at least 1.

    Only plain ASCII digit labels count; "Next", an ellipsis, "1_000" or
    full-width digits are skipped.
    """
    pages: list[int] = []
    for label in labels:
        text = label.strip()
        if text.isascii() and text.isdigit():
            pages.append(int(text))
    return max(max(pages, default=1), 1)


@dataclass(frozen=True)
class Archive:
    """The root page of one video archive.

    Attributes:
        address: Canonical archive root, always ending in "/".
        name: Archive name taken from the document title, or None.
    """

    address: str
    document: PageElement = field(repr=False, compare=False)
    fetcher: PageFetcher = field(repr=False, compare=False)
    name: str | None = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "name", archive_name_from_title(self.document.title())
        )

    def get_sections(self) -> SectionCollection:
        """Sections listed in this archive's navigation. Performs no fetch."""
        return SectionCollection(
            archive_address=self.address,
            document=self.document,
            fetcher=self.fetcher,
        )


@dataclass(frozen=True)
class SectionCollection:
    """View over the navigation tabs of an archive root document.

    Nothing is materialized up front: every read of ``slugs`` and every
    ``get_section`` call re-scans the document.
    """

    archive_address: str
    document: PageElement = field(repr=False, compare=False)
    fetcher: PageFetcher = field(repr=False, compare=False)

    def _section_links(self) -> Iterator[Link]:
        anchors = self.document.query_css(
            NAV_TAB_SELECTOR, "navigation tab anchors", min_count=0
        )
        for anchor in anchors:
            link = anchor.as_link()
            if link is None:
                continue
            if link.path.casefold() == LIVE_PATH:
                continue
            yield link

    @property
    def slugs(self) -> Iterator[str]:
        """Lazily enumerate section slugs in navigation order.

        Each access returns a fresh iterator over the same document.
        """
        return (link.path[1:] for link in self._section_links())

    def __iter__(self) -> Iterator[str]:
        return self.slugs

    async def get_section(self, slug: str) -> Section | None:
        """Resolve a slug into a Section.

        Fetches the section's first listing page to discover how many pages
        it has.

        Args:
            slug: Section slug, matched case-insensitively.

        Returns:
            The resolved Section, or None if no navigation tab has this slug.
            No fetch happens in that case.
        """
        wanted = f"/{slug}".casefold()
        link = next(
            (
                link
                for link in self._section_links()
                if link.path.casefold() == wanted
            ),
            None,
        )
        if link is None:
            logger.debug(f"No section '{slug}' in {self.archive_address}")
            return None

        address = f"{self.archive_address}archive/{slug}"
        document = await self.fetcher.fetch(address)

        labels = [
            anchor.text_content()
            for anchor in document.query_css(
                PAGINATION_SELECTOR, "pagination anchors", min_count=0
            )
        ]
        page_count = highest_page_number(labels)

        logger.info(
            f"Resolved section '{slug}' ({link.text}) with {page_count} page(s)"
        )
        return Section(
            name=link.text,
            slug=slug,
            address=address,
            page_count=page_count,
            document=document,
            fetcher=self.fetcher,
        )

    async def get_sections(self) -> AsyncIterator[Section]:
        """Resolve every section in navigation order, one fetch at a time."""
        for slug in self.slugs:
            section = await self.get_section(slug)
            if section is not None:
                yield section


@dataclass(frozen=True)
class Section:
    """One topical section of an archive and its paginated video listing.

    Attributes:
        name: Navigation tab text.
        slug: Section slug.
        address: Listing address, ``<archive>archive/<slug>``.
        page_count: Number of listing pages seen on the first page.
        document: First listing page, fetched while resolving the section.
    """

    name: str
    slug: str
    address: str
    page_count: int
    document: PageElement = field(repr=False, compare=False)
    fetcher: PageFetcher = field(repr=False, compare=False)

    @property
    def pages(self) -> range:
        return range(1, self.page_count + 1)

    def clamp_page(self, page_number: int) -> int:
        """Clamp a requested page number into ``1..page_count``."""
        if page_number <= 0:
            return 1
        if page_number > self.page_count:
            return self.page_count
        return page_number

    def page_address(self, page_number: int) -> str:
        """Listing URL for a page number, after clamping."""
        page = self.clamp_page(page_number)
        return str(httpx.URL(self.address, params={"page": page}))

    async def get_page_videos(self, page_number: int) -> list[Video]:
        """Fetch one listing page and extract its videos.

        Out-of-range page numbers are clamped silently. The page is fetched
        fresh on every call, including page 1.

        Args:
            page_number: Requested page, 1-based.

        Returns:
            Videos in the order they appear in the listing table.
        """
        page = self.clamp_page(page_number)
        if page != page_number:
            logger.debug(
                f"Clamped page {page_number} to {page} for section '{self.slug}'"
            )

        document = await self.fetcher.fetch(self.page_address(page))
        return extract_videos(document)

    async def iter_videos(self) -> AsyncIterator[Video]:
        """Yield every video in the section, page by page."""
        for page in self.pages:
            for video in await self.get_page_videos(page):
                yield video


def extract_videos(document: PageElement) -> list[Video]:
    """Extract Video records from a listing page's video table.

    The date text is the cell's first direct text node, whatever it holds.
    A cell is skipped when it has no anchor, its first anchor has no href,
    or it has no direct text node at all. Date text that does not parse,
    including whitespace, leaves ``Video.date`` as None.
    """
    videos: list[Video] = []
    cells = document.query_css(
        VIDEO_CELL_SELECTOR, "video table cells", min_count=0
    )
    for cell in cells:
        anchors = cell.query_css("a", "video anchor", min_count=0)
        link = anchors[0].as_link() if anchors else None
        text_nodes = cell.direct_text_nodes()
        date_text = text_nodes[0] if text_nodes else None
        if link is None or date_text is None:
            logger.debug(
                f"Skipping video cell without link or text on {document.url}"
            )
            continue

        videos.append(
            Video(
                name=link.text,
                slug=link.path.removeprefix(PLAY_PREFIX),
                address=link.url,
                date=parse_listing_date(date_text),
            )
        )
    return videos
