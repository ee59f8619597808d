"""PageElement and PageFetcher protocols for archive traversal.

The traversal layer consumes two capabilities: something that turns a URL
into a parsed document, and a DOM query interface over that document. Both
are expressed as protocols so tests and alternative transports can supply
their own implementations. The standard implementations live in
``lxml_page_element`` and ``request_manager``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Link:
    """Represents an HTML <a> element with its resolved URL and text.

    Link is a plain value object and performs no I/O.

    Attributes:
        url: Resolved absolute URL from the href attribute.
        path: Path component of the resolved URL (e.g. "/city-council").
        text: Visible text content of the link, stripped.
    """

    url: str
    path: str
    text: str


class PageElement(Protocol):
    """Protocol for data extraction from a parsed HTML element.

    Query methods support count validation and raise
    HTMLStructuralAssumptionException if the actual count doesn't match
    expectations. Pass ``min_count=0`` where absence is a normal outcome.
    """

    @property
    def url(self) -> str:
        """URL the element's document was fetched from."""
        ...

    def query_xpath(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[PageElement]:
        """Query elements by XPath selector."""
        ...

    def query_xpath_strings(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[str]:
        """Query string values (text nodes, attributes) by XPath selector."""
        ...

    def query_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[PageElement]:
        """Query elements by CSS selector."""
        ...

    def text_content(self) -> str:
        """Visible text content of the element and its descendants."""
        ...

    def get_attribute(self, name: str) -> str | None:
        """Value of the attribute, or None if it doesn't exist."""
        ...

    def as_link(self) -> Link | None:
        """This element as a Link, or None if it has no href."""
        ...

    def direct_text_nodes(self) -> list[str]:
        """Text nodes that are direct children of this element."""
        ...

    def title(self) -> str | None:
        """Whitespace-collapsed document title, or None if absent."""
        ...


class PageFetcher(Protocol):
    """Protocol for the fetch capability: URL in, parsed document out.

    Implementations raise on transport failures, unexpected status codes and
    unparsable bodies. Callers in this package never catch those errors.
    """

    async def fetch(self, url: str) -> PageElement:
        """Fetch *url* and return its parsed root element."""
        ...
