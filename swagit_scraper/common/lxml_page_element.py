"""LxmlPageElement implementation wrapping CheckedHtmlElement.

This module provides the standard implementation of the PageElement protocol.
It wraps CheckedHtmlElement, delegates queries to it, and resolves link
targets against the URL the document was fetched from.
"""

from __future__ import annotations

from urllib.parse import urljoin, urlsplit

from lxml import etree, html

from swagit_scraper.common.checked_html import CheckedHtmlElement
from swagit_scraper.common.exceptions import DocumentParseException
from swagit_scraper.common.page_element import Link


class LxmlPageElement:
    """Implementation of PageElement protocol wrapping CheckedHtmlElement.

    Attributes:
        _element: The underlying CheckedHtmlElement.
        _url: The base URL for resolving relative URLs.
    """

    def __init__(self, element: CheckedHtmlElement, url: str = ""):
        """Initialize LxmlPageElement.

        Args:
            element: The CheckedHtmlElement to wrap.
            url: Base URL for resolving relative URLs.
        """
        self._element = element
        self._url = url

    @classmethod
    def from_html(
        cls,
        content: bytes | str,
        url: str,
        content_type: str | None = None,
        encoding: str | None = None,
    ) -> LxmlPageElement:
        """Parse an HTML document into a root LxmlPageElement.

        Args:
            content: Raw response body. Bytes are preferred so lxml can
                honour the document's own charset declaration.
            url: URL the document was fetched from.
            content_type: Content-Type header, for error context only.
            encoding: Charset from the Content-Type header. When None, lxml
                detects the encoding from the document itself.

        Returns:
            LxmlPageElement wrapping the document's <html> element.

        Raises:
            DocumentParseException: If the body is empty or not parsable.
        """
        try:
            parser = None
            if encoding and isinstance(content, bytes):
                parser = html.HTMLParser(encoding=encoding)
            root = html.document_fromstring(
                content, parser=parser, base_url=url
            )
        except (etree.LxmlError, LookupError, ValueError) as e:
            raise DocumentParseException(url, content_type) from e

        return cls(CheckedHtmlElement(root, url), url)

    @property
    def url(self) -> str:
        return self._url

    def query_xpath(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        """Query elements by XPath selector.

        Args:
            selector: XPath expression to execute.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching LxmlPageElement instances.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match expectations.
        """
        checked_elements = self._element.checked_xpath(
            selector, description, min_count, max_count
        )
        return [LxmlPageElement(elem, self._url) for elem in checked_elements]

    def query_xpath_strings(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[str]:
        """Query string values by XPath selector.

        Args:
            selector: XPath expression returning strings (text nodes, attributes).
            description: Human-readable description of what's being selected.
            min_count: Minimum number of strings expected (default: 1).
            max_count: Maximum number of strings expected (None = unlimited).

        Returns:
            List of matching string values.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match expectations.
        """
        return self._element.checked_xpath(
            selector, description, min_count, max_count, type=str
        )

    def query_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[LxmlPageElement]:
        """Query elements by CSS selector.

        Args:
            selector: CSS selector expression.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching LxmlPageElement instances, in document order.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match expectations.
        """
        checked_elements = self._element.checked_css(
            selector, description, min_count, max_count
        )
        return [LxmlPageElement(elem, self._url) for elem in checked_elements]

    def text_content(self) -> str:
        return self._element.text_content()

    def get_attribute(self, name: str) -> str | None:
        return self._element.get(name)

    def as_link(self) -> Link | None:
        """Describe this element as a Link.

        Returns:
            Link with the href resolved against the document URL, or None if
            the element has no usable href attribute.
        """
        href = self.get_attribute("href")
        if not href or not href.strip():
            return None

        url = urljoin(self._url, href.strip())
        return Link(
            url=url,
            path=urlsplit(url).path,
            text=self.text_content().strip(),
        )

    def direct_text_nodes(self) -> list[str]:
        """Text nodes that are direct children of this element.

        Whitespace-only nodes are included; text inside child elements is not.
        """
        return self.query_xpath_strings("./text()", "direct text", min_count=0)

    def title(self) -> str | None:
        """Whitespace-collapsed text of the document's <title>.

        Returns:
            The title text, or None if the document has no <title> element.
        """
        titles = self.query_xpath(
            "//title", "document title", min_count=0
        )
        if not titles:
            return None
        return " ".join(titles[0].text_content().split())
