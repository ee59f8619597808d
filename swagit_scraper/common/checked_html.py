"""Checked HTML element wrapper for safe XPath/CSS querying.

CheckedHtmlElement wraps an lxml.html.HtmlElement and validates selector
results against expected counts, so that a changed archive layout fails
loudly where a caller asked for a guarantee. Queries made with
``min_count=0`` never raise on an empty result.
"""

from __future__ import annotations

from typing import overload

from cssselect import SelectorError
from lxml.html import HtmlElement

from swagit_scraper.common.exceptions import (
    HTMLStructuralAssumptionException,
)


class CheckedHtmlElement:
    """Wrapper around HtmlElement with validated selectors."""

    def __init__(self, element: HtmlElement, request_url: str = "") -> None:
        """Initialize the checked element wrapper.

        Args:
            element: The lxml HtmlElement to wrap.
            request_url: Optional URL for error context.
        """
        self._element = element
        self._request_url = request_url

    def _check_count(
        self,
        selector: str,
        selector_type: str,
        description: str,
        min_count: int,
        max_count: int | None,
        actual_count: int,
        is_element_query: bool = True,
    ) -> None:
        if actual_count < min_count or (
            max_count is not None and actual_count > max_count
        ):
            raise HTMLStructuralAssumptionException(
                selector=selector,
                selector_type=selector_type,
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=actual_count,
                request_url=self._request_url,
                is_element_query=is_element_query,
            )

    @overload
    def checked_xpath(
        self,
        xpath: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
        *,
        type: type[str],
    ) -> list[str]: ...

    @overload
    def checked_xpath(
        self,
        xpath: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]: ...

    def checked_xpath(
        self,
        xpath: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
        *,
        type: type[str] | None = None,
    ) -> list[CheckedHtmlElement] | list[str]:
        """Execute XPath query with count validation.

        Args:
            xpath: XPath expression to execute.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of results expected (default: 1).
            max_count: Maximum number of results expected (None = unlimited).
            type: Pass `str` to return only string results (text nodes,
                attributes). If omitted, returns only CheckedHtmlElements.

        Returns:
            List of matching results filtered by type.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match expectations.

        Example::

            cell = CheckedHtmlElement(lxml.html.fromstring(html))
            dates = cell.checked_xpath("./text()", "date text", type=str)
        """
        results = self._element.xpath(xpath)

        if type is str:
            # lxml text results are str subclasses; normalise to plain str
            strings: list[str] = [str(r) for r in results if isinstance(r, str)]
            self._check_count(
                xpath,
                "xpath",
                description,
                min_count,
                max_count,
                len(strings),
                is_element_query=False,
            )
            return strings

        wrapped: list[CheckedHtmlElement] = [
            CheckedHtmlElement(r, self._request_url)
            for r in results
            if isinstance(r, HtmlElement)
        ]
        self._check_count(
            xpath, "xpath", description, min_count, max_count, len(wrapped)
        )
        return wrapped

    def checked_css(
        self,
        selector: str,
        description: str,
        min_count: int = 1,
        max_count: int | None = None,
    ) -> list[CheckedHtmlElement]:
        """Execute CSS selector query with count validation.

        Args:
            selector: CSS selector expression.
            description: Human-readable description of what's being selected.
            min_count: Minimum number of elements expected (default: 1).
            max_count: Maximum number of elements expected (None = unlimited).

        Returns:
            List of matching CheckedHtmlElements, in document order.

        Raises:
            HTMLStructuralAssumptionException: If count doesn't match
                expectations or the selector cannot be compiled.

        Example::

            tree = CheckedHtmlElement(lxml.html.fromstring(html))
            cells = tree.checked_css("table#video-table td", "cells", min_count=0)
        """
        try:
            results = self._element.cssselect(selector)
        except SelectorError as e:
            raise HTMLStructuralAssumptionException(
                selector=selector,
                selector_type="css",
                description=description,
                expected_min=min_count,
                expected_max=max_count,
                actual_count=0,
                request_url=self._request_url,
            ) from e

        self._check_count(
            selector, "css", description, min_count, max_count, len(results)
        )

        return [
            CheckedHtmlElement(result, self._request_url) for result in results
        ]

    def __getattr__(self, name: str):
        """Delegate all other attributes to the wrapped element."""
        return getattr(self._element, name)
