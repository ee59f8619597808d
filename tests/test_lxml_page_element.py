"""Tests for LxmlPageElement and CheckedHtmlElement.

Tests count-checked queries, link resolution, direct text nodes, titles and
document parsing errors.
"""

import pytest
from lxml import html

from swagit_scraper.common.checked_html import CheckedHtmlElement
from swagit_scraper.common.exceptions import (
    DocumentParseException,
    HTMLStructuralAssumptionException,
)
from swagit_scraper.common.lxml_page_element import (
    LxmlPageElement,
)
from swagit_scraper.common.page_element import Link


@pytest.fixture
def simple_page():
    """Simple listing-like page for testing."""
    html_content = """
    <html>
    <head><title>
        Springfield  -  Archive
    </title></head>
    <body>
        <div id="main">
            <table id="video-table">
                <tr><td><a href="/play/first">First</a> 01/15/2024</td></tr>
                <tr><td>  <a href="play/second"> Second </a><br>02/01/2024</td></tr>
                <tr><td><a>No href</a>03/01/2024</td></tr>
            </table>
        </div>
    </body>
    </html>
    """
    doc = html.fromstring(html_content)
    checked = CheckedHtmlElement(doc, "https://x.test/archive/council?page=2")
    return LxmlPageElement(checked, "https://x.test/archive/council?page=2")


class TestQueries:
    def test_query_css_returns_wrapped_elements(self, simple_page):
        cells = simple_page.query_css("table#video-table td", "cells")

        assert len(cells) == 3
        assert all(isinstance(cell, LxmlPageElement) for cell in cells)
        assert cells[0].text_content().strip() == "First 01/15/2024"

    def test_query_css_min_count_violation_raises(self, simple_page):
        with pytest.raises(HTMLStructuralAssumptionException) as exc_info:
            simple_page.query_css("div.pagination > a", "pagination")

        assert exc_info.value.selector_type == "css"
        assert exc_info.value.actual_count == 0
        assert exc_info.value.request_url.startswith("https://x.test/")

    def test_query_css_zero_min_count_allows_empty(self, simple_page):
        assert (
            simple_page.query_css("div.pagination > a", "pagination", min_count=0)
            == []
        )

    def test_query_css_max_count_violation_raises(self, simple_page):
        with pytest.raises(HTMLStructuralAssumptionException) as exc_info:
            simple_page.query_css("td", "cells", max_count=1)

        assert "at least" not in str(exc_info.value)
        assert exc_info.value.expected_max == 1

    def test_invalid_css_selector_raises_structural_exception(self, simple_page):
        with pytest.raises(HTMLStructuralAssumptionException):
            simple_page.query_css("td[[", "broken selector", min_count=0)

    def test_query_xpath_strings(self, simple_page):
        hrefs = simple_page.query_xpath_strings("//a/@href", "hrefs")

        assert hrefs == ["/play/first", "play/second"]
        assert all(type(href) is str for href in hrefs)


class TestLinks:
    def test_as_link_resolves_against_document_url(self, simple_page):
        anchors = simple_page.query_css("a", "anchors")

        assert anchors[0].as_link() == Link(
            url="https://x.test/play/first",
            path="/play/first",
            text="First",
        )
        relative = anchors[1].as_link()
        assert relative.url == "https://x.test/archive/play/second"
        assert relative.text == "Second"

    def test_as_link_without_href_is_none(self, simple_page):
        anchors = simple_page.query_css("a", "anchors")
        assert anchors[2].as_link() is None

    def test_as_link_blank_href_is_none(self):
        page = LxmlPageElement.from_html(
            '<html><body><a href="  ">Blank</a></body></html>',
            "https://x.test/",
        )
        assert page.query_css("a", "anchor")[0].as_link() is None

    def test_link_is_frozen(self):
        link = Link(url="https://x.test/a", path="/a", text="A")
        with pytest.raises(AttributeError):
            link.url = "different"  # type: ignore[misc]


class TestDirectTextNodes:
    def test_text_beside_anchor_is_direct(self, simple_page):
        cells = simple_page.query_css("td", "cells")

        assert [t.strip() for t in cells[0].direct_text_nodes()] == [
            "01/15/2024"
        ]

    def test_text_after_line_break_is_direct(self, simple_page):
        cells = simple_page.query_css("td", "cells")

        nodes = cells[1].direct_text_nodes()
        assert [n for n in nodes if n.strip()] == ["02/01/2024"]

    def test_anchor_text_is_not_direct(self, simple_page):
        cells = simple_page.query_css("td", "cells")
        assert "No href" not in cells[2].direct_text_nodes()


class TestTitle:
    def test_title_whitespace_is_collapsed(self, simple_page):
        assert simple_page.title() == "Springfield - Archive"

    def test_missing_title_is_none(self):
        page = LxmlPageElement.from_html(
            "<html><body><p>no title</p></body></html>", "https://x.test/"
        )
        assert page.title() is None


class TestFromHtml:
    def test_parses_bytes_with_declared_encoding(self):
        content = "<html><head><title>Café - Archive</title></head></html>"
        page = LxmlPageElement.from_html(
            content.encode("utf-8"), "https://x.test/", encoding="utf-8"
        )

        assert page.title() == "Café - Archive"
        assert page.url == "https://x.test/"

    def test_empty_body_raises_document_parse_exception(self):
        with pytest.raises(DocumentParseException) as exc_info:
            LxmlPageElement.from_html(
                b"", "https://x.test/empty", content_type="text/html"
            )

        assert exc_info.value.request_url == "https://x.test/empty"
        assert exc_info.value.content_type == "text/html"

    def test_unknown_encoding_raises_document_parse_exception(self):
        with pytest.raises(DocumentParseException):
            LxmlPageElement.from_html(
                b"<html></html>", "https://x.test/", encoding="no-such-codec"
            )
