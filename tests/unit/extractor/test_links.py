"""
Unit tests for LinkExtractor.
"""

from pageharvest.extractor.links import LinkExtractor
from pageharvest.models import ExtractedLink

BASE = "https://example.com/docs/index.html"


class TestLinkExtractor:
    """Test cases for link collection."""

    def test_links_are_resolved_and_classified(self, logger, make_soup):
        soup = make_soup(
            """
            <a href="guide.html" title="The full guide">  Read   the <b>guide</b> </a>
            <a href="https://other.example.org/page">Elsewhere</a>
            <a href="//example.com/top">Top</a>
            <a href="#section-2">Jump</a>
            """
        )
        links = LinkExtractor(logger=logger).extract(soup, BASE)

        assert links == (
            ExtractedLink(
                url="https://example.com/docs/guide.html",
                title="Read the guide",
                description="The full guide",
                is_external=False,
            ),
            ExtractedLink(url="https://other.example.org/page", title="Elsewhere", is_external=True),
            ExtractedLink(url="https://example.com/top", title="Top", is_external=False),
            ExtractedLink(url="https://example.com/docs/index.html#section-2", title="Jump", is_external=False),
        )

    def test_non_http_schemes_are_dropped(self, logger, make_soup):
        soup = make_soup(
            """
            <a href="mailto:team@example.com">Mail</a>
            <a href="javascript:void(0)">Click</a>
            <a href="tel:+15551234">Call</a>
            <a href="ftp://files.example.com/a.zip">FTP</a>
            <a>No href</a>
            <a href="/kept">Kept</a>
            """
        )
        links = LinkExtractor(logger=logger).extract(soup, BASE)
        assert [link.url for link in links] == ["https://example.com/kept"]

    def test_aria_label_fallback_for_icon_links(self, logger, make_soup):
        soup = make_soup('<a href="/search" aria-label="Search"><svg></svg></a>')
        (link,) = LinkExtractor(logger=logger).extract(soup, BASE)
        assert link.title == "Search"

    def test_duplicates_keep_first(self, logger, make_soup):
        soup = make_soup('<a href="/a">First</a><a href="https://example.com/a">Second</a>')
        links = LinkExtractor(logger=logger).extract(soup, BASE)
        assert [link.title for link in links] == ["First"]

    def test_subdomain_is_external(self, logger, make_soup):
        soup = make_soup('<a href="https://blog.example.com/">Blog</a>')
        (link,) = LinkExtractor(logger=logger).extract(soup, BASE)
        assert link.is_external
