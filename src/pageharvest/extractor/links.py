"""
Hyperlink extraction.
"""

from __future__ import annotations

from typing import Any, List, Optional, Set, Tuple

import structlog
from bs4 import BeautifulSoup

from ..models import ExtractedLink
from .parser import attr_text, element_text, normalize_whitespace
from .urls import is_external, resolve_url


class LinkExtractor:
    """Collects every resolvable http(s) link on the page."""

    def __init__(self, logger: Any = None) -> None:
        self.logger = (logger or structlog.get_logger(__name__)).bind(component="LinkExtractor")

    def extract(self, soup: BeautifulSoup, base_url: str) -> Tuple[ExtractedLink, ...]:
        """
        Extract links in document order.

        ``mailto:``, ``javascript:``, ``tel:`` and other non-http(s) hrefs
        are dropped along with anything that does not resolve. The first
        occurrence of a URL wins.
        """
        links: List[ExtractedLink] = []
        seen: Set[str] = set()
        dropped = 0

        for anchor in soup.find_all("a", href=True):
            url: Optional[str] = resolve_url(attr_text(anchor, "href"), base_url)
            if url is None:
                dropped += 1
                continue
            if url in seen:
                continue
            seen.add(url)
            links.append(
                ExtractedLink(
                    url=url,
                    title=element_text(anchor) or normalize_whitespace(attr_text(anchor, "aria-label")),
                    description=normalize_whitespace(attr_text(anchor, "title")),
                    is_external=is_external(url, base_url),
                )
            )

        self.logger.debug("Links extracted", count=len(links), dropped=dropped)
        return tuple(links)
