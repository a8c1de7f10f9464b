"""
Author Extractor - Byline Identification

Finds the author of a page in its body markup when the head metadata does
not name one: microdata, rel=author links, author/byline classes, and
finally "By Jane Doe" style text near the top of the page.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Pattern

import structlog
from bs4 import BeautifulSoup, Tag

from ..extractor.noise_filter import NoiseFilter
from ..extractor.parser import BLOCK_TAGS, attr_text, element_text, iter_elements, normalize_whitespace

logger = structlog.get_logger(__name__)

_PREFIXES = ("written by", "posted by", "author:", "by:", "by", "@")
_SUFFIXES = ("writes:", "says:", "reports:")

# A byline ends at the first separator; whatever follows is usually a date.
_SEPARATOR = re.compile(r"\s*(?:[|\u2022\u00b7\u2013\u2014]|\s-\s|\bon\s+\w+day\b|\bupdated\b|\bpublished\b).*$", re.IGNORECASE)

_URL_LIKE = re.compile(r"^(?:https?:|www\.|/)", re.IGNORECASE)

_BYLINE_TEXT_TAGS = frozenset({"p", "span", "div", "address", "small", "em", "strong", "li", "time", "a"})

_SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "head", "title"})


def clean_author_name(raw: Optional[str], max_length: int = 100) -> Optional[str]:
    """Strip byline decoration from ``raw``.

    Returns:
        The bare name, or None when nothing name-like remains or the
        result is longer than ``max_length``.
    """
    name = normalize_whitespace(raw or "")
    if not name or _URL_LIKE.match(name):
        return None

    name = _SEPARATOR.sub("", name)

    # Remove common prefixes/suffixes
    lowered = name.lower()
    for prefix in _PREFIXES:
        boundary = lowered[len(prefix) : len(prefix) + 1]
        if lowered.startswith(prefix) and (not prefix[-1].isalpha() or not boundary.isalpha()):
            name = name[len(prefix) :].strip()
            break
    lowered = name.lower()
    for suffix in _SUFFIXES:
        if lowered.endswith(suffix):
            name = name[: -len(suffix)].strip()
            break

    name = name.strip(" .,;:|-")
    if not name or len(name) > max_length:
        return None
    if not any(ch.isalpha() for ch in name):
        return None
    return name


class AuthorExtractor:
    """
    Body-markup author extraction.

    Strategies run from most to least explicit; the first one that yields a
    clean name wins. Elements inside noise subtrees (comment threads,
    sidebars) are never considered.
    """

    def __init__(
        self,
        noise_filter: Optional[NoiseFilter] = None,
        max_author_length: int = 100,
        byline_search_blocks: int = 12,
    ) -> None:
        self.noise_filter = noise_filter or NoiseFilter()
        self.max_author_length = max_author_length
        self.byline_search_blocks = byline_search_blocks

        # Author-related CSS selectors (common patterns)
        self.author_selectors: List[str] = [
            '[rel~="author"]',
            ".author-name",
            ".byline-author",
            ".post-author",
            ".article-author",
            '[class*="byline"]',
            '[class*="author"]',
            '[id*="author"]',
        ]

        self.byline_pattern: Pattern[str] = re.compile(
            r"^(?i:by|written by|posted by|author:)\s+"
            r"([A-Z][\w'.\-]*(?:\s+(?:[A-Z][\w'.\-]*|(?:van|von|de|da|del|der|la|le|bin|al)\b)){0,4})"
        )

    def extract(self, soup: BeautifulSoup) -> Optional[str]:
        """Author named in the body markup of ``soup``, or None."""
        for strategy in (self._from_microdata, self._from_selectors, self._from_byline_text):
            author = strategy(soup)
            if author:
                logger.debug("Author found in body markup", strategy=strategy.__name__.lstrip("_"))
                return author
        return None

    def _clean(self, raw: Optional[str]) -> Optional[str]:
        return clean_author_name(raw, self.max_author_length)

    def _from_microdata(self, soup: BeautifulSoup) -> Optional[str]:
        for element in soup.select('[itemprop~="author"]'):
            if self.noise_filter.is_excluded(element):
                continue
            name_element = element.select_one('[itemprop~="name"]')
            target = name_element if isinstance(name_element, Tag) else element
            author = self._clean(attr_text(target, "content") or target.get_text(" "))
            if author:
                return author
        return None

    def _from_selectors(self, soup: BeautifulSoup) -> Optional[str]:
        for selector in self.author_selectors:
            for element in soup.select(selector):
                if element.name in ("meta", "link") or self._skipped(element):
                    continue
                author = self._clean(element.get_text(" "))
                if author:
                    return author
        return None

    def _from_byline_text(self, soup: BeautifulSoup) -> Optional[str]:
        for text in self._leading_blocks(soup):
            match = self.byline_pattern.match(text)
            if match:
                author = self._clean(match.group(1))
                if author:
                    return author
        return None

    def _leading_blocks(self, soup: BeautifulSoup) -> Iterator[str]:
        """Short text blocks in document order, up to byline_search_blocks of them."""
        root = soup.body if isinstance(soup.body, Tag) else soup
        seen = 0
        for element in iter_elements(root, self._is_hidden):
            if seen >= self.byline_search_blocks:
                return
            if element.name not in _BYLINE_TEXT_TAGS:
                continue
            # Only innermost blocks; a wrapper's text runs into the article.
            if any(isinstance(child, Tag) and child.name in BLOCK_TAGS for child in element.children):
                continue
            text = element_text(element)
            if not text:
                continue
            seen += 1
            yield text

    def _is_hidden(self, tag: Tag) -> bool:
        return tag.name in _SKIP_TAGS or self.noise_filter.is_noise(tag)

    def _skipped(self, element: Tag) -> bool:
        if self.noise_filter.is_excluded(element):
            return True
        return any(isinstance(parent, Tag) and parent.name in _SKIP_TAGS for parent in element.parents)
