"""
Date Extractor - Publication Date Detection

Parses the date formats pages actually use (ISO 8601, RFC 2822, written-out
month names, numeric US/European forms) and locates publication dates in
time elements and leading page text.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional

import structlog
from bs4 import BeautifulSoup, Tag
from dateutil import parser as dateutil_parser

from ..extractor.noise_filter import NoiseFilter
from ..extractor.parser import attr_text, element_text, normalize_whitespace

logger = structlog.get_logger(__name__)

# Anything earlier is a parse accident (or a copyright year), not a publish date.
MIN_YEAR = 1990

_MONTH = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*\.?"

# Date-like substrings of free text, most specific first.
TEXT_DATE_PATTERN = re.compile(
    r"\b\d{4}-\d{2}-\d{2}(?:[T ]\d{2}:\d{2}(?::\d{2})?(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?)?"
    rf"|\b{_MONTH}\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}\b"
    rf"|\b\d{{1,2}}(?:st|nd|rd|th)?\s+{_MONTH},?\s+\d{{4}}\b"
    r"|\b\d{1,2}/\d{1,2}/\d{4}\b"
    r"|\b\d{1,2}\.\d{1,2}\.\d{4}\b",
    re.IGNORECASE,
)

_ORDINAL = re.compile(r"(?<=\d)(?:st|nd|rd|th)\b", re.IGNORECASE)
_WEEKDAY_PREFIX = re.compile(r"^(?:mon|tue|wed|thu|fri|sat|sun)[a-z]*\.?,?\s+", re.IGNORECASE)
_ABBREVIATION_DOT = re.compile(r"(?<=[A-Za-z])\.(?=\s|,|$)")
_SEPT = re.compile(r"\bsept\b", re.IGNORECASE)

_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%B %d, %Y %I:%M %p",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%d %B, %Y",
    "%d %b, %Y",
    "%m/%d/%Y",
    "%d.%m.%Y",
)

# Text of these elements never contains a visible byline or date.
_INVISIBLE_TAGS = frozenset({"script", "style", "noscript", "template", "head", "title"})


class DateExtractor:
    """
    Publication date parsing and detection.

    Every parse is deterministic: partial dates never borrow today's date,
    and naive timestamps are taken to be UTC. The page-text search skips
    noise subtrees, so a date in the site header is never the publish date.
    """

    def __init__(self, noise_filter: Optional[NoiseFilter] = None) -> None:
        self.noise_filter = noise_filter or NoiseFilter()

    def parse_date(self, value: Optional[str]) -> Optional[datetime]:
        """Parse a single date string.

        Returns:
            A timezone-aware datetime, or None for unparseable input and
            for years before MIN_YEAR.
        """
        text = normalize_whitespace(value or "")
        if not text or len(text) > 64:
            return None

        parsed = self._parse_iso(text)
        if parsed is None:
            parsed = self._parse_formats(self._clean(text))
        if parsed is None:
            parsed = self._parse_rfc2822(text)
        if parsed is None:
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        if parsed.year < MIN_YEAR:
            return None
        return parsed

    def from_time_elements(self, soup: BeautifulSoup) -> Optional[datetime]:
        """Publication date from itemprop/pubdate markers, then any <time datetime>."""
        candidates: List[str] = []
        for element in soup.select('[itemprop="datePublished"], time[pubdate]'):
            candidates.append(
                attr_text(element, "datetime") or attr_text(element, "content") or element.get_text()
            )
        for element in soup.find_all("time"):
            value = attr_text(element, "datetime")
            if value:
                candidates.append(value)

        for candidate in candidates:
            parsed = self.parse_date(candidate)
            if parsed is not None:
                return parsed
        return None

    def find_date_in_text(self, text: str) -> Optional[datetime]:
        """First parseable date-like substring of ``text``."""
        for match in TEXT_DATE_PATTERN.finditer(text):
            parsed = self.parse_date(match.group(0))
            if parsed is not None:
                logger.debug("Date found in page text", source_text=match.group(0))
                return parsed
        return None

    def from_page_text(self, soup: BeautifulSoup, search_chars: int) -> Optional[datetime]:
        """Search the leading ``search_chars`` characters of visible page text."""
        if search_chars <= 0:
            return None
        root = soup.body if isinstance(soup.body, Tag) else soup
        text = element_text(root, self._is_hidden)
        return self.find_date_in_text(text[:search_chars])

    def _is_hidden(self, tag: Tag) -> bool:
        return tag.name in _INVISIBLE_TAGS or self.noise_filter.is_noise(tag)

    @staticmethod
    def _clean(text: str) -> str:
        text = _WEEKDAY_PREFIX.sub("", text)
        text = _ORDINAL.sub("", text)
        text = _SEPT.sub("Sep", text)
        return _ABBREVIATION_DOT.sub("", text)

    @staticmethod
    def _parse_iso(text: str) -> Optional[datetime]:
        if not text[:1].isdigit():
            return None
        try:
            return dateutil_parser.isoparse(text)
        except (ValueError, OverflowError):
            return None

    @staticmethod
    def _parse_formats(text: str) -> Optional[datetime]:
        for fmt in _FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
        return None

    @staticmethod
    def _parse_rfc2822(text: str) -> Optional[datetime]:
        try:
            return parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None
