"""
Metadata Extractor - Article Metadata from Head and Body Markup

Combines structured data (OpenGraph, Twitter Cards, JSON-LD, standard meta
tags) with body heuristics. Every field follows its own priority chain and
the first non-empty source wins; fields nobody declares stay None.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, FrozenSet, Iterable, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from ..config.config import ExtractionConfig
from ..extractor.noise_filter import NoiseFilter
from ..extractor.parser import element_text, normalize_whitespace
from .author_extractor import AuthorExtractor, clean_author_name
from .date_extractor import DateExtractor
from .structured_data_parser import StructuredData, StructuredDataParser, ld_texts

_LANGUAGE_PATTERN = re.compile(r"^([a-z]{2,3})(?:[-_]([a-z0-9]{2,8}))*$", re.IGNORECASE)

_KEYWORD_SPLIT = re.compile(r"[,;]")

# A category or tag longer than this is a sentence, not a label.
_MAX_LABEL_LENGTH = 60


@dataclass(slots=True, frozen=True)
class MetadataResult:
    """Metadata found for one document."""

    title: Optional[str] = None
    description: str = ""
    author: Optional[str] = None
    publish_date: Optional[datetime] = None
    language: Optional[str] = None
    category: Optional[str] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)
    # Resolved og:image / twitter:image, consumed by the image extractor
    image_url: Optional[str] = None


def normalize_language(value: Optional[str]) -> Optional[str]:
    """Normalize a language tag to ``xx`` or ``xx-YY`` form.

    ``en_us``, ``EN-us`` and ``en-US,en;q=0.9`` all become ``en-US``;
    values that are not language tags give None.
    """
    if not value:
        return None
    first = value.split(",")[0].split(";")[0].strip()
    match = _LANGUAGE_PATTERN.match(first)
    if not match:
        return None
    parts = re.split(r"[-_]", first)
    language = parts[0].lower()
    if len(parts) > 1 and len(parts[1]) == 2 and parts[1].isalpha():
        return f"{language}-{parts[1].upper()}"
    return language


def split_keywords(values: Iterable[str]) -> List[str]:
    """Split comma/semicolon keyword strings into clean, de-duplicated labels."""
    seen = set()
    keywords: List[str] = []
    for value in values:
        for part in _KEYWORD_SPLIT.split(value):
            keyword = normalize_whitespace(part)
            if keyword and len(keyword) <= _MAX_LABEL_LENGTH and keyword.lower() not in seen:
                seen.add(keyword.lower())
                keywords.append(keyword)
    return keywords


class MetadataExtractor:
    """
    Article metadata extraction.

    Structured sources are consulted before body heuristics for every
    field. Body heuristics for category and tags ignore noise subtrees, so a
    sidebar tag cloud never labels the article.
    """

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        noise_filter: Optional[NoiseFilter] = None,
        logger: Any = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.noise_filter = noise_filter or NoiseFilter(self.config)
        self.logger = (logger or structlog.get_logger(__name__)).bind(component="MetadataExtractor")

        self.structured_parser = StructuredDataParser()
        self.author_extractor = AuthorExtractor(
            noise_filter=self.noise_filter,
            max_author_length=self.config.max_author_length,
            byline_search_blocks=self.config.byline_search_blocks,
        )
        self.date_extractor = DateExtractor(self.noise_filter)

    def extract(self, soup: BeautifulSoup, base_url: str = "", main_text: str = "") -> MetadataResult:
        """
        Extract metadata from a parsed document.

        Args:
            soup: Parsed document (read only)
            base_url: Page URL, used to resolve the preview image
            main_text: Selected main text; searched for a date when the
                leading page text has none

        Returns:
            MetadataResult with every field that could be determined
        """
        data = self.structured_parser.parse(soup, base_url)

        result = MetadataResult(
            title=self._title(soup, data),
            description=self._description(data),
            author=self._author(soup, data),
            publish_date=self._publish_date(soup, data, main_text),
            language=self._language(data),
            category=self._category(soup, data),
            tags=frozenset(self._tags(soup, data)),
            image_url=data.image_url,
        )

        self.logger.debug(
            "Metadata extracted",
            has_title=result.title is not None,
            has_author=result.author is not None,
            has_date=result.publish_date is not None,
            language=result.language,
            tag_count=len(result.tags),
            json_ld_items=len(data.json_ld),
        )
        return result

    # --- per-field priority chains ---

    def _title(self, soup: BeautifulSoup, data: StructuredData) -> Optional[str]:
        title = (
            data.og("og:title")
            or data.twitter_value("twitter:title")
            or data.json_ld_text("headline", article_only=True)
            or data.json_ld_text("name", article_only=True)
            or data.title_tag
        )
        if title:
            return title
        h1 = soup.find("h1")
        if isinstance(h1, Tag):
            return element_text(h1) or None
        return None

    def _description(self, data: StructuredData) -> str:
        return (
            data.og("og:description")
            or data.twitter_value("twitter:description")
            or data.json_ld_text("description", article_only=True)
            or data.meta_value("description")
            or ""
        )

    def _author(self, soup: BeautifulSoup, data: StructuredData) -> Optional[str]:
        limit = self.config.max_author_length

        declared = ld_texts(data.json_ld_raw("author", "creator", article_only=True))
        names = [clean_author_name(name, limit) for name in declared]
        names = list(dict.fromkeys(name for name in names if name))
        if names:
            joined = ", ".join(names)
            if len(joined) <= limit:
                return joined
            return names[0]

        for candidate in (data.og("article:author"), data.meta_value("author", "dc.creator", "byl")):
            name = clean_author_name(candidate, limit)
            if name:
                return name

        return self.author_extractor.extract(soup)

    def _publish_date(self, soup: BeautifulSoup, data: StructuredData, main_text: str) -> Optional[datetime]:
        parse = self.date_extractor.parse_date
        declared = (
            data.json_ld_text("datePublished", article_only=True),
            data.json_ld_text("dateCreated", article_only=True),
            data.og("article:published_time"),
            data.meta_value(
                "date",
                "pubdate",
                "publish_date",
                "publishdate",
                "dc.date.issued",
                "dc.date",
                "itemprop:datepublished",
            ),
        )
        for value in declared:
            parsed = parse(value)
            if parsed is not None:
                return parsed

        searches: List[Callable[[], Optional[datetime]]] = [
            lambda: self.date_extractor.from_time_elements(soup),
            lambda: self.date_extractor.from_page_text(soup, self.config.date_search_chars),
            lambda: self.date_from_main_text(main_text),
        ]
        for search in searches:
            parsed = search()
            if parsed is not None:
                return parsed
        return None

    def date_from_main_text(self, main_text: str) -> Optional[datetime]:
        """First date in the leading part of the selected main text."""
        return self.date_extractor.find_date_in_text(main_text[: self.config.date_search_chars])

    def _language(self, data: StructuredData) -> Optional[str]:
        candidates = (
            data.json_ld_text("inLanguage", article_only=True),
            data.og("og:locale"),
            data.html_lang,
            data.http_equiv.get("content-language"),
            data.meta_value("content-language", "language"),
        )
        for candidate in candidates:
            language = normalize_language(candidate)
            if language:
                return language
        return None

    def _category(self, soup: BeautifulSoup, data: StructuredData) -> Optional[str]:
        declared = (
            data.json_ld_text("articleSection", article_only=True),
            data.og("article:section"),
            data.meta_value("category", "article:section"),
        )
        for value in declared:
            if value and len(value) <= _MAX_LABEL_LENGTH:
                return value

        for element in self._content_elements(soup, '[rel~="category"], [itemprop~="articleSection"], .category'):
            text = element_text(element)
            if text and len(text) <= _MAX_LABEL_LENGTH:
                return text
        return None

    def _tags(self, soup: BeautifulSoup, data: StructuredData) -> List[str]:
        sources: List[Callable[[], List[str]]] = [
            lambda: split_keywords(ld_texts(data.json_ld_raw("keywords", article_only=True))),
            lambda: split_keywords(data.article_tags),
            lambda: split_keywords([data.meta_value("keywords", "news_keywords") or ""]),
            lambda: split_keywords(
                element_text(element)
                for element in self._content_elements(soup, '[rel~="tag"], .tags a, .post-tags a, .tag-list a')
            ),
        ]
        for source in sources:
            tags = source()
            if tags:
                return tags
        return []

    def _content_elements(self, soup: BeautifulSoup, selector: str) -> List[Tag]:
        return [element for element in soup.select(selector) if not self.noise_filter.is_excluded(element)]
