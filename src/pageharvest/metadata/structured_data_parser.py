"""
Structured Data Parser - OpenGraph, Schema.org JSON-LD, and Twitter Cards

Collects the head metadata of a parsed document in one pass so the metadata
and image extractors can apply their own priority rules to it.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import structlog
from bs4 import BeautifulSoup, Tag

from ..extractor.parser import attr_text, normalize_whitespace
from ..extractor.urls import resolve_url

logger = structlog.get_logger(__name__)

ARTICLE_TYPES = frozenset(
    {
        "article",
        "newsarticle",
        "blogposting",
        "reportagenewsarticle",
        "analysisnewsarticle",
        "opinionnewsarticle",
        "scholarlyarticle",
        "techarticle",
        "liveblogposting",
        "webpage",
        "videoobject",
    }
)

_HTML_COMMENT = re.compile(r"^\s*(?:<!--|<!\[CDATA\[)|(?:-->|\]\]>)\s*$")


@dataclass
class StructuredData:
    """Head metadata of one document."""

    # OpenGraph and article:* properties (first value per property)
    open_graph: Dict[str, str] = field(default_factory=dict)
    article_tags: List[str] = field(default_factory=list)

    # Twitter Cards
    twitter: Dict[str, str] = field(default_factory=dict)

    # Schema.org JSON-LD items (lists and @graph containers flattened)
    json_ld: List[Dict[str, Any]] = field(default_factory=list)

    # Standard meta tags keyed by lower-cased name / http-equiv
    meta: Dict[str, str] = field(default_factory=dict)
    http_equiv: Dict[str, str] = field(default_factory=dict)

    title_tag: Optional[str] = None
    html_lang: Optional[str] = None

    # og:image (or twitter:image) resolved against the page URL
    image_url: Optional[str] = None

    def og(self, key: str) -> Optional[str]:
        return self.open_graph.get(key) or None

    def twitter_value(self, key: str) -> Optional[str]:
        return self.twitter.get(key) or None

    def meta_value(self, *names: str) -> Optional[str]:
        for name in names:
            value = self.meta.get(name.lower())
            if value:
                return value
        return None

    def articles(self) -> List[Dict[str, Any]]:
        """JSON-LD items, article-like types first."""
        preferred = [item for item in self.json_ld if _is_article_type(item.get("@type"))]
        others = [item for item in self.json_ld if not _is_article_type(item.get("@type"))]
        return preferred + others

    def json_ld_raw(self, *keys: str, article_only: bool = False) -> Any:
        """First non-empty raw value of any of ``keys`` across JSON-LD items."""
        items = self.articles()
        if article_only:
            items = [item for item in items if _is_article_type(item.get("@type"))]
        for item in items:
            for key in keys:
                value = item.get(key)
                if value not in (None, "", [], {}):
                    return value
        return None

    def json_ld_text(self, *keys: str, article_only: bool = False) -> Optional[str]:
        return ld_text(self.json_ld_raw(*keys, article_only=article_only))


def _is_article_type(value: Any) -> bool:
    if isinstance(value, list):
        return any(_is_article_type(v) for v in value)
    return isinstance(value, str) and value.lower() in ARTICLE_TYPES


def ld_text(value: Any) -> Optional[str]:
    """Text of a JSON-LD value: strings, {"name"}/{"@value"} objects, or the first usable list item."""
    if value is None:
        return None
    if isinstance(value, str):
        text = normalize_whitespace(value)
        return text or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, dict):
        for key in ("name", "@value", "headline"):
            text = ld_text(value.get(key))
            if text:
                return text
        return None
    if isinstance(value, list):
        for item in value:
            text = ld_text(item)
            if text:
                return text
    return None


def ld_texts(value: Any) -> List[str]:
    """Every text of a JSON-LD value (for multi-author or keyword lists)."""
    if isinstance(value, list):
        texts: List[str] = []
        for item in value:
            texts.extend(ld_texts(item))
        return texts
    text = ld_text(value)
    return [text] if text else []


class OpenGraphParser:
    """Parser for OpenGraph and article:* metadata."""

    PREFIXES = ("og:", "article:")

    @staticmethod
    def parse(soup: BeautifulSoup, data: StructuredData) -> None:
        for tag in soup.find_all("meta"):
            key = (attr_text(tag, "property") or attr_text(tag, "name")).lower()
            if not key.startswith(OpenGraphParser.PREFIXES):
                continue
            content = normalize_whitespace(attr_text(tag, "content"))
            if not content:
                continue
            if key == "article:tag":
                data.article_tags.append(content)
            data.open_graph.setdefault(key, content)


class TwitterCardParser:
    """Parser for Twitter Card metadata."""

    @staticmethod
    def parse(soup: BeautifulSoup, data: StructuredData) -> None:
        for tag in soup.find_all("meta"):
            key = (attr_text(tag, "name") or attr_text(tag, "property")).lower()
            if not key.startswith("twitter:"):
                continue
            content = normalize_whitespace(attr_text(tag, "content"))
            if content:
                data.twitter.setdefault(key, content)


class SchemaOrgParser:
    """Parser for Schema.org JSON-LD blocks."""

    @staticmethod
    def parse(soup: BeautifulSoup, data: StructuredData) -> None:
        for script in soup.find_all("script"):
            if attr_text(script, "type").lower() != "application/ld+json":
                continue
            raw = _HTML_COMMENT.sub("", script.get_text()).strip()
            if not raw:
                continue
            try:
                payload = json.loads(raw, strict=False)
            except json.JSONDecodeError as e:
                logger.debug("Invalid JSON-LD skipped", error=str(e))
                continue
            data.json_ld.extend(SchemaOrgParser.flatten(payload))

    @staticmethod
    def flatten(payload: Any) -> List[Dict[str, Any]]:
        """Expand top-level lists and @graph containers into plain items."""
        items: List[Dict[str, Any]] = []
        pending: List[Any] = [payload]
        while pending:
            current = pending.pop(0)
            if isinstance(current, list):
                pending[0:0] = current
            elif isinstance(current, dict):
                graph = current.get("@graph")
                if "@type" in current or not graph:
                    items.append(current)
                if isinstance(graph, (list, dict)):
                    pending.append(graph)
        return items


class StandardMetaParser:
    """Parser for <title>, <html lang> and name/http-equiv meta tags."""

    @staticmethod
    def parse(soup: BeautifulSoup, data: StructuredData) -> None:
        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            title = normalize_whitespace(title_tag.get_text())
            data.title_tag = title or None

        html_tag = soup.find("html")
        if isinstance(html_tag, Tag):
            lang = attr_text(html_tag, "lang") or attr_text(html_tag, "xml:lang")
            data.html_lang = lang or None

        for tag in soup.find_all("meta"):
            content = normalize_whitespace(attr_text(tag, "content"))
            if not content:
                continue
            name = attr_text(tag, "name").lower()
            if name:
                data.meta.setdefault(name, content)
            equiv = attr_text(tag, "http-equiv").lower()
            if equiv:
                data.http_equiv.setdefault(equiv, content)
            itemprop = attr_text(tag, "itemprop").lower()
            if itemprop:
                data.meta.setdefault(f"itemprop:{itemprop}", content)


class StructuredDataParser:
    """
    Comprehensive structured data parser.

    Extracts metadata from OpenGraph, Schema.org, Twitter Cards,
    and standard HTML meta tags.
    """

    def __init__(self) -> None:
        self.parsers: Iterable[Any] = (OpenGraphParser, TwitterCardParser, SchemaOrgParser, StandardMetaParser)

    def parse(self, soup: BeautifulSoup, base_url: str = "") -> StructuredData:
        """
        Parse all structured data from a document.

        Args:
            soup: Parsed document
            base_url: Page URL used to resolve the preview image

        Returns:
            StructuredData; empty fields when the page declares nothing
        """
        data = StructuredData()
        for parser in self.parsers:
            parser.parse(soup, data)

        image = (
            data.og("og:image")
            or data.og("og:image:url")
            or data.og("og:image:secure_url")
            or data.twitter_value("twitter:image")
            or data.twitter_value("twitter:image:src")
        )
        if image:
            data.image_url = resolve_url(image, base_url)
        return data
