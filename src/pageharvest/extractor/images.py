"""
Image extraction with lazy-load, srcset and main-image detection.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Any, Iterator, List, Optional, Set, Tuple

import structlog
from bs4 import BeautifulSoup, Tag

from ..config.config import ExtractionConfig
from ..models import ExtractedImage
from .noise_filter import NoiseFilter
from .parser import attr_text, element_text, is_descendant, normalize_whitespace
from .urls import resolve_url

logger = structlog.get_logger(__name__)

LAZY_SOURCE_ATTRIBUTES = ("data-src", "data-lazy-src", "data-original")

_DIMENSION = re.compile(r"^\s*(\d+)\s*(?:px)?\s*$", re.IGNORECASE)
_SRCSET_DESCRIPTOR = re.compile(r"^(\d+(?:\.\d+)?)([wx])$", re.IGNORECASE)


def parse_dimension(value: Optional[str]) -> Optional[int]:
    """``"640"`` and ``"640px"`` give 640; anything else gives None."""
    match = _DIMENSION.match(value or "")
    return int(match.group(1)) if match else None


def widest_srcset_candidate(srcset: str) -> Optional[str]:
    """URL of the largest candidate in a ``srcset`` attribute.

    Width descriptors outrank density descriptors; a candidate without a
    descriptor counts as ``1x``. Ties keep the earlier candidate.
    """
    best: Optional[str] = None
    best_key: Tuple[int, float] = (-1, 0.0)
    for candidate in srcset.split(","):
        parts = candidate.split()
        if not parts:
            continue
        url = parts[0]
        key: Tuple[int, float] = (0, 1.0)
        if len(parts) > 1:
            match = _SRCSET_DESCRIPTOR.match(parts[1])
            if not match:
                continue
            key = (1 if match.group(2).lower() == "w" else 0, float(match.group(1)))
        if key > best_key:
            best, best_key = url, key
    return best


class ImageExtractor:
    """Collects every image on the page and picks at most one main image."""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        noise_filter: Optional[NoiseFilter] = None,
        logger: Any = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.noise_filter = noise_filter or NoiseFilter(self.config)
        self.logger = (logger or structlog.get_logger(__name__)).bind(component="ImageExtractor")

    def extract(
        self,
        soup: BeautifulSoup,
        base_url: str,
        content_root: Optional[Tag] = None,
        og_image: Optional[str] = None,
    ) -> Tuple[ExtractedImage, ...]:
        """
        Extract images in document order.

        Args:
            soup: Parsed document (read only)
            base_url: Page URL for resolving relative sources
            content_root: Selected main-content container, if any
            og_image: Resolved Open Graph image URL, if the page declares one

        Returns:
            Images de-duplicated by URL, with at most one main image
        """
        images: List[ExtractedImage] = []
        elements: List[Tag] = []
        seen: Set[str] = set()

        for element in self._image_elements(soup):
            url = self._source_url(element, base_url)
            if url is None or url in seen:
                continue
            seen.add(url)
            images.append(self._build(element, url))
            elements.append(element)

        if og_image:
            images = self._mark_open_graph(images, soup, og_image)
        else:
            index = self._main_image_index(elements, images, content_root)
            if index is not None:
                images[index] = replace(images[index], is_main_image=True)

        self.logger.debug(
            "Images extracted",
            count=len(images),
            main_image=next((image.url for image in images if image.is_main_image), None),
        )
        return tuple(images)

    def _image_elements(self, soup: BeautifulSoup) -> Iterator[Tag]:
        for element in soup.find_all(["img", "source"]):
            if element.name == "source" and not (isinstance(element.parent, Tag) and element.parent.name == "picture"):
                continue
            yield element

    def _source_url(self, element: Tag, base_url: str) -> Optional[str]:
        """First candidate source that resolves to an absolute http(s) URL."""
        candidates: List[str] = []
        src = attr_text(element, "src")
        if src and not src.lower().startswith("data:"):
            candidates.append(src)
        candidates.extend(attr_text(element, name) for name in LAZY_SOURCE_ATTRIBUTES)
        for name in ("srcset", "data-srcset"):
            widest = widest_srcset_candidate(attr_text(element, name))
            if widest:
                candidates.append(widest)

        for candidate in candidates:
            if not candidate or candidate.lower().startswith("data:"):
                continue
            url = resolve_url(candidate, base_url)
            if url is not None:
                return url
        return None

    def _build(self, element: Tag, url: str) -> ExtractedImage:
        alt = normalize_whitespace(attr_text(element, "alt"))
        if not alt and element.name == "source" and isinstance(element.parent, Tag):
            img = element.parent.find("img")
            alt = normalize_whitespace(attr_text(img, "alt"))
        return ExtractedImage(
            url=url,
            alt=alt,
            caption=self._caption(element),
            width=parse_dimension(attr_text(element, "width")),
            height=parse_dimension(attr_text(element, "height")),
        )

    @staticmethod
    def _caption(element: Tag) -> str:
        figure = element.find_parent("figure")
        if isinstance(figure, Tag):
            figcaption = figure.find("figcaption")
            if isinstance(figcaption, Tag):
                caption = element_text(figcaption)
                if caption:
                    return caption
        return normalize_whitespace(attr_text(element, "title"))

    def _mark_open_graph(self, images: List[ExtractedImage], soup: BeautifulSoup, og_image: str) -> List[ExtractedImage]:
        for index, image in enumerate(images):
            if image.url == og_image:
                images[index] = replace(image, is_main_image=True)
                return images

        synthetic = ExtractedImage(
            url=og_image,
            alt=_meta_property(soup, "og:image:alt"),
            width=parse_dimension(_meta_property(soup, "og:image:width")),
            height=parse_dimension(_meta_property(soup, "og:image:height")),
            is_main_image=True,
        )
        return [synthetic] + images

    def _main_image_index(
        self,
        elements: List[Tag],
        images: List[ExtractedImage],
        content_root: Optional[Tag],
    ) -> Optional[int]:
        if content_root is None:
            return None
        minimum = self.config.min_main_image_size
        for index, (element, image) in enumerate(zip(elements, images)):
            if not is_descendant(element, content_root) or self.noise_filter.is_excluded(element):
                continue
            if image.width is not None and image.width < minimum:
                continue
            if image.height is not None and image.height < minimum:
                continue
            return index
        return None


def _meta_property(soup: BeautifulSoup, name: str) -> str:
    for meta in soup.find_all("meta"):
        if (attr_text(meta, "property") or attr_text(meta, "name")).lower() == name:
            return normalize_whitespace(attr_text(meta, "content"))
    return ""
