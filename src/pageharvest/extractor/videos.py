"""
Video extraction: <video> elements and iframe embeds from known hosts.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Iterator, List, Optional, Set, Tuple
from urllib.parse import urlsplit

import structlog
from bs4 import BeautifulSoup, Tag

from ..config.config import ExtractionConfig
from ..models import ExtractedVideo, VideoPlatform
from .parser import attr_text, element_text, normalize_whitespace
from .urls import host_of, resolve_url

logger = structlog.get_logger(__name__)

DEFAULT_DIRECT_EXTENSIONS = (".mp4", ".webm", ".mov", ".m4v", ".ogv")

YOUTUBE_ID_PATTERNS = (
    re.compile(r"youtube(?:-nocookie)?\.com/watch\?(?:.*&)?v=([^&#]+)"),
    re.compile(r"youtu\.be/([^?&#/]+)"),
    re.compile(r"youtube(?:-nocookie)?\.com/embed/([^?&#/]+)"),
)

YOUTUBE_THUMBNAIL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


def classify_platform(url: str, direct_extensions: Iterable[str] = DEFAULT_DIRECT_EXTENSIONS) -> VideoPlatform:
    """Classify a video URL by host, then by file extension.

    Hosts containing ``youtube``/``youtu.be`` are YouTube and hosts
    containing ``vimeo`` are Vimeo; a path ending in a video file extension
    is a direct file; anything else is ``other`` named after its host.
    """
    host = host_of(url)
    if "youtube" in host or "youtu.be" in host:
        return VideoPlatform.youtube()
    if "vimeo" in host:
        return VideoPlatform.vimeo()
    try:
        path = urlsplit(url).path.lower()
    except ValueError:
        path = ""
    if path.endswith(tuple(direct_extensions)):
        return VideoPlatform.direct()
    return VideoPlatform.other(host or "unknown")


def youtube_video_id(url: str) -> Optional[str]:
    for pattern in YOUTUBE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


class VideoExtractor:
    """Finds videos and classifies their hosting platform."""

    def __init__(self, config: Optional[ExtractionConfig] = None, logger: Any = None) -> None:
        self.config = config or ExtractionConfig()
        self.logger = (logger or structlog.get_logger(__name__)).bind(component="VideoExtractor")
        self._extensions = tuple(self.config.direct_video_extensions)
        self._embed_hosts = tuple(self.config.video_embed_hosts)

    def extract(self, soup: BeautifulSoup, base_url: str) -> Tuple[ExtractedVideo, ...]:
        """
        Extract videos in document order.

        Args:
            soup: Parsed document (read only)
            base_url: Page URL for resolving relative sources

        Returns:
            Videos de-duplicated by URL
        """
        videos: List[ExtractedVideo] = []
        seen: Set[str] = set()

        for element, url in self._sources(soup, base_url):
            if url in seen:
                continue
            seen.add(url)
            videos.append(self._build(element, url, base_url))

        self.logger.debug("Videos extracted", count=len(videos))
        return tuple(videos)

    def is_video_url(self, url: str) -> bool:
        """True for recognised embed hosts and direct video files."""
        lowered = url.lower()
        try:
            path = urlsplit(lowered).path
        except ValueError:
            return False
        if path.endswith(self._extensions):
            return True
        location = lowered.split("://", 1)[-1]
        host = host_of(lowered)
        for pattern in self._embed_hosts:
            if "/" in pattern:
                if location.startswith(pattern) or location.startswith(f"www.{pattern}"):
                    return True
            elif host == pattern or host.endswith(f".{pattern}"):
                return True
        return False

    def _sources(self, soup: BeautifulSoup, base_url: str) -> Iterator[Tuple[Tag, str]]:
        for element in soup.find_all(["video", "iframe"]):
            if element.name == "video":
                references = [attr_text(element, "src")]
                references.extend(attr_text(source, "src") for source in element.find_all("source"))
                for reference in references:
                    url = resolve_url(reference, base_url)
                    if url is not None:
                        yield element, url
                        break
            else:
                for name in ("src", "data-src"):
                    url = resolve_url(attr_text(element, name), base_url)
                    if url is not None and self.is_video_url(url):
                        yield element, url
                        break

    def _build(self, element: Tag, url: str, base_url: str) -> ExtractedVideo:
        platform = classify_platform(url, self._extensions)
        return ExtractedVideo(
            url=url,
            title=self._title(element),
            platform=platform,
            duration=self._duration(element),
            thumbnail=self._thumbnail(element, url, base_url, platform),
        )

    @staticmethod
    def _title(element: Tag) -> str:
        title = normalize_whitespace(attr_text(element, "title") or attr_text(element, "aria-label"))
        if title:
            return title
        figure = element.find_parent("figure")
        if isinstance(figure, Tag):
            figcaption = figure.find("figcaption")
            if isinstance(figcaption, Tag):
                return element_text(figcaption)
        return ""

    @staticmethod
    def _duration(element: Tag) -> Optional[str]:
        duration = attr_text(element, "data-duration") or attr_text(element, "duration")
        if not duration:
            meta = element.find(attrs={"itemprop": "duration"})
            if meta is None and isinstance(element.parent, Tag):
                meta = element.parent.find(attrs={"itemprop": "duration"})
            duration = attr_text(meta, "content") or attr_text(meta, "datetime")
        return duration or None

    def _thumbnail(self, element: Tag, url: str, base_url: str, platform: VideoPlatform) -> Optional[str]:
        poster = attr_text(element, "poster")
        if poster:
            return resolve_url(poster, base_url)
        if platform == VideoPlatform.youtube():
            video_id = youtube_video_id(url)
            if video_id:
                return YOUTUBE_THUMBNAIL.format(video_id=video_id)
        return None
