"""
Data models for extraction results.

Every entity is a frozen dataclass and every collection is a tuple or a
frozenset, so an ExtractedContent is immutable once it is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple


class PlatformKind(Enum):
    """Known video hosting platforms."""

    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    DIRECT = "direct"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class VideoPlatform:
    """
    Tagged video platform classification.

    Exactly one of the PlatformKind alternatives; ``name`` carries the host
    name and is only set for ``PlatformKind.OTHER``.
    """

    kind: PlatformKind
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is PlatformKind.OTHER and not self.name:
            raise ValueError("other platform requires a name")
        if self.kind is not PlatformKind.OTHER and self.name is not None:
            raise ValueError(f"{self.kind.value} platform takes no name")

    @classmethod
    def youtube(cls) -> VideoPlatform:
        return cls(PlatformKind.YOUTUBE)

    @classmethod
    def vimeo(cls) -> VideoPlatform:
        return cls(PlatformKind.VIMEO)

    @classmethod
    def direct(cls) -> VideoPlatform:
        return cls(PlatformKind.DIRECT)

    @classmethod
    def other(cls, name: str) -> VideoPlatform:
        return cls(PlatformKind.OTHER, name)

    def __str__(self) -> str:
        if self.kind is PlatformKind.OTHER:
            return f"other({self.name})"
        return self.kind.value


@dataclass(slots=True, frozen=True)
class ExtractedImage:
    """An image referenced by the page."""

    url: str
    alt: str = ""
    caption: str = ""
    width: Optional[int] = None
    height: Optional[int] = None
    is_main_image: bool = False


@dataclass(slots=True, frozen=True)
class ExtractedVideo:
    """A video element or recognised video embed."""

    url: str
    title: str
    platform: VideoPlatform
    duration: Optional[str] = None
    thumbnail: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ExtractedLink:
    """A resolved http(s) hyperlink."""

    url: str
    title: str = ""
    description: str = ""
    is_external: bool = False


@dataclass(slots=True, frozen=True)
class ContentMetadata:
    """Article metadata; every field is independently optional."""

    author: Optional[str] = None
    publish_date: Optional[datetime] = None
    language: Optional[str] = None
    category: Optional[str] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)
    word_count: int = 0
    reading_time: int = 1


@dataclass(slots=True, frozen=True)
class ExtractedContent:
    """Result of extracting one HTML document."""

    main_text: str
    description: str
    metadata: ContentMetadata
    images: Tuple[ExtractedImage, ...] = ()
    videos: Tuple[ExtractedVideo, ...] = ()
    links: Tuple[ExtractedLink, ...] = ()
    word_count: int = 0
    reading_time: int = 1
    title: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the result."""
        if self.word_count < 0:
            raise ValueError("word_count must be non-negative")
        if self.reading_time < 1:
            raise ValueError("reading_time must be at least 1")
        if sum(1 for image in self.images if image.is_main_image) > 1:
            raise ValueError("at most one image may be the main image")

    @property
    def main_image(self) -> Optional[ExtractedImage]:
        for image in self.images:
            if image.is_main_image:
                return image
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation."""
        meta = self.metadata
        return {
            "title": self.title,
            "main_text": self.main_text,
            "description": self.description,
            "metadata": {
                "author": meta.author,
                "publish_date": meta.publish_date.isoformat() if meta.publish_date else None,
                "language": meta.language,
                "category": meta.category,
                "tags": sorted(meta.tags),
                "word_count": meta.word_count,
                "reading_time": meta.reading_time,
            },
            "images": [
                {
                    "url": image.url,
                    "alt": image.alt,
                    "caption": image.caption,
                    "width": image.width,
                    "height": image.height,
                    "is_main_image": image.is_main_image,
                }
                for image in self.images
            ],
            "videos": [
                {
                    "url": video.url,
                    "title": video.title,
                    "duration": video.duration,
                    "thumbnail": video.thumbnail,
                    "platform": video.platform.kind.value,
                    "platform_name": video.platform.name,
                }
                for video in self.videos
            ],
            "links": [
                {
                    "url": link.url,
                    "title": link.title,
                    "description": link.description,
                    "is_external": link.is_external,
                }
                for link in self.links
            ],
            "word_count": self.word_count,
            "reading_time": self.reading_time,
        }
