"""
Content extraction engine.
"""

from .content_locator import ContentLocator, ContentSelection
from .html_content_extractor import HTMLContentExtractor, extract
from .images import ImageExtractor
from .links import LinkExtractor
from .metrics import ContentMetrics, calculate_metrics, count_words, reading_time
from .noise_filter import NoiseFilter
from .parser import parse_html
from .urls import host_of, is_external, resolve_url
from .videos import VideoExtractor, classify_platform

__all__ = [
    "ContentLocator",
    "ContentMetrics",
    "ContentSelection",
    "HTMLContentExtractor",
    "ImageExtractor",
    "LinkExtractor",
    "NoiseFilter",
    "VideoExtractor",
    "calculate_metrics",
    "classify_platform",
    "count_words",
    "extract",
    "host_of",
    "is_external",
    "parse_html",
    "reading_time",
    "resolve_url",
]
