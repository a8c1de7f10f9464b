"""
PageHarvest - main-content, metadata and media extraction for HTML pages.
"""

__version__ = "0.1.0"

from .config import Config, ExtractionConfig, LoggingConfig, load_config
from .extractor import HTMLContentExtractor, extract
from .models import (
    ContentMetadata,
    ExtractedContent,
    ExtractedImage,
    ExtractedLink,
    ExtractedVideo,
    PlatformKind,
    VideoPlatform,
)
from .observability import configure_logging

__all__ = [
    "Config",
    "ContentMetadata",
    "ExtractedContent",
    "ExtractedImage",
    "ExtractedLink",
    "ExtractedVideo",
    "ExtractionConfig",
    "HTMLContentExtractor",
    "LoggingConfig",
    "PlatformKind",
    "VideoPlatform",
    "configure_logging",
    "extract",
    "load_config",
    "__version__",
]
