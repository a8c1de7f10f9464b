"""
Configuration management for PageHarvest using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class ExtractionConfig(BaseModel):
    """Tuning parameters for the extraction engine.

    The density and noise settings are heuristics; the defaults are a
    reasonable starting point rather than exact cutoffs.
    """

    parser: Literal["html.parser", "lxml", "html5lib"] = Field(
        default="html.parser", description="BeautifulSoup tree builder used to parse markup."
    )
    words_per_minute: int = Field(default=200, ge=1, description="Reading speed used for reading time.")
    min_text_length: int = Field(
        default=25, ge=0, description="Minimum normalized text length for a main-content candidate."
    )
    noise_tags: List[str] = Field(
        default=["script", "style", "noscript", "nav", "header", "footer", "aside", "template"],
        description="Elements excluded with their whole subtree from content scoring.",
    )
    noise_roles: List[str] = Field(
        default=["navigation", "banner", "contentinfo", "complementary"],
        description="ARIA landmark roles treated as non-content.",
    )
    noise_patterns: List[str] = Field(
        default=[
            "nav",
            "menu",
            "footer",
            "header",
            "sidebar",
            "advertisement",
            "comment",
            "share",
            "cookie",
            "popup",
        ],
        description="Case-insensitive substrings of class/id marking non-content elements.",
    )
    noise_tokens: List[str] = Field(
        default=["ad", "ads", "advert"],
        description="Short noise markers that must match a whole class/id token.",
    )
    container_tags: List[str] = Field(
        default=["div", "article", "section", "main", "body"],
        description="Elements scored as main-content candidates (parents of <p> are always added).",
    )
    min_main_image_size: int = Field(
        default=100, ge=0, description="Declared width/height below which an image cannot be the main image."
    )
    direct_video_extensions: List[str] = Field(
        default=[".mp4", ".webm", ".mov", ".m4v", ".ogv"],
        description="URL path suffixes classified as direct video files.",
    )
    video_embed_hosts: List[str] = Field(
        default=[
            "youtube.com",
            "youtube-nocookie.com",
            "youtu.be",
            "vimeo.com",
            "dailymotion.com",
            "dai.ly",
            "twitch.tv",
            "wistia.com",
            "wistia.net",
            "brightcove.net",
            "jwplayer.com",
            "jwplatform.com",
            "streamable.com",
            "loom.com",
            "rumble.com",
            "ted.com",
            "facebook.com/plugins/video",
            "tiktok.com/embed",
        ],
        description="Host (or host/path prefix) fragments recognised as video embeds in iframes.",
    )
    date_search_chars: int = Field(
        default=1500, ge=0, description="How much leading page text is scanned for a date-like string."
    )
    byline_search_blocks: int = Field(
        default=12, ge=0, description="Number of leading text blocks scanned for a 'By <name>' byline."
    )
    max_author_length: int = Field(default=100, ge=1, description="Longer author candidates are rejected.")
    parallel_subextractions: bool = Field(
        default=True, description="Run independent sub-extractions concurrently in extract_async()."
    )
    max_concurrency: int = Field(default=8, ge=1, description="Concurrent documents in extract_many().")

    @field_validator("noise_tags", "container_tags")
    @classmethod
    def validate_tag_list(cls, v: List[str]) -> List[str]:
        """Ensure tag lists are non-empty and lower case."""
        if not v:
            raise ValueError("tag list must contain at least one tag")
        return [tag.strip().lower() for tag in v if tag.strip()]

    @field_validator("noise_roles", "noise_patterns", "noise_tokens", "video_embed_hosts")
    @classmethod
    def lower_case_patterns(cls, v: List[str]) -> List[str]:
        return [pattern.strip().lower() for pattern in v if pattern.strip()]

    @field_validator("direct_video_extensions")
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        """Normalize extensions to a leading dot."""
        cleaned = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            cleaned.append(ext if ext.startswith(".") else f".{ext}")
        return cleaned


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    json_logs: bool = Field(default=False, description="Render JSON lines even when logging to the console.")

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "PageHarvest"
    version: str = "0.1.0"
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="PAGEHARVEST_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    paths_to_check = [
        current_dir / "pageharvest.yaml",
        current_dir / "pageharvest.yml",
    ]
    for path in paths_to_check:
        if path.exists():
            return path
    return None


def load_config(path: Path | None = None) -> Config:
    """Load configuration from ``path``, a discovered file, or defaults."""
    config_path = path or find_config_file()
    if config_path:
        log.info("Loading configuration from: %s", config_path)
        return Config.from_yaml(config_path)
    log.debug("No config file found. Using default settings.")
    return Config()
