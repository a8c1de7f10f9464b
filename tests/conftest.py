"""
Test configuration for PageHarvest.

Provides sample documents and pre-built extractor components shared by the
unit and property tests.
"""

import pytest
import structlog
from bs4 import BeautifulSoup

from pageharvest.config import ExtractionConfig
from pageharvest.extractor import HTMLContentExtractor, NoiseFilter
from pageharvest.extractor.parser import parse_html

BASE_URL = "https://example.com/blog/post"

ARTICLE_HTML = """<!DOCTYPE html>
<html lang="en-us">
<head>
  <title>Fallback Title | Example Blog</title>
  <meta property="og:title" content="Understanding Tide Pools">
  <meta property="og:description" content="A field guide to the life between the tides.">
  <meta property="og:image" content="/media/tidepool-hero.jpg">
  <meta property="article:published_time" content="2023-06-14T09:30:00+02:00">
  <meta property="article:section" content="Nature">
  <meta property="article:tag" content="ocean">
  <meta property="article:tag" content="biology">
  <meta name="author" content="Marina Lopez">
  <meta name="keywords" content="ignored, because, article tags win">
</head>
<body>
  <header class="site-header">
    <nav>
      <a href="/">Home</a> <a href="/about">About</a> <a href="/contact">Contact</a>
    </nav>
  </header>
  <article>
    <h1>Understanding Tide Pools</h1>
    <p>Tide pools form where the ocean retreats twice a day and leaves small basins of water behind
    among the rocks. The animals living there have adapted to constant change.</p>
    <figure>
      <img src="/media/anemone.jpg" alt="Green anemone" width="800" height="600">
      <figcaption>A green anemone at low tide.</figcaption>
    </figure>
    <p>Anemones, sea stars and hermit crabs share the pools with algae and tiny fish. Read the
    <a href="https://marine.example.org/guide">marine guide</a> for species lists.</p>
    <iframe src="https://www.youtube.com/embed/abc123XYZ" title="Tide pool walk"></iframe>
  </article>
  <aside class="sidebar">
    <a href="/popular">Popular posts</a>
    <img src="/media/ad-banner.gif" width="300" height="250">
  </aside>
  <footer class="site-footer"><a href="mailto:hello@example.com">Email us</a></footer>
</body>
</html>
"""


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: End-to-end extraction tests")
    config.addinivalue_line("markers", "property: Hypothesis property-based tests")


@pytest.fixture
def config() -> ExtractionConfig:
    return ExtractionConfig()


@pytest.fixture
def noise_filter(config: ExtractionConfig) -> NoiseFilter:
    return NoiseFilter(config)


@pytest.fixture
def logger():
    """A structlog logger that discards output."""
    return structlog.wrap_logger(structlog.ReturnLogger())


@pytest.fixture
def extractor(config: ExtractionConfig, logger) -> HTMLContentExtractor:
    return HTMLContentExtractor(config, logger=logger)


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def article_html() -> str:
    return ARTICLE_HTML


@pytest.fixture
def article_soup() -> BeautifulSoup:
    return parse_html(ARTICLE_HTML)


@pytest.fixture
def make_soup():
    """Parse a markup snippet with the default parser."""
    return parse_html
