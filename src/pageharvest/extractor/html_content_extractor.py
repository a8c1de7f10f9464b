"""
HTML content extractor: parses a page once and assembles an ExtractedContent.

Pipeline:

1. parse the markup into a read-only tree
2. locate the main content on the noise-filtered view of the tree
3. extract metadata, videos and links from the full tree
4. extract images (main-image choice needs steps 2 and 3)
5. compute word count and reading time from the main text; a page whose
   markup declares no publish date gets the first date in its main text

Steps 2 and 3 are independent; ``extract_async`` runs them concurrently on
the default thread executor. Both paths give identical results.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

import structlog
from bs4 import BeautifulSoup

from ..config.config import ExtractionConfig
from ..metadata.metadata_extractor import MetadataExtractor, MetadataResult
from ..models import ContentMetadata, ExtractedContent, ExtractedImage, ExtractedLink, ExtractedVideo
from .content_locator import ContentLocator, ContentSelection
from .images import ImageExtractor
from .links import LinkExtractor
from .metrics import ContentMetrics, calculate_metrics
from .noise_filter import NoiseFilter
from .parser import parse_html
from .videos import VideoExtractor

T = TypeVar("T")


class HTMLContentExtractor:
    """
    Extracts main text, metadata and media from HTML documents.

    An instance holds only configuration and stateless helpers, so one
    extractor can serve any number of concurrent calls. No method raises
    for string input: a sub-extraction that fails is logged and its field
    falls back to the empty value.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None, logger: Any = None) -> None:
        self.config = config or ExtractionConfig()
        self.logger = (logger or structlog.get_logger(__name__)).bind(component="HTMLContentExtractor")

        self.noise_filter = NoiseFilter(self.config)
        self.locator = ContentLocator(self.config, self.noise_filter, logger=self.logger)
        self.metadata_extractor = MetadataExtractor(self.config, self.noise_filter, logger=self.logger)
        self.image_extractor = ImageExtractor(self.config, self.noise_filter, logger=self.logger)
        self.video_extractor = VideoExtractor(self.config, logger=self.logger)
        self.link_extractor = LinkExtractor(logger=self.logger)

    def extract(self, html: str, base_url: str) -> ExtractedContent:
        """
        Extract content from one document, sequentially.

        Args:
            html: Decoded page markup (may be empty)
            base_url: Absolute URL the page was fetched from

        Returns:
            ExtractedContent
        """
        soup = self._parse(html)
        selection = self._locate(soup)
        metadata = self._metadata(soup, base_url)
        videos = self._videos(soup, base_url)
        links = self._links(soup, base_url)
        images = self._images(soup, base_url, selection, metadata)
        return self._assemble(base_url, selection, metadata, images, videos, links)

    async def extract_async(self, html: str, base_url: str) -> ExtractedContent:
        """
        Extract content from one document without blocking the event loop.

        Independent sub-extractions share the parsed tree read-only and run
        concurrently when ``parallel_subextractions`` is enabled.
        """
        loop = asyncio.get_running_loop()
        soup = await loop.run_in_executor(None, self._parse, html)

        if self.config.parallel_subextractions:
            selection, metadata, videos, links = await asyncio.gather(
                loop.run_in_executor(None, self._locate, soup),
                loop.run_in_executor(None, self._metadata, soup, base_url),
                loop.run_in_executor(None, self._videos, soup, base_url),
                loop.run_in_executor(None, self._links, soup, base_url),
            )
        else:
            selection = await loop.run_in_executor(None, self._locate, soup)
            metadata = await loop.run_in_executor(None, self._metadata, soup, base_url)
            videos = await loop.run_in_executor(None, self._videos, soup, base_url)
            links = await loop.run_in_executor(None, self._links, soup, base_url)

        images = await loop.run_in_executor(None, self._images, soup, base_url, selection, metadata)
        return self._assemble(base_url, selection, metadata, images, videos, links)

    async def extract_many(
        self,
        pages: Iterable[Tuple[str, str]],
        concurrency: Optional[int] = None,
    ) -> List[ExtractedContent]:
        """
        Extract a batch of ``(html, base_url)`` pages.

        At most ``concurrency`` (default ``max_concurrency``) documents are
        in flight at once. Results are in input order.
        """
        limit = self.config.max_concurrency if concurrency is None else concurrency
        if limit < 1:
            raise ValueError("concurrency must be at least 1")
        semaphore = asyncio.Semaphore(limit)

        async def extract_with_semaphore(html: str, base_url: str) -> ExtractedContent:
            async with semaphore:
                return await self.extract_async(html, base_url)

        page_list = list(pages)
        self.logger.info("Starting batch extraction", pages=len(page_list), concurrency=limit)
        results = await asyncio.gather(*(extract_with_semaphore(html, base_url) for html, base_url in page_list))
        self.logger.info("Batch extraction completed", pages=len(results))
        return list(results)

    # --- guarded stages ---

    def _guarded(self, stage: str, default: T, func: Callable[..., T], *args: Any) -> T:
        try:
            return func(*args)
        except Exception as e:
            self.logger.warning(
                "Sub-extraction failed, using empty value",
                stage=stage,
                error=str(e),
                error_type=type(e).__name__,
            )
            return default

    def _parse(self, html: str) -> BeautifulSoup:
        return self._guarded("parse", BeautifulSoup("", "html.parser"), parse_html, html, self.config.parser)

    def _locate(self, soup: BeautifulSoup) -> ContentSelection:
        return self._guarded("main_content", ContentSelection(), self.locator.locate, soup)

    def _metadata(self, soup: BeautifulSoup, base_url: str) -> MetadataResult:
        return self._guarded("metadata", MetadataResult(), self.metadata_extractor.extract, soup, base_url)

    def _videos(self, soup: BeautifulSoup, base_url: str) -> Tuple[ExtractedVideo, ...]:
        return self._guarded("videos", (), self.video_extractor.extract, soup, base_url)

    def _links(self, soup: BeautifulSoup, base_url: str) -> Tuple[ExtractedLink, ...]:
        return self._guarded("links", (), self.link_extractor.extract, soup, base_url)

    def _images(
        self,
        soup: BeautifulSoup,
        base_url: str,
        selection: ContentSelection,
        metadata: MetadataResult,
    ) -> Tuple[ExtractedImage, ...]:
        return self._guarded(
            "images",
            (),
            self.image_extractor.extract,
            soup,
            base_url,
            selection.element,
            metadata.image_url,
        )

    def _assemble(
        self,
        base_url: str,
        selection: ContentSelection,
        metadata: MetadataResult,
        images: Tuple[ExtractedImage, ...],
        videos: Tuple[ExtractedVideo, ...],
        links: Tuple[ExtractedLink, ...],
    ) -> ExtractedContent:
        metrics = self._guarded(
            "metrics",
            ContentMetrics(),
            calculate_metrics,
            selection.text,
            self.config.words_per_minute,
        )
        publish_date = metadata.publish_date
        if publish_date is None and selection.text:
            publish_date = self._guarded(
                "publish_date", None, self.metadata_extractor.date_from_main_text, selection.text
            )

        content = ExtractedContent(
            main_text=selection.text,
            description=metadata.description,
            metadata=ContentMetadata(
                author=metadata.author,
                publish_date=publish_date,
                language=metadata.language,
                category=metadata.category,
                tags=metadata.tags,
                word_count=metrics.word_count,
                reading_time=metrics.reading_time,
            ),
            images=images,
            videos=videos,
            links=links,
            word_count=metrics.word_count,
            reading_time=metrics.reading_time,
            title=metadata.title,
        )

        self.logger.debug(
            "Extraction completed",
            base_url=base_url,
            word_count=metrics.word_count,
            images=len(images),
            videos=len(videos),
            links=len(links),
        )
        return content


def extract(
    html: str,
    base_url: str,
    config: Optional[ExtractionConfig] = None,
    logger: Any = None,
) -> ExtractedContent:
    """Extract content from one HTML document."""
    return HTMLContentExtractor(config, logger).extract(html, base_url)
