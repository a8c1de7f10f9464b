"""
Main-content locator.

Scores candidate containers of the noise-filtered tree by text density,

    density = text_length / (1 + descendant_tag_count)
    score   = density * (1 - link_density)

where link_density is the share of the text that sits inside anchors. The
highest score wins; on a tie the earlier container in document order wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import structlog
from bs4 import Tag

from ..config.config import ExtractionConfig
from .noise_filter import NoiseFilter
from .parser import is_text_node

logger = structlog.get_logger(__name__)


@dataclass(slots=True, frozen=True)
class SubtreeStats:
    """Aggregated counts for one filtered subtree."""

    chars: int = 0  # non-whitespace characters
    tokens: int = 0  # whitespace-delimited tokens
    tags: int = 0  # descendant elements
    link_chars: int = 0  # text length inside anchors

    @property
    def text_length(self) -> int:
        # Length of the whitespace-normalized text: characters plus one
        # separating space between consecutive tokens.
        return self.chars + max(0, self.tokens - 1)

    @property
    def link_density(self) -> float:
        length = self.text_length
        if length == 0:
            return 0.0
        return min(1.0, self.link_chars / length)

    @property
    def density(self) -> float:
        return self.text_length / (1 + self.tags)

    @property
    def score(self) -> float:
        return self.density * (1.0 - self.link_density)


@dataclass(slots=True, frozen=True)
class ContentSelection:
    """The container chosen as main content."""

    element: Optional[Tag] = None
    text: str = ""
    score: float = 0.0

    @property
    def found(self) -> bool:
        return self.element is not None


class ContentLocator:
    """Selects the main-content container of a parsed document."""

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        noise_filter: Optional[NoiseFilter] = None,
        logger: Any = None,
    ) -> None:
        self.config = config or ExtractionConfig()
        self.noise_filter = noise_filter or NoiseFilter(self.config)
        self.logger = (logger or structlog.get_logger(__name__)).bind(component="ContentLocator")
        self._container_tags = frozenset(self.config.container_tags)

    def locate(self, root: Tag) -> ContentSelection:
        """
        Find the best main-content container under ``root``.

        Args:
            root: Parsed document (or any subtree of it)

        Returns:
            ContentSelection; empty when no candidate reaches min_text_length
        """
        stats, order = self._collect_stats(root)

        best: Optional[Tag] = None
        best_score = 0.0
        candidates = 0
        for element in self._candidates(order):
            element_stats = stats[id(element)]
            if element_stats.text_length < self.config.min_text_length:
                continue
            candidates += 1
            score = element_stats.score
            if score > best_score:
                best, best_score = element, score

        if best is None:
            self.logger.debug("No main-content candidate above threshold", candidates=candidates)
            return ContentSelection()

        text = self.noise_filter.text(best)
        self.logger.debug(
            "Main content selected",
            tag=best.name,
            score=round(best_score, 3),
            candidates=candidates,
            text_length=len(text),
        )
        return ContentSelection(element=best, text=text, score=best_score)

    def _candidates(self, order: List[Tag]) -> List[Tag]:
        """Container elements plus the parents of paragraphs, in document order."""
        selected: Dict[int, Tag] = {}
        for element in order:
            if element.name in self._container_tags:
                selected[id(element)] = element
            if element.name == "p" and isinstance(element.parent, Tag):
                selected.setdefault(id(element.parent), element.parent)
        positions = {id(element): index for index, element in enumerate(order)}
        return sorted(selected.values(), key=lambda element: positions.get(id(element), -1))

    def _collect_stats(self, root: Tag) -> Tuple[Dict[int, SubtreeStats], List[Tag]]:
        """
        Compute SubtreeStats for every non-noise element in one post-order pass.

        Returns the stats keyed by ``id(element)`` and the elements in
        document order (``root`` first).
        """
        stats: Dict[int, SubtreeStats] = {}
        order: List[Tag] = []
        stack: List[Tuple[Tag, bool]] = [(root, False)]

        while stack:
            element, visited = stack.pop()
            if not visited:
                order.append(element)
                stack.append((element, True))
                children = [
                    child
                    for child in element.children
                    if isinstance(child, Tag) and not self.noise_filter.is_noise(child)
                ]
                stack.extend((child, False) for child in reversed(children))
                continue

            chars = tokens = tags = link_chars = 0
            for child in element.children:
                if isinstance(child, Tag):
                    child_stats = stats.get(id(child))
                    if child_stats is None:  # noise subtree
                        continue
                    chars += child_stats.chars
                    tokens += child_stats.tokens
                    tags += 1 + child_stats.tags
                    if child.name == "a":
                        link_chars += child_stats.text_length
                    else:
                        link_chars += child_stats.link_chars
                elif is_text_node(child):
                    words = str(child).split()
                    chars += sum(len(word) for word in words)
                    tokens += len(words)
            stats[id(element)] = SubtreeStats(chars=chars, tokens=tokens, tags=tags, link_chars=link_chars)

        return stats, order
