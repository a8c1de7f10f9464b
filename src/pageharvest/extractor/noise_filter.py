"""
Noise filter: decides which subtrees are navigation, ads or boilerplate.

The filter is a predicate over the parsed tree, not a transformation of
it. Extractors pass ``is_noise`` as the ``exclude`` callback of the
parser's walkers, so the shared tree is never modified.
"""

from __future__ import annotations

import re
from typing import Optional

from bs4 import Tag

from ..config.config import ExtractionConfig
from .parser import attr_text, element_text

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")

# Never dropped, whatever their class or id says.
_PROTECTED_TAGS = frozenset({"html", "body", "main", "[document]"})


class NoiseFilter:
    """Structural, non-destructive filter for non-content elements."""

    def __init__(self, config: Optional[ExtractionConfig] = None) -> None:
        self.config = config or ExtractionConfig()
        self._noise_tags = frozenset(self.config.noise_tags)
        self._noise_roles = frozenset(self.config.noise_roles)
        self._noise_patterns = tuple(self.config.noise_patterns)
        self._noise_tokens = frozenset(self.config.noise_tokens)

    def is_noise(self, tag: Tag) -> bool:
        """True when ``tag`` itself marks a non-content subtree."""
        name = tag.name or ""
        if name in _PROTECTED_TAGS:
            return False
        if name in self._noise_tags:
            return True

        role = attr_text(tag, "role").lower()
        if role and role in self._noise_roles:
            return True

        markers = f"{attr_text(tag, 'class')} {attr_text(tag, 'id')}".lower().strip()
        if not markers:
            return False
        if any(pattern in markers for pattern in self._noise_patterns):
            return True
        tokens = set(_TOKEN_SPLIT.split(markers))
        return not tokens.isdisjoint(self._noise_tokens)

    def is_excluded(self, tag: Tag) -> bool:
        """True when ``tag`` or any of its ancestors is noise."""
        if self.is_noise(tag):
            return True
        return any(isinstance(parent, Tag) and self.is_noise(parent) for parent in tag.parents)

    def text(self, root: Tag) -> str:
        """Flattened, whitespace-normalized content text of ``root``."""
        return element_text(root, self.is_noise)
