"""
Tolerant HTML parsing on top of BeautifulSoup.

parse_html() never raises: unknown tags become generic elements, unclosed
tags are closed by the tree builder, and malformed attributes are dropped
one by one. The returned tree is treated as read-only by every extractor.
"""

from __future__ import annotations

import re
import warnings
from typing import Any, Callable, Iterator, List, Optional, Tuple

import structlog
from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.builder import ParserRejectedMarkup
from bs4.element import PreformattedString

logger = structlog.get_logger(__name__)

# Attribute names HTML does not allow: empty, or containing quotes,
# angle brackets, '=', '/' or whitespace.
_VALID_ATTRIBUTE = re.compile(r"^[^\s\"'<>/=]+$")

_DECLARATION_PATTERN = re.compile(r"<![^>]*>|<\?[^>]*>")

# Elements whose boundaries separate words when text is flattened.
BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "br",
        "caption",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "html",
        "img",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)


def parse_html(html: Optional[str], parser: str = "html.parser") -> BeautifulSoup:
    """Parse raw markup into a BeautifulSoup tree.

    Args:
        html: Decoded page markup; None and empty strings give an empty tree
        parser: BeautifulSoup tree builder name

    Returns:
        Parsed document. Never raises for string input.
    """
    if not html or not html.strip():
        return BeautifulSoup("", parser)

    soup = _build(html, parser)
    if soup is None:
        # Some builders choke on odd declarations; retry without them.
        stripped = _DECLARATION_PATTERN.sub("", html)
        soup = _build(stripped, parser)
    if soup is None:
        logger.warning("Markup rejected by parser, using empty document", parser=parser, html_length=len(html))
        return BeautifulSoup("", parser)

    dropped = _drop_malformed_attributes(soup)
    if dropped:
        logger.debug("Dropped malformed attributes", count=dropped)
    return soup


def _build(html: str, parser: str) -> Optional[BeautifulSoup]:
    try:
        with warnings.catch_warnings():
            # bs4 warns when markup looks like a URL or file name.
            warnings.simplefilter("ignore")
            return BeautifulSoup(html, parser)
    except (ParserRejectedMarkup, AssertionError, ValueError) as e:
        logger.debug("Parser rejected markup", parser=parser, error=str(e), error_type=type(e).__name__)
        return None


def _drop_malformed_attributes(soup: BeautifulSoup) -> int:
    dropped = 0
    for tag in soup.find_all(True):
        bad = [name for name in tag.attrs if not _VALID_ATTRIBUTE.match(name or "")]
        for name in bad:
            del tag.attrs[name]
            dropped += 1
    return dropped


def attr_text(tag: Any, name: str) -> str:
    """Return an attribute as a stripped string ('' when missing).

    Multi-valued attributes such as ``class`` are joined with spaces.
    """
    if not isinstance(tag, Tag):
        return ""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value).strip()
    return str(value).strip()


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return " ".join(text.split())


def is_text_node(node: Any) -> bool:
    """True for visible character data (not comments, doctypes or CDATA)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def iter_text(root: Tag, exclude: Optional[Callable[[Tag], bool]] = None) -> Iterator[str]:
    """Yield the text fragments under ``root`` in document order.

    Subtrees whose root satisfies ``exclude`` are skipped entirely. A single
    space is emitted around block-level elements so flattened text keeps
    word boundaries. Iterative, so deeply nested markup cannot exhaust the
    recursion limit.
    """
    stack: List[Tuple[Tag, Iterator[Any]]] = [(root, iter(root.children))]
    while stack:
        parent, children = stack[-1]
        node = next(children, None)
        if node is None:
            stack.pop()
            if parent.name in BLOCK_TAGS:
                yield " "
            continue
        if isinstance(node, Tag):
            if exclude is not None and exclude(node):
                continue
            if node.name in BLOCK_TAGS:
                yield " "
            stack.append((node, iter(node.children)))
        elif is_text_node(node):
            yield str(node)


def element_text(root: Tag, exclude: Optional[Callable[[Tag], bool]] = None) -> str:
    """Flattened, whitespace-normalized text of ``root``."""
    return normalize_whitespace("".join(iter_text(root, exclude)))


def iter_elements(root: Tag, exclude: Optional[Callable[[Tag], bool]] = None) -> Iterator[Tag]:
    """Yield descendant elements of ``root`` in document order, pruning excluded subtrees."""
    stack: List[Iterator[Any]] = [iter(root.children)]
    while stack:
        node = next(stack[-1], None)
        if node is None:
            stack.pop()
            continue
        if not isinstance(node, Tag):
            continue
        if exclude is not None and exclude(node):
            continue
        yield node
        stack.append(iter(node.children))


def is_descendant(tag: Tag, ancestor: Optional[Tag]) -> bool:
    """Identity-based ancestry check (bs4 ``==`` compares markup, not nodes)."""
    if ancestor is None:
        return False
    return any(parent is ancestor for parent in tag.parents)
