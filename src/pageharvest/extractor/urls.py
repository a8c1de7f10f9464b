"""
URL resolution helpers shared by the media and link extractors.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlsplit

_HTTP_SCHEMES = ("http", "https")


def resolve_url(reference: str, base_url: str) -> Optional[str]:
    """Resolve ``reference`` against ``base_url``.

    Absolute http(s) URLs pass through unchanged; scheme-relative and
    path-relative references are resolved with standard RFC 3986 rules.

    Returns:
        An absolute http(s) URL with a host, or None when the reference
        cannot be turned into one (bad base, other scheme, garbage input).
    """
    reference = (reference or "").strip()
    if not reference:
        return None
    # Browsers ignore embedded tabs and newlines inside URLs.
    reference = reference.replace("\t", "").replace("\n", "").replace("\r", "")

    try:
        if is_absolute_http(reference):
            return reference
        resolved = urljoin(base_url or "", reference)
    except ValueError:
        return None

    return resolved if is_absolute_http(resolved) else None


def is_absolute_http(url: str) -> bool:
    """True for ``http``/``https`` URLs that carry a host."""
    try:
        parts = urlsplit(url)
        return parts.scheme.lower() in _HTTP_SCHEMES and bool(parts.hostname)
    except ValueError:
        return False


def host_of(url: str) -> str:
    """Lower-cased host name of ``url`` ('' when there is none)."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def is_external(url: str, base_url: str) -> bool:
    """True when ``url`` is on a different host than ``base_url``.

    Hosts are compared exactly (case-insensitively), so a different
    subdomain counts as external.
    """
    return host_of(url) != host_of(base_url)
