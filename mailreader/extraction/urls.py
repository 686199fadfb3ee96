"""URL filtering and canonicalisation for links found in newsletter bodies."""

from typing import Iterable, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from mailreader.extraction.rules import default_rules

MIN_HREF_LENGTH = 10
ALLOWED_SCHEMES = frozenset({"http", "https"})


def is_ignorable(href: str, patterns: Optional[Iterable[str]] = None) -> bool:
    """True for in-page anchors, very short hrefs and boilerplate endpoints."""
    if patterns is None:
        patterns = default_rules().ignored_patterns
    if href.startswith("#") or len(href) < MIN_HREF_LENGTH:
        return True
    lowered = href.lower()
    return any(p.lower() in lowered for p in patterns)


def normalize_url(url: str, tracking_params: Optional[Iterable[str]] = None) -> str:
    """
    Canonical form of `url`: tracking parameters removed, remaining parameters
    ordered by name, fragment dropped, one trailing slash stripped from the path.

    >>> normalize_url("https://x.com/a?utm_source=nl&id=5#frag")
    'https://x.com/a?id=5'
    """
    params = (
        default_rules().tracking_params
        if tracking_params is None
        else frozenset(tracking_params)
    )
    parts = urlsplit(url.strip())
    kept = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in params
    ]
    # sorted() is stable: repeated keys keep their relative order
    kept.sort(key=lambda pair: pair[0])
    path = parts.path[:-1] if parts.path.endswith("/") else parts.path
    return urlunsplit((parts.scheme, parts.netloc, path, urlencode(kept), ""))
