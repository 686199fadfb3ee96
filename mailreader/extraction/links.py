"""
Link extractor: newsletter HTML → ordered, deduplicated article links.

Pure and side-effect free.  Body content is never logged.
"""

import logging
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, Tag

from mailreader.extraction.rules import ExtractionRules, default_rules
from mailreader.extraction.titles import TitleContext, is_valid_title, resolve_title
from mailreader.extraction.urls import ALLOWED_SCHEMES, is_ignorable, normalize_url

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 300


class ExtractedLink(NamedTuple):
    url: str          # canonical, deduplication key
    title: str
    description: str
    domain: str
    position: int     # 0-based order among the links kept for this body


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _description(anchor: Tag) -> str:
    """Text of a <p> directly following the anchor's container, if any."""
    parent = anchor.parent
    if parent is None:
        return ""
    sibling = parent.find_next_sibling()
    if sibling is None or sibling.name != "p":
        return ""
    return _truncate(sibling.get_text().strip(), MAX_DESCRIPTION_LENGTH)


def extract_links(html: str, rules: Optional[ExtractionRules] = None) -> list[ExtractedLink]:
    rules = rules or default_rules()
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as exc:  # noqa: BLE001
        logger.debug("link extraction: HTML parse failed — %s", type(exc).__name__)
        return []

    links: list[ExtractedLink] = []
    seen: set[str] = set()

    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        # Padded hrefs are common in templated newsletters
        href = href.strip()
        if not href:
            continue
        if is_ignorable(href, rules.ignored_patterns):
            continue

        try:
            parsed = urlsplit(href)
            url = normalize_url(href, rules.tracking_params)
        except ValueError:
            continue
        if parsed.scheme not in ALLOWED_SCHEMES:
            continue

        if url in seen:
            continue
        seen.add(url)

        title = resolve_title(TitleContext(anchor, href, parsed, rules))
        if not is_valid_title(title):
            continue

        links.append(
            ExtractedLink(
                url=url,
                title=_truncate(title, MAX_TITLE_LENGTH),
                description=_description(anchor),
                domain=parsed.hostname or "",
                position=len(links),
            )
        )

    return links
