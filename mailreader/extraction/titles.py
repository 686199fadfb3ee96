"""
Title resolution for extracted links.

Newsletters rarely put a usable title in the anchor itself, so a title is
looked for in a fixed order of places.  Each strategy returns a cleaned
candidate or None; the first candidate that passes `is_candidate` wins and
the raw href is the last resort.
"""

import re
from typing import Callable, NamedTuple, Optional
from urllib.parse import SplitResult, urlsplit

from bs4 import Tag

from mailreader.extraction.rules import ExtractionRules

MIN_TITLE_LENGTH = 20
MAX_ANCESTOR_DEPTH = 5

ANCESTOR_HEADINGS = ["h1", "h2", "h3", "h4", "strong"]
DESCENDANT_HEADINGS = ["h1", "h2", "h3", "h4", "h5", "strong", "b", "span", "p"]

_WHITESPACE = re.compile(r"[\n\r\t]")
_SPACES = re.compile(r" {2,}")
_TRAILING_HEX_ID = re.compile(r"[-_][a-f0-9]{8,}$")


class TitleContext(NamedTuple):
    anchor: Tag
    href: str
    url: SplitResult
    rules: ExtractionRules


# ── candidate checks ───────────────────────────────────────────────────────────

def clean_title(text: Optional[str]) -> str:
    if not text:
        return ""
    return _SPACES.sub(" ", _WHITESPACE.sub(" ", text)).strip()


def is_candidate(text: str, href: str) -> bool:
    """A usable title candidate: some letters, not a URL, not the href itself."""
    if not text or text == href:
        return False
    if text.startswith(("http://", "https://")):
        return False
    if len(text) < 3:
        return False
    return any(("a" <= c <= "z") or ("A" <= c <= "Z") or ord(c) > 127 for c in text)


def is_valid_title(title: str) -> bool:
    """Acceptance gate for a resolved title: long enough and capitalised."""
    return len(title) >= MIN_TITLE_LENGTH and title[0].isupper()


# ── URL slug helpers ───────────────────────────────────────────────────────────

def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def _path_parts(href: str) -> Optional[tuple[SplitResult, list[str]]]:
    try:
        parsed = urlsplit(href)
    except ValueError:
        return None
    return parsed, parsed.path.strip("/").split("/")


def title_from_long_form_url(href: str) -> str:
    """
    Slug of a long-form platform URL, e.g.
    /@author/why-rust-is-eating-the-world-3f2a9c1b7d0e → "Why Rust Is Eating The World".
    """
    split = _path_parts(href)
    if split is None:
        return ""
    _, parts = split
    slug = parts[-1]
    # /p/<id> and other short tails carry no words
    if (slug == "p" or len(slug) < 10) and len(parts) > 1:
        slug = parts[-2]

    idx = slug.rfind("-")
    if idx > 0 and len(slug) - idx <= 13:
        slug = slug[:idx]

    return " ".join(_capitalize(w) for w in slug.split("-"))


def title_from_url(href: str) -> str:
    """Generic slug title; the host name when the path is empty."""
    split = _path_parts(href)
    if split is None:
        return href
    parsed, parts = split
    if parts == [""]:
        return parsed.netloc

    slug = parts[-1]
    idx = slug.rfind(".")
    if idx > 0:
        slug = slug[:idx]
    slug = _TRAILING_HEX_ID.sub("", slug)
    slug = slug.replace("-", " ").replace("_", " ")

    title = " ".join(_capitalize(w) for w in slug.split())
    return title or parsed.netloc


# ── strategies ─────────────────────────────────────────────────────────────────

def from_long_form_slug(ctx: TitleContext) -> Optional[str]:
    host = (ctx.url.hostname or "").lower()
    if not any(h in host for h in ctx.rules.long_form_hosts):
        return None
    return clean_title(title_from_long_form_url(ctx.href))


def from_ancestor_headings(ctx: TitleContext) -> Optional[str]:
    """Longest heading-like text at the nearest ancestor level that has one."""
    node = ctx.anchor.parent
    depth = 0
    while node is not None and depth < MAX_ANCESTOR_DEPTH:
        found = [
            text
            for text in (clean_title(h.get_text()) for h in node.find_all(ANCESTOR_HEADINGS))
            if is_candidate(text, ctx.href)
        ]
        if found:
            return max(found, key=len)
        node = node.parent
        depth += 1
    return None


def from_anchor_text(ctx: TitleContext) -> Optional[str]:
    return clean_title(ctx.anchor.get_text())


def from_descendants(ctx: TitleContext) -> Optional[str]:
    for child in ctx.anchor.find_all(DESCENDANT_HEADINGS):
        text = clean_title(child.get_text())
        if is_candidate(text, ctx.href):
            return text
    return None


def from_title_attribute(ctx: TitleContext) -> Optional[str]:
    return clean_title(ctx.anchor.get("title"))


def from_image_alt(ctx: TitleContext) -> Optional[str]:
    img = ctx.anchor.find("img")
    if img is None:
        return None
    return clean_title(img.get("alt"))


def from_url_slug(ctx: TitleContext) -> Optional[str]:
    return title_from_url(ctx.href)


TITLE_STRATEGIES: list[Callable[[TitleContext], Optional[str]]] = [
    from_long_form_slug,
    from_ancestor_headings,
    from_anchor_text,
    from_descendants,
    from_title_attribute,
    from_image_alt,
    from_url_slug,
]


def resolve_title(ctx: TitleContext) -> str:
    for strategy in TITLE_STRATEGIES:
        candidate = strategy(ctx)
        if candidate and is_candidate(candidate, ctx.href):
            return candidate
    return ctx.href
