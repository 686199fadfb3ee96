"""
Message normalizer: raw RFC 2822 bytes → best textual body + extracted links.

Preference order: first text/html part, then first text/plain part, then the
raw bytes.  Malformed MIME never raises; the chosen text is always handed to
the link extractor so every message gets a best-effort pass.
"""

import logging
from email import message_from_bytes
from email.message import Message
from email.policy import compat32
from typing import Optional

from mailreader.extraction.links import ExtractedLink, extract_links
from mailreader.extraction.rules import ExtractionRules

logger = logging.getLogger(__name__)
# Prevent the email stdlib from leaking content into log records
logging.getLogger("email").setLevel(logging.WARNING)

_TEXT_TYPES = ("text/html", "text/plain")


def _decode(part: Message) -> Optional[str]:
    try:
        payload = part.get_payload(decode=True)
    except (TypeError, ValueError):
        return None
    if not payload or not isinstance(payload, bytes):
        return None
    charset = part.get_content_charset() or "utf-8"
    try:
        return payload.decode(charset, errors="replace")
    except LookupError:
        # Unknown charset label
        return payload.decode("utf-8", errors="replace")


def _from_multipart(msg: Message) -> Optional[str]:
    found: dict[str, str] = {}
    for part in msg.walk():
        if part.is_multipart():
            continue
        if (part.get_content_disposition() or "").lower() == "attachment":
            continue
        ct = part.get_content_type()
        if ct in _TEXT_TYPES and ct not in found:
            text = _decode(part)
            if text:
                found[ct] = text
    return found.get("text/html") or found.get("text/plain")


def _from_single(msg: Message) -> Optional[str]:
    if msg.get_content_type() not in _TEXT_TYPES:
        return None
    return _decode(msg)


def select_body(raw: bytes) -> str:
    try:
        msg = message_from_bytes(raw, policy=compat32)
    except Exception as exc:  # noqa: BLE001
        logger.debug("normalizer: MIME parse failed — %s", type(exc).__name__)
        msg = None

    text: Optional[str] = None
    if msg is not None:
        text = _from_multipart(msg) if msg.is_multipart() else _from_single(msg)
    if text is None:
        text = raw.decode("utf-8", errors="replace")
    return text


def normalize(
    raw: bytes, rules: Optional[ExtractionRules] = None
) -> tuple[str, list[ExtractedLink]]:
    text = select_body(raw)
    return text, extract_links(text, rules)
