"""
IMAP transport built on imapclient.

Folders are selected read-only and bodies fetched with BODY.PEEK[] so a scan
never marks newsletters as read.  Library and socket errors are translated
into MailboxError subclasses; callers never see imapclient exceptions.
"""

import logging
from dataclasses import dataclass
from datetime import timezone
from email.header import decode_header, make_header
from typing import Any, Optional

from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientError

from mailreader.core.config import settings
from mailreader.mailbox.base import (
    Envelope,
    FolderFetchError,
    MailboxConnectionError,
    RawMessage,
    message_range,
)

logger = logging.getLogger(__name__)

_FETCH_ITEMS = ["ENVELOPE", "FLAGS", "BODY.PEEK[]"]
_SEEN = b"\\Seen"


@dataclass(frozen=True)
class MailboxCredentials:
    user: str
    password: str
    host: str = "imap.gmail.com"
    port: int = 993
    ssl: bool = True


def credentials_from_settings() -> MailboxCredentials:
    return MailboxCredentials(
        user=settings.IMAP_USER,
        password=settings.IMAP_PASSWORD,
        host=settings.IMAP_HOST,
        port=settings.IMAP_PORT,
        ssl=settings.IMAP_SSL,
    )


# ── envelope decoding ──────────────────────────────────────────────────────────

def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    try:
        return str(make_header(decode_header(value))).strip()
    except (LookupError, UnicodeError, ValueError):
        return value.strip()


def _format_sender(addresses: Any) -> str:
    if not addresses:
        return ""
    first = addresses[0]
    address = f"{_text(first.mailbox)}@{_text(first.host)}"
    name = _text(first.name)
    return f"{name} <{address}>" if name else address


def _envelope(raw: Any) -> Optional[Envelope]:
    if raw is None:
        return None
    try:
        date = raw.date
        if date is not None and date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        return Envelope(
            message_id=_text(raw.message_id).strip("<>"),
            sender=_format_sender(raw.from_),
            subject=_text(raw.subject),
            date=date,
        )
    except (AttributeError, IndexError, TypeError):
        return None


# ── session ────────────────────────────────────────────────────────────────────

class ImapMailbox:
    """One authenticated IMAP connection.  Not thread-safe; owned by one caller."""

    def __init__(self, client: IMAPClient, user: str = "") -> None:
        self._client = client
        self._user = user

    def list_folders(self) -> list[str]:
        try:
            folders = [name for _flags, _delim, name in self._client.list_folders()]
        except (IMAPClientError, OSError) as exc:
            raise FolderFetchError(f"failed to list folders: {exc}") from exc
        logger.info("imap: found %d folders", len(folders))
        return folders

    def fetch_all(self, folder: str, limit: int = 0) -> list[RawMessage]:
        try:
            info = self._client.select_folder(folder, readonly=True)
        except (IMAPClientError, OSError) as exc:
            raise FolderFetchError(f"failed to select folder {folder}: {exc}") from exc

        total = int(info.get(b"EXISTS", 0))
        span = message_range(total, limit)
        if span is None:
            logger.info("imap: no messages in folder %s", folder)
            return []

        first, last = span
        logger.info(
            "imap: fetching messages %d:%d from folder %s (total: %d)",
            first, last, folder, total,
        )
        try:
            response = self._client.fetch(f"{first}:{last}", _FETCH_ITEMS)
        except (IMAPClientError, OSError) as exc:
            raise FolderFetchError(f"failed to fetch messages from {folder}: {exc}") from exc

        messages: list[RawMessage] = []
        for seq in sorted(response):
            data = response[seq]
            messages.append(
                RawMessage(
                    folder=folder,
                    envelope=_envelope(data.get(b"ENVELOPE")),
                    body=data.get(b"BODY[]") or b"",
                    is_read=_SEEN in (data.get(b"FLAGS") or ()),
                )
            )
        return messages

    def close(self) -> None:
        try:
            self._client.logout()
        except (IMAPClientError, OSError) as exc:
            logger.warning("imap: logout failed for %s — %s", self._user, exc)


def connect(credentials: MailboxCredentials) -> ImapMailbox:
    """Open and authenticate a connection; raises MailboxConnectionError."""
    logger.info("imap: connecting to %s:%s as %s", credentials.host, credentials.port, credentials.user)
    try:
        # Sequence numbers, not UIDs: ranges are computed from EXISTS
        client = IMAPClient(credentials.host, port=credentials.port, ssl=credentials.ssl, use_uid=False)
    except (IMAPClientError, OSError) as exc:
        raise MailboxConnectionError(f"failed to connect to IMAP: {exc}") from exc

    try:
        client.login(credentials.user, credentials.password)
    except (IMAPClientError, OSError) as exc:
        try:
            client.logout()
        except (IMAPClientError, OSError) as logout_exc:
            logger.debug("imap: logout after failed login also failed — %s", logout_exc)
        raise MailboxConnectionError(f"failed to authenticate: {exc}") from exc

    logger.info("imap: authenticated as %s", credentials.user)
    return ImapMailbox(client, credentials.user)
