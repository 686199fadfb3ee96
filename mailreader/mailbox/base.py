from datetime import datetime
from typing import NamedTuple, Optional, Protocol


class MailboxError(Exception):
    """Base class for mailbox transport failures."""


class MailboxConnectionError(MailboxError):
    """Connecting or authenticating failed; nothing can be scanned."""


class FolderFetchError(MailboxError):
    """One folder could not be selected or fetched."""


class Envelope(NamedTuple):
    message_id: str
    sender: str       # "Name <mailbox@host>" or "mailbox@host"
    subject: str
    date: Optional[datetime]


class RawMessage(NamedTuple):
    folder: str
    envelope: Optional[Envelope]  # None when the server sent none / it failed to parse
    body: bytes                   # full RFC 2822 message
    is_read: bool = False


class MailboxSession(Protocol):
    def list_folders(self) -> list[str]:
        ...

    def fetch_all(self, folder: str, limit: int = 0) -> list[RawMessage]:
        """Fetch every message of `folder` (or the newest `limit`); raises FolderFetchError."""
        ...

    def close(self) -> None:
        ...


def message_range(total: int, limit: int) -> Optional[tuple[int, int]]:
    """
    Inclusive sequence-number range to fetch from a folder holding `total`
    messages.  limit == 0 means everything; otherwise the newest `limit`.
    """
    if total <= 0:
        return None
    if 0 < limit < total:
        return total - limit + 1, total
    return 1, total
