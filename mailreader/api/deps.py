"""Process-wide collaborators, injected into endpoints via Depends()."""

from functools import lru_cache
from typing import Callable

from mailreader.db.session import get_engine
from mailreader.mailbox.base import MailboxSession
from mailreader.mailbox.imap import connect, credentials_from_settings
from mailreader.scanner.orchestrator import ScanOrchestrator
from mailreader.store import ArticleStore


def connect_mailbox() -> MailboxSession:
    return connect(credentials_from_settings())


def get_mailbox_connector() -> Callable[[], MailboxSession]:
    return connect_mailbox


@lru_cache(maxsize=1)
def get_store() -> ArticleStore:
    return ArticleStore(get_engine())


@lru_cache(maxsize=1)
def get_orchestrator() -> ScanOrchestrator:
    # One orchestrator per process so only one scan can run
    return ScanOrchestrator(connect=connect_mailbox, store=get_store())
