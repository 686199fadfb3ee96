"""Folder walker: one mailbox folder → lazily normalized messages."""

import logging
from datetime import datetime
from typing import Iterator, NamedTuple, Optional

from mailreader.extraction.links import ExtractedLink
from mailreader.extraction.normalizer import normalize
from mailreader.extraction.rules import ExtractionRules
from mailreader.mailbox.base import MailboxSession, RawMessage

logger = logging.getLogger(__name__)


class NormalizedMessage(NamedTuple):
    sender: str
    subject: str
    date: Optional[datetime]
    folder: str
    body: str
    links: list[ExtractedLink]


class FolderWalk:
    """
    Single-pass iterator over the messages fetched from one folder.

    The fetch has already happened; MIME parsing and link extraction run
    only as each message is consumed.  len() is the number of messages that
    will be yielded.
    """

    def __init__(
        self,
        folder: str,
        raw_messages: list[RawMessage],
        rules: Optional[ExtractionRules] = None,
    ) -> None:
        self.folder = folder
        self._pending = [m for m in raw_messages if m.envelope is not None]
        self.skipped = len(raw_messages) - len(self._pending)
        self._rules = rules
        self._messages = self._normalized()

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[NormalizedMessage]:
        return self._messages

    def _normalized(self) -> Iterator[NormalizedMessage]:
        for raw in self._pending:
            envelope = raw.envelope
            body, links = normalize(raw.body, self._rules)
            yield NormalizedMessage(
                sender=envelope.sender,
                subject=envelope.subject,
                date=envelope.date,
                folder=self.folder,
                body=body,
                links=links,
            )


def walk(
    session: MailboxSession,
    folder: str,
    limit: int = 0,
    rules: Optional[ExtractionRules] = None,
) -> FolderWalk:
    """Fetch `folder` (newest `limit` messages, 0 = all); raises FolderFetchError."""
    raw_messages = session.fetch_all(folder, limit)
    messages = FolderWalk(folder, raw_messages, rules)
    if messages.skipped:
        logger.debug("walker: %d messages without envelope skipped in %s", messages.skipped, folder)
    logger.info("walker: fetched %d messages from folder %s", len(messages), folder)
    return messages
