from __future__ import annotations

from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Callable

from mailreader.mailbox.base import Envelope, FolderFetchError, RawMessage
from mailreader.store import ArticleStoreError

DATE = datetime(2026, 2, 16, 10, 0, tzinfo=timezone.utc)


def article_html(n: int, *, title: str | None = None) -> str:
    """One newsletter body holding a single valid article link."""
    title = title or f"Weekly engineering story number {n}"
    return (
        "<html><body><table><tr><td>"
        f'<a href="https://blog.example.test/posts/story-{n}?utm_source=nl">{title}</a>'
        "</td></tr></table></body></html>"
    )


def make_mime(html: str | None = None, text: str | None = None) -> bytes:
    msg = MIMEMultipart("alternative")
    msg["From"] = "Newsletter <news@example.test>"
    msg["Subject"] = "This week"
    if text is not None:
        msg.attach(MIMEText(text, "plain", "utf-8"))
    if html is not None:
        msg.attach(MIMEText(html, "html", "utf-8"))
    return msg.as_bytes()


def make_raw(
    folder: str = "INBOX",
    html: str | None = None,
    *,
    body: bytes | None = None,
    envelope: bool = True,
) -> RawMessage:
    if body is None:
        body = make_mime(html=html if html is not None else "<p>no links</p>")
    return RawMessage(
        folder=folder,
        envelope=Envelope(
            message_id="<msg@example.test>",
            sender="Newsletter <news@example.test>",
            subject="This week",
            date=DATE,
        ) if envelope else None,
        body=body,
    )


class FakeMailbox:
    """In-memory MailboxSession.  Folders listed in `failing` raise FolderFetchError."""

    def __init__(
        self,
        folders: dict[str, list[RawMessage]] | None = None,
        *,
        failing: set[str] | None = None,
    ) -> None:
        self.folders = folders or {}
        self.failing = failing or set()
        self.fetch_calls: list[tuple[str, int]] = []
        self.closed = 0

    def list_folders(self) -> list[str]:
        return list(self.folders)

    def fetch_all(self, folder: str, limit: int = 0) -> list[RawMessage]:
        self.fetch_calls.append((folder, limit))
        if folder in self.failing or folder not in self.folders:
            raise FolderFetchError(f"failed to select folder {folder}")
        messages = self.folders[folder]
        return messages[-limit:] if limit else list(messages)

    def close(self) -> None:
        self.closed += 1


class FakeStore:
    """Insert-if-absent keyed on URL, with optional per-insert hook and failures."""

    def __init__(
        self,
        *,
        fail_urls: set[str] | None = None,
        on_insert: Callable[[int], None] | None = None,
    ) -> None:
        self.rows: dict[str, dict] = {}
        self.fail_urls = fail_urls or set()
        self.on_insert = on_insert
        self.calls = 0

    def insert_if_absent(self, url, title, description, domain, sender, date, folder) -> bool:
        self.calls += 1
        if self.on_insert is not None:
            self.on_insert(self.calls)
        if url in self.fail_urls:
            raise ArticleStoreError(f"failed to index article {url}")
        if url in self.rows:
            return False
        self.rows[url] = {
            "title": title,
            "description": description,
            "domain": domain,
            "sender": sender,
            "date": date,
            "folder": folder,
        }
        return True

    def count(self) -> int:
        return len(self.rows)
