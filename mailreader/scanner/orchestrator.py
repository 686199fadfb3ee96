"""
Scan orchestrator.

Runs one background thread per scan that walks the requested folders in
order, persists every extracted link and keeps ScanState current.  Only one
scan may run at a time; cancellation is cooperative and observed at folder
boundaries and every CANCEL_CHECK_INTERVAL messages.

Failure handling:
- connection failure      → status=error, nothing scanned
- folder fetch failure    → logged, folder skipped, scan continues
- article insert failure  → logged, article skipped
- cancellation            → status=cancelled (not an error)

Body content is NEVER logged; only metadata (folders, counts, URLs) appears in logs.
"""

import logging
import threading
from typing import Callable, Optional, Protocol, Sequence

from mailreader.core.config import settings
from mailreader.extraction.rules import ExtractionRules
from mailreader.mailbox.base import MailboxError, MailboxSession
from mailreader.models.enums import ScanStatus
from mailreader.scanner.state import ScanProgress, ScanResult, ScanRunSummary, ScanState
from mailreader.scanner.walker import NormalizedMessage, walk
from mailreader.store import ArticleStoreError

logger = logging.getLogger(__name__)

CANCEL_CHECK_INTERVAL = 10  # messages between cancellation checks
PROGRESS_LOG_INTERVAL = 50
CANCELLED_MESSAGE = "Scan cancelled by user"


class ScanAlreadyRunningError(RuntimeError):
    pass


class ScanNotRunningError(RuntimeError):
    pass


class ArticleSink(Protocol):
    def insert_if_absent(self, url, title, description, domain, sender, date, folder) -> bool:
        ...


class ScanOrchestrator:
    def __init__(
        self,
        connect: Callable[[], MailboxSession],
        store: ArticleSink,
        state: Optional[ScanState] = None,
        default_folders: Optional[Sequence[str]] = None,
        folder_limit: Optional[int] = None,
        rules: Optional[ExtractionRules] = None,
    ) -> None:
        self._connect = connect
        self._store = store
        self.state = state or ScanState()
        self._default_folders = list(default_folders or settings.SCAN_DEFAULT_FOLDERS)
        self._folder_limit = settings.SCAN_FOLDER_LIMIT if folder_limit is None else folder_limit
        self._rules = rules
        self._thread: Optional[threading.Thread] = None

    # ── public ────────────────────────────────────────────────────────────────

    def start_scan(self, folders: Optional[Sequence[str]] = None) -> dict:
        """
        Claim the run flag and start the scan thread.  Returns immediately.
        Raises ScanAlreadyRunningError without touching progress if a scan is active.
        """
        folders = list(folders or self._default_folders)
        if not self.state.try_begin(len(folders)):
            raise ScanAlreadyRunningError("scan already running")

        thread = threading.Thread(
            target=self._run, args=(folders,), name="mailreader-scan", daemon=True
        )
        try:
            thread.start()
        except RuntimeError as exc:
            self.state.finish(ScanResult(ScanStatus.error, error=f"failed to start scan: {exc}"))
            raise
        self._thread = thread
        logger.info("scan started: folders=%s", folders)
        return {"status": "started", "folders": folders}

    def cancel_scan(self) -> dict:
        """Post the cancellation signal; a second request while one is pending is a no-op."""
        posted = self.state.request_cancel()
        if posted is None:
            raise ScanNotRunningError("no scan running")
        if posted:
            logger.info("scan cancellation requested")
        return {"status": "cancelling"}

    def get_scan_status(self) -> ScanRunSummary:
        return self.state.summary()

    def get_scan_progress(self) -> ScanProgress:
        return self.state.progress()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the current scan thread; True once no scan thread is alive."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # ── scan thread ───────────────────────────────────────────────────────────

    def _run(self, folders: list[str]) -> None:
        result = ScanResult(ScanStatus.error, error="scan stopped unexpectedly")
        try:
            result = self._execute(folders)
        except Exception as exc:  # noqa: BLE001
            result = ScanResult(ScanStatus.error, error=f"{type(exc).__name__}: {str(exc)[:300]}")
            logger.exception("scan aborted: %s", result.error)
        finally:
            self.state.finish(result)

    def _execute(self, folders: list[str]) -> ScanResult:
        try:
            session = self._connect()
        except MailboxError as exc:
            logger.error("scan: mailbox connection failed — %s", exc)
            return ScanResult(ScanStatus.error, error=f"Failed to connect to mailbox: {exc}")

        try:
            return self._scan(session, folders)
        finally:
            session.close()

    def _scan(self, session: MailboxSession, folders: list[str]) -> ScanResult:
        self.state.update(status=ScanStatus.scanning)
        total_folders = len(folders)
        processed = 0
        articles = 0

        for index, folder in enumerate(folders):
            if self.state.cancel_requested():
                return self._cancelled(processed)

            self.state.update(
                current_folder=folder,
                folders_processed=index,
                percent_complete=index * 100 // total_folders,
            )
            logger.info("scan: folder %s (%d/%d)", folder, index + 1, total_folders)

            try:
                messages = walk(session, folder, self._folder_limit, self._rules)
            except MailboxError as exc:
                logger.warning("scan: folder %s skipped — %s", folder, exc)
                continue

            self.state.increment(emails_total=len(messages))

            for position, message in enumerate(messages):
                if position % CANCEL_CHECK_INTERVAL == 0 and self.state.cancel_requested():
                    return self._cancelled(processed)

                articles += self._persist(message)
                processed += 1
                self.state.update(emails_processed=processed, articles_found=articles)

                if processed % PROGRESS_LOG_INTERVAL == 0:
                    logger.info(
                        "scan: processed %d emails, found %d articles so far", processed, articles
                    )

        self.state.update(
            folders_processed=total_folders,
            percent_complete=100,
            articles_found=articles,
        )
        logger.info(
            "scan completed: %d articles extracted from %d emails in %d folders",
            articles, processed, total_folders,
        )
        return ScanResult(ScanStatus.completed, error="", emails_scanned=processed)

    def _persist(self, message: NormalizedMessage) -> int:
        """Insert every link of one message; returns how many were new."""
        inserted = 0
        for link in message.links:
            try:
                if self._store.insert_if_absent(
                    url=link.url,
                    title=link.title,
                    description=link.description,
                    domain=link.domain,
                    sender=message.sender,
                    date=message.date,
                    folder=message.folder,
                ):
                    inserted += 1
            except ArticleStoreError as exc:
                logger.warning("scan: article skipped — %s", exc)
        return inserted

    def _cancelled(self, processed: int) -> ScanResult:
        logger.info("scan cancelled by user after %d emails", processed)
        return ScanResult(ScanStatus.cancelled, error=CANCELLED_MESSAGE)
