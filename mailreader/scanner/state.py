"""
Process-wide scan state.

The scan thread is the only writer; status endpoints read point-in-time
copies.  Every access goes through one lock, held only for the copy or
update itself.
"""

import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import NamedTuple, Optional

from mailreader.models.enums import ScanStatus


@dataclass
class ScanProgress:
    current_folder: str = ""
    folders_total: int = 0
    folders_processed: int = 0
    emails_total: int = 0
    emails_processed: int = 0
    articles_found: int = 0
    percent_complete: int = 0
    status: ScanStatus = ScanStatus.idle


@dataclass
class ScanRunSummary:
    is_running: bool = False
    last_scan_time: Optional[datetime] = None
    last_emails_scanned: int = 0
    last_error: str = ""


class ScanResult(NamedTuple):
    status: ScanStatus
    error: str = ""
    emails_scanned: Optional[int] = None  # only reported by completed scans


class ScanState:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._progress = ScanProgress()
        self._summary = ScanRunSummary()
        self._cancel = threading.Event()

    # ── run flag ──────────────────────────────────────────────────────────────

    def try_begin(self, folders_total: int) -> bool:
        """Atomically claim the run flag and reset progress.  False if a scan is running."""
        with self._lock:
            if self._summary.is_running:
                return False
            self._summary.is_running = True
            self._progress = ScanProgress(
                folders_total=folders_total,
                status=ScanStatus.connecting,
            )
            # Drain a stale signal left by the previous run
            self._cancel.clear()
            return True

    def finish(self, result: ScanResult) -> None:
        with self._lock:
            self._progress.status = result.status
            self._summary.is_running = False
            self._summary.last_scan_time = datetime.now(timezone.utc)
            self._summary.last_error = result.error
            if result.emails_scanned is not None:
                self._summary.last_emails_scanned = result.emails_scanned

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._summary.is_running

    # ── cancellation ──────────────────────────────────────────────────────────

    def request_cancel(self) -> Optional[bool]:
        """
        Post the cancellation signal.

        Returns None when no scan is running (nothing posted), False when a
        signal is already pending, True when this call posted it.
        """
        with self._lock:
            if not self._summary.is_running:
                return None
            if self._cancel.is_set():
                return False
            self._cancel.set()
            return True

    def cancel_requested(self) -> bool:
        return self._cancel.is_set()

    # ── progress ──────────────────────────────────────────────────────────────

    def update(self, **fields) -> None:
        with self._lock:
            for name, value in fields.items():
                setattr(self._progress, name, value)

    def increment(self, **deltas: int) -> None:
        with self._lock:
            for name, delta in deltas.items():
                setattr(self._progress, name, getattr(self._progress, name) + delta)

    # ── snapshots ─────────────────────────────────────────────────────────────

    def progress(self) -> ScanProgress:
        with self._lock:
            return replace(self._progress)

    def summary(self) -> ScanRunSummary:
        with self._lock:
            return replace(self._summary)
