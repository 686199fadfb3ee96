from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from mailreader.models.enums import ScanStatus


class ScanRequest(BaseModel):
    # Empty → SCAN_DEFAULT_FOLDERS
    folders: list[str] = []


class ScanStartedOut(BaseModel):
    status: str
    folders: list[str]


class ScanCancelOut(BaseModel):
    status: str


class ScanStatusOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_running: bool
    last_scan_time: Optional[datetime]
    last_emails_scanned: int
    last_error: str


class ScanProgressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_folder: str
    folders_total: int
    folders_processed: int
    emails_total: int
    emails_processed: int
    articles_found: int
    percent_complete: int
    status: ScanStatus
