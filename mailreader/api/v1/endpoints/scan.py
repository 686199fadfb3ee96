"""
POST /scan          – start a scan of the given folders (returns immediately)
POST /scan/cancel   – request cooperative cancellation of the running scan
GET  /scan/status   – last-run summary and running flag
GET  /scan/progress – live progress of the current / last scan
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from mailreader.api.deps import get_orchestrator
from mailreader.scanner.orchestrator import (
    ScanAlreadyRunningError,
    ScanNotRunningError,
    ScanOrchestrator,
)
from mailreader.schemas.scan import (
    ScanCancelOut,
    ScanProgressOut,
    ScanRequest,
    ScanStartedOut,
    ScanStatusOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["scan"])


@router.post(
    "",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ScanStartedOut,
    summary="Start scanning mailbox folders for newsletter articles",
)
async def start_scan(
    body: Optional[ScanRequest] = None,
    orchestrator: ScanOrchestrator = Depends(get_orchestrator),
) -> ScanStartedOut:
    try:
        ack = orchestrator.start_scan(body.folders if body else None)
    except ScanAlreadyRunningError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Scan already running.")
    return ScanStartedOut(**ack)


@router.post(
    "/cancel",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=ScanCancelOut,
    summary="Cancel the running scan",
)
async def cancel_scan(
    orchestrator: ScanOrchestrator = Depends(get_orchestrator),
) -> ScanCancelOut:
    try:
        ack = orchestrator.cancel_scan()
    except ScanNotRunningError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No scan running.")
    return ScanCancelOut(**ack)


@router.get("/status", response_model=ScanStatusOut, summary="Scan run summary")
async def get_scan_status(
    orchestrator: ScanOrchestrator = Depends(get_orchestrator),
) -> ScanStatusOut:
    return ScanStatusOut.model_validate(orchestrator.get_scan_status())


@router.get("/progress", response_model=ScanProgressOut, summary="Live scan progress")
async def get_scan_progress(
    orchestrator: ScanOrchestrator = Depends(get_orchestrator),
) -> ScanProgressOut:
    return ScanProgressOut.model_validate(orchestrator.get_scan_progress())
