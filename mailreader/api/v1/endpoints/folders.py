"""GET /folders – folders available in the configured mailbox."""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status

from mailreader.api.deps import get_mailbox_connector
from mailreader.mailbox.base import MailboxError, MailboxSession
from mailreader.schemas.article import FoldersOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/folders", tags=["folders"])


@router.get("", response_model=FoldersOut, summary="List mailbox folders")
def list_folders(
    connect: Callable[[], MailboxSession] = Depends(get_mailbox_connector),
) -> FoldersOut:
    try:
        session = connect()
    except MailboxError as exc:
        logger.error("folders: mailbox connection failed — %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Mailbox connection failed.")

    try:
        folders = session.list_folders()
    except MailboxError as exc:
        logger.error("folders: listing failed — %s", exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to list folders.")
    finally:
        session.close()

    return FoldersOut(folders=folders)
