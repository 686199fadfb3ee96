from fastapi import APIRouter

from mailreader.api.v1.endpoints.articles import router as articles_router
from mailreader.api.v1.endpoints.folders import router as folders_router
from mailreader.api.v1.endpoints.scan import router as scan_router

router = APIRouter()


@router.get("/status", tags=["status"])
async def status() -> dict:
    return {"status": "ok", "service": "mailreader-api", "version": "0.1.0"}


router.include_router(scan_router)
router.include_router(folders_router)
router.include_router(articles_router)
