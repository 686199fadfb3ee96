"""
GET    /articles             – paginated article list with optional filters
GET    /articles/stats       – totals and top domains
GET    /articles/newsletters – distinct newsletter senders
DELETE /articles/{id}        – remove one article
"""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from mailreader.api.deps import get_store
from mailreader.schemas.article import (
    ArticleListOut,
    ArticleOut,
    ArticleStatsOut,
    NewslettersOut,
)
from mailreader.store import ArticleStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("", response_model=ArticleListOut, summary="List articles")
def list_articles(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=1000),
    domain: Optional[str] = Query(default=None, description="Exact domain"),
    newsletter: Optional[str] = Query(default=None, description="Substring of the sender"),
    q: Optional[str] = Query(
        default=None,
        description="Substring of title, description, URL or sender",
    ),
    store: ArticleStore = Depends(get_store),
) -> ArticleListOut:
    rows, total = store.list_articles(
        skip=skip, limit=limit, domain=domain, newsletter=newsletter, search=q
    )
    return ArticleListOut(
        items=[ArticleOut.model_validate(a) for a in rows],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/stats", response_model=ArticleStatsOut, summary="Article statistics")
def article_stats(store: ArticleStore = Depends(get_store)) -> ArticleStatsOut:
    return ArticleStatsOut(**store.stats())


@router.get("/newsletters", response_model=NewslettersOut, summary="Distinct newsletters")
def list_newsletters(store: ArticleStore = Depends(get_store)) -> NewslettersOut:
    return NewslettersOut(newsletters=store.newsletters())


@router.delete(
    "/{article_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an article",
)
def delete_article(
    article_id: uuid.UUID,
    store: ArticleStore = Depends(get_store),
) -> None:
    if not store.delete(article_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found.")
    logger.info("Article deleted: id=%s", article_id)
