"""
Article store: the persistent, URL-unique reading index.

Insertion is idempotent (INSERT … ON CONFLICT (url) DO NOTHING), so scans can
be re-run over the same folders without creating duplicates.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mailreader.models.article import Article

_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}
TOP_DOMAINS = 10


class ArticleStoreError(Exception):
    """A single store operation failed."""


class ArticleStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        try:
            self._insert = _INSERTS[engine.dialect.name]
        except KeyError:
            raise ValueError(f"Unsupported database dialect: {engine.dialect.name!r}") from None

    # ── writes ────────────────────────────────────────────────────────────────

    def insert_if_absent(
        self,
        url: str,
        title: str,
        description: str,
        domain: str,
        sender: str,
        date: Optional[datetime],
        folder: str,
    ) -> bool:
        """Insert article row; returns True if inserted, False if the URL already exists."""
        stmt = (
            self._insert(Article)
            .values(
                id=uuid.uuid4(),
                url=url,
                title=title,
                description=description,
                domain=domain,
                newsletter=sender,
                email_date=date,
                folder=folder,
            )
            .on_conflict_do_nothing(index_elements=["url"])
            .returning(Article.id)
        )
        try:
            with self.engine.begin() as conn:
                return conn.execute(stmt).first() is not None
        except SQLAlchemyError as exc:
            raise ArticleStoreError(f"failed to index article {url}: {exc}") from exc

    def delete(self, article_id: uuid.UUID) -> bool:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(delete(Article).where(Article.id == article_id))
        except SQLAlchemyError as exc:
            raise ArticleStoreError(f"failed to delete article {article_id}: {exc}") from exc
        return result.rowcount > 0

    # ── reads ─────────────────────────────────────────────────────────────────

    def count(self) -> int:
        try:
            with self.engine.connect() as conn:
                return conn.execute(select(func.count()).select_from(Article)).scalar_one()
        except SQLAlchemyError as exc:
            raise ArticleStoreError(f"failed to count articles: {exc}") from exc

    def list_articles(
        self,
        skip: int = 0,
        limit: int = 50,
        domain: Optional[str] = None,
        newsletter: Optional[str] = None,
        search: Optional[str] = None,
    ) -> tuple[list[Article], int]:
        """Filtered page of articles, newest newsletter first, plus the filtered total."""
        conditions = []
        if domain:
            conditions.append(Article.domain == domain)
        if newsletter:
            conditions.append(Article.newsletter.contains(newsletter, autoescape=True))
        if search:
            conditions.append(
                or_(
                    Article.title.contains(search, autoescape=True),
                    Article.description.contains(search, autoescape=True),
                    Article.url.contains(search, autoescape=True),
                    Article.newsletter.contains(search, autoescape=True),
                )
            )

        base = select(Article).where(*conditions)
        count_q = select(func.count()).select_from(Article).where(*conditions)
        try:
            with Session(self.engine) as session:
                total: int = session.execute(count_q).scalar_one()
                rows = session.scalars(
                    base.order_by(Article.email_date.desc().nulls_last(), Article.created_at.desc())
                    .offset(skip)
                    .limit(limit)
                ).all()
        except SQLAlchemyError as exc:
            raise ArticleStoreError(f"failed to list articles: {exc}") from exc
        return list(rows), total

    def stats(self) -> dict[str, Any]:
        by_domain_q = (
            select(Article.domain, func.count().label("n"))
            .where(Article.domain != "")
            .group_by(Article.domain)
            .order_by(func.count().desc())
            .limit(TOP_DOMAINS)
        )
        newsletters_q = select(func.count(func.distinct(Article.newsletter))).where(
            Article.newsletter != ""
        )
        try:
            with self.engine.connect() as conn:
                total = conn.execute(select(func.count()).select_from(Article)).scalar_one()
                total_newsletters = conn.execute(newsletters_q).scalar_one()
                by_domain = {row.domain: row.n for row in conn.execute(by_domain_q)}
        except SQLAlchemyError as exc:
            raise ArticleStoreError(f"failed to compute article stats: {exc}") from exc
        return {
            "total_articles": total,
            "total_newsletters": total_newsletters,
            "by_domain": by_domain,
        }

    def newsletters(self) -> list[str]:
        q = (
            select(Article.newsletter)
            .where(Article.newsletter != "")
            .distinct()
            .order_by(Article.newsletter)
        )
        try:
            with self.engine.connect() as conn:
                return list(conn.execute(q).scalars())
        except SQLAlchemyError as exc:
            raise ArticleStoreError(f"failed to list newsletters: {exc}") from exc
