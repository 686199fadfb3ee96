import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ArticleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    url: str
    title: str
    description: str
    domain: str
    newsletter: str
    email_date: Optional[datetime]
    folder: str
    created_at: datetime


class ArticleListOut(BaseModel):
    items: list[ArticleOut]
    total: int
    skip: int
    limit: int


class ArticleStatsOut(BaseModel):
    total_articles: int
    total_newsletters: int
    by_domain: dict[str, int]


class NewslettersOut(BaseModel):
    newsletters: list[str]


class FoldersOut(BaseModel):
    folders: list[str]
