"""Synchronous SQLAlchemy engine shared by the API and the scan thread."""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from mailreader.core.config import settings
from mailreader.db.base import Base


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_engine(settings.DATABASE_URL, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """Create missing tables.  Production schemas are managed by Alembic."""
    import mailreader.models  # noqa: F401 – registers all ORM models with Base.metadata

    Base.metadata.create_all(engine)
