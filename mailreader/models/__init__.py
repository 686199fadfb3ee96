# Import every model so that Alembic autogenerate and create_all can
# discover all tables via Base.metadata

from mailreader.models.article import Article  # noqa: F401

__all__ = ["Article"]
