from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from mailreader.db.base import Base
from mailreader.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Article(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A candidate reading item discovered in a newsletter, unique by canonical URL."""

    __tablename__ = "articles"

    url: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    domain: Mapped[str] = mapped_column(Text, nullable=False, server_default="", index=True)

    # Provenance: sender of the newsletter that first mentioned the link
    newsletter: Mapped[str] = mapped_column(Text, nullable=False, server_default="", index=True)
    email_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    folder: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
