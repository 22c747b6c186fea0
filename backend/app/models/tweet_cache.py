"""Cached tweet result sets keyed by submitted URL and crawl fullness."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class TweetCacheEntry(Base):
    """Serialized tweets for one (url, is_full) pair."""

    __tablename__ = "tweet_cache"

    url: Mapped[str] = mapped_column(Text, primary_key=True)
    is_full: Mapped[bool] = mapped_column(Boolean, primary_key=True)

    # JSON-encoded list of strings
    tweets: Mapped[str] = mapped_column(Text)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
