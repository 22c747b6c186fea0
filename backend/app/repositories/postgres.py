"""PostgreSQL repository implementations."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import TweetCacheEntry


class PostgresTweetCacheRepository:
    """PostgreSQL implementation of the tweet cache repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_payload(self, url: str, is_full: bool) -> str | None:
        """Get the serialized tweets for an exact (url, is_full) match."""
        result = await self.session.execute(
            select(TweetCacheEntry.tweets).where(
                TweetCacheEntry.url == url,
                TweetCacheEntry.is_full == is_full,
            )
        )
        return result.scalar_one_or_none()

    async def upsert(self, url: str, is_full: bool, payload: str) -> None:
        """Insert or overwrite the cached tweets for (url, is_full)."""
        now = datetime.now(timezone.utc)
        stmt = insert(TweetCacheEntry).values(
            url=url,
            is_full=is_full,
            tweets=payload,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[TweetCacheEntry.url, TweetCacheEntry.is_full],
            set_={"tweets": stmt.excluded.tweets, "updated_at": now},
        )
        await self.session.execute(stmt)
