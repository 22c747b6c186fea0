"""Tweet cache gateway.

Reads never fail the request: missing rows, unparseable payloads and
database errors all come back as a miss. Writes never fail the request
either; a failed upsert is logged and reported as ``False``.
"""

import json
import logging
from typing import Callable

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import CacheReadCorrupt, CacheWriteFailure
from app.repositories import PostgresTweetCacheRepository
from app.services.result_validator import ResultSet, check_tweets

logger = logging.getLogger(__name__)


class TweetCache:
    """Look up and store tweet result sets keyed by (url, is_full)."""

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        repository_class=PostgresTweetCacheRepository,
    ):
        self.session_factory = session_factory
        self.repository_class = repository_class

    def _decode(self, url: str, payload: str) -> ResultSet:
        try:
            return check_tweets(json.loads(payload))
        except (json.JSONDecodeError, TypeError) as e:
            raise CacheReadCorrupt(f"Error parsing cached tweets: {e}", context={"url": url}) from e
        except (ValidationError, ValueError) as e:
            raise CacheReadCorrupt(f"Cached tweet validation error: {e}", context={"url": url}) from e

    async def lookup(self, url: str, is_full: bool) -> ResultSet | None:
        """Return cached tweets for (url, is_full), or None on any kind of miss."""
        try:
            async with self.session_factory() as session:
                payload = await self.repository_class(session).get_payload(url, is_full)
        except SQLAlchemyError as e:
            logger.warning(f"Cache lookup failed for {url}: {e}")
            return None

        if payload is None:
            logger.info(f"No cache hit for {url} (full={is_full})")
            return None

        try:
            tweets = self._decode(url, payload)
        except CacheReadCorrupt as e:
            logger.warning(f"Ignoring corrupt cache entry for {url}: {e.message}")
            return None

        logger.info(f"Cache hit for {url} (full={is_full})")
        return tweets

    async def store(self, url: str, is_full: bool, tweets: ResultSet) -> bool:
        """Upsert tweets for (url, is_full). Returns False if persisting failed."""
        payload = json.dumps(list(tweets))
        try:
            async with self.session_factory() as session:
                await self.repository_class(session).upsert(url, is_full, payload)
                await session.commit()
        except SQLAlchemyError as e:
            error = CacheWriteFailure(f"Failed to store tweets in cache: {e}", context={"url": url})
            logger.error(error.message)
            return False

        logger.info(f"Cached {len(tweets)} tweets for {url} (full={is_full})")
        return True
