"""SQLAlchemy models."""

from app.models.tweet_cache import TweetCacheEntry

__all__ = [
    "TweetCacheEntry",
]
