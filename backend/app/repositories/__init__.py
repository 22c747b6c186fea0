"""Repository implementations for data access."""

from app.repositories.postgres import PostgresTweetCacheRepository

__all__ = [
    "PostgresTweetCacheRepository",
]
