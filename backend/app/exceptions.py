"""Errors raised while turning a website into tweet drafts.

Every error carries a human-readable ``message`` that is safe to return to
the caller as-is. ``CacheReadCorrupt`` and ``CacheWriteFailure`` are only
ever logged; the cache layer never lets them escape.
"""

from typing import Any


class TweetGenerationError(Exception):
    """Base error for the tweet generation flow."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)


class InvalidUrl(TweetGenerationError):
    """Raised when the submitted URL cannot be parsed."""


class ConfigMissing(TweetGenerationError):
    """Raised when a credential needed for this request is not configured."""


class UpstreamMapFailure(TweetGenerationError):
    """Raised when the site mapper reports a failure."""


class UpstreamFetchFailure(TweetGenerationError):
    """Raised when the batch page fetch reports a failure."""


class CompletionFailed(TweetGenerationError):
    """Raised when a completion request fails at the provider."""


class GenerationEmpty(TweetGenerationError):
    """Raised when no usable drafts survive generation and validation."""


class CacheReadCorrupt(TweetGenerationError):
    """A cached payload could not be parsed or failed the schema check."""


class CacheWriteFailure(TweetGenerationError):
    """Persisting a result set to the cache failed."""
