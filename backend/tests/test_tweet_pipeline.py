"""End-to-end tests for TweetPipeline with fake collaborators."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.config import Settings
from app.exceptions import (
    ConfigMissing,
    GenerationEmpty,
    InvalidUrl,
    UpstreamFetchFailure,
    UpstreamMapFailure,
)
from app.services.draft_generator import DraftGenerator
from app.services.firecrawl_crawler import ScrapedPage
from app.services.tweet_cache import TweetCache
from app.services.tweet_pipeline import TweetPipeline, combine_markdown

from conftest import FakeCompleter, FakeCrawler, InMemoryCacheStore

pytestmark = pytest.mark.integration


class TestTweetPipeline:
    """Tests for TweetPipeline."""

    @pytest.fixture
    def cache(self, session_factory, cache_store: InMemoryCacheStore) -> TweetCache:
        return TweetCache(session_factory, repository_class=cache_store.repository_class)

    @pytest.fixture
    def crawler_keys(self) -> list[str]:
        return []

    def _pipeline(
        self,
        settings: Settings,
        cache: TweetCache,
        crawler: FakeCrawler,
        completer: FakeCompleter,
        crawler_keys: list[str],
        ensure_llm_configured=None,
    ) -> TweetPipeline:
        def factory(api_key: str) -> FakeCrawler:
            crawler_keys.append(api_key)
            return crawler

        return TweetPipeline(
            settings=settings,
            cache=cache,
            crawler_factory=factory,
            generator=DraftGenerator(completer, settings, sleep=AsyncMock()),
            ensure_llm_configured=ensure_llm_configured,
        )

    @pytest.mark.asyncio
    async def test_quick_run_then_cache_hit(
        self, settings, cache, fake_crawler, fake_completer, crawler_keys
    ) -> None:
        """Test example.com quick mode: 10-link map, tweets, then served from cache."""
        pipeline = self._pipeline(settings, cache, fake_crawler, fake_completer, crawler_keys)

        tweets = await pipeline.run("example.com", wants_full=False)

        assert fake_crawler.map_calls == [("example.com", 10)]
        assert len(fake_crawler.fetch_calls[0]) == 10
        assert crawler_keys == ["fc-default"]
        assert 0 < len(tweets) <= 15
        assert all(isinstance(t, str) and t for t in tweets)

        calls_before = len(fake_completer.calls)
        again = await pipeline.run("example.com", wants_full=False)

        assert again == tweets
        assert len(fake_completer.calls) == calls_before
        assert len(fake_crawler.map_calls) == 1

    @pytest.mark.asyncio
    async def test_full_mode_uses_caller_key_and_limit(
        self, settings, cache, fake_completer, crawler_keys
    ) -> None:
        """Test that full mode maps 100 pages with the caller's key."""
        crawler = FakeCrawler(links=[f"https://example.com/{i}" for i in range(250)])
        pipeline = self._pipeline(settings, cache, crawler, fake_completer, crawler_keys)

        await pipeline.run("example.com", firecrawl_key="fc-user", wants_full=True)

        assert crawler.map_calls == [("example.com", 100)]
        assert len(crawler.fetch_calls[0]) == 100
        assert crawler_keys == ["fc-user"]

    @pytest.mark.asyncio
    async def test_github_repo_is_crawl_root(
        self, settings, cache, fake_crawler, fake_completer, crawler_keys
    ) -> None:
        """Test that the owner/repo stem is both the crawl root and the cache key."""
        pipeline = self._pipeline(settings, cache, fake_crawler, fake_completer, crawler_keys)

        await pipeline.run("https://github.com/acme/widgets/issues")

        assert fake_crawler.map_calls == [("github.com/acme/widgets", 10)]
        assert await cache.lookup("github.com/acme/widgets", False) is not None

    @pytest.mark.asyncio
    async def test_full_mode_without_caller_key_is_config_missing(
        self, settings, cache, fake_crawler, fake_completer, crawler_keys
    ) -> None:
        """Test that full mode requires a caller-supplied Firecrawl key."""
        pipeline = self._pipeline(settings, cache, fake_crawler, fake_completer, crawler_keys)

        with pytest.raises(ConfigMissing) as exc_info:
            await pipeline.run("https://github.com/acme/widgets", wants_full=True)

        assert exc_info.value.message == "A Firecrawl API key is required for full crawls"
        assert fake_crawler.map_calls == []

    @pytest.mark.asyncio
    async def test_no_firecrawl_key_anywhere(
        self, cache, fake_crawler, fake_completer, crawler_keys
    ) -> None:
        """Test that a missing default key fails at request time."""
        settings = Settings(_env_file=None, firecrawl_api_key=None, openai_api_key="sk", chunk_delay_seconds=0)
        pipeline = self._pipeline(settings, cache, fake_crawler, fake_completer, crawler_keys)

        with pytest.raises(ConfigMissing) as exc_info:
            await pipeline.run("example.com")

        assert exc_info.value.message == "FIRECRAWL_API_KEY is not set"

    @pytest.mark.asyncio
    async def test_invalid_url(self, settings, cache, fake_crawler, fake_completer, crawler_keys) -> None:
        pipeline = self._pipeline(settings, cache, fake_crawler, fake_completer, crawler_keys)

        with pytest.raises(InvalidUrl):
            await pipeline.run("not a url")

    @pytest.mark.asyncio
    async def test_map_failure_message(self, settings, cache, fake_completer, crawler_keys) -> None:
        """Test that a mapper failure is reported with its error text."""
        crawler = FakeCrawler(map_error="timeout")
        pipeline = self._pipeline(settings, cache, crawler, fake_completer, crawler_keys)

        with pytest.raises(UpstreamMapFailure) as exc_info:
            await pipeline.run("example.com")

        assert exc_info.value.message == "Failed to map URL: timeout"
        assert crawler.fetch_calls == []

    @pytest.mark.asyncio
    async def test_map_without_links(self, settings, cache, fake_completer, crawler_keys) -> None:
        crawler = FakeCrawler(links=[])
        pipeline = self._pipeline(settings, cache, crawler, fake_completer, crawler_keys)

        with pytest.raises(UpstreamMapFailure):
            await pipeline.run("example.com")

    @pytest.mark.asyncio
    async def test_fetch_failure_message(self, settings, cache, fake_completer, crawler_keys) -> None:
        crawler = FakeCrawler(fetch_error="Payment required")
        pipeline = self._pipeline(settings, cache, crawler, fake_completer, crawler_keys)

        with pytest.raises(UpstreamFetchFailure) as exc_info:
            await pipeline.run("example.com")

        assert exc_info.value.message == "Failed to scrape URLs: Payment required"
        assert fake_completer.calls == []

    @pytest.mark.asyncio
    async def test_llm_config_checked_before_generation(
        self, settings, cache, fake_crawler, fake_completer, crawler_keys
    ) -> None:
        """Test that a missing completion key aborts before any completion call."""
        ensure = MagicMock(side_effect=ConfigMissing("KLUSTER_API_KEY is not defined."))
        pipeline = self._pipeline(
            settings, cache, fake_crawler, fake_completer, crawler_keys, ensure_llm_configured=ensure
        )

        with pytest.raises(ConfigMissing):
            await pipeline.run("example.com")

        assert fake_completer.calls == []

    @pytest.mark.asyncio
    async def test_all_chunks_fail_is_generation_empty(
        self, settings, cache, cache_store, crawler_keys
    ) -> None:
        """Test that an empty aggregate fails with per-chunk diagnostics."""
        crawler = FakeCrawler(links=["https://example.com"], markdown="Only one chunk here.")
        completer = FakeCompleter(["no markers at all"])
        pipeline = self._pipeline(settings, cache, crawler, completer, crawler_keys)

        with pytest.raises(GenerationEmpty) as exc_info:
            await pipeline.run("example.com")

        assert "chunk 1" in exc_info.value.message
        assert cache_store.rows == {}

    @pytest.mark.asyncio
    async def test_empty_pages_is_generation_empty(self, settings, cache, fake_completer, crawler_keys) -> None:
        crawler = FakeCrawler(markdown="")
        pipeline = self._pipeline(settings, cache, crawler, fake_completer, crawler_keys)

        with pytest.raises(GenerationEmpty):
            await pipeline.run("example.com")

        assert fake_completer.calls == []

    @pytest.mark.asyncio
    async def test_output_capped_at_fifteen(self, cache, crawler_keys) -> None:
        """Test that many chunks still yield exactly 15 tweets, 3 per chunk."""
        settings = Settings(
            _env_file=None,
            firecrawl_api_key="fc",
            openai_api_key="sk",
            chunk_max_length=60,
            chunk_delay_seconds=0,
        )
        crawler = FakeCrawler(markdown="A sentence about the product that is long enough. " * 5)
        completer = FakeCompleter(["TWEET: a\nTWEET: b\nTWEET: c\nTWEET: d"] * 20)
        pipeline = self._pipeline(settings, cache, crawler, completer, crawler_keys)

        tweets = await pipeline.run("example.com")

        assert len(tweets) == 15
        assert len(completer.calls) == 5

    @pytest.mark.asyncio
    async def test_cache_write_failure_still_returns_tweets(
        self, settings, cache, cache_store, fake_crawler, fake_completer, crawler_keys
    ) -> None:
        """Test that a failed cache store does not fail the request."""
        cache_store.fail_writes = True
        pipeline = self._pipeline(settings, cache, fake_crawler, fake_completer, crawler_keys)

        tweets = await pipeline.run("example.com")

        assert len(tweets) > 0

    @pytest.mark.asyncio
    async def test_corrupt_cache_entry_regenerates(
        self, settings, cache, cache_store, fake_crawler, fake_completer, crawler_keys
    ) -> None:
        """Test that a corrupt cache row is treated as a miss and overwritten."""
        cache_store.rows[("example.com", False)] = "{broken"
        pipeline = self._pipeline(settings, cache, fake_crawler, fake_completer, crawler_keys)

        tweets = await pipeline.run("example.com")

        assert fake_crawler.map_calls
        assert await cache.lookup("example.com", False) == tweets


class TestCombineMarkdown:
    """Tests for combine_markdown."""

    def test_pages_joined_with_blank_lines(self) -> None:
        pages = [ScrapedPage("a", "# A"), ScrapedPage("b", ""), ScrapedPage("c", "C")]

        assert combine_markdown(pages) == "# A\n\nC\n\n"
