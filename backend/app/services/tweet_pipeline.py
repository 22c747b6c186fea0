"""End-to-end flow: URL in, cached or freshly generated tweets out."""

import logging
from typing import Callable, Protocol

from app.config import Settings
from app.exceptions import (
    ConfigMissing,
    GenerationEmpty,
    UpstreamFetchFailure,
    UpstreamMapFailure,
)
from app.services.chunker import chunk_text
from app.services.draft_generator import DraftGenerator
from app.services.firecrawl_crawler import FetchResult, MapResult, ScrapedPage
from app.services.result_validator import ResultSet, validate_drafts
from app.services.tweet_cache import TweetCache
from app.services.url_normalizer import normalize_site

logger = logging.getLogger(__name__)


class SiteCrawler(Protocol):
    async def map_site(self, root: str, limit: int) -> MapResult: ...

    async def batch_fetch(self, urls: list[str]) -> FetchResult: ...


def combine_markdown(pages: list[ScrapedPage]) -> str:
    """Join page markdown in fetch order, each followed by a blank line."""
    return "".join(f"{page.markdown}\n\n" for page in pages if page.markdown)


class TweetPipeline:
    """Normalize, check cache, crawl, chunk, generate, validate, store."""

    def __init__(
        self,
        settings: Settings,
        cache: TweetCache,
        crawler_factory: Callable[[str], SiteCrawler],
        generator: DraftGenerator,
        ensure_llm_configured: Callable[[], None] | None = None,
    ):
        self.settings = settings
        self.cache = cache
        self.crawler_factory = crawler_factory
        self.generator = generator
        self.ensure_llm_configured = ensure_llm_configured

    def _resolve_firecrawl_key(self, firecrawl_key: str | None, wants_full: bool) -> str:
        if wants_full and not firecrawl_key:
            raise ConfigMissing("A Firecrawl API key is required for full crawls")
        api_key = firecrawl_key or self.settings.firecrawl_api_key
        if not api_key:
            raise ConfigMissing("FIRECRAWL_API_KEY is not set")
        return api_key

    async def _crawl(self, crawler: SiteCrawler, root: str, limit: int) -> list[ScrapedPage]:
        map_result = await crawler.map_site(root, limit)
        if not map_result.success:
            raise UpstreamMapFailure(f"Failed to map URL: {map_result.error}")

        urls = map_result.links[:limit]
        if not urls:
            raise UpstreamMapFailure(f"Failed to map URL: no pages found for {root}")

        fetch_result = await crawler.batch_fetch(urls)
        if not fetch_result.success:
            raise UpstreamFetchFailure(f"Failed to scrape URLs: {fetch_result.error}")

        return fetch_result.pages

    async def run(
        self,
        url: str,
        firecrawl_key: str | None = None,
        wants_full: bool = False,
    ) -> ResultSet:
        """Produce up to ``max_tweets`` tweets for a website.

        Args:
            url: URL as submitted by the caller; its normalized stem is the cache key
            firecrawl_key: Caller-supplied Firecrawl key (required for full mode)
            wants_full: Crawl up to the full page limit instead of the quick one

        Raises:
            TweetGenerationError: Any terminal failure before tweets exist
        """
        api_key = self._resolve_firecrawl_key(firecrawl_key, wants_full)
        limit = self.settings.full_page_limit if wants_full else self.settings.quick_page_limit

        site = normalize_site(url, self.settings.code_hosting_domains)

        cached = await self.cache.lookup(site.stem, wants_full)
        if cached is not None:
            return cached

        logger.info(f"Generating tweets for {site.stem} (limit {limit})")
        crawler = self.crawler_factory(api_key)
        pages = await self._crawl(crawler, site.stem, limit)

        chunks = chunk_text(combine_markdown(pages), self.settings.chunk_max_length)
        logger.info(f"Scraped {len(pages)} pages into {len(chunks)} chunks")
        if not chunks:
            raise GenerationEmpty("Failed to generate tweets: scraped pages had no content.")

        if self.ensure_llm_configured:
            self.ensure_llm_configured()

        report = await self.generator.generate(chunks, target=self.settings.max_tweets)
        if not report.drafts:
            detail = report.failure_summary() or "no drafts returned"
            raise GenerationEmpty(f"Failed to generate tweets: {detail}")

        tweets = validate_drafts(report.drafts, limit=self.settings.max_tweets)

        await self.cache.store(site.stem, wants_full, tweets)
        return tweets
