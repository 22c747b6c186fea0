"""Site mapping and batch page fetching using the Firecrawl API."""

import asyncio
import logging
from dataclasses import dataclass, field

from firecrawl import Firecrawl

logger = logging.getLogger(__name__)


@dataclass
class ScrapedPage:
    """Markdown content for one fetched page."""
    url: str
    markdown: str


@dataclass
class MapResult:
    """Outcome of mapping a site to its URLs."""
    success: bool
    links: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass
class FetchResult:
    """Outcome of batch-fetching page content."""
    success: bool
    pages: list[ScrapedPage] = field(default_factory=list)
    error: str | None = None


class FirecrawlCrawler:
    """Map and scrape websites through Firecrawl.

    The SDK is synchronous, so calls run in a worker thread and are bounded
    by ``timeout_seconds``. Errors are reported in the result objects rather
    than raised; nothing is retried.
    """

    def __init__(self, api_key: str, timeout_seconds: float = 120.0):
        """Initialize crawler.

        Args:
            api_key: Firecrawl API key (per-request or process default)
            timeout_seconds: Upper bound for each map or batch scrape call
        """
        self.client = Firecrawl(api_key=api_key)
        self.timeout_seconds = timeout_seconds

    async def _run(self, func, *args, **kwargs):
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args, **kwargs),
            timeout=self.timeout_seconds,
        )

    async def map_site(self, root: str, limit: int) -> MapResult:
        """Discover up to ``limit`` URLs on a site using the /map endpoint.

        Args:
            root: The crawl root (host or host/owner/repo)
            limit: Maximum number of links to request

        Returns:
            MapResult with discovered URLs, or the error text on failure
        """
        logger.info(f"Mapping website URLs: {root} (limit {limit})")

        try:
            result = await self._run(self.client.map, url=root, limit=limit)
        except asyncio.TimeoutError:
            logger.error(f"Timed out mapping {root}")
            return MapResult(success=False, error="timeout")
        except Exception as e:
            logger.error(f"Error mapping {root}: {e}")
            return MapResult(success=False, error=str(e))

        # result.links holds strings or LinkResult objects
        raw_links = result.links if hasattr(result, "links") and result.links else []
        urls = []
        for link in raw_links:
            if isinstance(link, str):
                urls.append(link)
            elif hasattr(link, "url"):
                urls.append(link.url)
            else:
                urls.append(str(link))

        logger.info(f"Map completed: {len(urls)} URLs discovered")
        return MapResult(success=True, links=urls)

    async def batch_fetch(self, urls: list[str]) -> FetchResult:
        """Scrape markdown for a set of URLs using the batch API.

        Only the main content of each page is requested.

        Args:
            urls: URLs to scrape

        Returns:
            FetchResult with one ScrapedPage per returned document
        """
        if not urls:
            return FetchResult(success=True)

        logger.info(f"Batch scraping {len(urls)} URLs")

        try:
            result = await self._run(
                self.client.batch_scrape,
                urls,
                formats=["markdown"],
                only_main_content=True,
                # SDK-side bound so the polling thread stops with the wait_for
                wait_timeout=max(1, int(self.timeout_seconds)),
            )
        except asyncio.TimeoutError:
            logger.error(f"Timed out batch scraping {len(urls)} URLs")
            return FetchResult(success=False, error="timeout")
        except Exception as e:
            logger.error(f"Error in batch scrape: {e}")
            return FetchResult(success=False, error=str(e))

        status = getattr(result, "status", None)
        if status == "failed":
            return FetchResult(success=False, error="batch scrape job failed")

        data = result.data if hasattr(result, "data") and result.data else []
        pages = []
        for doc in data:
            meta = doc.metadata
            url = getattr(meta, "url", "") or getattr(meta, "source_url", "") or ""
            pages.append(ScrapedPage(url=url, markdown=doc.markdown or ""))

        logger.info(f"Batch scrape completed: {len(pages)} pages")
        return FetchResult(success=True, pages=pages)
