"""Pytest configuration and shared fixtures for site-tweets tests."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.config import Settings
from app.services.firecrawl_crawler import FetchResult, MapResult, ScrapedPage


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Pure logic tests with no I/O, network, or database")
    config.addinivalue_line("markers", "integration: Tests wiring several services together with fakes")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Default unmarked tests to unit."""
    for item in items:
        marker_names = [m.name for m in item.iter_markers()]
        if any(m in marker_names for m in ("unit", "integration")):
            continue
        item.add_marker(pytest.mark.unit)


@pytest.fixture
def settings() -> Settings:
    """Settings with keys set and no pacing delay."""
    return Settings(
        _env_file=None,
        firecrawl_api_key="fc-default",
        openai_api_key="sk-test",
        chunk_delay_seconds=0,
    )


class FakeCrawler:
    """In-memory stand-in for FirecrawlCrawler."""

    def __init__(
        self,
        links: list[str] | None = None,
        map_error: str | None = None,
        fetch_error: str | None = None,
        markdown: str = "Our product ships fast. Teams love it. Try it today!",
    ):
        self.links = links if links is not None else [f"https://example.com/p{i}" for i in range(30)]
        self.map_error = map_error
        self.fetch_error = fetch_error
        self.markdown = markdown
        self.map_calls: list[tuple[str, int]] = []
        self.fetch_calls: list[list[str]] = []

    async def map_site(self, root: str, limit: int) -> MapResult:
        self.map_calls.append((root, limit))
        if self.map_error:
            return MapResult(success=False, error=self.map_error)
        return MapResult(success=True, links=list(self.links))

    async def batch_fetch(self, urls: list[str]) -> FetchResult:
        self.fetch_calls.append(list(urls))
        if self.fetch_error:
            return FetchResult(success=False, error=self.fetch_error)
        return FetchResult(
            success=True,
            pages=[ScrapedPage(url=url, markdown=self.markdown) for url in urls],
        )


class FakeCompleter:
    """Completion client returning queued responses in order."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls: list[tuple[str, str, int, int]] = []

    async def complete(self, system_prompt, user_prompt, max_tokens, n=1):
        self.calls.append((system_prompt, user_prompt, max_tokens, n))
        if not self.responses:
            return "TWEET: one\nTWEET: two\nTWEET: three"
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class InMemoryCacheStore:
    """Dict-backed rows shared by every repository instance."""

    def __init__(self):
        self.rows: dict[tuple[str, bool], str] = {}
        self.fail_reads = False
        self.fail_writes = False

    def repository_class(self, session):
        store = self

        class _Repository:
            def __init__(self, _session):
                self.session = _session

            async def get_payload(self, url, is_full):
                if store.fail_reads:
                    from sqlalchemy.exc import OperationalError
                    raise OperationalError("SELECT", {}, Exception("connection refused"))
                return store.rows.get((url, is_full))

            async def upsert(self, url, is_full, payload):
                if store.fail_writes:
                    from sqlalchemy.exc import OperationalError
                    raise OperationalError("INSERT", {}, Exception("connection refused"))
                store.rows[(url, is_full)] = payload

        return _Repository(session)


@pytest.fixture
def cache_store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def session_factory():
    """Factory yielding mock sessions as async context managers."""

    @asynccontextmanager
    async def factory():
        session = MagicMock()
        session.commit = AsyncMock()
        yield session

    return factory


@pytest.fixture
def fake_crawler() -> FakeCrawler:
    return FakeCrawler()


@pytest.fixture
def fake_completer() -> FakeCompleter:
    return FakeCompleter()
