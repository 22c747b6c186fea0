"""Dependency injection for FastAPI routes."""

from functools import partial
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import Settings, get_settings
from app.services import (
    CompletionClient,
    DraftGenerator,
    FirecrawlCrawler,
    TweetCache,
    TweetPipeline,
)


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Session factory created at startup."""
    return request.app.state.session_factory


def get_completion_client(request: Request) -> CompletionClient:
    """Completion client shared across requests."""
    return request.app.state.completion_client


# Type aliases for dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
SessionFactory = Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)]
LLMClient = Annotated[CompletionClient, Depends(get_completion_client)]


def get_pipeline(
    settings: AppSettings,
    session_factory: SessionFactory,
    client: LLMClient,
) -> TweetPipeline:
    """Assemble the tweet pipeline for a request."""
    return TweetPipeline(
        settings=settings,
        cache=TweetCache(session_factory),
        crawler_factory=partial(
            FirecrawlCrawler, timeout_seconds=settings.firecrawl_timeout_seconds
        ),
        generator=DraftGenerator(client, settings),
        ensure_llm_configured=client.ensure_configured,
    )


Pipeline = Annotated[TweetPipeline, Depends(get_pipeline)]
