"""Tweet generation route."""

import asyncio
import logging

from fastapi import APIRouter, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import AppSettings, Pipeline
from app.exceptions import TweetGenerationError

logger = logging.getLogger(__name__)

router = APIRouter()

GENERATE_TWEETS_PATH = "/api/generate-tweets"


class GenerateTweetsRequest(BaseModel):
    """Request to generate tweets for a website."""

    model_config = ConfigDict(populate_by_name=True)

    url: str | None = None
    firecrawl_key: str | None = Field(default=None, alias="firecrawlKey")
    wants_full: bool | None = Field(default=None, alias="wantsFull")


class GenerateTweetsResponse(BaseModel):
    """Tweets on success, or a single error message."""

    success: bool
    tweets: list[str] | None = None
    error: str | None = None


@router.post(
    "/generate-tweets",
    response_model=GenerateTweetsResponse,
    response_model_exclude_none=True,
)
async def generate_tweets(
    request: GenerateTweetsRequest,
    pipeline: Pipeline,
    settings: AppSettings,
) -> GenerateTweetsResponse:
    """Generate up to 15 tweets from a website's content."""
    try:
        tweets = await asyncio.wait_for(
            pipeline.run(
                request.url or "",
                firecrawl_key=request.firecrawl_key or None,
                wants_full=bool(request.wants_full),
            ),
            timeout=settings.request_timeout_seconds,
        )
    except TweetGenerationError as e:
        logger.warning(f"Tweet generation failed for {request.url}: {e.message}")
        return GenerateTweetsResponse(success=False, error=e.message)
    except asyncio.TimeoutError:
        logger.error(f"Tweet generation timed out for {request.url}")
        return GenerateTweetsResponse(success=False, error="Request timed out")
    except Exception as e:
        logger.exception(f"Error in generate_tweets for {request.url}")
        return GenerateTweetsResponse(
            success=False,
            error=str(e) or "An unknown error occurred.",
        )

    return GenerateTweetsResponse(success=True, tweets=list(tweets))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed tweet requests with the standard failure body."""
    if request.url.path != GENERATE_TWEETS_PATH:
        return await request_validation_exception_handler(request, exc)

    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {field or 'body'}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request body."
    logger.warning(message)
    return JSONResponse(GenerateTweetsResponse(success=False, error=message).model_dump(exclude_none=True))
