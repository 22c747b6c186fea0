"""Business logic services."""

from app.services.chunker import chunk_text
from app.services.draft_generator import DraftGenerator, GenerationReport
from app.services.draft_parser import parse_drafts
from app.services.firecrawl_crawler import FirecrawlCrawler
from app.services.llm_client import CompletionClient
from app.services.result_validator import validate_drafts
from app.services.tweet_cache import TweetCache
from app.services.tweet_pipeline import TweetPipeline
from app.services.url_normalizer import NormalizedSite, normalize_site

__all__ = [
    "chunk_text",
    "CompletionClient",
    "DraftGenerator",
    "FirecrawlCrawler",
    "GenerationReport",
    "NormalizedSite",
    "normalize_site",
    "parse_drafts",
    "TweetCache",
    "TweetPipeline",
    "validate_drafts",
]
