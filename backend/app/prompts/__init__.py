"""LLM prompts for various tasks."""

from app.prompts.tweet_generation import TWEET_GENERATION_PROMPT, TWEET_SYSTEM_PROMPT

__all__ = [
    "TWEET_GENERATION_PROMPT",
    "TWEET_SYSTEM_PROMPT",
]
