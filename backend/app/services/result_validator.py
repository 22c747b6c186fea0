"""Shape validation for tweet result sets."""

from typing import Annotated, Any

from pydantic import StringConstraints, TypeAdapter, ValidationError

from app.exceptions import GenerationEmpty

MAX_TWEETS = 15

ResultSet = tuple[str, ...]

TweetText = Annotated[str, StringConstraints(strict=True, min_length=1)]

_TWEET_LIST = TypeAdapter(list[TweetText])


def check_tweets(value: Any) -> ResultSet:
    """Check that value is a list of non-blank strings.

    Raises:
        ValidationError: If value is not a list or an entry is not a
            non-empty string
        ValueError: If an entry is only whitespace
    """
    tweets = _TWEET_LIST.validate_python(value)
    for i, tweet in enumerate(tweets):
        if not tweet.strip():
            raise ValueError(f"Tweet {i} is blank")
    return tuple(tweets)


def validate_drafts(candidates: list[Any], limit: int = MAX_TWEETS) -> ResultSet:
    """Truncate candidates to ``limit`` and validate the result shape.

    Raises:
        GenerationEmpty: If there are no candidates or any kept entry is
            not a non-empty string. The message carries the cause.
    """
    kept = list(candidates)[:limit]
    if not kept:
        raise GenerationEmpty("Failed to generate tweets: no drafts were produced.")

    try:
        return check_tweets(kept)
    except (ValidationError, ValueError) as e:
        raise GenerationEmpty(f"Failed to validate generated tweets. {e}") from e
