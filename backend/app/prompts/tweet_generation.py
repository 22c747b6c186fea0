"""Prompts for generating tweet drafts from a chunk of site content."""

TWEET_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates tweets based on provided text content."
)

TWEET_GENERATION_PROMPT = """Generate {count} short, engaging tweets about the content below.

## Content

{content}

## Style

- American English, conversational, everyday tone
- Each tweet must stand on its own and fit in 280 characters
- No numbering, no hashtags unless they read naturally

## Output Format

Write exactly {count} lines, each starting with "{marker}" followed by the tweet:

{marker} First tweet text
{marker} Second tweet text

Return ONLY those lines, nothing else."""
