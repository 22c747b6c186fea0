"""Split scraped site text into bounded-size chunks for the LLM.

Sentences are packed greedily. A sentence that is longer than the limit on
its own is split on word boundaries, and its trailing piece starts the next
chunk so the following sentences can still be packed behind it.
"""

import re

DEFAULT_MAX_CHUNK_LENGTH = 4000

# A sentence ends at ., ! or ? followed by whitespace
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    """Split text into whitespace-normalized sentences."""
    sentences = []
    for raw in _SENTENCE_BOUNDARY.split(text):
        sentence = " ".join(raw.split())
        if sentence:
            sentences.append(sentence)
    return sentences


def _split_words(sentence: str, max_length: int) -> list[str]:
    """Greedily pack the words of an overlong sentence into pieces."""
    pieces: list[str] = []
    current = ""
    for word in sentence.split(" "):
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= max_length:
            current = f"{current} {word}"
        else:
            pieces.append(current)
            current = word
    if current:
        pieces.append(current)
    return pieces


def chunk_text(text: str, max_length: int = DEFAULT_MAX_CHUNK_LENGTH) -> list[str]:
    """Split text into ordered chunks of at most ``max_length`` characters.

    Args:
        text: The text to split (typically combined page markdown)
        max_length: Maximum chunk length in characters

    Returns:
        Non-empty, stripped chunks in document order. A chunk only exceeds
        ``max_length`` when a single word is longer than the limit.
    """
    if max_length < 1:
        raise ValueError("max_length must be at least 1")

    chunks: list[str] = []
    current = ""

    for sentence in split_sentences(text or ""):
        if not current:
            candidate = sentence
        else:
            candidate = f"{current} {sentence}"

        if len(candidate) <= max_length:
            current = candidate
            continue

        if current:
            chunks.append(current)
            current = ""

        if len(sentence) <= max_length:
            current = sentence
            continue

        pieces = _split_words(sentence, max_length)
        chunks.extend(pieces[:-1])
        current = pieces[-1]

    if current:
        chunks.append(current)

    return chunks
