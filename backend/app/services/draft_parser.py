"""Parser for tweet drafts in free-form LLM output.

Grammar, one draft per line::

    line   := ws* MARKER ws* text ws*
    MARKER := "TWEET:"

Lines that do not start with the exact marker (after leading whitespace)
are ignored, as are marker lines with no text after them.
"""

DRAFT_MARKER = "TWEET:"


def parse_drafts(text: str | None, marker: str = DRAFT_MARKER) -> list[str]:
    """Extract draft lines from a completion response, in order."""
    if not text:
        return []

    drafts = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped.startswith(marker):
            continue
        draft = stripped[len(marker):].strip()
        if draft:
            drafts.append(draft)
    return drafts
