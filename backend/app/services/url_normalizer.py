"""Derive the crawl root (stem) for a user-submitted URL."""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from app.exceptions import InvalidUrl

DEFAULT_SCHEME = "http"
DEFAULT_CODE_HOSTING_DOMAINS = ("github.com",)

_SCHEME_RE = re.compile(r"^(https?):/+", re.IGNORECASE)


@dataclass(frozen=True)
class NormalizedSite:
    """Hostname, optionally narrowed to an owner/repo on a code host."""
    host: str
    owner: str | None = None
    repo: str | None = None

    @property
    def stem(self) -> str:
        """Crawl root: ``host`` or ``host/owner/repo``."""
        if self.owner and self.repo:
            return f"{self.host}/{self.owner}/{self.repo}"
        return self.host


def _is_code_host(host: str, domains) -> bool:
    return any(host == domain or host.endswith(f".{domain}") for domain in domains)


def normalize_site(
    raw: str,
    code_hosting_domains=DEFAULT_CODE_HOSTING_DOMAINS,
) -> NormalizedSite:
    """Normalize a raw URL string into a NormalizedSite.

    Strings without an ``http:/`` or ``https:/`` prefix get ``http://``
    prepended before parsing. On a code-hosting domain, a path with at
    least two non-empty segments selects ``owner/repo`` as the root.

    Raises:
        InvalidUrl: If the string still cannot be parsed into a hostname.
    """
    candidate = (raw or "").strip()
    if not candidate:
        raise InvalidUrl("Invalid URL provided.")

    match = _SCHEME_RE.match(candidate)
    if match:
        candidate = f"{match.group(1).lower()}://{candidate[match.end():]}"
    else:
        candidate = f"{DEFAULT_SCHEME}://{candidate}"

    try:
        parsed = urlsplit(candidate)
        host = parsed.hostname
        # Accessing .port validates the authority section
        parsed.port
    except ValueError as e:
        raise InvalidUrl("Invalid URL provided.", context={"url": raw, "reason": str(e)}) from e

    if not host or any(ch.isspace() for ch in host):
        raise InvalidUrl("Invalid URL provided.", context={"url": raw})

    if _is_code_host(host, code_hosting_domains):
        segments = [segment for segment in parsed.path.split("/") if segment]
        if len(segments) >= 2:
            return NormalizedSite(host=host, owner=segments[0], repo=segments[1])

    return NormalizedSite(host=host)
