"""Fetch strategies for refreshing the cache.

The default chain, in priority order:

1. :class:`GhCliFetcher` -- ``gh api meta`` when the GitHub CLI is
   installed and logged in.
2. :class:`HttpFetcher` -- a direct ``GET`` request, bearer-authenticated
   when a token is available.
"""

from __future__ import annotations

from typing import Optional

from metacache.fetchers.base import Fetcher
from metacache.fetchers.gh_cli import GhCliFetcher
from metacache.fetchers.http import HttpFetcher
from metacache.models import Settings


def build_fetchers(settings: Settings, token: Optional[str] = None) -> list[Fetcher]:
    """Return the default fetch chain for *settings*.

    Args:
        settings: Effective settings (endpoints, timeouts, rate-limit marker).
        token: Bearer token for the HTTP path, or ``None`` for an
            unauthenticated request.
    """
    return [
        GhCliFetcher(
            endpoint=settings.gh_endpoint,
            command=settings.gh_command,
            timeout=settings.timeout,
        ),
        HttpFetcher(
            url=settings.url,
            token=token,
            timeout=settings.timeout,
            rate_limit_marker=settings.rate_limit_marker,
        ),
    ]


__all__ = ["Fetcher", "GhCliFetcher", "HttpFetcher", "build_fetchers"]
