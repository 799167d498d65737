"""Secondary fetch path: a direct HTTP request via :mod:`httpx`.

Sends ``Authorization: token <value>`` when a bearer token is available
and falls back to an unauthenticated request otherwise. Unauthenticated
requests share a small per-IP quota, so the response body is checked for
GitHub's rate-limit message before it is handed back; a rate-limited body
is never returned as a payload.
"""

from __future__ import annotations

from typing import Optional

import httpx

from metacache.exceptions import FetchError, RateLimitError
from metacache.fetchers.base import Fetcher
from metacache.models import DEFAULT_RATE_LIMIT_MARKER
from metacache.output import get_output


class HttpFetcher(Fetcher):
    """Fetch the payload with a single ``GET`` request.

    Args:
        url: Full URL to fetch.
        token: Optional bearer token sent as ``Authorization: token <value>``.
        timeout: Request timeout in seconds.
        rate_limit_marker: Substring whose presence in the body marks the
            response as rate-limited.
        transport: Optional :class:`httpx.BaseTransport`, used by tests to
            substitute :class:`httpx.MockTransport`.

    Example::

        payload = HttpFetcher("https://api.github.com/meta", token=None).fetch()
    """

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        rate_limit_marker: str = DEFAULT_RATE_LIMIT_MARKER,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._url = url
        self._token = token
        self._timeout = timeout
        self._rate_limit_marker = rate_limit_marker
        self._transport = transport

    @property
    def name(self) -> str:
        return "http"

    @property
    def description(self) -> str:
        if self._token:
            return "HTTP with token"
        return "HTTP without auth"

    def fetch(self) -> bytes:
        """Issue the request and return the validated body.

        Raises:
            RateLimitError: If the body contains the rate-limit marker.
            FetchError: On network errors or timeouts.
        """
        output = get_output()
        headers = {"Accept": "application/json"}
        if self._token:
            output.info("Using token for authentication")
            headers["Authorization"] = f"token {self._token}"
        else:
            output.info("No token found, making unauthenticated request (may be rate limited)")

        try:
            with httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = client.get(self._url, headers=headers)
        except httpx.HTTPError as exc:
            raise FetchError(f"GET {self._url} failed: {exc}", source=self.name) from exc

        output.debug(f"GET {self._url} -> HTTP {response.status_code}")
        body = response.content

        if self._rate_limit_marker and self._rate_limit_marker.encode("utf-8") in body:
            raise RateLimitError(
                f"Rate limit exceeded for {'authenticated' if self._token else 'unauthenticated'} request",
                source=self.name,
            )
        return body
