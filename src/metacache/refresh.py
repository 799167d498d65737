"""Cache refresh controller.

:class:`CacheRefresher` is the whole decision tree behind
``metacache refresh``:

1. Make sure the cache directory exists.
2. If the cached payload is fresh (``now - timestamp <= max_age``), reuse it.
3. Otherwise walk the fetch chain (``gh`` CLI, then direct HTTP) and commit
   the first payload that comes back: payload file first, timestamp second.
4. If nothing could be fetched, fall back to whatever payload is on disk,
   however old; fail only when there is none.

Each fetcher is attempted at most once. Nothing is written to the cache
until a fetcher has returned a validated payload, so a rate-limited
response never replaces a good one.

Example::

    refresher = CacheRefresher.from_settings(settings, token=resolve_token(settings))
    sys.exit(refresher.run())
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from metacache.exceptions import CacheDirError, FetchError, RateLimitError
from metacache.fetchers import Fetcher, build_fetchers
from metacache.models import CacheStatus, RefreshOutcome, Settings
from metacache.output import get_output
from metacache.store import (
    FilePayloadStore,
    FileTimestampStore,
    PayloadStore,
    TimestampStore,
)
from metacache.summary import summary_lines


class CacheRefresher:
    """Refresh the on-disk cache, reusing or falling back to existing data.

    Args:
        cache_dir: Directory that must exist before any write.
        max_age_seconds: Cache is fresh while its age is at most this value.
        payload_store: Where the raw payload lives.
        timestamp_store: Where the fetch time lives.
        fetchers: Fetch strategies in priority order.
        clock: Returns the current time in epoch seconds.
    """

    def __init__(
        self,
        cache_dir: Path,
        max_age_seconds: int,
        payload_store: PayloadStore,
        timestamp_store: TimestampStore,
        fetchers: Sequence[Fetcher],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cache_dir = cache_dir
        self._max_age = max_age_seconds
        self._payload = payload_store
        self._timestamp = timestamp_store
        self._fetchers = list(fetchers)
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token: Optional[str] = None,
        fetchers: Optional[Sequence[Fetcher]] = None,
    ) -> CacheRefresher:
        """Build a refresher backed by the files named in *settings*."""
        return cls(
            cache_dir=settings.cache_dir,
            max_age_seconds=settings.max_age_seconds,
            payload_store=FilePayloadStore(settings.payload_path),
            timestamp_store=FileTimestampStore(settings.timestamp_path),
            fetchers=fetchers if fetchers is not None else build_fetchers(settings, token),
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def run(self, force: bool = False) -> int:
        """Refresh the cache and return the process exit code.

        Raises:
            CacheDirError: If the cache directory cannot be created.
        """
        return self.refresh(force=force).exit_code

    def refresh(self, force: bool = False) -> RefreshOutcome:
        """Refresh the cache and report how the run ended.

        Args:
            force: Skip the freshness check and always try to fetch.

        Raises:
            CacheDirError: If the cache directory cannot be created.
        """
        output = get_output()
        self._ensure_cache_dir()

        if not force and self.is_valid(report=True):
            output.info(f"Using existing cache from {self._timestamp.read()}")
            return RefreshOutcome.FRESH

        if self._fetch_and_commit():
            for line in summary_lines(self._payload.read()):
                output.print_data(line)
            return RefreshOutcome.FETCHED

        if self._payload.exists():
            output.warning(
                "Failed to update cache, using existing cached data (which may be expired)"
            )
            return RefreshOutcome.STALE

        output.error("Failed to fetch GitHub API data and no cache exists")
        return RefreshOutcome.FAILED

    def age(self) -> Optional[int]:
        """Seconds since the last successful fetch, or ``None`` if unknown."""
        timestamp = self._timestamp.read()
        if timestamp is None:
            return None
        return int(self._clock()) - timestamp

    def is_valid(self, report: bool = False) -> bool:
        """Return ``True`` if both files exist and the cache is not older than max age.

        Args:
            report: Print whether the cache is being reused or has expired.
        """
        if not (self._payload.exists() and self._timestamp.exists()):
            return False
        age = self.age()
        if age is None:
            return False

        output = get_output()
        if age > self._max_age:
            if report:
                output.info(f"Cache is expired ({age} seconds old)")
            return False
        if report:
            output.info(f"Using cached GitHub API data ({age} seconds old)")
        return True

    def status(self) -> CacheStatus:
        """Return a snapshot of the cache for ``metacache status``."""
        payload = self._payload.read()
        return CacheStatus(
            cache_dir=str(self._cache_dir),
            payload_exists=payload is not None,
            timestamp_exists=self._timestamp.exists(),
            payload_bytes=len(payload) if payload is not None else None,
            timestamp=self._timestamp.read(),
            age_seconds=self.age(),
            max_age_seconds=self._max_age,
            valid=self.is_valid(),
        )

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_cache_dir(self) -> None:
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheDirError(
                f"Cannot create cache directory {self._cache_dir}: {exc}"
            ) from exc

    def _fetch_and_commit(self) -> bool:
        """Try each fetcher in order; return ``True`` once one payload is committed."""
        output = get_output()
        for fetcher in self._fetchers:
            output.info(f"Attempting to fetch GitHub API data using {fetcher.description}...")
            if not fetcher.is_available():
                output.info(fetcher.unavailable_reason())
                continue

            try:
                payload = fetcher.fetch()
            except RateLimitError as exc:
                output.warning(str(exc))
                continue
            except FetchError as exc:
                output.info(str(exc))
                continue

            try:
                self._commit(payload)
            except OSError as exc:
                output.warning(f"Could not write cache after {fetcher.name} fetch: {exc}")
                continue

            output.success(
                f"Successfully fetched and cached GitHub API data using {fetcher.description}"
            )
            return True
        return False

    def _commit(self, payload: bytes) -> None:
        # Payload strictly before timestamp: a crash in between leaves the
        # timestamp stale, never falsely fresh.
        self._payload.write(payload)
        self._timestamp.write(int(self._clock()))
