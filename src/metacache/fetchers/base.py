"""Abstract base class for fetch strategies.

A refresh run walks an ordered list of :class:`Fetcher` objects and stops
at the first one that returns a payload. Each fetcher answers two
questions:

- :meth:`~Fetcher.is_available` -- can this strategy be tried at all right
  now (binary installed, user logged in)?  An unavailable fetcher is
  skipped without being counted as an attempt.
- :meth:`~Fetcher.fetch` -- retrieve the payload, or raise
  :class:`~metacache.exceptions.FetchError`.

A fetcher never writes to the cache. Whatever it returns has already been
validated, so the controller can commit it as-is.

See Also:
    :func:`metacache.fetchers.build_fetchers` for the default chain.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Fetcher(ABC):
    """Abstract base class for a single way of retrieving the payload.

    Subclasses must provide:

    1. A :attr:`name` property returning a short identifier used in
       messages (e.g. ``"gh"``, ``"http"``).
    2. A :attr:`description` used in progress lines.
    3. A :meth:`fetch` implementation.

    :meth:`is_available` defaults to ``True``; override it when the
    strategy depends on something outside the process.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier for this strategy."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description, e.g. ``"authenticated gh CLI"``."""

    def is_available(self) -> bool:
        """Return ``True`` if :meth:`fetch` is worth attempting."""
        return True

    def unavailable_reason(self) -> str:
        """Explain why :meth:`is_available` returned ``False``."""
        return f"{self.name} is not available"

    @abstractmethod
    def fetch(self) -> bytes:
        """Retrieve the payload.

        Returns:
            The raw response body, ready to be written to the cache.

        Raises:
            FetchError: If the payload could not be retrieved or is unusable.
        """
