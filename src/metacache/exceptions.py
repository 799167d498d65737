"""Exception hierarchy for metacache.

All exceptions inherit from :class:`MetacacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`metacache.exit_codes`.
The top-level error handler in :func:`metacache.app.main` catches
``MetacacheError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Fetch errors never reach the top level: the refresh controller recovers
from them by moving on to the next fetcher or the stale-cache fallback.

Subclass hierarchy::

    MetacacheError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 2)
    +-- CacheDirError       (exit 1)
    +-- CacheMissError      (exit 4)
    +-- FetchError          (exit 1)
        +-- RateLimitError  (exit 1)
"""

from metacache.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


class MetacacheError(Exception):
    """Base exception for all metacache errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`metacache.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(MetacacheError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(MetacacheError):
    """Raised for configuration problems (invalid JSON, out-of-range values, unknown keys)."""

    exit_code = EXIT_INVALID_USAGE


class CacheDirError(MetacacheError):
    """Raised when the cache directory cannot be created."""

    exit_code = EXIT_GENERIC_FAILURE


class CacheMissError(MetacacheError):
    """Raised when a command needs a cached payload and none exists."""

    exit_code = EXIT_NOT_FOUND


class FetchError(MetacacheError):
    """Raised by a fetcher when it could not retrieve a usable payload.

    Args:
        message: Human-readable description of the failure.
        source: Name of the fetcher that failed (e.g. ``"gh"``, ``"http"``).
    """

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class RateLimitError(FetchError):
    """Raised when a response body reports that the API rate limit is exhausted."""
