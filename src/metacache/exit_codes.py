"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific outcome and is referenced by the
corresponding :class:`~metacache.exceptions.MetacacheError` subclass or
:class:`~metacache.models.RefreshOutcome` member.  Container builds and CI
scripts only need to check for ``0``: a stale cache is still a success.

Example::

    $ metacache refresh
    $ echo $?
    1   # EXIT_GENERIC_FAILURE -- nothing fetched and no cache on disk
"""

EXIT_SUCCESS = 0
"""Fresh cache reused, fetch succeeded, or stale cache fallback used."""

EXIT_GENERIC_FAILURE = 1
"""No fetch succeeded and no cache exists, or an unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or configuration values."""

EXIT_NOT_FOUND = 4
"""The requested cache entry does not exist."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
