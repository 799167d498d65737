"""File-backed stores for the cached payload and its timestamp.

The cache is two flat files in one directory:

* ``meta.json`` -- the raw response body, written by :class:`FilePayloadStore`.
* ``meta-timestamp.txt`` -- epoch seconds as a decimal integer, written by
  :class:`FileTimestampStore`.

Both stores write through :func:`~metacache.config.atomic_write`, so a
reader never observes a half-written file. The refresh controller only
ever writes the timestamp after the payload write has returned, which
keeps a crash from leaving a fresh timestamp next to an old payload.

The abstract :class:`PayloadStore` and :class:`TimestampStore` interfaces
exist so the controller can run against in-memory stores in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from metacache.config import atomic_write
from metacache.output import get_output


class PayloadStore(ABC):
    """Storage for the raw cached response body."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location, used in status output."""

    @abstractmethod
    def exists(self) -> bool:
        """Return ``True`` if a payload has been stored."""

    @abstractmethod
    def read(self) -> Optional[bytes]:
        """Return the stored payload, or ``None`` if nothing is stored."""

    @abstractmethod
    def write(self, payload: bytes) -> None:
        """Replace the stored payload with *payload*."""

    @abstractmethod
    def clear(self) -> bool:
        """Remove the stored payload. Returns ``True`` if something was removed."""


class TimestampStore(ABC):
    """Storage for the epoch-seconds marker of the last successful fetch."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location, used in status output."""

    @abstractmethod
    def exists(self) -> bool:
        """Return ``True`` if a timestamp has been stored."""

    @abstractmethod
    def read(self) -> Optional[int]:
        """Return the stored timestamp, or ``None`` if absent or unreadable."""

    @abstractmethod
    def write(self, timestamp: int) -> None:
        """Replace the stored timestamp."""

    @abstractmethod
    def clear(self) -> bool:
        """Remove the stored timestamp. Returns ``True`` if something was removed."""


class FilePayloadStore(PayloadStore):
    """Payload stored verbatim in a single file.

    Args:
        path: Full path of the payload file (e.g. ``~/.github-meta-cache/meta.json``).
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def location(self) -> str:
        return str(self._path)

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> Optional[bytes]:
        if not self._path.is_file():
            return None
        return self._path.read_bytes()

    def write(self, payload: bytes) -> None:
        atomic_write(self._path, payload)

    def clear(self) -> bool:
        return _unlink(self._path)


class FileTimestampStore(TimestampStore):
    """Timestamp stored as decimal epoch seconds in a single text file.

    The file holds the bare integer with no trailing newline. Surrounding
    whitespace is tolerated on read so that files written by
    ``date +%s > meta-timestamp.txt`` are still understood.

    Args:
        path: Full path of the timestamp file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def location(self) -> str:
        return str(self._path)

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> Optional[int]:
        if not self._path.is_file():
            return None
        raw = self._path.read_bytes()
        try:
            return int(raw.decode("utf-8").strip())
        except (UnicodeDecodeError, ValueError):
            get_output().debug(f"Ignoring unreadable timestamp in {self._path}: {raw!r}")
            return None

    def write(self, timestamp: int) -> None:
        atomic_write(self._path, str(int(timestamp)))

    def clear(self) -> bool:
        return _unlink(self._path)


def _unlink(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
