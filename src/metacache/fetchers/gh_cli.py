"""Primary fetch path: the authenticated GitHub CLI.

``gh`` carries its own credentials (from ``gh auth login`` or
``GH_TOKEN``) and its own rate-limit bucket, so it is tried before the
direct HTTP request. The fetcher only runs ``gh api`` after
``gh auth status`` has succeeded.
"""

from __future__ import annotations

import shutil
import subprocess

from metacache.exceptions import FetchError
from metacache.fetchers.base import Fetcher
from metacache.output import get_output


class GhCliFetcher(Fetcher):
    """Fetch the payload with ``gh api <endpoint>``.

    Args:
        endpoint: API path passed to ``gh api`` (default ``meta``).
        command: Name or path of the ``gh`` binary.
        timeout: Seconds to wait for each ``gh`` invocation.
    """

    def __init__(self, endpoint: str = "meta", command: str = "gh", timeout: float = 30.0) -> None:
        self._endpoint = endpoint
        self._command = command
        self._timeout = timeout
        self._reason = ""

    @property
    def name(self) -> str:
        return "gh"

    @property
    def description(self) -> str:
        return "authenticated gh CLI"

    def is_available(self) -> bool:
        """Return ``True`` if ``gh`` is installed and ``gh auth status`` succeeds."""
        if shutil.which(self._command) is None:
            self._reason = f"{self._command} CLI not found"
            return False
        try:
            result = self._run(["auth", "status"])
        except FetchError as exc:
            self._reason = str(exc)
            return False
        if result.returncode != 0:
            self._reason = "gh CLI not authenticated"
            return False
        return True

    def unavailable_reason(self) -> str:
        return self._reason or super().unavailable_reason()

    def fetch(self) -> bytes:
        result = self._run(["api", self._endpoint])
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            detail = stderr.splitlines()[-1] if stderr else f"exit code {result.returncode}"
            raise FetchError(f"gh api {self._endpoint} failed: {detail}", source=self.name)
        return result.stdout

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[bytes]:
        cmd = [self._command, *args]
        get_output().debug(f"Running: {' '.join(cmd)}")
        try:
            return subprocess.run(
                cmd,
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise FetchError(
                f"{' '.join(cmd)} timed out after {self._timeout:g}s", source=self.name
            ) from exc
        except OSError as exc:
            raise FetchError(f"Could not run {self._command}: {exc}", source=self.name) from exc
