"""metacache -- Cache the GitHub API meta endpoint on disk.

Container builds and CI jobs that read ``https://api.github.com/meta``
on every run quickly exhaust the unauthenticated rate limit. metacache
keeps a copy of the response in ``~/.github-meta-cache`` and only refetches
it once it is older than an hour, trying the authenticated ``gh`` CLI
first, then a direct HTTP request, and serving stale data when both fail.

Typical use::

    metacache                 # refresh if expired, otherwise reuse
    metacache status          # inspect the cache
    metacache show --json     # print the cached payload

Modules:
    app: Typer application and CLI entry point.
    refresh: The cache refresh controller.
    fetchers: ``gh`` CLI and HTTP fetch strategies.
    store: File-backed payload and timestamp stores.
    config: XDG-aware configuration and settings precedence.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
