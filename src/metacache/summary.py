"""Summary of a freshly cached payload.

After a successful fetch the CLI prints how many GitHub Actions domains the
payload lists. Counting follows ``jq '.domains.actions | length'``: a
missing key or ``null`` counts as zero, while a payload that is not JSON,
or whose value has no length, cannot be summarised.
"""

from __future__ import annotations

import json
from typing import Any, Optional


class SummaryError(ValueError):
    """Raised when the payload cannot be summarised."""


def count_action_domains(payload: Optional[bytes]) -> int:
    """Return the length of ``domains.actions`` in *payload*.

    Args:
        payload: Raw cached bytes.

    Returns:
        Number of entries (items of a list, keys of an object, or
        characters of a string), ``0`` when the path is absent.

    Raises:
        SummaryError: If the payload is missing, not JSON, or the path
            cannot be walked.
    """
    if payload is None:
        raise SummaryError("no payload")
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SummaryError(f"payload is not JSON: {exc}") from exc

    actions = _lookup(_lookup(data, "domains"), "actions")
    if actions is None:
        return 0
    if isinstance(actions, (list, dict, str)):
        return len(actions)
    raise SummaryError(f"domains.actions has no length ({type(actions).__name__})")


def _lookup(value: Any, key: str) -> Any:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise SummaryError(f"cannot index {type(value).__name__} with {key!r}")
    return value.get(key)


def summary_lines(payload: Optional[bytes]) -> list[str]:
    """Return the human-readable summary printed after a successful fetch."""
    lines = ["GitHub API meta data cached successfully. Summary:"]
    try:
        lines.append(f"- Actions domains: {count_action_domains(payload)}")
    except SummaryError:
        lines.append("- Could not parse actions domains from cache file")
    return lines
