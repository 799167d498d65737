"""Tests for the post-fetch summary."""

from __future__ import annotations

import pytest

from metacache.summary import SummaryError, count_action_domains, summary_lines


class TestCountActionDomains:
    def test_counts_list_entries(self) -> None:
        assert count_action_domains(b'{"domains":{"actions":["a","b"]}}') == 2

    def test_missing_path_counts_as_zero(self) -> None:
        assert count_action_domains(b"{}") == 0
        assert count_action_domains(b'{"domains":{}}') == 0
        assert count_action_domains(b'{"domains":null}') == 0

    def test_object_counts_keys(self) -> None:
        payload = b'{"domains":{"actions":{"inbound":[],"outbound":[]}}}'
        assert count_action_domains(payload) == 2

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            b"",
            b"<html>rate limited</html>",
            b'{"domains":["github.com"]}',
            b'{"domains":{"actions":true}}',
            b"\xff\xfe",
        ],
    )
    def test_unsummarisable_payloads(self, payload) -> None:
        with pytest.raises(SummaryError):
            count_action_domains(payload)


class TestSummaryLines:
    def test_success(self) -> None:
        assert summary_lines(b'{"domains":{"actions":["a","b","c"]}}') == [
            "GitHub API meta data cached successfully. Summary:",
            "- Actions domains: 3",
        ]

    def test_parse_failure_is_reported_not_raised(self) -> None:
        lines = summary_lines(b"not json")
        assert lines[-1] == "- Could not parse actions domains from cache file"
