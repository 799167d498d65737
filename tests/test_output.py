"""Tests for the output formatting system.

Covers format resolution, colour disabling, stdout/stderr discipline,
quiet/verbose handling, table rendering, and payload formatting.
"""

from __future__ import annotations

import json

import pytest

from metacache import output as output_module
from metacache.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("metacache.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("metacache.output._is_tty", lambda: True)


class TestFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager().format == OutputFormat.RICH

    def test_no_color_forces_plain_on_tty(self, tty):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_wins(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_dumb_terminal(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_colour_enabled_by_default(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


class TestStreams:
    def test_diagnostics_go_to_stderr(self, capsys, non_tty):
        mgr = OutputManager(no_color=True)
        mgr.info("checking cache")
        mgr.success("cached")
        mgr.warning("stale")
        mgr.error("nothing cached")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.splitlines() == [
            "checking cache",
            "cached",
            "Warning: stale",
            "Error: nothing cached",
        ]

    def test_data_goes_to_stdout(self, capsys, non_tty):
        OutputManager(no_color=True).print_data("- Actions domains: 2")
        captured = capsys.readouterr()
        assert captured.out == "- Actions domains: 2\n"
        assert captured.err == ""

    def test_quiet_keeps_warnings_and_errors(self, capsys, non_tty):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden")
        mgr.suggest("hidden")
        mgr.warning("shown")
        mgr.error("shown too")

        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "Warning: shown" in err
        assert "Error: shown too" in err

    def test_debug_only_when_verbose(self, capsys, non_tty):
        OutputManager(no_color=True).debug("quiet debug")
        OutputManager(no_color=True, verbose=True).debug("loud debug")

        err = capsys.readouterr().err
        assert "quiet debug" not in err
        assert "[debug] loud debug" in err

    def test_rich_stderr_does_not_eat_brackets(self, capsys, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager()
        mgr.info("Ignoring unreadable timestamp: [not a number]")
        assert "[not a number]" in capsys.readouterr().err


class TestDataFormatting:
    def test_json_string_payload_is_pretty_printed(self, capsys):
        OutputManager(format=OutputFormat.JSON).format_response('{"domains":{"actions":["a"]}}')
        assert json.loads(capsys.readouterr().out) == {"domains": {"actions": ["a"]}}

    def test_non_json_payload_printed_verbatim(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).format_response("<html>oops</html>")
        assert capsys.readouterr().out == "<html>oops</html>\n"

    def test_table_json(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_table(
            ["field", "value"], [["valid", "yes"], ["age_seconds", "12"]]
        )
        assert json.loads(capsys.readouterr().out) == [
            {"field": "valid", "value": "yes"},
            {"field": "age_seconds", "value": "12"},
        ]

    def test_table_plain(self, capsys):
        OutputManager(format=OutputFormat.PLAIN).print_table(
            ["field", "value"], [["valid", "no"]]
        )
        assert capsys.readouterr().out == "field\tvalue\nvalid\tno\n"


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_output_installs_instance(self):
        mgr = OutputManager(quiet=True)
        set_output(mgr)
        assert get_output() is mgr

    def test_module_helpers_delegate(self, capsys):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.warning("via helper")
        output_module.print_data("data line")

        captured = capsys.readouterr()
        assert "Warning: via helper" in captured.err
        assert captured.out == "data line\n"
