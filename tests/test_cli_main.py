"""Tests for the CLI entry point in single-command mode."""

import pytest

import cli.main as cli_main
from cli.models import StatsCommand, UploadCommand


@pytest.fixture
def dispatched(monkeypatch):
    calls = []
    closed = []
    state = {"result": "  total_users: 0"}

    def fake_dispatch(cmd_obj, client=None):
        calls.append(cmd_obj)
        return state["result"]

    monkeypatch.setattr(cli_main, "dispatch_command", fake_dispatch)
    monkeypatch.setattr(cli_main, "close_client", lambda: closed.append(True))
    monkeypatch.setattr(cli_main, "repl_loop", lambda: pytest.fail("REPL should not start"))
    return calls, closed, state


def test_single_command_is_dispatched(dispatched, capsys):
    calls, closed, _ = dispatched

    assert cli_main.main(["stats"]) == 0

    assert calls == [StatsCommand()]
    assert closed == [True]
    assert "total_users" in capsys.readouterr().out


def test_arguments_with_spaces_survive_quoting(dispatched):
    calls, _, _ = dispatched

    cli_main.main(["upload", "my report.pdf", "1500"])

    assert calls == [UploadCommand(path="my report.pdf", fee=1500)]


def test_debug_flag_is_not_part_of_the_command(dispatched):
    calls, _, _ = dispatched

    assert cli_main.main(["--debug", "stats"]) == 0
    assert calls == [StatsCommand()]


def test_failed_command_exits_nonzero(dispatched):
    _, _, state = dispatched
    state["result"] = "Upload failed: Fee too low"

    assert cli_main.main(["stats"]) == 1


def test_parse_error_exits_with_usage_code(dispatched, capsys):
    calls, _, _ = dispatched

    assert cli_main.main(["frobnicate"]) == 2
    assert calls == []
    assert "Error" in capsys.readouterr().err
