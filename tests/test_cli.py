"""Tests for the rollover command line."""

from unittest.mock import patch

import pytest

from rollover import cli
from rollover.cli import main
from rollover.trace.store_jsonl import load_events

from tests.fakes import FakeTracker

ARGS = ["--repo", "octo/widgets", "--milestone", "5", "--issues-count", "10", "--token", "t"]


@pytest.fixture
def tracker():
    return FakeTracker({5: "2.0", 6: "2.1"}, [{"number": 42, "labels": [], "milestone": 5}])


def test_run_success_is_silent(clean_env, tracker, capsys):
    with patch("rollover.cli.GitHubClient", return_value=tracker) as client_cls:
        main(["run"] + ARGS)

    client_cls.assert_called_once_with("t", base_url="https://api.github.com")
    assert tracker.issues[42]["milestone"] == 6
    captured = capsys.readouterr()
    assert captured.out == ""


def test_plan_prints_actions_without_mutating(clean_env, tracker, capsys):
    with patch("rollover.cli.GitHubClient", return_value=tracker):
        main(["plan"] + ARGS)

    out = capsys.readouterr().out
    assert "Milestone 5 (2.0) in octo/widgets: 1 open issue(s)" in out
    assert "#42: add 'missed: v2.0', milestone -> 6" in out
    assert tracker.mutations() == []


def test_run_dry_run_flag(clean_env, tracker, capsys):
    with patch("rollover.cli.GitHubClient", return_value=tracker):
        main(["run", "--dry-run"] + ARGS)

    assert tracker.mutations() == []
    assert "#42" in capsys.readouterr().out


def test_missing_milestone_exits_non_zero(clean_env, capsys):
    tracker = FakeTracker({})
    with patch("rollover.cli.GitHubClient", return_value=tracker):
        with pytest.raises(SystemExit) as exc_info:
            main(["run"] + ARGS)

    assert exc_info.value.code == 1
    assert "Milestone 5 not found in octo/widgets" in capsys.readouterr().err


def test_config_error_before_any_remote_call(clean_env, capsys):
    with patch("rollover.cli.GitHubClient") as client_cls:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "--repo", "octo/widgets", "--milestone", "five", "--issues-count", "10", "--token", "t"])

    assert exc_info.value.code == 1
    client_cls.assert_not_called()
    assert "must be an integer" in capsys.readouterr().err


def test_actions_error_annotation(clean_env, capsys):
    clean_env.setenv("GITHUB_ACTIONS", "true")
    tracker = FakeTracker({})
    with patch("rollover.cli.GitHubClient", return_value=tracker):
        with pytest.raises(SystemExit):
            main(["run"] + ARGS)

    assert "::error::Milestone 5 not found" in capsys.readouterr().out


def test_inputs_from_action_environment(clean_env, tracker):
    clean_env.setenv("INPUT_MILESTONE", "5")
    clean_env.setenv("INPUT_ISSUES-COUNT", "10")
    clean_env.setenv("INPUT_GITHUB-TOKEN", "action-token")
    clean_env.setenv("GITHUB_REPOSITORY", "octo/widgets")

    with patch("rollover.cli.GitHubClient", return_value=tracker) as client_cls:
        main(["run"])

    assert client_cls.call_args[0][0] == "action-token"
    assert tracker.issues[42]["labels"] == ["missed: v2.0"]


def test_trace_written(clean_env, tracker, tmp_path):
    trace_path = tmp_path / "run" / "events.jsonl"
    with patch("rollover.cli.GitHubClient", return_value=tracker):
        main(["run", "--trace", str(trace_path)] + ARGS)

    events = load_events(trace_path)
    assert events
    assert events[-1].payload["call"] == "set_milestone"


def test_no_command_prints_help():
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1


def test_cli_logger_is_module_scoped():
    assert cli.logger.name == "rollover.cli"
