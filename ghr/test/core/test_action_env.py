"""Tests for ghr.core.config module."""

from __future__ import annotations

from pathlib import Path

from ghr.core.config import load_action_env
from ghr.core.result import Err, Ok


def test_missing_workspace_is_an_error() -> None:
    result = load_action_env({"GITHUB_EVENT_NAME": "push"})
    assert isinstance(result, Err)
    assert result.error.message == "GITHUB_WORKSPACE was not defined"
    assert result.error.hint is not None


def test_blank_workspace_is_an_error() -> None:
    result = load_action_env({"GITHUB_WORKSPACE": "   "})
    assert isinstance(result, Err)


def test_workspace_must_be_a_directory(tmp_path: Path) -> None:
    f = tmp_path / "file"
    f.write_text("", encoding="utf-8")
    result = load_action_env({"GITHUB_WORKSPACE": str(f)})
    assert isinstance(result, Err)
    assert "not a directory" in result.error.message


def test_reads_runner_variables(tmp_path: Path) -> None:
    event = tmp_path / "event.json"
    out = tmp_path / "out"
    result = load_action_env(
        {
            "GITHUB_WORKSPACE": str(tmp_path),
            "GITHUB_EVENT_NAME": "pull_request",
            "GITHUB_EVENT_PATH": str(event),
            "GITHUB_REPOSITORY": "octo/widgets",
            "GITHUB_OUTPUT": str(out),
            "GITHUB_ACTIONS": "true",
        }
    )
    assert isinstance(result, Ok)
    env = result.value
    assert env.workspace_root == tmp_path.resolve()
    assert env.event_name == "pull_request"
    assert env.event_path == event
    assert env.repository == "octo/widgets"
    assert env.output_path == out
    assert env.annotate is True


def test_optional_variables_default_to_none(tmp_path: Path) -> None:
    result = load_action_env({"GITHUB_WORKSPACE": str(tmp_path)})
    assert isinstance(result, Ok)
    env = result.value
    assert env.event_name == ""
    assert env.event_path is None
    assert env.repository is None
    assert env.output_path is None
    assert env.annotate is False
