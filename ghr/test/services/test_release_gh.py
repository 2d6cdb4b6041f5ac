from __future__ import annotations

import json
from pathlib import Path

import pytest

from ghr.core.result import Err, Ok, Result
from ghr.platform.process import ProcessError
from ghr.services.release import gh as gh_mod
from ghr.services.release.model import ReleaseAbsent, ReleaseFound, ReleaseInput

RELEASE_JSON = json.dumps(
    {
        "id": 17,
        "tag_name": "v1.2.0",
        "upload_url": "https://uploads.github.com/repos/octo/widgets/releases/17/assets",
        "html_url": "https://github.com/octo/widgets/releases/tag/v1.2.0",
        "body": "* Fix bug",
        "target_commitish": "main",
    }
)

RELEASE = ReleaseInput(
    tag_name="v1.2.0",
    name="Release v1.2.0",
    target_commitish="abc123",
    body="* Fix bug",
    draft=False,
    prerelease=True,
)


def _err(*, stderr: str, returncode: int = 1) -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=("gh", "api", "repos/octo/widgets/releases"),
            returncode=returncode,
            stdout="",
            stderr=stderr,
        )
    )


class _Recorder:
    def __init__(self, *responses: Result[str, ProcessError]) -> None:
        self.responses = list(responses)
        self.calls: list[list[str]] = []
        self.envs: list[dict[str, str] | None] = []

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        del cwd, timeout
        self.calls.append(cmd)
        self.envs.append(env)
        return self.responses.pop(0)


def _store(tmp_path: Path, token: str | None = None) -> gh_mod.GhReleaseStore:
    return gh_mod.GhReleaseStore(workspace_root=tmp_path, repo="octo/widgets", token=token)


def test_lookup_found(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    rec = _Recorder(Ok(RELEASE_JSON))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    result = _store(tmp_path).get_release_by_tag("v1.2.0")

    assert isinstance(result, Ok)
    assert isinstance(result.value, ReleaseFound)
    assert result.value.release.id == 17
    assert rec.calls == [["gh", "api", "repos/octo/widgets/releases/tags/v1.2.0"]]


def test_lookup_quotes_tag(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    rec = _Recorder(Ok(RELEASE_JSON))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    _store(tmp_path).get_release_by_tag("release/1.0")

    assert rec.calls[0][-1] == "repos/octo/widgets/releases/tags/release%2F1.0"


def test_lookup_404_is_absent(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", _Recorder(_err(stderr="gh: Not Found (HTTP 404)")))

    result = _store(tmp_path).get_release_by_tag("v1.2.0")

    assert result == Ok(ReleaseAbsent(tag="v1.2.0"))


def test_lookup_other_error_is_lookup_failed(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(
        gh_mod, "run_process", _Recorder(_err(stderr="HTTP 500 Internal Server Error"))
    )

    result = _store(tmp_path).get_release_by_tag("v1.2.0")

    assert isinstance(result, Err)
    assert result.error.kind == "lookup_failed"
    assert result.error.hint == "HTTP 500 Internal Server Error"


def test_lookup_garbage_payload(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", _Recorder(Ok("<html>")))

    result = _store(tmp_path).get_release_by_tag("v1.2.0")

    assert isinstance(result, Err)
    assert result.error.kind == "lookup_failed"


def test_create_sends_fields(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    rec = _Recorder(Ok(RELEASE_JSON))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    result = _store(tmp_path).create_release(RELEASE)

    assert isinstance(result, Ok)
    assert result.value.tag_name == "v1.2.0"
    cmd = rec.calls[0]
    assert cmd[:5] == ["gh", "api", "--method", "POST", "repos/octo/widgets/releases"]
    assert "tag_name=v1.2.0" in cmd
    assert "name=Release v1.2.0" in cmd
    assert "target_commitish=abc123" in cmd
    assert "body=* Fix bug" in cmd
    assert cmd[cmd.index("draft=false") - 1] == "-F"
    assert cmd[cmd.index("prerelease=true") - 1] == "-F"


def test_create_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", _Recorder(_err(stderr="HTTP 422 Validation")))

    result = _store(tmp_path).create_release(RELEASE)

    assert isinstance(result, Err)
    assert result.error.kind == "create_failed"


def test_update_uses_patch(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    rec = _Recorder(Ok(RELEASE_JSON))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    result = _store(tmp_path).update_release(17, RELEASE)

    assert isinstance(result, Ok)
    assert rec.calls[0][2:5] == ["--method", "PATCH", "repos/octo/widgets/releases/17"]


def test_update_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", _Recorder(_err(stderr="HTTP 403")))

    result = _store(tmp_path).update_release(17, RELEASE)

    assert isinstance(result, Err)
    assert result.error.kind == "update_failed"


def test_create_comment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    rec = _Recorder(Ok('{"id": 5, "html_url": "https://github.com/octo/widgets/pull/3#c5"}'))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    result = _store(tmp_path).create_comment(3, "hello")

    assert isinstance(result, Ok)
    assert result.value.id == 5
    assert rec.calls[0] == [
        "gh",
        "api",
        "--method",
        "POST",
        "repos/octo/widgets/issues/3/comments",
        "-f",
        "body=hello",
    ]


def test_create_comment_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", _Recorder(_err(stderr="HTTP 404 Not Found")))

    result = _store(tmp_path).create_comment(3, "hello")

    assert isinstance(result, Err)
    assert result.error.kind == "comment_failed"


def test_token_is_exported_as_gh_token(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    rec = _Recorder(Ok(RELEASE_JSON), Ok(RELEASE_JSON))
    monkeypatch.setattr(gh_mod, "run_process", rec)

    _store(tmp_path, token="t0k").get_release_by_tag("v1.2.0")
    _store(tmp_path).get_release_by_tag("v1.2.0")

    with_token, without_token = rec.envs
    assert with_token is not None and with_token["GH_TOKEN"] == "t0k"
    assert without_token is None


def test_ensure_gh_available(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: None)

    result = gh_mod.ensure_gh_available()

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"


def test_parse_release_requires_id_and_tag() -> None:
    assert gh_mod.parse_release({"id": 1}) is None
    assert gh_mod.parse_release({"tag_name": "v1"}) is None
    assert gh_mod.parse_release([]) is None
    parsed = gh_mod.parse_release({"id": 1, "tag_name": "v1"})
    assert parsed is not None
    assert parsed.html_url == ""
