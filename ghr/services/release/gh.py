from __future__ import annotations

import json
import os
import shutil
from pathlib import Path
from urllib.parse import quote

from ghr.core.result import Err, Ok, Result
from ghr.core.structured import as_str_dict, get_int, get_raw_str, get_str
from ghr.platform.process import ProcessError
from ghr.platform.process import run as run_process
from ghr.services.release.errors import ReleaseError, ReleaseErrorKind
from ghr.services.release.model import (
    CommentRecord,
    ReleaseAbsent,
    ReleaseFound,
    ReleaseInput,
    ReleaseLookup,
    ReleaseRecord,
)
from ghr.services.release.timeouts import GH_TIMEOUT_SECONDS


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def is_not_found(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    return "http 404" in text


def _bool_field(name: str, value: bool) -> list[str]:
    # -F turns the literals true/false into JSON booleans.
    return ["-F", f"{name}={'true' if value else 'false'}"]


def release_fields(release: ReleaseInput) -> list[str]:
    return [
        "-f",
        f"tag_name={release.tag_name}",
        "-f",
        f"name={release.name}",
        "-f",
        f"target_commitish={release.target_commitish}",
        "-f",
        f"body={release.body}",
        *_bool_field("draft", release.draft),
        *_bool_field("prerelease", release.prerelease),
    ]


def parse_release(obj: object) -> ReleaseRecord | None:
    data = as_str_dict(obj)
    if data is None:
        return None

    release_id = get_int(data, "id")
    tag = get_str(data, "tag_name")
    if release_id is None or tag is None:
        return None

    return ReleaseRecord(
        id=release_id,
        tag_name=tag,
        upload_url=get_raw_str(data, "upload_url") or "",
        html_url=get_raw_str(data, "html_url") or "",
        body=get_raw_str(data, "body"),
        target_commitish=get_raw_str(data, "target_commitish") or "",
    )


def parse_comment(obj: object) -> CommentRecord | None:
    data = as_str_dict(obj)
    if data is None:
        return None

    comment_id = get_int(data, "id")
    if comment_id is None:
        return None
    return CommentRecord(id=comment_id, html_url=get_raw_str(data, "html_url") or "")


class GhReleaseStore:
    """Release store backed by `gh api`.

    Attributes:
        workspace_root: Directory gh runs in.
        repo: Repository slug (owner/name).
    """

    def __init__(self, *, workspace_root: Path, repo: str, token: str | None = None) -> None:
        self.workspace_root = workspace_root
        self.repo = repo
        self._token = token

    def get_release_by_tag(self, tag: str) -> Result[ReleaseLookup, ReleaseError]:
        endpoint = f"repos/{self.repo}/releases/tags/{quote(tag, safe='')}"
        result = self._api([endpoint])
        if isinstance(result, Err):
            if is_not_found(result.error):
                return Ok(ReleaseAbsent(tag=tag))
            return Err(
                ReleaseError(
                    kind="lookup_failed",
                    message=f"failed to fetch release for tag {tag}",
                    hint=result.error.stderr.strip() or None,
                )
            )

        release = self._decode_release(result.value, kind="lookup_failed", endpoint=endpoint)
        if isinstance(release, Err):
            return release
        return Ok(ReleaseFound(release=release.value))

    def create_release(self, release: ReleaseInput) -> Result[ReleaseRecord, ReleaseError]:
        endpoint = f"repos/{self.repo}/releases"
        result = self._api(["--method", "POST", endpoint, *release_fields(release)])
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="create_failed",
                    message=f"failed to create release for tag {release.tag_name}",
                    hint=result.error.stderr.strip() or None,
                )
            )
        return self._decode_release(result.value, kind="create_failed", endpoint=endpoint)

    def update_release(
        self, release_id: int, release: ReleaseInput
    ) -> Result[ReleaseRecord, ReleaseError]:
        endpoint = f"repos/{self.repo}/releases/{release_id}"
        result = self._api(["--method", "PATCH", endpoint, *release_fields(release)])
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="update_failed",
                    message=f"failed to update release {release_id} ({release.tag_name})",
                    hint=result.error.stderr.strip() or None,
                )
            )
        return self._decode_release(result.value, kind="update_failed", endpoint=endpoint)

    def create_comment(self, issue_number: int, body: str) -> Result[CommentRecord, ReleaseError]:
        endpoint = f"repos/{self.repo}/issues/{issue_number}/comments"
        result = self._api(["--method", "POST", endpoint, "-f", f"body={body}"])
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="comment_failed",
                    message=f"failed to comment on pull request #{issue_number}",
                    hint=result.error.stderr.strip() or None,
                )
            )

        obj = _loads(result.value)
        comment = None if obj is None else parse_comment(obj)
        if comment is None:
            return Err(
                ReleaseError(
                    kind="comment_failed",
                    message="unexpected comment payload",
                    hint=endpoint,
                )
            )
        return Ok(comment)

    def _api(self, args: list[str]) -> Result[str, ProcessError]:
        env: dict[str, str] | None = None
        if self._token:
            env = {**os.environ, "GH_TOKEN": self._token}
        return run_process(
            ["gh", "api", *args],
            cwd=self.workspace_root,
            env=env,
            timeout=GH_TIMEOUT_SECONDS,
        )

    def _decode_release(
        self, text: str, *, kind: ReleaseErrorKind, endpoint: str
    ) -> Result[ReleaseRecord, ReleaseError]:
        obj = _loads(text)
        release = None if obj is None else parse_release(obj)
        if release is None:
            return Err(ReleaseError(kind=kind, message="unexpected release payload", hint=endpoint))
        return Ok(release)


def _loads(text: str) -> object | None:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None
