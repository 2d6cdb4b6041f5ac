from __future__ import annotations

from ghr.core.result import Err, Ok, Result
from ghr.output.console import ConsoleProtocol
from ghr.services.release.errors import ReleaseError
from ghr.services.release.model import CommentRecord
from ghr.services.release.store import ReleaseStore

COMMENT_MARKER = "<!-- ghr-release -->"
RELEASE_BADGE = (
    "![RELEASE](https://img.shields.io/static/v1"
    "?label=GitHub&message=RELEASE&color=success&style=flat)"
)


def render_comment_body(*, head_tag: str, base_tag: str, changelog: str) -> str:
    lines = [
        COMMENT_MARKER,
        RELEASE_BADGE,
        "",
        f"A GitHub release with `{head_tag}` tag will be created"
        " once this pull request got merged.",
        "",
        f"## Changelog since {base_tag}",
        changelog,
    ]
    return "\n".join(lines)


def post_comment(
    *,
    store: ReleaseStore,
    issue_number: int,
    body: str,
    console: ConsoleProtocol,
) -> Result[CommentRecord, ReleaseError]:
    result = store.create_comment(issue_number, body)
    if isinstance(result, Err):
        console.error(f"failed to comment on pull request #{issue_number}: {result.error.pretty()}")
        return result
    return Ok(result.value)
