"""Event dispatcher: read configs, render the changelog, then publish.

push          -> create or update the release for the head config's tag
pull_request  -> comment the changelog that would be released

Every step consumes the previous one's result; the first error ends the
run and nothing after it is attempted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Literal

from ghr.core.result import Err, Ok, Result
from ghr.git.history import DEFAULT_MAX_COMMITS, GitError, HistoryReader
from ghr.output.console import ConsoleProtocol
from ghr.services.release.changelog import (
    RenderOptions,
    render_change_json,
    render_changelog,
    render_release_note,
)
from ghr.services.release.comment import post_comment, render_comment_body
from ghr.services.release.config import DEFAULT_RELEASE_FILE, load_release_config
from ghr.services.release.errors import ReleaseError
from ghr.services.release.event import ReleaseEvent
from ghr.services.release.model import ReleaseConfig, ReleaseInput
from ghr.services.release.store import ReleaseStore
from ghr.services.release.upsert import upsert_release

RunAction = Literal["created", "updated", "commented", "skipped"]
StoreFactory = Callable[[ReleaseEvent], ReleaseStore]


@dataclass(frozen=True, slots=True)
class RunRequest:
    release_file: str = DEFAULT_RELEASE_FILE
    options: RenderOptions = field(default_factory=RenderOptions)
    body_override: str | None = None
    max_commits: int = DEFAULT_MAX_COMMITS
    skip_unchanged: bool = False


@dataclass(frozen=True, slots=True)
class RunOutputs:
    action: RunAction
    # Ordered (name, value) pairs, published as action outputs.
    values: tuple[tuple[str, str], ...] = ()

    def as_dict(self) -> dict[str, str]:
        return dict(self.values)


def git_release_error(error: GitError) -> ReleaseError:
    return ReleaseError(kind=error.kind, message=error.message, hint=f"git {error.command}")


def resolve_body(*, head_config: ReleaseConfig, override: str | None, changelog: str) -> str:
    if head_config.body:
        return head_config.body
    if override and override.strip():
        return override
    return changelog


def _release_file_changed(changed: list[str], release_file: str) -> bool:
    wanted = PurePosixPath(release_file.replace("\\", "/")).as_posix()
    return any(PurePosixPath(path).as_posix() == wanted for path in changed)


def run_release(
    request: RunRequest,
    *,
    event: ReleaseEvent,
    history: HistoryReader,
    store_factory: StoreFactory,
    console: ConsoleProtocol,
) -> Result[RunOutputs, ReleaseError]:
    if request.max_commits < 1:
        return Err(
            ReleaseError(
                kind="invalid_options",
                message=f"max commits must be positive, got {request.max_commits}",
            )
        )

    console.info(f"Start handling for {event.name} event")

    head_config = load_release_config(
        history=history, revision=event.head_sha, path=request.release_file
    )
    if isinstance(head_config, Err):
        return head_config
    console.info(
        f"Loaded release config from {request.release_file} at the HEAD commit ({event.head_sha})"
    )

    base_config = load_release_config(
        history=history, revision=event.base_sha, path=request.release_file
    )
    if isinstance(base_config, Err):
        return base_config
    console.info(
        f"Loaded release config from {request.release_file} at the BASE commit ({event.base_sha})"
    )

    if request.skip_unchanged:
        changed = history.changed_files(event.base_sha, event.head_sha)
        if isinstance(changed, Err):
            return Err(git_release_error(changed.error))
        if not _release_file_changed(changed.value, request.release_file):
            console.info(f"Nothing to do since {request.release_file} was not modified")
            return Ok(RunOutputs(action="skipped"))

    head, base = head_config.value, base_config.value

    commits = history.list_commits(base.tag, event.head_sha, max_count=request.max_commits)
    if isinstance(commits, Err):
        return Err(git_release_error(commits.error))

    if len(commits.value) >= request.max_commits:
        console.warning(
            f"Reached the limit of {request.max_commits} commits, the changelog may be truncated"
        )

    options = request.options.with_release_config(head)
    change_json = render_change_json(base.tag, head.tag, commits.value, options)
    console.info(f"Successfully generated change list\n{change_json}")

    changelog = render_changelog(commits.value, options)
    if head.show_header:
        changelog = render_release_note(head.tag, base.tag, changelog)
    console.info(f"Successfully generated changelog\n{changelog}")
    body = resolve_body(head_config=head, override=request.body_override, changelog=changelog)

    store = store_factory(event)

    if event.name == "push":
        release = ReleaseInput(
            tag_name=head.tag,
            name=head.title or f"Release {head.tag}",
            target_commitish=head.commitish or event.head_sha,
            body=body,
            draft=False,
            prerelease=head.prerelease,
        )
        outcome = upsert_release(store=store, release=release, console=console)
        if isinstance(outcome, Err):
            return outcome

        r = outcome.value.release
        console.success(f"Successfully {outcome.value.action} release {r.tag_name}: {r.html_url}")
        return Ok(
            RunOutputs(
                action=outcome.value.action,
                values=(
                    ("id", str(r.id)),
                    ("tag", r.tag_name),
                    ("html_url", r.html_url),
                    ("upload_url", r.upload_url),
                    ("changelog", body),
                    ("change_json", change_json),
                ),
            )
        )

    if event.pr_number is None:
        return Err(ReleaseError(kind="invalid_event", message="missing pull request number"))

    message = render_comment_body(head_tag=head.tag, base_tag=base.tag, changelog=body)
    comment = post_comment(store=store, issue_number=event.pr_number, body=message, console=console)
    if isinstance(comment, Err):
        return comment

    console.success(
        f"Successfully commented the changelog to pull request #{event.pr_number}: "
        f"{comment.value.html_url}"
    )
    return Ok(
        RunOutputs(
            action="commented",
            values=(
                ("changelog", body),
                ("change_json", change_json),
                ("comment_url", comment.value.html_url),
            ),
        )
    )
