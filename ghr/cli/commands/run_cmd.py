from __future__ import annotations

import typer

from ghr.cli.commands._helpers import exit_release
from ghr.cli.context import build_context
from ghr.core.result import Err
from ghr.git.history import DEFAULT_MAX_COMMITS, History
from ghr.services.release.changelog import RenderOptions
from ghr.services.release.config import DEFAULT_RELEASE_FILE
from ghr.services.release.dispatch import RunRequest, run_release
from ghr.services.release.event import ReleaseEvent, load_event
from ghr.services.release.gh import GhReleaseStore, ensure_gh_available
from ghr.services.release.outputs import write_outputs


def run(
    release_file: str = typer.Option(
        DEFAULT_RELEASE_FILE,
        "--release-file",
        envvar="INPUT_RELEASE_FILE",
        help="Path of the release config file, relative to the repository root.",
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        envvar=["INPUT_TOKEN", "GITHUB_TOKEN"],
        help="Token passed to gh (GH_TOKEN).",
        show_default=False,
    ),
    body: str | None = typer.Option(
        None,
        "--body",
        envvar="INPUT_BODY",
        help="Release body used when the release file has none.",
    ),
    show_abbrev_hash: bool = typer.Option(
        False,
        "--changelog-show-abbrev-hash/--no-changelog-show-abbrev-hash",
        envvar="INPUT_CHANGELOG_SHOW_ABBREV_HASH",
    ),
    show_committer: bool = typer.Option(
        True,
        "--changelog-show-committer/--no-changelog-show-committer",
        envvar="INPUT_CHANGELOG_SHOW_COMMITTER",
    ),
    only_use_merge_commit: bool = typer.Option(
        False,
        "--changelog-only-use-merge-commit/--no-changelog-only-use-merge-commit",
        envvar="INPUT_CHANGELOG_ONLY_USE_MERGE_COMMIT",
    ),
    ignore_merge_commit: bool = typer.Option(
        False,
        "--changelog-ignore-merge-commit/--no-changelog-ignore-merge-commit",
        envvar="INPUT_CHANGELOG_IGNORE_MERGE_COMMIT",
    ),
    max_commits: int = typer.Option(
        DEFAULT_MAX_COMMITS,
        "--changelog-max-commits-number",
        envvar="INPUT_CHANGELOG_MAX_COMMITS_NUMBER",
        min=1,
    ),
    skip_unchanged: bool = typer.Option(
        False,
        "--skip-unchanged/--no-skip-unchanged",
        envvar="INPUT_SKIP_UNCHANGED",
        help="Do nothing when the release file is not modified by the change.",
    ),
) -> None:
    """Publish a release (push) or comment the changelog (pull_request)."""
    ctx = build_context()
    console = ctx.console
    annotate = ctx.env.annotate

    options = RenderOptions.from_flags(
        show_abbrev_hash=show_abbrev_hash,
        show_committer=show_committer,
        only_use_merge_commit=only_use_merge_commit,
        ignore_merge_commit=ignore_merge_commit,
    )
    if isinstance(options, Err):
        exit_release(options.error, console=console, annotate=annotate)

    event = load_event(
        name=ctx.env.event_name,
        payload_path=ctx.env.event_path,
        repository=ctx.env.repository,
    )
    if isinstance(event, Err):
        exit_release(event.error, console=console, annotate=annotate)

    gh = ensure_gh_available()
    if isinstance(gh, Err):
        exit_release(gh.error, console=console, annotate=annotate)

    def store_factory(ev: ReleaseEvent) -> GhReleaseStore:
        return GhReleaseStore(workspace_root=ctx.env.workspace_root, repo=ev.slug, token=token)

    result = run_release(
        RunRequest(
            release_file=release_file,
            options=options.value,
            body_override=body,
            max_commits=max_commits,
            skip_unchanged=skip_unchanged,
        ),
        event=event.value,
        history=History(ctx.env.workspace_root),
        store_factory=store_factory,
        console=console,
    )
    if isinstance(result, Err):
        exit_release(result.error, console=console, annotate=annotate)

    if result.value.values:
        written = write_outputs(
            result.value.as_dict(),
            output_path=ctx.env.output_path,
            console=console,
        )
        if isinstance(written, Err):
            exit_release(written.error, console=console, annotate=annotate)
