"""Changelog command - preview the changelog between two revisions locally."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

import typer

from ghr.cli.commands._helpers import exit_release
from ghr.core.result import Err
from ghr.git.history import DEFAULT_MAX_COMMITS, History
from ghr.output.console import RichConsole
from ghr.services.release.changelog import RenderOptions, render_change_json, render_changelog
from ghr.services.release.dispatch import git_release_error


class Format(StrEnum):
    text = "text"
    json = "json"


def changelog(
    from_ref: str = typer.Option(..., "--from", help="Older revision (usually the last tag)"),
    to_ref: str = typer.Option("HEAD", "--to", help="Newer revision"),
    repo: Path = typer.Option(Path("."), "--repo", help="Repository directory"),
    fmt: Format = typer.Option(Format.text, "--format", help="Output format"),
    show_abbrev_hash: bool = typer.Option(False, "--show-abbrev-hash"),
    show_committer: bool = typer.Option(False, "--show-committer"),
    only_use_merge_commit: bool = typer.Option(False, "--only-merge-commits"),
    ignore_merge_commit: bool = typer.Option(False, "--ignore-merge-commits"),
    max_commits: int = typer.Option(DEFAULT_MAX_COMMITS, "--max-commits", min=1),
) -> None:
    """Print the changelog that a release would get."""
    console = RichConsole(stderr=True)

    options = RenderOptions.from_flags(
        show_abbrev_hash=show_abbrev_hash,
        show_committer=show_committer,
        only_use_merge_commit=only_use_merge_commit,
        ignore_merge_commit=ignore_merge_commit,
    )
    if isinstance(options, Err):
        exit_release(options.error, console=console)

    commits = History(repo.expanduser()).list_commits(from_ref, to_ref, max_count=max_commits)
    if isinstance(commits, Err):
        exit_release(git_release_error(commits.error), console=console)

    if fmt == Format.json:
        typer.echo(render_change_json(from_ref, to_ref, commits.value, options.value))
    else:
        typer.echo(render_changelog(commits.value, options.value))
