from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ghr.git.history import CommitRecord

__all__ = [
    "CommentRecord",
    "CommitCategory",
    "CommitFilter",
    "CommitMatcher",
    "CommitRecord",
    "EventName",
    "ReleaseAbsent",
    "ReleaseConfig",
    "ReleaseFound",
    "ReleaseInput",
    "ReleaseLookup",
    "ReleaseRecord",
    "UpsertAction",
    "UpsertOutcome",
]

EventName = Literal["push", "pull_request"]
CommitFilter = Literal["all", "merge_only", "exclude_merge"]
UpsertAction = Literal["created", "updated"]


@dataclass(frozen=True, slots=True)
class CommitMatcher:
    """Selects commits by subject prefix or body substring.

    With `parent_of_merge_commit`, a commit also matches when the merge
    commit that brought it in matches.
    """

    prefixes: tuple[str, ...] = ()
    contains: tuple[str, ...] = ()
    parent_of_merge_commit: bool = False

    @property
    def empty(self) -> bool:
        return not self.prefixes and not self.contains


@dataclass(frozen=True, slots=True)
class CommitCategory:
    id: str
    title: str
    # An empty matcher catches every commit not claimed by an earlier category.
    matcher: CommitMatcher = field(default_factory=CommitMatcher)


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Release intent declared in the release file at one revision.

    Attributes:
        tag: Tag the release is published under.
        title: Release name; "Release <tag>" when unset.
        commitish: Target of the tag; the head commit when unset.
        body: Release body; the generated changelog when unset.
        prerelease: Publish as a prerelease.
        commit_include: When not empty, only matching commits are listed.
        commit_exclude: Matching commits are never listed.
        categories: Ordered changelog sections.
        use_release_note_block: Take a commit's line from its
            ```release-note block when it has one.
        show_header: Prefix the generated changelog with a
            "## Release <tag> with changes since <previous tag>" heading.
    """

    tag: str
    title: str | None = None
    commitish: str | None = None
    body: str | None = None
    prerelease: bool = False
    commit_include: CommitMatcher = field(default_factory=CommitMatcher)
    commit_exclude: CommitMatcher = field(default_factory=CommitMatcher)
    categories: tuple[CommitCategory, ...] = ()
    use_release_note_block: bool = False
    show_header: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseInput:
    tag_name: str
    name: str
    target_commitish: str
    body: str
    draft: bool
    prerelease: bool


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    id: int
    tag_name: str
    upload_url: str
    html_url: str
    body: str | None
    target_commitish: str


@dataclass(frozen=True, slots=True)
class CommentRecord:
    id: int
    html_url: str


@dataclass(frozen=True, slots=True)
class ReleaseFound:
    release: ReleaseRecord


@dataclass(frozen=True, slots=True)
class ReleaseAbsent:
    tag: str


type ReleaseLookup = ReleaseFound | ReleaseAbsent


@dataclass(frozen=True, slots=True)
class UpsertOutcome:
    action: UpsertAction
    release: ReleaseRecord
