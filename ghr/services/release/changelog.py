"""Changelog rendering.

One filter, two renderings: the text changelog used as release body and
the ChangeJSON payload published as machine-readable output. Both take the
same commit list and options and go through `filter_commits`, so they
always describe the same set of commits.

Release files refine the selection with include/exclude matchers, group
lines into `### <title>` sections and may take a commit's line from a
```release-note block in its body.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from ghr.core.result import Err, Ok, Result
from ghr.core.structured import as_str_dict, get_raw_str
from ghr.services.release.errors import ReleaseError
from ghr.services.release.model import (
    CommitCategory,
    CommitFilter,
    CommitMatcher,
    CommitRecord,
    ReleaseConfig,
)

MERGE_COMMIT_PREFIX = "Merge pull request #"

_PR_NUMBER = re.compile(r"\d+")
_RELEASE_NOTE_BLOCK = re.compile(
    r"(?:Release note\*\*:\s*(?:<!--[^<>]*-->\s*)?```(?:release-note)?|```release-note)(.+?)```",
    re.DOTALL,
)
_COMMIT_KEYS = ("author", "committer", "hash", "abbrevHash", "subject", "body")


@dataclass(frozen=True, slots=True)
class RenderOptions:
    show_abbrev_hash: bool = False
    show_committer: bool = False
    commit_filter: CommitFilter = "all"
    include: CommitMatcher = field(default_factory=CommitMatcher)
    exclude: CommitMatcher = field(default_factory=CommitMatcher)
    categories: tuple[CommitCategory, ...] = ()
    use_release_note_block: bool = False

    @classmethod
    def from_flags(
        cls,
        *,
        show_abbrev_hash: bool,
        show_committer: bool,
        only_use_merge_commit: bool,
        ignore_merge_commit: bool,
    ) -> Result[RenderOptions, ReleaseError]:
        if only_use_merge_commit and ignore_merge_commit:
            return Err(
                ReleaseError(
                    kind="invalid_options",
                    message="only_use_merge_commit and ignore_merge_commit are mutually exclusive",
                )
            )

        commit_filter: CommitFilter = "all"
        if only_use_merge_commit:
            commit_filter = "merge_only"
        elif ignore_merge_commit:
            commit_filter = "exclude_merge"

        return Ok(
            cls(
                show_abbrev_hash=show_abbrev_hash,
                show_committer=show_committer,
                commit_filter=commit_filter,
            )
        )

    def with_release_config(self, config: ReleaseConfig) -> RenderOptions:
        """Add the selection and grouping rules declared in a release file."""
        return replace(
            self,
            include=config.commit_include,
            exclude=config.commit_exclude,
            categories=config.categories,
            use_release_note_block=config.use_release_note_block,
        )


def is_merge_commit_subject(subject: str) -> bool:
    return subject.startswith(MERGE_COMMIT_PREFIX)


def merge_parents(commits: Sequence[CommitRecord]) -> dict[str, CommitRecord]:
    """Map each commit brought in by a merge to that merge commit.

    Walks the second-parent chain of every merge until it reaches the first
    parent, leaves the listed range, or hits another merge.
    """
    by_hash = {c.hash: c for c in commits}
    out: dict[str, CommitRecord] = {}
    for merge in commits:
        if not merge.is_merge:
            continue
        cursor, finish = merge.parents[1], merge.parents[0]
        while (parent := by_hash.get(cursor)) is not None:
            if parent.hash == finish or len(parent.parents) != 1:
                break
            out[cursor] = merge
            cursor = parent.parents[0]
    return out


def matches(
    matcher: CommitMatcher, commit: CommitRecord, merge: CommitRecord | None = None
) -> bool:
    if matcher.parent_of_merge_commit and merge is not None and matches(matcher, merge):
        return True
    if any(commit.subject.startswith(p) for p in matcher.prefixes):
        return True
    return any(s in commit.body for s in matcher.contains)


def keep(commit: CommitRecord, opts: RenderOptions, merge: CommitRecord | None = None) -> bool:
    match opts.commit_filter:
        case "exclude_merge":
            if is_merge_commit_subject(commit.subject):
                return False
        case "merge_only":
            if not is_merge_commit_subject(commit.subject):
                return False
        case "all":
            pass
    if not opts.exclude.empty and matches(opts.exclude, commit, merge):
        return False
    return opts.include.empty or matches(opts.include, commit, merge)


def filter_commits(commits: Sequence[CommitRecord], opts: RenderOptions) -> list[CommitRecord]:
    merges = merge_parents(commits)
    return [c for c in commits if keep(c, opts, merges.get(c.hash))]


def category_of(
    commit: CommitRecord, opts: RenderOptions, merge: CommitRecord | None = None
) -> str | None:
    """Return the id of the first category claiming the commit, if any."""
    for category in opts.categories:
        if category.matcher.empty or matches(category.matcher, commit, merge):
            return category.id
    return None


def release_note_block(body: str) -> str | None:
    """Extract the text of a ```release-note block, None if absent or blank."""
    m = _RELEASE_NOTE_BLOCK.search(body)
    if m is None:
        return None
    return m.group(1).strip() or None


def pull_request_number(subject: str) -> str:
    """Extract the PR number from a merge-commit subject.

    "Merge pull request #42 from owner/branch" -> "42". Falls back to the
    first word after the prefix when it does not start with digits.
    """
    rest = subject.removeprefix(MERGE_COMMIT_PREFIX)
    match = _PR_NUMBER.match(rest)
    if match is not None:
        return match.group(0)
    parts = rest.split(maxsplit=1)
    return parts[0] if parts else ""


def _merge_line_text(commit: CommitRecord) -> str:
    message = commit.body.split("\n", 1)[0].strip()
    pr = pull_request_number(commit.subject)
    if not message:
        return f"#{pr}"
    return f"{message} #{pr}"


def _line_text(commit: CommitRecord, opts: RenderOptions) -> str:
    if opts.use_release_note_block:
        note = release_note_block(commit.body)
        if note is not None:
            return note
    if opts.commit_filter == "merge_only":
        return _merge_line_text(commit)
    return commit.subject


def render_line(commit: CommitRecord, opts: RenderOptions) -> str:
    fields = ["*"]
    if opts.show_abbrev_hash:
        fields.append(commit.abbrev_hash)
    fields.append(_line_text(commit, opts))
    if opts.show_committer:
        fields.append(f"- by {commit.committer}")
    return " ".join(fields)


def render_changelog(commits: Sequence[CommitRecord], opts: RenderOptions) -> str:
    """Render one `* ...` line per kept commit, newest first, no trailing newline.

    With categories, each non-empty category becomes a `### <title>` section
    in declaration order, and uncategorized lines follow the sections.
    """
    kept = filter_commits(commits, opts)
    if not opts.categories:
        return "\n".join(render_line(c, opts) for c in kept)

    merges = merge_parents(commits)
    grouped: dict[str, list[str]] = {}
    loose: list[str] = []
    for c in kept:
        category = category_of(c, opts, merges.get(c.hash))
        if category is None:
            loose.append(render_line(c, opts))
        else:
            grouped.setdefault(category, []).append(render_line(c, opts))

    blocks: list[str] = []
    seen: set[str] = set()
    for category in opts.categories:
        lines = grouped.get(category.id)
        if not lines or category.id in seen:
            continue
        seen.add(category.id)
        blocks.append(f"### {category.title}\n\n" + "\n".join(lines))
    if loose:
        blocks.append("\n".join(loose))
    return "\n\n".join(blocks)


def render_release_note(tag: str, previous_tag: str, changelog: str) -> str:
    """Prefix a changelog with the release heading."""
    return f"## Release {tag} with changes since {previous_tag}\n\n{changelog}"


def _commit_payload(commit: CommitRecord) -> dict[str, str]:
    return {
        "author": commit.author,
        "committer": commit.committer,
        "hash": commit.hash,
        "abbrevHash": commit.abbrev_hash,
        "subject": commit.subject,
        "body": commit.body,
    }


def render_change_json(
    from_tag: str,
    to_tag: str,
    commits: Sequence[CommitRecord],
    opts: RenderOptions,
) -> str:
    payload: dict[str, object] = {
        "fromTag": from_tag,
        "toTag": to_tag,
        "commits": [_commit_payload(c) for c in filter_commits(commits, opts)],
    }
    return json.dumps(payload, indent=4, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class ChangeSet:
    from_tag: str
    to_tag: str
    commits: tuple[CommitRecord, ...]


def parse_change_json(text: str) -> Result[ChangeSet, ReleaseError]:
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="invalid_input", message=f"invalid change JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(ReleaseError(kind="invalid_input", message="change JSON must be an object"))

    from_tag = get_raw_str(data, "fromTag")
    to_tag = get_raw_str(data, "toTag")
    raw_commits = data.get("commits")
    if from_tag is None or to_tag is None or not isinstance(raw_commits, list):
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="change JSON requires fromTag, toTag and commits",
            )
        )

    commits: list[CommitRecord] = []
    for item in raw_commits:
        d = as_str_dict(item)
        values = None if d is None else [get_raw_str(d, k) for k in _COMMIT_KEYS]
        if values is None or any(v is None for v in values):
            return Err(
                ReleaseError(kind="invalid_input", message=f"invalid commit entry: {item!r}")
            )
        author, committer, full_hash, abbrev, subject, body = (v or "" for v in values)
        commits.append(
            CommitRecord(
                author=author,
                committer=committer,
                hash=full_hash,
                abbrev_hash=abbrev,
                subject=subject,
                body=body,
            )
        )

    return Ok(ChangeSet(from_tag=from_tag, to_tag=to_tag, commits=tuple(commits)))

