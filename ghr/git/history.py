"""Read-only access to repository history.

History wraps the handful of git commands a release run needs: resolving
revisions, reading a file as it was at a revision, listing the files
changed between two revisions, and walking the commit log between two
references. All operations return Result types.

Usage:
    history = History(Path("/path/to/repo"))

    match history.list_commits("v1.0.0", "HEAD", max_count=50):
        case Ok(commits):
            for c in commits:
                print(c.abbrev_hash, c.subject)
        case Err(e):
            print(f"{e.kind}: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol

from ghr.core.result import Err, Ok, Result
from ghr.platform.process import ProcessError
from ghr.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

# Commit cap when the caller gives none
DEFAULT_MAX_COMMITS = 100

# ASCII record/unit separators never appear in author names or subjects.
_RECORD_SEP = "\x1e"
_FIELD_SEP = "\x1f"
_LOG_FIELDS = ("%an", "%cn", "%H", "%h", "%P", "%s", "%b")
_LOG_FORMAT = "%x1e" + "%x1f".join(_LOG_FIELDS)

__all__ = [
    "DEFAULT_MAX_COMMITS",
    "CommitRecord",
    "GitError",
    "History",
    "HistoryReader",
    "parse_log",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a history read.

    Attributes:
        kind: `revision_resolution` when a reference does not name a commit,
            `command_execution` when git itself failed or printed garbage,
            `invalid_options` when the request was rejected before running git.
        command: The git subcommand that failed.
        message: Error message.
        returncode: Process return code.
    """

    kind: Literal["revision_resolution", "command_execution", "invalid_options"]
    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """One commit as seen by the changelog engine.

    Attributes:
        author: Author name.
        committer: Committer name.
        hash: Full commit hash.
        abbrev_hash: Abbreviated hash as printed by git.
        subject: First line of the message.
        body: Rest of the message, trimmed; empty string if none.
        parents: Parent hashes, first parent first. Two or more for a merge.
    """

    author: str
    committer: str
    hash: str
    abbrev_hash: str
    subject: str
    body: str
    parents: tuple[str, ...] = ()

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


class HistoryReader(Protocol):
    """What the release pipeline needs from history; History implements it."""

    def read_file(self, revision: str, path: str) -> Result[str, GitError]: ...

    def changed_files(self, base: str, head: str) -> Result[list[str], GitError]: ...

    def list_commits(
        self, from_ref: str, to_ref: str, *, max_count: int = DEFAULT_MAX_COMMITS
    ) -> Result[list[CommitRecord], GitError]: ...


def parse_log(output: str) -> Result[list[CommitRecord], str]:
    """Parse `git log` output produced with the History log format."""
    commits: list[CommitRecord] = []
    for chunk in output.split(_RECORD_SEP)[1:]:
        fields = chunk.split(_FIELD_SEP)
        if len(fields) != len(_LOG_FIELDS):
            return Err(
                f"log entry should contain {len(_LOG_FIELDS)} fields but got {len(fields)}"
            )
        author, committer, full_hash, abbrev, parents, subject, body = fields
        commits.append(
            CommitRecord(
                author=author,
                committer=committer,
                hash=full_hash,
                abbrev_hash=abbrev,
                subject=subject,
                body=body.strip(),
                parents=tuple(parents.split()),
            )
        )
    return Ok(commits)


class History:
    """Git history of a single repository.

    Attributes:
        path: Path to the repository (any directory inside the work tree)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def resolve(self, ref: str) -> Result[str, GitError]:
        """Resolve a reference (tag, branch, hash) to a full commit hash."""
        result = self._run(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        kind="revision_resolution",
                        command="rev-parse",
                        message=f"unknown revision: {ref}",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(stdout.strip())

    def read_file(self, revision: str, path: str) -> Result[str, GitError]:
        """Return the content of `path` as it was at `revision`."""
        result = self._run(["show", f"{revision}:{path}"])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        kind="command_execution",
                        command="show",
                        message=e.stderr.strip() or f"cannot read {path} at {revision}",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(stdout.strip())

    def changed_files(self, base: str, head: str) -> Result[list[str], GitError]:
        """List paths that differ between two revisions."""
        result = self._run(["diff", "--name-only", base, head])
        match result:
            case Err(e):
                return Err(
                    GitError(
                        kind="command_execution",
                        command="diff",
                        message=e.stderr.strip() or "git diff failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok([ln for ln in stdout.splitlines() if ln.strip()])

    def list_commits(
        self,
        from_ref: str,
        to_ref: str,
        *,
        max_count: int = DEFAULT_MAX_COMMITS,
    ) -> Result[list[CommitRecord], GitError]:
        """List commits between two references, most recent first.

        Both references are resolved before walking the log so an unknown
        tag is reported as such rather than as a generic git failure.

        Args:
            from_ref: Older end of the range (typically the previous tag).
            to_ref: Newer end of the range (typically the head commit).
            max_count: Positive cap on the number of commits returned. git
                reads a negative count as "no limit", so anything below 1 is
                rejected before git runs.

        Returns:
            Ok(list of CommitRecord) on success
            Err(GitError) on failure
        """
        if max_count < 1:
            return Err(
                GitError(
                    kind="invalid_options",
                    command="log",
                    message=f"max count must be positive, got {max_count}",
                )
            )

        for ref in (from_ref, to_ref):
            resolved = self.resolve(ref)
            if isinstance(resolved, Err):
                return resolved

        result = self._run(
            [
                "log",
                "--no-decorate",
                f"--max-count={max_count}",
                f"--pretty=format:{_LOG_FORMAT}",
                f"{from_ref}...{to_ref}",
            ]
        )
        if isinstance(result, Err):
            e = result.error
            return Err(
                GitError(
                    kind="command_execution",
                    command="log",
                    message=e.stderr.strip() or "git log failed",
                    returncode=e.returncode,
                )
            )

        parsed = parse_log(result.value)
        if isinstance(parsed, Err):
            return Err(GitError(kind="command_execution", command="log", message=parsed.error))
        return Ok(parsed.value)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )
