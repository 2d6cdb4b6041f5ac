"""Resolution of the triggering webhook event.

Only `push` and `pull_request` are handled; the event name is checked
before the payload is even read.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ghr.core.result import Err, Ok, Result
from ghr.core.structured import as_str_dict, get_int, get_str, get_table
from ghr.services.release.errors import ReleaseError
from ghr.services.release.model import EventName

SUPPORTED_EVENTS: tuple[EventName, ...] = ("push", "pull_request")


@dataclass(frozen=True, slots=True)
class ReleaseEvent:
    name: EventName
    owner: str
    repo: str
    head_sha: str
    base_sha: str
    # Set for pull_request events only.
    pr_number: int | None = None

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


def check_event_name(name: str) -> Result[EventName, ReleaseError]:
    if name == "push":
        return Ok("push")
    if name == "pull_request":
        return Ok("pull_request")
    return Err(
        ReleaseError(
            kind="unsupported_event",
            message=f"this action does not support {name or '(unset)'} event",
            hint="supported events: push, pull_request",
        )
    )


def _invalid(message: str) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="invalid_event", message=message))


def _owner_repo(
    payload: Mapping[str, object], repository: str | None
) -> Result[tuple[str, str], ReleaseError]:
    if repository and "/" in repository:
        owner, repo = repository.split("/", 1)
        return Ok((owner, repo))

    repo_tbl = get_table(payload, "repository") or {}
    owner_tbl = get_table(repo_tbl, "owner") or {}
    owner = get_str(owner_tbl, "login")
    repo = get_str(repo_tbl, "name")
    if owner is None or repo is None:
        return _invalid("missing repository owner/name in event payload")
    return Ok((owner, repo))


def parse_event(
    name: str,
    payload: Mapping[str, object],
    *,
    repository: str | None = None,
) -> Result[ReleaseEvent, ReleaseError]:
    checked = check_event_name(name)
    if isinstance(checked, Err):
        return checked

    names = _owner_repo(payload, repository)
    if isinstance(names, Err):
        return names
    owner, repo = names.value

    if checked.value == "push":
        head = get_str(payload, "after")
        base = get_str(payload, "before")
        if head is None or base is None:
            return _invalid("missing before/after commits in push event")
        return Ok(ReleaseEvent(name="push", owner=owner, repo=repo, head_sha=head, base_sha=base))

    pr = get_table(payload, "pull_request")
    if pr is None:
        return _invalid("missing pull request data in webhook event")

    head = get_str(get_table(pr, "head") or {}, "sha")
    base = get_str(get_table(pr, "base") or {}, "sha")
    number = get_int(pr, "number")
    if number is None:
        number = get_int(payload, "number")
    if head is None or base is None or number is None:
        return _invalid("missing head/base commit or number in pull request event")

    return Ok(
        ReleaseEvent(
            name="pull_request",
            owner=owner,
            repo=repo,
            head_sha=head,
            base_sha=base,
            pr_number=number,
        )
    )


def load_event(
    *,
    name: str,
    payload_path: Path | None,
    repository: str | None = None,
) -> Result[ReleaseEvent, ReleaseError]:
    """Read the webhook payload file and resolve head/base revisions."""
    checked = check_event_name(name)
    if isinstance(checked, Err):
        return checked

    if payload_path is None:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message="GITHUB_EVENT_PATH was not defined",
            )
        )

    try:
        obj: object = json.loads(payload_path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"failed to read event payload: {e}",
                hint=str(payload_path),
            )
        )
    except json.JSONDecodeError as e:
        return _invalid(f"failed to parse event payload: {e}")

    payload = as_str_dict(obj)
    if payload is None:
        return _invalid("event payload must be a JSON object")

    return parse_event(name, payload, repository=repository)
