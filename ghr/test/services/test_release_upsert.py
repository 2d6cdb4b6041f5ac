from __future__ import annotations

from dataclasses import replace

from ghr.core.result import Err, Ok, Result
from ghr.output.console import MockConsole
from ghr.services.release.errors import ReleaseError
from ghr.services.release.model import (
    CommentRecord,
    ReleaseAbsent,
    ReleaseFound,
    ReleaseInput,
    ReleaseLookup,
    ReleaseRecord,
)
from ghr.services.release.upsert import upsert_release


class FakeStore:
    """In-memory release store keyed by tag."""

    def __init__(self) -> None:
        self.releases: dict[str, ReleaseRecord] = {}
        self.calls: list[str] = []
        self.lookup_error: ReleaseError | None = None
        self.write_error: ReleaseError | None = None

    def get_release_by_tag(self, tag: str) -> Result[ReleaseLookup, ReleaseError]:
        self.calls.append(f"get {tag}")
        if self.lookup_error is not None:
            return Err(self.lookup_error)
        found = self.releases.get(tag)
        if found is None:
            return Ok(ReleaseAbsent(tag=tag))
        return Ok(ReleaseFound(release=found))

    def create_release(self, release: ReleaseInput) -> Result[ReleaseRecord, ReleaseError]:
        self.calls.append(f"create {release.tag_name}")
        if self.write_error is not None:
            return Err(self.write_error)
        record = ReleaseRecord(
            id=len(self.releases) + 1,
            tag_name=release.tag_name,
            upload_url=f"https://uploads/{release.tag_name}",
            html_url=f"https://releases/{release.tag_name}",
            body=release.body,
            target_commitish=release.target_commitish,
        )
        self.releases[release.tag_name] = record
        return Ok(record)

    def update_release(
        self, release_id: int, release: ReleaseInput
    ) -> Result[ReleaseRecord, ReleaseError]:
        self.calls.append(f"update {release_id}")
        if self.write_error is not None:
            return Err(self.write_error)
        record = replace(
            self.releases[release.tag_name],
            body=release.body,
            target_commitish=release.target_commitish,
        )
        self.releases[release.tag_name] = record
        return Ok(record)

    def create_comment(self, issue_number: int, body: str) -> Result[CommentRecord, ReleaseError]:
        raise AssertionError("not used")


RELEASE = ReleaseInput(
    tag_name="v1.0.0",
    name="Release v1.0.0",
    target_commitish="abc",
    body="* Fix bug",
    draft=False,
    prerelease=False,
)


def test_creates_when_absent() -> None:
    store = FakeStore()
    console = MockConsole()

    result = upsert_release(store=store, release=RELEASE, console=console)

    assert isinstance(result, Ok)
    assert result.value.action == "created"
    assert result.value.release.tag_name == "v1.0.0"
    assert store.calls == ["get v1.0.0", "create v1.0.0"]
    assert console.find("Creating new release for tag v1.0.0")


def test_updates_when_found() -> None:
    store = FakeStore()
    upsert_release(store=store, release=RELEASE, console=MockConsole())
    console = MockConsole()

    result = upsert_release(
        store=store, release=replace(RELEASE, body="* Better"), console=console
    )

    assert isinstance(result, Ok)
    assert result.value.action == "updated"
    assert result.value.release.body == "* Better"
    assert store.calls[-2:] == ["get v1.0.0", "update 1"]
    assert console.find("Updating existing release 1 for tag v1.0.0")


def test_repeated_runs_converge_on_one_release() -> None:
    store = FakeStore()

    first = upsert_release(store=store, release=RELEASE, console=MockConsole())
    second = upsert_release(store=store, release=RELEASE, console=MockConsole())

    assert isinstance(first, Ok) and isinstance(second, Ok)
    assert first.value.action == "created"
    assert second.value.action == "updated"
    assert first.value.release.id == second.value.release.id
    assert len(store.releases) == 1


def test_lookup_error_stops_before_any_write() -> None:
    store = FakeStore()
    store.lookup_error = ReleaseError(kind="lookup_failed", message="HTTP 500")
    console = MockConsole()

    result = upsert_release(store=store, release=RELEASE, console=console)

    assert isinstance(result, Err)
    assert result.error.kind == "lookup_failed"
    assert store.calls == ["get v1.0.0"]
    assert console.has_error()
    assert console.find("unexpected error while fetching release for tag v1.0.0")


def test_create_error_propagates() -> None:
    store = FakeStore()
    store.write_error = ReleaseError(kind="create_failed", message="HTTP 422")
    console = MockConsole()

    result = upsert_release(store=store, release=RELEASE, console=console)

    assert isinstance(result, Err)
    assert result.error.kind == "create_failed"
    assert console.has_error()
