"""The release store capability consumed by the upsert manager and the
comment poster.

The production adapter is `GhReleaseStore` (GitHub CLI); tests use an
in-memory double. A lookup never reports "not found" as an error: the
adapter turns it into `ReleaseAbsent`.
"""

from __future__ import annotations

from typing import Protocol

from ghr.core.result import Result
from ghr.services.release.errors import ReleaseError
from ghr.services.release.model import (
    CommentRecord,
    ReleaseInput,
    ReleaseLookup,
    ReleaseRecord,
)


class ReleaseStore(Protocol):
    def get_release_by_tag(self, tag: str) -> Result[ReleaseLookup, ReleaseError]: ...

    def create_release(self, release: ReleaseInput) -> Result[ReleaseRecord, ReleaseError]: ...

    def update_release(
        self, release_id: int, release: ReleaseInput
    ) -> Result[ReleaseRecord, ReleaseError]: ...

    def create_comment(
        self, issue_number: int, body: str
    ) -> Result[CommentRecord, ReleaseError]: ...
