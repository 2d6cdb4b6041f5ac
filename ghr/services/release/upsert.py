"""Create-or-update of the release identified by a tag.

Lookup by tag, then either update the release found or create a new one.
Running it twice with the same input converges on a single release: the
second run takes the update branch.
"""

from __future__ import annotations

from ghr.core.result import Err, Ok, Result
from ghr.output.console import ConsoleProtocol
from ghr.services.release.errors import ReleaseError
from ghr.services.release.model import ReleaseAbsent, ReleaseFound, ReleaseInput, UpsertOutcome
from ghr.services.release.store import ReleaseStore


def upsert_release(
    *,
    store: ReleaseStore,
    release: ReleaseInput,
    console: ConsoleProtocol,
) -> Result[UpsertOutcome, ReleaseError]:
    tag = release.tag_name

    lookup = store.get_release_by_tag(tag)
    if isinstance(lookup, Err):
        console.error(
            f"unexpected error while fetching release for tag {tag}: {lookup.error.pretty()}"
        )
        return lookup

    match lookup.value:
        case ReleaseFound(release=current):
            console.info(f"Updating existing release {current.id} for tag {tag}...")
            updated = store.update_release(current.id, release)
            if isinstance(updated, Err):
                console.error(f"failed to update release for tag {tag}: {updated.error.pretty()}")
                return updated
            return Ok(UpsertOutcome(action="updated", release=updated.value))

        case ReleaseAbsent():
            console.info(f"Creating new release for tag {tag}...")
            created = store.create_release(release)
            if isinstance(created, Err):
                console.error(f"failed to create release for tag {tag}: {created.error.pretty()}")
                return created
            return Ok(UpsertOutcome(action="created", release=created.value))
