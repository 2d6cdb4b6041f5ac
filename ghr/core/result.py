"""Result type for explicit error handling.

Every fallible step of a release run (reading a config at a revision,
walking history, talking to the release store) returns a Result instead of
raising, so the dispatcher can stop the pipeline at the first failure
without try/except blocks in between.

Usage:
    def load_tag(path: Path) -> Result[str, ReleaseError]:
        text = path.read_text(encoding="utf-8").strip()
        if not text:
            return Err(ReleaseError(kind="config_read", message="empty tag"))
        return Ok(text)

    match load_tag(path):
        case Ok(tag):
            print(f"tag: {tag}")
        case Err(error):
            print(f"error: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
