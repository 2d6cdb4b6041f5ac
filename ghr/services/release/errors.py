"""Error payload for the release pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "config_read",
    "invalid_options",
    "invalid_event",
    "unsupported_event",
    "invalid_input",
    "revision_resolution",
    "command_execution",
    "lookup_failed",
    "create_failed",
    "update_failed",
    "comment_failed",
    "output_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical error value returned by every release step.

    `kind` drives the exit code; `message` is what the run reports as its
    failure; `hint` carries tool output or the offending path.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
