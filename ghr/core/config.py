"""Typed access to the GitHub Actions runtime environment.

The runner describes the run through environment variables; this module
gathers the ones ghr needs into a single frozen value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "ActionEnv",
    "ConfigError",
    "load_action_env",
]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the runtime environment is incomplete."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ActionEnv:
    """Runtime environment of an action run.

    Attributes:
        workspace_root: Checkout directory (GITHUB_WORKSPACE), resolved.
        event_name: Triggering event (GITHUB_EVENT_NAME), may be empty.
        event_path: Webhook payload file (GITHUB_EVENT_PATH).
        repository: owner/name slug (GITHUB_REPOSITORY).
        output_path: File receiving step outputs (GITHUB_OUTPUT).
        annotate: True when running on an Actions runner, so errors are
            also emitted as workflow annotations.
    """

    workspace_root: Path
    event_name: str
    event_path: Path | None = None
    repository: str | None = None
    output_path: Path | None = None
    annotate: bool = False


def _path(environ: Mapping[str, str], key: str) -> Path | None:
    value = environ.get(key, "").strip()
    return Path(value) if value else None


def load_action_env(environ: Mapping[str, str]) -> Result[ActionEnv, ConfigError]:
    workspace = environ.get("GITHUB_WORKSPACE", "").strip()
    if not workspace:
        return Err(
            ConfigError(
                "GITHUB_WORKSPACE was not defined",
                hint="set GITHUB_WORKSPACE to the repository checkout",
            )
        )

    try:
        root = Path(workspace).expanduser().resolve()
    except OSError as e:
        return Err(ConfigError(f"invalid GITHUB_WORKSPACE: {e}", hint=workspace))

    if not root.is_dir():
        return Err(ConfigError(f"GITHUB_WORKSPACE is not a directory: {root}"))

    return Ok(
        ActionEnv(
            workspace_root=root,
            event_name=environ.get("GITHUB_EVENT_NAME", "").strip(),
            event_path=_path(environ, "GITHUB_EVENT_PATH"),
            repository=environ.get("GITHUB_REPOSITORY", "").strip() or None,
            output_path=_path(environ, "GITHUB_OUTPUT"),
            annotate=environ.get("GITHUB_ACTIONS", "").lower() == "true",
        )
    )
