"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from ghr.core.errors import ErrorCode
from ghr.output.console import ConsoleProtocol, Style
from ghr.services.release.errors import ReleaseError


def release_error_code(kind: str) -> ErrorCode:
    if kind in {"invalid_input"}:
        return ErrorCode.ENV_ERROR
    if kind in {"revision_resolution", "command_execution"}:
        return ErrorCode.GIT_ERROR
    if kind in {"lookup_failed", "create_failed", "update_failed", "comment_failed"}:
        return ErrorCode.NETWORK_ERROR
    if kind in {"output_failed"}:
        return ErrorCode.IO_ERROR
    return ErrorCode.USER_ERROR


def exit_release(
    error: ReleaseError,
    *,
    console: ConsoleProtocol,
    annotate: bool = False,
) -> NoReturn:
    """Report a fatal release error and exit with the matching code.

    With `annotate`, the message is also printed as a workflow `::error::`
    command so it shows up on the run summary.
    """
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    if annotate:
        typer.echo(f"::error::{_escape_annotation(error.message)}")
    raise typer.Exit(code=int(release_error_code(error.kind)))


def _escape_annotation(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
