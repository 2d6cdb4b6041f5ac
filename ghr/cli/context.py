from __future__ import annotations

import os
from dataclasses import dataclass

import typer

from ghr.core.config import ActionEnv, load_action_env
from ghr.core.errors import ErrorCode
from ghr.core.result import Err
from ghr.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    env: ActionEnv
    console: ConsoleProtocol


def build_context() -> CLIContext:
    env_result = load_action_env(os.environ)
    if isinstance(env_result, Err):
        typer.echo(f"error: {env_result.error.message}", err=True)
        if env_result.error.hint:
            typer.echo(f"hint: {env_result.error.hint}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(env=env_result.value, console=RichConsole())
