"""Action outputs.

When `GITHUB_OUTPUT` points to a file, every output is appended with the
multi-line `name<<DELIMITER` syntax so changelogs survive intact. Without
it (local runs) the outputs are printed instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from uuid import uuid4

from ghr.core.result import Err, Ok, Result
from ghr.output.console import ConsoleProtocol, Style
from ghr.services.release.errors import ReleaseError


def format_output(name: str, value: str, *, delimiter: str | None = None) -> str:
    delim = delimiter or f"ghr_{uuid4().hex}"
    return f"{name}<<{delim}\n{value}\n{delim}\n"


def write_outputs(
    outputs: Mapping[str, str],
    *,
    output_path: Path | None,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    if output_path is None:
        for name, value in outputs.items():
            console.header(name)
            console.print(value, Style.DIM)
        return Ok(None)

    text = "".join(format_output(name, value) for name, value in outputs.items())
    try:
        with output_path.open("a", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        return Err(
            ReleaseError(
                kind="output_failed",
                message=f"failed to write outputs: {e}",
                hint=str(output_path),
            )
        )
    return Ok(None)
