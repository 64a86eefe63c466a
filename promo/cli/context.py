from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from promo.core.errors import ErrorCode
from promo.output.console import ConsoleProtocol, RichConsole

PROJECT_ENV = "PROMO_PROJECT"
VERBOSE_ENV = "PROMO_VERBOSE"


@dataclass(frozen=True, slots=True)
class CLIContext:
    project_root: Path
    console: ConsoleProtocol
    verbose: bool = False


def build_context() -> CLIContext:
    raw = os.environ.get(PROJECT_ENV)
    try:
        root = Path(raw).expanduser().resolve() if raw else Path.cwd()
    except OSError as e:
        typer.echo(f"error: cannot resolve project root: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    verbose = os.environ.get(VERBOSE_ENV) == "1"
    return CLIContext(
        project_root=root,
        console=RichConsole(verbose=verbose),
        verbose=verbose,
    )
