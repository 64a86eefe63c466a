from __future__ import annotations

import os
from pathlib import Path

import typer

from promo import __version__
from promo.cli.commands.deploy_cmd import deploy
from promo.cli.commands.init_cmd import init
from promo.cli.commands.merge_cmd import merge
from promo.cli.commands.release_cmd import release
from promo.cli.context import PROJECT_ENV, VERBOSE_ENV
from promo.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(init)
app.command()(deploy)
app.command()(release)
app.command()(merge)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo git commands."),
    project: Path | None = typer.Option(
        None,
        "--project",
        help="Project root (default: current directory)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if verbose:
        os.environ[VERBOSE_ENV] = "1"

    if project is not None:
        try:
            root = project.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --project: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not root.is_dir():
            typer.echo(f"error: --project '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ[PROJECT_ENV] = str(root)


def main() -> None:
    app()
