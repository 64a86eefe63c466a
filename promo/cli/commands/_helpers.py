"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from promo.core.config import Config, config_path, load_config
from promo.core.errors import ErrorCode
from promo.core.result import Err, Result
from promo.git.repository import Repository
from promo.output.console import Style
from promo.output.errors import print_promotion_error, promotion_error_exit_code
from promo.promotion.errors import PromotionError

if TYPE_CHECKING:
    from promo.cli.context import CLIContext


def exit_on_error[T](result: Result[T, PromotionError], ctx: CLIContext) -> T:
    """Return the value of an Ok, or report the error and exit.

    Replaces the pattern:
        if isinstance(result, Err):
            print_promotion_error(result.error, ctx.console)
            raise typer.Exit(code=promotion_error_exit_code(result.error))
        value = result.value
    """
    if isinstance(result, Err):
        print_promotion_error(result.error, ctx.console)
        raise typer.Exit(code=promotion_error_exit_code(result.error))
    return result.value


def exit_with_code(code: ErrorCode) -> NoReturn:
    raise typer.Exit(code=int(code))


def require_config(ctx: CLIContext) -> Config:
    """Load promo.toml from the project root or exit with ENV_ERROR."""
    loaded = load_config(config_path(ctx.project_root))
    if isinstance(loaded, Err):
        ctx.console.error(loaded.error.message)
        if loaded.error.hint:
            ctx.console.print(f"hint: {loaded.error.hint}", Style.DIM)
        exit_with_code(ErrorCode.ENV_ERROR)
    return loaded.value


def require_checkout(ctx: CLIContext) -> Repository:
    repo = Repository(ctx.project_root, console=ctx.console)
    if not repo.exists():
        ctx.console.error(f"not a git repository: {ctx.project_root}")
        ctx.console.print("hint: run promo inside the project checkout", Style.DIM)
        exit_with_code(ErrorCode.ENV_ERROR)
    return repo
