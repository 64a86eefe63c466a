from __future__ import annotations

import typer

from promo.cli.commands._helpers import exit_on_error, require_checkout
from promo.cli.context import build_context
from promo.cli.prompts import TyperPrompts
from promo.services.merge import run_release_merge


def merge(
    version: str | None = typer.Option(
        None, "--version", help="Create release/<version> instead of choosing"
    ),
) -> None:
    """Merge the current branch into a release branch and push both."""
    ctx = build_context()
    repo = require_checkout(ctx)

    report = exit_on_error(
        run_release_merge(
            repo,
            prompts=TyperPrompts(ctx.console),
            console=ctx.console,
            version=version,
        ),
        ctx,
    )

    if report.status == "aborted":
        ctx.console.warning("merge not pushed")
        return
    ctx.console.success(f"pushed {report.release_branch} and {report.source}")
