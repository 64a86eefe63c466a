from __future__ import annotations

import typer

from promo.cli.commands._helpers import exit_on_error, require_checkout
from promo.cli.context import build_context
from promo.cli.prompts import TyperPrompts
from promo.services.release import ReleaseRequest, run_release


def release(
    version: str | None = typer.Option(
        None, "--version", help="Release version (major.minor.patch)"
    ),
    label: str | None = typer.Option(
        None, "--label", help="Formal release label; deploy promotes to release/<label>"
    ),
    no_edit: bool = typer.Option(False, "--no-edit", help="Do not open the changelog in $EDITOR"),
) -> None:
    """Bump the version, update CHANGELOG.md, commit, tag and push."""
    ctx = build_context()
    repo = require_checkout(ctx)

    request = ReleaseRequest(project_root=ctx.project_root, version=version, label=label)
    report = exit_on_error(
        run_release(
            request,
            repo=repo,
            prompts=TyperPrompts(ctx.console),
            console=ctx.console,
            edit=None if no_edit else _edit_in_editor,
        ),
        ctx,
    )

    match report.status:
        case "aborted":
            ctx.console.warning("release cancelled")
        case "local":
            ctx.console.warning(f"{report.tag} not pushed")
        case "pushed":
            ctx.console.success(f"released {report.tag} on {report.branch}")


def _edit_in_editor(text: str) -> str | None:
    return typer.edit(text, extension=".md")
