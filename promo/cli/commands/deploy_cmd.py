from __future__ import annotations

import typer

from promo.cli.commands._helpers import exit_on_error, require_checkout, require_config
from promo.cli.context import build_context
from promo.cli.prompts import TyperPrompts
from promo.output.console import Style
from promo.services.deploy import DeployRequest, run_deploy


def deploy(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Commit and tag in the local clone without pushing"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Overwrite an existing version tag"),
) -> None:
    """Promote the built artifact into the downstream repository."""
    ctx = build_context()
    config = require_config(ctx)
    source = require_checkout(ctx)

    request = DeployRequest(
        project_root=ctx.project_root,
        config=config,
        dry_run=dry_run,
        assume_yes=yes,
    )
    report = exit_on_error(
        run_deploy(
            request,
            source=source,
            console=ctx.console,
            prompts=TyperPrompts(ctx.console),
        ),
        ctx,
    )

    match report.status:
        case "nothing_to_do":
            ctx.console.info(f"nothing to deploy: {report.reason}")
        case "aborted":
            ctx.console.warning(f"deploy cancelled: {report.reason}")
        case "no_changes":
            ctx.console.info(f"{report.destination}: {report.reason}")
        case "dry_run":
            ctx.console.success(
                f"{report.application} {report.version} ready on {report.destination} (dry-run)"
            )
            ctx.console.print(f"tags: {', '.join(report.tags)}", Style.DIM)
            ctx.console.print("nothing pushed", Style.DIM)
        case "deployed":
            ctx.console.success(
                f"{report.application} {report.version} deployed to {report.destination}"
            )
            ctx.console.print(f"tags: {', '.join(report.tags)}", Style.DIM)
