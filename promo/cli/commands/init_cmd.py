from __future__ import annotations

import typer

from promo.cli.context import build_context
from promo.cli.commands._helpers import exit_with_code
from promo.core.config import (
    DEFAULT_DIST,
    DEFAULT_REMOTE_NAME,
    DEFAULT_TRUNK,
    Config,
    config_path,
    load_config,
    render_config,
)
from promo.core.errors import ErrorCode
from promo.core.result import Err
from promo.platform.files import atomic_write_text


def init(
    remote: str | None = typer.Option(None, "--remote", help="Downstream repository URL"),
    dist: str | None = typer.Option(None, "--dist", help="Artifact directory"),
    target: str | None = typer.Option(
        None, "--target", help="Directory in the downstream repository (default: app name)"
    ),
    trunk: str | None = typer.Option(None, "--trunk", help="Downstream default branch"),
) -> None:
    """Create or update promo.toml in the project root."""
    ctx = build_context()
    path = config_path(ctx.project_root)

    current: Config | None = None
    if path.exists():
        loaded = load_config(path)
        if not isinstance(loaded, Err):
            current = loaded.value

    if remote is None:
        remote = typer.prompt(
            "Downstream repository URL",
            default=current.remote if current else None,
        )
    remote = (remote or "").strip()
    if not remote:
        ctx.console.error("remote is required")
        exit_with_code(ErrorCode.USER_ERROR)

    if dist is None:
        dist = typer.prompt("Artifact directory", default=current.dist if current else DEFAULT_DIST)
    if target is None:
        target = typer.prompt(
            "Directory in the downstream repository (empty: app name)",
            default=(current.target or "") if current else "",
            show_default=False,
        )
    if trunk is None:
        trunk = current.trunk if current else DEFAULT_TRUNK

    config = Config(
        remote=remote,
        dist=dist.strip() or DEFAULT_DIST,
        target=target.strip() or None,
        trunk=trunk.strip() or DEFAULT_TRUNK,
        remote_name=current.remote_name if current else DEFAULT_REMOTE_NAME,
        name=current.name if current else None,
    )

    try:
        atomic_write_text(path, render_config(config))
    except OSError as e:
        ctx.console.error(f"failed to write {path}: {e}")
        exit_with_code(ErrorCode.IO_ERROR)

    ctx.console.success(f"wrote {path}")
