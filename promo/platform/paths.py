"""User-level paths.

Downstream repositories are cloned once into a per-user work directory and
reused by later deploys:

    ~/.promo/<repository-basename>
"""

from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import urlparse

__all__ = [
    "clone_dir",
    "home",
    "repository_basename",
    "work_dir",
]

APP_NAME = "promo"
WORK_DIR_ENV = "PROMO_HOME"


def home() -> Path:
    """Get the user's home directory, honouring HOME for CI/containers."""
    home_env = os.environ.get("HOME")
    if home_env:
        return Path(home_env)
    return Path.home()


def work_dir() -> Path:
    """Directory holding downstream clones ($PROMO_HOME or ~/.promo)."""
    override = os.environ.get(WORK_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return home() / f".{APP_NAME}"


def repository_basename(remote: str) -> str:
    """Directory name for a clone of ``remote``.

    Handles URLs (``https://host/team/deploy.git``) and scp-like remotes
    (``git@host:team/deploy.git``).
    """
    parsed = urlparse(remote)
    path = parsed.path if parsed.scheme else remote.rsplit(":", 1)[-1]
    name = path.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name or "repo"


def clone_dir(remote: str) -> Path:
    return work_dir() / repository_basename(remote)
