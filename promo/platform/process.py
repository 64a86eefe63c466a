"""Run external programs, returning Result values instead of raising.

Usage:
    result = run(["git", "tag", "--list"], cwd=repo_path)
    match result:
        case Ok(stdout):
            tags = stdout.splitlines()
        case Err(error):
            console.error(str(error))
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from promo.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero, could not start, or timed out.

    ``returncode`` is -1 when the process never produced an exit status.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def run(
    cmd: Sequence[str],
    cwd: Path,
    *,
    extra_env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    Args:
        cmd: Program and arguments.
        cwd: Working directory.
        extra_env: Variables set on top of the current environment.
        timeout: Seconds before the process is killed; None waits forever.
    """
    command = tuple(cmd)
    env = None
    if extra_env:
        env = {**os.environ, **extra_env}

    try:
        proc = subprocess.run(
            command,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _failed(command, -1, partial, f"Command timed out after {timeout}s")
    except OSError as e:
        return _failed(command, -1, "", str(e))

    if proc.returncode != 0:
        return _failed(command, proc.returncode, proc.stdout, proc.stderr)
    return Ok(proc.stdout)


def _failed(
    command: tuple[str, ...], returncode: int, stdout: str, stderr: str
) -> Err[ProcessError]:
    return Err(ProcessError(command, returncode, stdout, stderr))
