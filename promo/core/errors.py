"""Exit codes for CLI commands.

A no-op ("nothing to promote") and a declined confirmation are both
successful outcomes and exit with ``OK``.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. The numeric values are part of the CLI contract.

    - 0: Success, nothing to do, or operator declined a confirmation
    - 1: User error (malformed version, duplicate release branch, wrong branch)
    - 2: Environment error (missing or invalid promo.toml / manifest)
    - 3: Merge conflict
    - 4: Git error (a git command failed)
    - 5: I/O error (artifact copy, manifest or changelog write failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    CONFLICT = 3
    GIT_ERROR = 4
    IO_ERROR = 5
