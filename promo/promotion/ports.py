"""Ports between the promotion engine and the outside world.

The engine never runs git or prompts itself. Workflows receive a
``RepositoryPort`` (implemented by ``promo.git.Repository`` for a real
checkout) and a ``ConfirmationPort`` (implemented by the CLI on top of typer
prompts). Tests use in-memory fakes of both.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from promo.core.result import Result

__all__ = [
    "Branch",
    "ConfirmationPort",
    "GitError",
    "MergeOutcome",
    "RepositoryPort",
    "Validator",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "push")
        message: Error message, usually git's stderr
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class Branch:
    """A local or remote branch.

    Remote branch names carry no remote prefix: ``origin/release/2.0`` is
    ``Branch(name="release/2.0", is_remote=True)``.
    """

    name: str
    is_remote: bool = False
    is_current: bool = False


class MergeOutcome(Enum):
    MERGED = "merged"
    CONFLICT = "conflict"


# Returns an error message for invalid input, None when the input is accepted.
Validator = Callable[[str], str | None]


class RepositoryPort(Protocol):
    """Version-control operations the engine requests."""

    def list_tags(self) -> Result[list[str], GitError]:
        ...

    def list_branches(self, include_remote: bool) -> Result[list[Branch], GitError]:
        ...

    def tags_at_head(self) -> Result[list[str], GitError]:
        ...

    def current_branch_name(self) -> str | None:
        """Current branch, or None for a detached HEAD."""
        ...

    def branches_containing(self, ref: str) -> Result[list[str], GitError]:
        """Local branches whose history contains ``ref``."""
        ...

    def create_or_replace_tag(self, name: str) -> Result[None, GitError]:
        """Point tag ``name`` at HEAD, moving it if it already exists."""
        ...

    def create_branch(self, name: str, from_ref: str) -> Result[None, GitError]:
        """Create branch ``name`` at ``from_ref`` and switch to it."""
        ...

    def switch_branch(self, name: str) -> Result[None, GitError]:
        ...

    def merge(self, source_ref: str) -> Result[MergeOutcome, GitError]:
        """Merge ``source_ref`` into the current branch.

        A conflicted merge is reported as ``Ok(MergeOutcome.CONFLICT)`` and
        left in place for the operator to resolve or abort.
        """
        ...

    def push(self, ref: str, force: bool) -> Result[None, GitError]:
        """Push ``ref`` together with tags."""
        ...


class ConfirmationPort(Protocol):
    """Blocking operator interactions. None means the operator cancelled."""

    def confirm(self, prompt: str) -> bool:
        ...

    def choose_one(self, prompt: str, options: Sequence[str]) -> int | None:
        ...

    def input_text(self, prompt: str, validator: Validator) -> str | None:
        ...
