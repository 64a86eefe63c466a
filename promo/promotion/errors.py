"""Error payloads for promotion workflows.

Kinds group into the taxonomy the CLI maps to exit codes:

- validation: invalid_version, invalid_release_version,
  duplicate_release_branch, not_on_branch, already_on_release_branch,
  not_on_release_branch
- merge_conflict
- infrastructure: git_failed, config_invalid, copy_failed, write_failed

Soft outcomes ("nothing to promote", a declined confirmation) are not errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from promo.promotion.ports import GitError

PromotionErrorKind = Literal[
    "invalid_version",
    "invalid_release_version",
    "duplicate_release_branch",
    "not_on_branch",
    "already_on_release_branch",
    "not_on_release_branch",
    "merge_conflict",
    "git_failed",
    "config_invalid",
    "copy_failed",
    "write_failed",
]

VALIDATION_KINDS: frozenset[str] = frozenset(
    {
        "invalid_version",
        "invalid_release_version",
        "duplicate_release_branch",
        "not_on_branch",
        "already_on_release_branch",
        "not_on_release_branch",
    }
)


@dataclass(frozen=True, slots=True)
class PromotionError:
    """Canonical workflow error.

    Attributes:
        kind: Category, see module docstring.
        message: What went wrong, naming the offending input.
        hint: Optional next step for the operator.
        step: Workflow step that failed, when it matters for recovery
            (e.g. "merge feature/x into release/2.0").
    """

    kind: PromotionErrorKind
    message: str
    hint: str | None = None
    step: str | None = None

    @property
    def is_validation(self) -> bool:
        return self.kind in VALIDATION_KINDS

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


def git_failed(error: GitError, *, step: str) -> PromotionError:
    return PromotionError(
        kind="git_failed",
        message=f"git {error.command} failed during {step}",
        hint=error.message.strip() or None,
        step=step,
    )
