"""Fold a work branch into a release line.

Run from a non-release branch (the source). The operator picks an existing
``release/<major>.<minor>[.<patch>]`` branch, newest first, or creates a new
one from the source tip. An existing branch gets the source merged into it.
After a final confirmation the release branch and then the source branch are
pushed. Declining keeps every change local.
"""

from __future__ import annotations

import re
from collections.abc import Set
from dataclasses import dataclass
from typing import Literal

from promo.core.result import Err, Ok, Result
from promo.output.console import ConsoleProtocol, Style
from promo.promotion.branches import (
    branch_names,
    is_release_branch,
    release_branch_name,
    release_candidates,
)
from promo.promotion.errors import PromotionError, git_failed
from promo.promotion.ports import ConfirmationPort, MergeOutcome, RepositoryPort

CREATE_OPTION = "+ create a new release branch"

_RELEASE_VERSION_RE = re.compile(r"^\d+\.\d+(?:\.\d+)?\S*$")

MergeStatus = Literal["pushed", "aborted"]


@dataclass(frozen=True, slots=True)
class MergeReport:
    status: MergeStatus
    source: str
    release_branch: str | None = None
    created: bool = False


def validate_release_version(text: str, existing: Set[str]) -> PromotionError | None:
    """Check a version typed for a new release branch."""
    value = text.strip()
    if _RELEASE_VERSION_RE.match(value) is None:
        return PromotionError(
            kind="invalid_release_version",
            message=f"invalid release version: {value!r}",
            hint="expected major.minor[.patch], e.g. 2.1",
        )
    name = release_branch_name(value)
    if name in existing:
        return PromotionError(
            kind="duplicate_release_branch",
            message=f"{name} already exists",
            hint="pick it from the list instead of creating it",
        )
    return None


def run_release_merge(
    repo: RepositoryPort,
    *,
    prompts: ConfirmationPort,
    console: ConsoleProtocol,
    version: str | None = None,
) -> Result[MergeReport, PromotionError]:
    """Select or create a release branch, merge the source into it, push both.

    Args:
        repo: Checkout whose current branch is the source.
        prompts: Operator interactions.
        console: Progress output.
        version: Create ``release/<version>`` without asking.
    """
    source = repo.current_branch_name()
    if source is None:
        return Err(
            PromotionError(
                kind="not_on_branch",
                message="HEAD is detached",
                hint="check out the branch to merge first",
            )
        )
    if is_release_branch(source):
        return Err(
            PromotionError(
                kind="already_on_release_branch",
                message=f"{source} is already a release branch",
                hint="run merge from the branch you want to fold into a release",
            )
        )

    branches = repo.list_branches(include_remote=True)
    if isinstance(branches, Err):
        return Err(git_failed(branches.error, step="list branches"))
    candidates = release_candidates(branches.value)
    existing = branch_names(branches.value)

    target: str | None = None
    if version is not None:
        invalid = validate_release_version(version, existing)
        if invalid is not None:
            return Err(invalid)
        target = release_branch_name(version.strip())
    elif candidates:
        options = [c.name for c in candidates] + [CREATE_OPTION]
        choice = prompts.choose_one(f"Merge {source} into which release branch?", options)
        if choice is None:
            return Ok(MergeReport(status="aborted", source=source))
        if choice < len(candidates):
            target = candidates[choice].name
    else:
        console.info("no release branch found, a new one will be created")

    created = target is None or target not in existing
    if target is None:
        typed = prompts.input_text(
            "Release version (major.minor[.patch])",
            lambda text: _validation_message(text, existing),
        )
        if typed is None:
            return Ok(MergeReport(status="aborted", source=source))
        target = release_branch_name(typed.strip())

    if created:
        made = repo.create_branch(target, source)
        if isinstance(made, Err):
            return Err(git_failed(made.error, step=f"create {target}"))
        console.success(f"created {target} from {source}")
    else:
        step = f"merge {source} into {target}"
        switched = repo.switch_branch(target)
        if isinstance(switched, Err):
            return Err(git_failed(switched.error, step=f"switch to {target}"))
        merged = repo.merge(source)
        if isinstance(merged, Err):
            return Err(git_failed(merged.error, step=step))
        if merged.value is MergeOutcome.CONFLICT:
            return Err(
                PromotionError(
                    kind="merge_conflict",
                    message=f"merge conflict while merging {source} into {target}",
                    hint="resolve the conflicts and commit, or run `git merge --abort`",
                    step=step,
                )
            )
        console.success(f"merged {source} into {target}")

    if not prompts.confirm(f"Push {target} and {source} now?"):
        restored = repo.switch_branch(source)
        if isinstance(restored, Err):
            return Err(git_failed(restored.error, step=f"switch back to {source}"))
        console.print("nothing pushed; changes stay local", Style.DIM)
        return Ok(
            MergeReport(status="aborted", source=source, release_branch=target, created=created)
        )

    pushed = repo.push(target, force=False)
    if isinstance(pushed, Err):
        return Err(git_failed(pushed.error, step=f"push {target}"))
    restored = repo.switch_branch(source)
    if isinstance(restored, Err):
        return Err(git_failed(restored.error, step=f"switch back to {source}"))
    pushed = repo.push(source, force=False)
    if isinstance(pushed, Err):
        return Err(git_failed(pushed.error, step=f"push {source}"))

    return Ok(MergeReport(status="pushed", source=source, release_branch=target, created=created))


def _validation_message(text: str, existing: Set[str]) -> str | None:
    error = validate_release_version(text, existing)
    return None if error is None else error.pretty()
