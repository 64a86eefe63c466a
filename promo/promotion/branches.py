"""Checkout classification and release branch grammar.

A promotion is triggered either by a version tag at HEAD or by being on a
release branch:

    HEAD tags          branch        destination
    v1.4.0@2.0         (any)         release/2.0   by tag, formal-release marker
    v1.4.0             (any)         <trunk>       by tag
    (none)             release/2.0   release/2.0   by branch
    (none)             feature/x     -             nothing to deploy
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from promo.core.result import Err, Ok, Result
from promo.promotion.ports import Branch, GitError, RepositoryPort
from promo.promotion.version import Version, newest_first


_VERSION_TAG_RE = re.compile(r"^v\d+\.\d+\.\d+.*$")
_FORMAL_RELEASE_RE = re.compile(r"^v\d+\.\d+\.\d+[^@]*@(.+)$")
_RELEASE_BRANCH_RE = re.compile(r"^release/.+$")
_VERSIONED_RELEASE_BRANCH_RE = re.compile(r"^release/(\d+)\.(\d+)(?:\.(\d+))?")

RELEASE_PREFIX = "release/"


class DeployType(Enum):
    BY_TAG = "tag"
    BY_BRANCH = "branch"


@dataclass(frozen=True, slots=True)
class CheckoutState:
    branch: str
    head_tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PromotionDecision:
    target_ref: str
    deploy_type: DeployType


@dataclass(frozen=True, slots=True)
class ReleaseBranchCandidate:
    name: str
    version: Version


def is_version_tag(tag: str) -> bool:
    return _VERSION_TAG_RE.match(tag) is not None


def formal_release_label(tag: str) -> str | None:
    m = _FORMAL_RELEASE_RE.match(tag)
    if m is None:
        return None
    return m.group(1)


def is_release_branch(name: str) -> bool:
    return _RELEASE_BRANCH_RE.match(name) is not None


def release_branch_name(label: str) -> str:
    return f"{RELEASE_PREFIX}{label}"


def resolve_promotion(state: CheckoutState, *, trunk: str) -> PromotionDecision | None:
    """Decide where the current checkout promotes to, or None for no deploy."""
    if any(is_version_tag(t) for t in state.head_tags):
        for tag in state.head_tags:
            label = formal_release_label(tag)
            if label is not None:
                return PromotionDecision(release_branch_name(label), DeployType.BY_TAG)
        return PromotionDecision(trunk, DeployType.BY_TAG)

    if is_release_branch(state.branch):
        return PromotionDecision(state.branch, DeployType.BY_BRANCH)

    return None


def read_checkout_state(repo: RepositoryPort) -> Result[CheckoutState | None, GitError]:
    """Read branch and HEAD tags from a checkout.

    A detached HEAD is attributed to the first branch containing it.
    Returns Ok(None) when no branch contains HEAD.
    """
    branch = repo.current_branch_name()
    if branch is None:
        containing = repo.branches_containing("HEAD")
        if isinstance(containing, Err):
            return containing
        if not containing.value:
            return Ok(None)
        branch = containing.value[0]

    head_tags = repo.tags_at_head()
    if isinstance(head_tags, Err):
        return head_tags
    return Ok(CheckoutState(branch=branch, head_tags=tuple(head_tags.value)))


def parse_release_branch(name: str) -> ReleaseBranchCandidate | None:
    m = _VERSIONED_RELEASE_BRANCH_RE.match(name)
    if m is None:
        return None
    # The patch defaults to 0 for ordering only; the name is kept verbatim.
    patch = int(m.group(3)) if m.group(3) is not None else 0
    version = Version(int(m.group(1)), int(m.group(2)), patch)
    return ReleaseBranchCandidate(name=name, version=version)


def release_candidates(branches: Iterable[Branch]) -> list[ReleaseBranchCandidate]:
    """Version-bearing release branches, newest first, one entry per name."""
    seen: set[str] = set()
    found: list[ReleaseBranchCandidate] = []
    for branch in branches:
        if branch.name in seen:
            continue
        candidate = parse_release_branch(branch.name)
        if candidate is None:
            continue
        seen.add(branch.name)
        found.append(candidate)
    return newest_first(found, lambda c: c.version)


def branch_names(branches: Sequence[Branch]) -> set[str]:
    return {b.name for b in branches}
