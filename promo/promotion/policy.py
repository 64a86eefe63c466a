"""Tag mutations for a promotion.

Promoting ``web`` at 1.3.1 rewrites up to three tags, in this order:

    web/latest   only if 1.3.1 is not older than the current newest tag
    web/1.3.1
    web/1.3.x

Each mutation replaces the tag if it exists. Mutations are independent; the
order only keeps logs readable.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from promo.core.result import Err, Ok, Result
from promo.output.console import ConsoleProtocol
from promo.promotion.ports import GitError, RepositoryPort
from promo.promotion.tags import Tag, format_tag, latest_tag_name, wide_tag_name
from promo.promotion.version import Version, is_newer_or_equal


class TagAction(Enum):
    CREATE = "create"
    REPLACE = "replace"


@dataclass(frozen=True, slots=True)
class TagMutation:
    tag_name: str
    action: TagAction


@dataclass(frozen=True, slots=True)
class PlanOutcome:
    """Result of planning.

    Attributes:
        plan: Ordered tag mutations.
        had_conflict: The exact version is already tagged. Advisory: the
            caller must get the operator's confirmation before applying.
    """

    plan: tuple[TagMutation, ...]
    had_conflict: bool

    @property
    def tag_names(self) -> list[str]:
        return [m.tag_name for m in self.plan]


def plan_tags(
    existing_newest_first: Sequence[Tag],
    application: str,
    candidate: Version,
) -> PlanOutcome:
    """Plan the tag mutations promoting ``application`` at ``candidate``.

    Args:
        existing_newest_first: The application's tags as returned by
            ``tags_for_application``; index 0 is the current newest.
        application: Application name.
        candidate: Version being promoted.
    """
    tag_name = format_tag(application, candidate)
    had_conflict = any(t.raw == tag_name for t in existing_newest_first)
    latest = existing_newest_first[0] if existing_newest_first else None

    plan: list[TagMutation] = []
    if (
        latest is None
        or latest.raw == tag_name
        or is_newer_or_equal(candidate, latest.version)
    ):
        plan.append(TagMutation(latest_tag_name(application), TagAction.REPLACE))
    plan.append(TagMutation(tag_name, TagAction.REPLACE))
    plan.append(TagMutation(wide_tag_name(application, candidate), TagAction.REPLACE))

    return PlanOutcome(plan=tuple(plan), had_conflict=had_conflict)


def apply_plan(
    repo: RepositoryPort,
    plan: Sequence[TagMutation],
    *,
    console: ConsoleProtocol,
) -> Result[None, GitError]:
    """Apply mutations in order, stopping at the first failure."""
    for mutation in plan:
        result = repo.create_or_replace_tag(mutation.tag_name)
        if isinstance(result, Err):
            return result
        console.print(f"tag {mutation.tag_name}")
    return Ok(None)
