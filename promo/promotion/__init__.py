"""Version-tag and branch promotion policy.

Pure decision logic over data read from a repository:

- version: Version ordering
- tags: application tag grammar
- branches: checkout classification, release branch grammar
- policy: tag mutation planning

Usage:
    from promo.promotion import plan_tags, parse_version, tags_for_application

    tags = tags_for_application(repo.list_tags().unwrap(), "web")
    outcome = plan_tags(tags, "web", parse_version("1.3.1"))
"""

from promo.promotion.branches import (
    CheckoutState,
    DeployType,
    PromotionDecision,
    ReleaseBranchCandidate,
    is_release_branch,
    parse_release_branch,
    read_checkout_state,
    release_candidates,
    resolve_promotion,
)
from promo.promotion.errors import PromotionError
from promo.promotion.policy import PlanOutcome, TagAction, TagMutation, apply_plan, plan_tags
from promo.promotion.ports import (
    Branch,
    ConfirmationPort,
    GitError,
    MergeOutcome,
    RepositoryPort,
)
from promo.promotion.tags import (
    Tag,
    format_tag,
    latest_tag_name,
    parse_tag,
    tags_for_application,
    wide_tag_name,
)
from promo.promotion.version import (
    Version,
    compare,
    is_newer_or_equal,
    is_newer_than,
    newest_first,
    parse_version,
)

__all__ = [
    # version
    "Version",
    "compare",
    "is_newer_or_equal",
    "is_newer_than",
    "newest_first",
    "parse_version",
    # tags
    "Tag",
    "format_tag",
    "latest_tag_name",
    "parse_tag",
    "tags_for_application",
    "wide_tag_name",
    # branches
    "CheckoutState",
    "DeployType",
    "PromotionDecision",
    "ReleaseBranchCandidate",
    "is_release_branch",
    "parse_release_branch",
    "read_checkout_state",
    "release_candidates",
    "resolve_promotion",
    # policy
    "PlanOutcome",
    "TagAction",
    "TagMutation",
    "apply_plan",
    "plan_tags",
    # ports
    "Branch",
    "ConfirmationPort",
    "GitError",
    "MergeOutcome",
    "RepositoryPort",
    # errors
    "PromotionError",
]
