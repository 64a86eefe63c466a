"""Tests for promo.promotion.branches."""

from __future__ import annotations

from promo.core.result import Err, Ok, Result
from promo.promotion.branches import (
    CheckoutState,
    DeployType,
    PromotionDecision,
    formal_release_label,
    is_release_branch,
    is_version_tag,
    parse_release_branch,
    read_checkout_state,
    release_candidates,
    resolve_promotion,
)
from promo.promotion.ports import Branch, GitError
from promo.promotion.version import Version


class CheckoutReader:
    """Read side of the repository port."""

    def __init__(
        self,
        branch: str | None,
        head_tags: list[str] | None = None,
        containing: list[str] | None = None,
        fail: bool = False,
    ) -> None:
        self.branch = branch
        self.head_tags = head_tags or []
        self.containing = containing or []
        self.fail = fail

    def current_branch_name(self) -> str | None:
        return self.branch

    def branches_containing(self, ref: str) -> Result[list[str], GitError]:
        if self.fail:
            return Err(GitError(command="for-each-ref", message="boom"))
        return Ok(self.containing)

    def tags_at_head(self) -> Result[list[str], GitError]:
        return Ok(self.head_tags)


class TestResolvePromotion:
    def test_formal_release_marker_targets_release_branch(self) -> None:
        state = CheckoutState(branch="feature/x", head_tags=("v1.4.0@2.0",))
        assert resolve_promotion(state, trunk="master") == PromotionDecision(
            "release/2.0", DeployType.BY_TAG
        )

    def test_release_branch_without_tags(self) -> None:
        state = CheckoutState(branch="release/2.0")
        assert resolve_promotion(state, trunk="master") == PromotionDecision(
            "release/2.0", DeployType.BY_BRANCH
        )

    def test_feature_branch_without_tags_is_no_deploy(self) -> None:
        state = CheckoutState(branch="feature/x")
        assert resolve_promotion(state, trunk="master") is None

    def test_plain_version_tag_targets_trunk(self) -> None:
        state = CheckoutState(branch="release/2.0", head_tags=("v2.0.1",))
        assert resolve_promotion(state, trunk="main") == PromotionDecision(
            "main", DeployType.BY_TAG
        )

    def test_first_marker_wins(self) -> None:
        state = CheckoutState(branch="master", head_tags=("v1.0.0", "v1.0.0@1.x", "v1.0.0@2.x"))
        decision = resolve_promotion(state, trunk="master")
        assert decision is not None
        assert decision.target_ref == "release/1.x"

    def test_non_version_tags_ignored(self) -> None:
        state = CheckoutState(branch="feature/x", head_tags=("nightly", "web/1.0.0"))
        assert resolve_promotion(state, trunk="master") is None


class TestGrammar:
    def test_version_tag(self) -> None:
        assert is_version_tag("v1.2.3")
        assert is_version_tag("v1.2.3-rc.1@2.0")
        assert not is_version_tag("1.2.3")
        assert not is_version_tag("v1.2")

    def test_formal_label(self) -> None:
        assert formal_release_label("v1.4.0@2.0") == "2.0"
        assert formal_release_label("v1.4.0-beta@lts") == "lts"
        assert formal_release_label("v1.4.0") is None

    def test_release_branch(self) -> None:
        assert is_release_branch("release/2.0")
        assert is_release_branch("release/hotfix")
        assert not is_release_branch("release/")
        assert not is_release_branch("feature/release/2.0")


class TestReadCheckoutState:
    def test_current_branch(self) -> None:
        reader = CheckoutReader("release/2.0", head_tags=["v2.0.0"])
        result = read_checkout_state(reader)  # type: ignore[arg-type]
        assert result == Ok(CheckoutState(branch="release/2.0", head_tags=("v2.0.0",)))

    def test_detached_head_uses_first_containing_branch(self) -> None:
        reader = CheckoutReader(None, head_tags=["v1.0.0"], containing=["release/1.0", "master"])
        result = read_checkout_state(reader)  # type: ignore[arg-type]
        assert result == Ok(CheckoutState(branch="release/1.0", head_tags=("v1.0.0",)))

    def test_detached_head_on_no_branch(self) -> None:
        reader = CheckoutReader(None)
        assert read_checkout_state(reader) == Ok(None)  # type: ignore[arg-type]

    def test_git_failure_propagates(self) -> None:
        reader = CheckoutReader(None, fail=True)
        result = read_checkout_state(reader)  # type: ignore[arg-type]
        assert isinstance(result, Err)


class TestReleaseCandidates:
    def test_parse(self) -> None:
        candidate = parse_release_branch("release/2.1")
        assert candidate is not None
        assert candidate.version == Version(2, 1, 0)
        assert parse_release_branch("release/hotfix") is None

    def test_patch_and_freeform_suffix(self) -> None:
        candidate = parse_release_branch("release/2.1.3-lts")
        assert candidate is not None
        assert candidate.name == "release/2.1.3-lts"
        assert candidate.version == Version(2, 1, 3)

    def test_newest_first_and_deduplicated(self) -> None:
        branches = [
            Branch("master", is_current=True),
            Branch("release/1.9"),
            Branch("release/2.0"),
            Branch("release/2.0", is_remote=True),
            Branch("release/1.10", is_remote=True),
            Branch("release/legacy", is_remote=True),
        ]
        names = [c.name for c in release_candidates(branches)]
        assert names == ["release/2.0", "release/1.10", "release/1.9"]
