"""Tests for promo.promotion.policy."""

from __future__ import annotations

import random

from promo.core.result import Err, Ok, Result
from promo.output.console import MockConsole
from promo.promotion.policy import TagAction, TagMutation, apply_plan, plan_tags
from promo.promotion.ports import GitError
from promo.promotion.tags import format_tag, tags_for_application
from promo.promotion.version import Version


class TagRecorder:
    """Only the tag operation of the repository port is needed here."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.tags: list[str] = []
        self.fail_on = fail_on

    def create_or_replace_tag(self, name: str) -> Result[None, GitError]:
        if name == self.fail_on:
            return Err(GitError(command="tag", message="locked"))
        self.tags.append(name)
        return Ok(None)


def _plan(existing: list[str], candidate: Version, app: str = "app") -> tuple[list[str], bool]:
    outcome = plan_tags(tags_for_application(existing, app), app, candidate)
    return outcome.tag_names, outcome.had_conflict


class TestPlanTags:
    def test_newer_patch_moves_latest(self) -> None:
        names, conflict = _plan(["app/1.2.0", "app/1.3.0"], Version(1, 3, 1))
        assert names == ["app/latest", "app/1.3.1", "app/1.3.x"]
        assert conflict is False

    def test_older_version_keeps_latest(self) -> None:
        names, conflict = _plan(["app/2.0.0"], Version(1, 9, 0))
        assert names == ["app/1.9.0", "app/1.9.x"]
        assert conflict is False

    def test_first_promotion(self) -> None:
        names, conflict = _plan([], Version(0, 1, 0))
        assert names == ["app/latest", "app/0.1.0", "app/0.1.x"]
        assert conflict is False

    def test_redeploy_of_newest_is_conflict(self) -> None:
        names, conflict = _plan(["app/1.3.0", "app/1.2.0"], Version(1, 3, 0))
        assert names == ["app/latest", "app/1.3.0", "app/1.3.x"]
        assert conflict is True

    def test_redeploy_of_older_is_conflict_without_latest(self) -> None:
        names, conflict = _plan(["app/1.3.0", "app/1.2.0"], Version(1, 2, 0))
        assert names == ["app/1.2.0", "app/1.2.x"]
        assert conflict is True

    def test_other_applications_ignored(self) -> None:
        names, _ = _plan(["other/9.0.0", "app/1.0.0"], Version(1, 1, 0))
        assert names[0] == "app/latest"

    def test_all_actions_replace(self) -> None:
        outcome = plan_tags([], "app", Version(1, 0, 0))
        assert all(m.action is TagAction.REPLACE for m in outcome.plan)

    def test_idempotent(self) -> None:
        existing = tags_for_application(["app/1.0.0", "app/1.1.0"], "app")
        first = plan_tags(existing, "app", Version(1, 1, 5))
        second = plan_tags(existing, "app", Version(1, 1, 5))
        assert first == second


class TestLatestMonotonic:
    """After any sequence of promotions, latest is the highest version seen."""

    def test_random_promotion_sequences(self) -> None:
        rng = random.Random(2024)
        for _ in range(20):
            tags: list[str] = []
            latest: Version | None = None
            for _ in range(12):
                candidate = Version(rng.randint(0, 2), rng.randint(0, 2), rng.randint(0, 2))
                outcome = plan_tags(tags_for_application(tags, "app"), "app", candidate)
                if "app/latest" in outcome.tag_names:
                    latest = candidate
                exact = format_tag("app", candidate)
                if exact not in tags:
                    tags.append(exact)
                newest = tags_for_application(tags, "app")[0].version
                assert latest == newest


class TestApplyPlan:
    def test_applies_in_order(self) -> None:
        repo = TagRecorder()
        console = MockConsole()
        plan = plan_tags([], "web", Version(1, 0, 0)).plan

        result = apply_plan(repo, plan, console=console)  # type: ignore[arg-type]

        assert isinstance(result, Ok)
        assert repo.tags == ["web/latest", "web/1.0.0", "web/1.0.x"]
        assert console.find("tag web/1.0.x")

    def test_stops_at_first_failure(self) -> None:
        repo = TagRecorder(fail_on="web/1.0.0")
        plan = (
            TagMutation("web/latest", TagAction.REPLACE),
            TagMutation("web/1.0.0", TagAction.REPLACE),
            TagMutation("web/1.0.x", TagAction.REPLACE),
        )

        result = apply_plan(repo, plan, console=MockConsole())  # type: ignore[arg-type]

        assert isinstance(result, Err)
        assert result.error.command == "tag"
        assert repo.tags == ["web/latest"]
