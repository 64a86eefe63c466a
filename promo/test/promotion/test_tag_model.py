"""Tests for promo.promotion.tags."""

from __future__ import annotations

import random
import string

import pytest

from promo.promotion.tags import (
    format_tag,
    latest_tag_name,
    parse_tag,
    tags_for_application,
    wide_tag_name,
)
from promo.promotion.version import Version, is_newer_or_equal


def _random_application(rng: random.Random) -> str:
    alphabet = string.ascii_lowercase + string.digits + "-_."
    return rng.choice(string.ascii_lowercase) + "".join(
        rng.choice(alphabet) for _ in range(rng.randint(0, 8))
    )


def _random_version(rng: random.Random) -> Version:
    return Version(rng.randint(0, 20), rng.randint(0, 20), rng.randint(0, 20))


class TestParseTag:
    def test_exact(self) -> None:
        tag = parse_tag("web/1.3.0")
        assert tag is not None
        assert tag.application == "web"
        assert tag.version == Version(1, 3, 0)
        assert tag.raw == "web/1.3.0"

    def test_suffix_kept_in_raw(self) -> None:
        tag = parse_tag("web/1.3.0-rc.1")
        assert tag is not None
        assert tag.raw == "web/1.3.0-rc.1"
        assert tag.version == Version(1, 3, 0)

    def test_unrelated_tags(self) -> None:
        assert parse_tag("v1.2.3") is None
        assert parse_tag("web/latest") is None
        assert parse_tag("web/1.3.x") is None
        assert parse_tag("team/web/1.0.0") is None

    def test_format_round_trip(self) -> None:
        version = Version(2, 10, 4)
        tag = parse_tag(format_tag("admin", version))
        assert tag is not None
        assert (tag.application, tag.version) == ("admin", version)


class TestNames:
    def test_wide(self) -> None:
        assert wide_tag_name("web", Version(1, 3, 7)) == "web/1.3.x"

    def test_latest(self) -> None:
        assert latest_tag_name("web") == "web/latest"


class TestTagsForApplication:
    def test_filters_and_sorts_newest_first(self) -> None:
        tags = [
            "web/1.2.0",
            "admin/9.0.0",
            "web/latest",
            "web/1.10.0",
            "web/1.3.x",
            "v1.0.0",
            "web/1.3.0",
        ]
        result = tags_for_application(tags, "web")
        assert [t.raw for t in result] == ["web/1.10.0", "web/1.3.0", "web/1.2.0"]

    def test_prefix_is_exact_namespace(self) -> None:
        result = tags_for_application(["webapp/2.0.0", "web/1.0.0"], "web")
        assert [t.raw for t in result] == ["web/1.0.0"]

    def test_equal_versions_keep_input_order(self) -> None:
        result = tags_for_application(["web/1.0.0-b", "web/1.0.0-a", "web/0.9.0"], "web")
        assert [t.raw for t in result] == ["web/1.0.0-b", "web/1.0.0-a", "web/0.9.0"]

    def test_empty(self) -> None:
        assert tags_for_application([], "web") == []


class TestTagProperties:
    """Laws checked over seeded random applications, versions and tag sets."""

    @pytest.mark.parametrize("seed", [1, 8, 64])
    def test_format_then_parse_round_trips(self, seed: int) -> None:
        rng = random.Random(seed)
        for _ in range(200):
            application = _random_application(rng)
            version = _random_version(rng)
            tag = parse_tag(format_tag(application, version))
            assert tag is not None
            assert (tag.application, tag.version) == (application, version)

    @pytest.mark.parametrize("seed", [4, 21, 300])
    def test_first_is_newest(self, seed: int) -> None:
        rng = random.Random(seed)
        for _ in range(50):
            own = [format_tag("web", _random_version(rng)) for _ in range(rng.randint(1, 12))]
            noise = [
                "web/latest",
                "web/1.2.x",
                "v1.0.0",
                format_tag("admin", _random_version(rng)),
            ]
            mixed = own + noise
            rng.shuffle(mixed)

            result = tags_for_application(mixed, "web")

            assert sorted(t.raw for t in result) == sorted(own)
            first = result[0]
            assert all(is_newer_or_equal(first.version, t.version) for t in result)
            for newer, older in zip(result, result[1:]):
                assert is_newer_or_equal(newer.version, older.version)
