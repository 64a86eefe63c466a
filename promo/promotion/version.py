from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Literal


_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True, slots=True)
class Version:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def compare(a: Version, b: Version) -> Literal[-1, 0, 1]:
    for left, right in (
        (a.major, b.major),
        (a.minor, b.minor),
        (a.patch, b.patch),
    ):
        if left > right:
            return 1
        if left < right:
            return -1
    return 0


def is_newer_than(a: Version, b: Version) -> bool:
    return compare(a, b) == 1


def is_newer_or_equal(a: Version, b: Version) -> bool:
    return compare(a, b) >= 0


def newest_first[T](items: Iterable[T], version_of: Callable[[T], Version]) -> list[T]:
    """Sort ``items`` by ``compare``, newest first; ties keep their input order."""
    by_version = cmp_to_key(compare)
    return sorted(items, key=lambda item: by_version(version_of(item)), reverse=True)


def parse_version(text: str) -> Version | None:
    """Parse ``major.minor.patch`` with an optional trailing suffix.

    ``"1.2.3-beta.1"`` parses as ``Version(1, 2, 3)``; the suffix does not take
    part in ordering.
    """
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    return Version(int(m.group(1)), int(m.group(2)), int(m.group(3)))
