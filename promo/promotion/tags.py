"""Application tag grammar.

Every application promoted into a shared repository owns the tag namespace
``{application}/``:

    web/1.3.0        exact version (an optional suffix such as -beta is kept)
    web/1.3.x        wide tag, newest patch of the 1.3 line
    web/latest       newest promoted version
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from promo.promotion.version import Version, newest_first


_TAG_RE = re.compile(r"^([^/]+)/(\d+)\.(\d+)\.(\d+)(.*)$")


@dataclass(frozen=True, slots=True)
class Tag:
    raw: str
    application: str
    version: Version


def parse_tag(raw: str) -> Tag | None:
    m = _TAG_RE.match(raw)
    if m is None:
        return None
    version = Version(int(m.group(2)), int(m.group(3)), int(m.group(4)))
    return Tag(raw=raw, application=m.group(1), version=version)


def format_tag(application: str, version: Version) -> str:
    return f"{application}/{version.major}.{version.minor}.{version.patch}"


def wide_tag_name(application: str, version: Version) -> str:
    return f"{application}/{version.major}.{version.minor}.x"


def latest_tag_name(application: str) -> str:
    return f"{application}/latest"


def tags_for_application(all_tags: Iterable[str], application: str) -> list[Tag]:
    """Versioned tags of one application, newest first.

    Tags of other applications and non-versioned tags (``latest``, wide
    tags) are dropped. Tags with equal versions keep their input order.
    """
    prefix = f"{application}/"
    parsed: list[Tag] = []
    for raw in all_tags:
        if not raw.startswith(prefix):
            continue
        tag = parse_tag(raw)
        if tag is not None:
            parsed.append(tag)
    return newest_first(parsed, lambda t: t.version)
