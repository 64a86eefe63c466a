"""Cut a release on a release branch.

The manifest version becomes the release version, unless its ``v`` tag
already exists, in which case the operator supplies a new one. Commit
subjects since the previous ``v*`` tag become a changelog entry. The
manifest bump and changelog are committed as ``release: <version>`` and
tagged ``v<version>`` (``v<version>@<label>`` for a formal release, which
``deploy`` promotes to ``release/<label>``).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol

from promo.core.result import Err, Ok, Result
from promo.output.console import ConsoleProtocol, Style
from promo.platform.files import atomic_write_text
from promo.promotion.branches import is_release_branch, is_version_tag
from promo.promotion.errors import PromotionError, git_failed
from promo.promotion.ports import ConfirmationPort, GitError, RepositoryPort
from promo.promotion.version import Version, is_newer_than, parse_version
from promo.services.manifest import read_manifest, write_version

CHANGELOG_FILE = "CHANGELOG.md"

_RELEASE_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+\S*$")

ReleaseStatus = Literal["pushed", "local", "aborted"]
EditText = Callable[[str], str | None]


class ReleaseCheckout(RepositoryPort, Protocol):
    def commit_subjects(self, since: str | None) -> Result[list[str], GitError]:
        ...

    def add_all(self) -> Result[None, GitError]:
        ...

    def commit(self, message: str) -> Result[None, GitError]:
        ...


@dataclass(frozen=True, slots=True)
class ReleaseRequest:
    project_root: Path
    version: str | None = None
    label: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    status: ReleaseStatus
    branch: str
    version: str
    tag: str | None = None
    changelog: str | None = None


def release_tag_name(version: str, label: str | None = None) -> str:
    if label:
        return f"v{version}@{label}"
    return f"v{version}"


def previous_release_tag(tags: Sequence[str]) -> str | None:
    """Newest ``v<major>.<minor>.<patch>`` tag, by version."""
    best: str | None = None
    best_version: Version | None = None
    for tag in tags:
        if not is_version_tag(tag):
            continue
        version = parse_version(tag[1:])
        if version is None:
            continue
        if best_version is None or is_newer_than(version, best_version):
            best, best_version = tag, version
    return best


def released_versions(tags: Iterable[str]) -> set[str]:
    """Versions already marked by ``v<version>`` or ``v<version>@<label>``."""
    return {tag[1:].split("@", 1)[0] for tag in tags if is_version_tag(tag)}


def render_changelog_entry(version: str, subjects: Sequence[str]) -> str:
    lines = [f"## {version}", ""]
    lines.extend(f"- {s}" for s in subjects if s.strip())
    return "\n".join(lines).rstrip() + "\n"


def prepend_changelog(path: Path, entry: str) -> None:
    """Put ``entry`` at the top of the changelog, creating it if needed.

    Raises:
        OSError: If the file cannot be read or written.
    """
    body = path.read_text(encoding="utf-8") if path.exists() else ""
    content = entry.rstrip() + "\n"
    if body.strip():
        content += "\n" + body.lstrip("\n")
    atomic_write_text(path, content, encoding="utf-8")


def run_release(
    request: ReleaseRequest,
    *,
    repo: ReleaseCheckout,
    prompts: ConfirmationPort,
    console: ConsoleProtocol,
    edit: EditText | None = None,
) -> Result[ReleaseReport, PromotionError]:
    """Bump, commit, tag and (after confirmation) push a release.

    Args:
        request: Project root plus the optional version and formal label.
        repo: Project checkout; must be on a release branch.
        prompts: Operator interactions.
        console: Progress output.
        edit: Lets the operator rewrite the changelog entry; None keeps it.
    """
    branch = repo.current_branch_name()
    if branch is None:
        return Err(
            PromotionError(
                kind="not_on_branch",
                message="HEAD is detached",
                hint="check out a release branch first",
            )
        )
    if not is_release_branch(branch):
        return Err(
            PromotionError(
                kind="not_on_release_branch",
                message=f"{branch} is not a release branch",
                hint="run `promo merge` to create or join a release branch",
            )
        )

    manifest = read_manifest(request.project_root)
    if isinstance(manifest, Err):
        return manifest

    tags = repo.list_tags()
    if isinstance(tags, Err):
        return Err(git_failed(tags.error, step="list tags"))
    released = released_versions(tags.value)

    version = _resolve_version(request, prompts, manifest.value.version, released)
    if isinstance(version, Err):
        return version
    if version.value is None:
        return Ok(ReleaseReport(status="aborted", branch=branch, version=manifest.value.version))
    release = version.value
    tag = release_tag_name(release, request.label)

    since = previous_release_tag(tags.value)
    subjects = repo.commit_subjects(since)
    if isinstance(subjects, Err):
        return Err(git_failed(subjects.error, step="collect commit subjects"))

    entry = render_changelog_entry(release, subjects.value)
    if edit is not None:
        edited = edit(entry)
        if edited is not None and edited.strip():
            entry = edited

    changelog = request.project_root / CHANGELOG_FILE
    try:
        prepend_changelog(changelog, entry)
    except OSError as e:
        return Err(
            PromotionError(
                kind="write_failed",
                message=f"failed to update {CHANGELOG_FILE}: {e}",
                hint=str(changelog),
            )
        )

    bumped = write_version(manifest.value, release)
    if isinstance(bumped, Err):
        return bumped
    if bumped.value:
        name = manifest.value.path.name
        console.print(f"{name}: {manifest.value.version} -> {release}", Style.DIM)

    staged = repo.add_all()
    if isinstance(staged, Err):
        return Err(git_failed(staged.error, step="stage release"))
    committed = repo.commit(f"release: {release}")
    if isinstance(committed, Err):
        return Err(git_failed(committed.error, step="commit release"))
    tagged = repo.create_or_replace_tag(tag)
    if isinstance(tagged, Err):
        return Err(git_failed(tagged.error, step=f"tag {tag}"))
    console.success(f"committed and tagged {tag}")

    report = ReleaseReport(status="local", branch=branch, version=release, tag=tag, changelog=entry)
    if not prompts.confirm(f"Push {branch} with {tag} now?"):
        console.print("nothing pushed; the release commit and tag stay local", Style.DIM)
        return Ok(report)

    pushed = repo.push(branch, force=False)
    if isinstance(pushed, Err):
        return Err(git_failed(pushed.error, step=f"push {branch}"))
    return Ok(
        ReleaseReport(status="pushed", branch=branch, version=release, tag=tag, changelog=entry)
    )


def validate_release(text: str, taken: Callable[[str], bool]) -> PromotionError | None:
    """Check a version typed for a release."""
    value = text.strip()
    if _RELEASE_VERSION_RE.match(value) is None:
        return PromotionError(
            kind="invalid_version",
            message=f"invalid version: {value!r}",
            hint="expected major.minor.patch, e.g. 1.4.0",
        )
    if taken(value):
        return PromotionError(
            kind="invalid_version",
            message=f"{value} is already released",
            hint="pick a version that has not been released",
        )
    return None


def _resolve_version(
    request: ReleaseRequest,
    prompts: ConfirmationPort,
    current: str,
    released: set[str],
) -> Result[str | None, PromotionError]:
    def taken(value: str) -> bool:
        return value in released

    if request.version is not None:
        invalid = validate_release(request.version, taken)
        if invalid is not None:
            return Err(invalid)
        return Ok(request.version.strip())

    if validate_release(current, taken) is None:
        return Ok(current.strip())

    def message(text: str) -> str | None:
        error = validate_release(text, taken)
        return None if error is None else error.pretty()

    typed = prompts.input_text(f"v{current} is taken or invalid. Release version", message)
    return Ok(None if typed is None else typed.strip())
