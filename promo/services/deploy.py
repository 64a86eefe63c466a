"""Deploy: promote the built artifact into the downstream repository.

Steps, in order:

1. read the manifest version and classify the local checkout
   (nothing to do unless HEAD carries a version tag or sits on a release branch)
2. clone or fetch the downstream repository into the work directory, dropping
   local tags the remote does not have
3. plan the application's tags; an already tagged version needs confirmation
4. reset the destination branch to its remote state (or the trunk when it is new)
5. replace ``<clone>/<target>`` with the artifact and commit it
6. apply the tag plan and force-push the branch with its tags

Nothing reaches the remote before step 6, so declining at step 3 leaves the
remote untouched.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Protocol

from promo.core.config import Config, resolve_dist
from promo.core.result import Err, Ok, Result
from promo.git.repository import Repository
from promo.output.console import ConsoleProtocol, Style
from promo.platform.files import replace_tree
from promo.platform.paths import clone_dir
from promo.promotion.branches import DeployType, read_checkout_state, resolve_promotion
from promo.promotion.errors import PromotionError, git_failed
from promo.promotion.policy import apply_plan, plan_tags
from promo.promotion.ports import ConfirmationPort, GitError, RepositoryPort
from promo.promotion.tags import format_tag, tags_for_application
from promo.promotion.version import Version, parse_version
from promo.services.manifest import read_manifest

DeployStatus = Literal["deployed", "dry_run", "nothing_to_do", "no_changes", "aborted"]


class SourceCheckout(RepositoryPort, Protocol):
    def last_commit_message(self) -> Result[str, GitError]:
        ...


class DownstreamRepository(RepositoryPort, Protocol):
    path: Path
    remote_name: str

    def remote_branch_exists(self, name: str) -> bool:
        ...

    def reset_branch(self, name: str, start: str) -> Result[None, GitError]:
        ...

    def add_all(self) -> Result[None, GitError]:
        ...

    def has_staged_changes(self) -> Result[bool, GitError]:
        ...

    def commit(self, message: str) -> Result[None, GitError]:
        ...


OpenDownstream = Callable[[Config, ConsoleProtocol], Result[DownstreamRepository, GitError]]


@dataclass(frozen=True, slots=True)
class DeployRequest:
    project_root: Path
    config: Config
    dry_run: bool = False
    assume_yes: bool = False


@dataclass(frozen=True, slots=True)
class DeployReport:
    status: DeployStatus
    application: str
    version: Version | None = None
    destination: str | None = None
    deploy_type: DeployType | None = None
    tags: tuple[str, ...] = ()
    reason: str | None = None


def application_name(manifest_name: str) -> str:
    """Application name usable as a tag namespace.

    npm scopes are dropped (``@team/web`` -> ``web``) since the tag grammar
    reserves ``/`` as the namespace separator.
    """
    return manifest_name.rsplit("/", 1)[-1]


def open_downstream(
    config: Config, console: ConsoleProtocol
) -> Result[DownstreamRepository, GitError]:
    """Clone the downstream repository on first use, fetch it afterwards."""
    dest = clone_dir(config.remote)
    if (dest / ".git").exists():
        repo = Repository(dest, console=console, remote_name=config.remote_name)
        fetched = repo.fetch()
        if isinstance(fetched, Err):
            return fetched
        return Ok(repo)

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(GitError(command="clone", message=f"cannot create {dest.parent}: {e}"))
    console.print(f"cloning {config.remote} into {dest}", Style.DIM)
    cloned = Repository.clone(
        config.remote, dest, console=console, remote_name=config.remote_name
    )
    if isinstance(cloned, Err):
        return cloned
    return Ok(cloned.value)


def run_deploy(
    request: DeployRequest,
    *,
    source: SourceCheckout,
    console: ConsoleProtocol,
    prompts: ConfirmationPort,
    open_repo: OpenDownstream = open_downstream,
) -> Result[DeployReport, PromotionError]:
    config = request.config

    manifest = read_manifest(request.project_root)
    if isinstance(manifest, Err):
        return manifest
    application = config.name or application_name(manifest.value.name)

    raw_version = manifest.value.version
    version = parse_version(raw_version)
    if version is None:
        return Err(
            PromotionError(
                kind="invalid_version",
                message=f"invalid version in {manifest.value.path.name}: {raw_version!r}",
                hint="expected major.minor.patch, e.g. 1.2.3",
            )
        )

    dist = resolve_dist(config, request.project_root)
    if isinstance(dist, Err):
        return Err(
            PromotionError(kind="config_invalid", message=dist.error.message, hint=dist.error.hint)
        )

    state = read_checkout_state(source)
    if isinstance(state, Err):
        return Err(git_failed(state.error, step="read local checkout"))
    if state.value is None:
        return Ok(
            DeployReport(
                status="nothing_to_do",
                application=application,
                version=version,
                reason="HEAD is not on any branch",
            )
        )

    decision = resolve_promotion(state.value, trunk=config.trunk)
    if decision is None:
        return Ok(
            DeployReport(
                status="nothing_to_do",
                application=application,
                version=version,
                reason=f"no version tag at HEAD and {state.value.branch} is not a release branch",
            )
        )

    destination = decision.target_ref
    console.info(
        f"promoting {application} {version} to {destination} (by {decision.deploy_type.value})"
    )

    opened = open_repo(config, console)
    if isinstance(opened, Err):
        return Err(git_failed(opened.error, step="prepare downstream repository"))
    downstream = opened.value

    all_tags = downstream.list_tags()
    if isinstance(all_tags, Err):
        return Err(git_failed(all_tags.error, step="list downstream tags"))
    outcome = plan_tags(tags_for_application(all_tags.value, application), application, version)

    if outcome.had_conflict and not request.assume_yes:
        existing = format_tag(application, version)
        if not prompts.confirm(f"{existing} already exists. Overwrite it?"):
            return Ok(
                DeployReport(
                    status="aborted",
                    application=application,
                    version=version,
                    destination=destination,
                    deploy_type=decision.deploy_type,
                    reason=f"{existing} kept",
                )
            )

    checkout = _checkout_destination(downstream, destination, trunk=config.trunk)
    if isinstance(checkout, Err):
        return Err(git_failed(checkout.error, step=f"checkout {destination}"))

    target = downstream.path / config.target_dir(application)
    try:
        copied = replace_tree(dist.value, target)
    except OSError as e:
        return Err(
            PromotionError(
                kind="copy_failed",
                message=f"failed to copy {dist.value} to {target}: {e}",
                step="copy artifact",
            )
        )
    console.print(f"copied {copied} files to {target}", Style.DIM)

    staged = downstream.add_all()
    if isinstance(staged, Err):
        return Err(git_failed(staged.error, step="stage artifact"))
    changed = downstream.has_staged_changes()
    if isinstance(changed, Err):
        return Err(git_failed(changed.error, step="stage artifact"))
    if not changed.value:
        return Ok(
            DeployReport(
                status="no_changes",
                application=application,
                version=version,
                destination=destination,
                deploy_type=decision.deploy_type,
                reason="artifact is identical to the deployed one",
            )
        )

    message = source.last_commit_message()
    if isinstance(message, Err):
        return Err(git_failed(message.error, step="read local commit message"))
    committed = downstream.commit(message.value or f"{application} {version}")
    if isinstance(committed, Err):
        return Err(git_failed(committed.error, step="commit artifact"))

    applied = apply_plan(downstream, outcome.plan, console=console)
    if isinstance(applied, Err):
        return Err(git_failed(applied.error, step="update tags"))

    status: DeployStatus = "dry_run"
    if not request.dry_run:
        pushed = downstream.push(destination, force=True)
        if isinstance(pushed, Err):
            return Err(git_failed(pushed.error, step=f"push {destination}"))
        status = "deployed"

    return Ok(
        DeployReport(
            status=status,
            application=application,
            version=version,
            destination=destination,
            deploy_type=decision.deploy_type,
            tags=tuple(outcome.tag_names),
        )
    )


def _checkout_destination(
    repo: DownstreamRepository, branch: str, *, trunk: str
) -> Result[None, GitError]:
    """Check out ``branch`` at its remote state, or at the trunk when it is new.

    Local commits left by a dry run or a failed push are dropped here and
    rebuilt by the current run.
    """
    if repo.remote_branch_exists(branch):
        return repo.reset_branch(branch, f"{repo.remote_name}/{branch}")
    base = f"{repo.remote_name}/{trunk}" if repo.remote_branch_exists(trunk) else trunk
    return repo.reset_branch(branch, base)
