"""Git repository adapter.

``Repository`` implements ``RepositoryPort`` on top of the ``git`` binary,
plus the few extra operations the deploy and release workflows need
(clone, fetch, staging, committing). Every command is echoed through the
console's ``debug`` channel, so it shows up with ``--verbose``.

Usage:
    repo = Repository(Path("."), console=console)

    match repo.list_tags():
        case Ok(tags):
            print(tags)
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from pathlib import Path

from promo.core.result import Err, Ok, Result
from promo.output.console import ConsoleProtocol
from promo.platform.process import ProcessError
from promo.platform.process import run as run_process
from promo.promotion.ports import Branch, GitError, MergeOutcome

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"clone", "fetch", "pull", "push"})
# Never block on a credential prompt.
_NETWORK_ENV = {"GIT_TERMINAL_PROMPT": "0"}

__all__ = [
    "GitError",
    "Repository",
]


class Repository:
    """Git checkout at ``path``.

    Attributes:
        path: Path to the working tree root
        remote_name: Remote used for fetch and push
    """

    def __init__(
        self,
        path: Path,
        *,
        console: ConsoleProtocol,
        remote_name: str = "origin",
    ) -> None:
        self.path = path
        self.remote_name = remote_name
        self._console = console

    @classmethod
    def clone(
        cls,
        remote: str,
        dest: Path,
        *,
        console: ConsoleProtocol,
        remote_name: str = "origin",
    ) -> Result[Repository, GitError]:
        """Clone ``remote`` into ``dest`` (whose parent must exist)."""
        args = ["clone", "--origin", remote_name, remote, str(dest)]
        console.debug("git " + " ".join(args))
        result = run_process(
            ["git", *args],
            cwd=dest.parent,
            extra_env=_NETWORK_ENV,
            timeout=_GIT_NETWORK_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return Err(_git_error("clone", result.error))
        return Ok(cls(dest, console=console, remote_name=remote_name))

    def exists(self) -> bool:
        """Check if this is a git working tree."""
        return (self.path / ".git").exists()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def current_branch_name(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def list_tags(self) -> Result[list[str], GitError]:
        return self._lines(["tag", "--list"])

    def tags_at_head(self) -> Result[list[str], GitError]:
        return self._lines(["tag", "--points-at", "HEAD"])

    def branches_containing(self, ref: str) -> Result[list[str], GitError]:
        return self._lines(
            ["for-each-ref", "--contains", ref, "--format=%(refname:short)", "refs/heads"]
        )

    def list_branches(self, include_remote: bool) -> Result[list[Branch], GitError]:
        """List local branches, then branches of ``remote_name``."""
        patterns = ["refs/heads"]
        if include_remote:
            patterns.append(f"refs/remotes/{self.remote_name}")
        lines = self._lines(["for-each-ref", "--format=%(HEAD) %(refname)", *patterns])
        if isinstance(lines, Err):
            return lines

        branches: list[Branch] = []
        for line in lines.value:
            branch = self._parse_ref_line(line)
            if branch is not None:
                branches.append(branch)
        return Ok(branches)

    def remote_branch_exists(self, name: str) -> bool:
        result = self._run(
            ["rev-parse", "--verify", "--quiet", f"refs/remotes/{self.remote_name}/{name}"]
        )
        return isinstance(result, Ok)

    def has_staged_changes(self) -> Result[bool, GitError]:
        """True if the index differs from HEAD."""
        result = self._run(["diff", "--cached", "--quiet"])
        match result:
            case Ok(_):
                return Ok(False)
            case Err(e) if e.returncode == 1:
                return Ok(True)
            case Err(e):
                return Err(_git_error("diff", e))

    def last_commit_message(self) -> Result[str, GitError]:
        result = self._run(["log", "-1", "--format=%B"])
        if isinstance(result, Err):
            return Err(_git_error("log", result.error))
        return Ok(result.value.strip())

    def commit_subjects(self, since: str | None) -> Result[list[str], GitError]:
        """Subjects of commits reachable from HEAD but not from ``since``."""
        rev = f"{since}..HEAD" if since else "HEAD"
        return self._lines(["log", "--format=%s", rev])

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def fetch(self) -> Result[None, GitError]:
        """Mirror the remote's branches and tags.

        Replaced remote tags overwrite local ones and tags the remote does not
        have are deleted.
        """
        return self._check(
            ["fetch", "--tags", "--force", "--prune", "--prune-tags", self.remote_name]
        )

    def create_or_replace_tag(self, name: str) -> Result[None, GitError]:
        return self._check(["tag", "--force", name])

    def create_branch(self, name: str, from_ref: str) -> Result[None, GitError]:
        return self._check(["checkout", "-b", name, from_ref])

    def switch_branch(self, name: str) -> Result[None, GitError]:
        return self._check(["checkout", name])

    def reset_branch(self, name: str, start: str) -> Result[None, GitError]:
        """Check out ``name`` pointing at ``start``, discarding local changes."""
        return self._check(["checkout", "--force", "-B", name, start])

    def merge(self, source_ref: str) -> Result[MergeOutcome, GitError]:
        result = self._run(["merge", "--no-edit", source_ref])
        if isinstance(result, Ok):
            return Ok(MergeOutcome.MERGED)

        conflicted = self._lines(["diff", "--name-only", "--diff-filter=U"])
        if isinstance(conflicted, Ok) and conflicted.value:
            return Ok(MergeOutcome.CONFLICT)
        return Err(_git_error("merge", result.error))

    def add_all(self) -> Result[None, GitError]:
        return self._check(["add", "--all"])

    def commit(self, message: str) -> Result[None, GitError]:
        return self._check(["commit", "--no-verify", "-m", message])

    def push(self, ref: str, force: bool) -> Result[None, GitError]:
        args = ["push", "--tags", self.remote_name, ref]
        if force:
            args.append("--force")
        return self._check(args)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        network = bool(args) and args[0] in _NETWORK_COMMANDS
        self._console.debug("git " + " ".join(args))
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            extra_env=_NETWORK_ENV if network else None,
            timeout=_GIT_NETWORK_TIMEOUT_SECONDS if network else _GIT_TIMEOUT_SECONDS,
        )

    def _check(self, args: list[str]) -> Result[None, GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error(args[0], result.error))
        return Ok(None)

    def _lines(self, args: list[str]) -> Result[list[str], GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error(args[0], result.error))
        return Ok([ln.strip() for ln in result.value.splitlines() if ln.strip()])

    def _parse_ref_line(self, line: str) -> Branch | None:
        """Parse ``%(HEAD) %(refname)`` output: ``* refs/heads/main``."""
        marker, _, refname = line.partition(" ")
        if not refname:
            # Non-current refs print a blank marker, which strip() removed.
            marker, refname = "", marker
        is_current = marker == "*"

        local_prefix = "refs/heads/"
        remote_prefix = f"refs/remotes/{self.remote_name}/"
        if refname.startswith(local_prefix):
            return Branch(name=refname[len(local_prefix) :], is_current=is_current)
        if refname.startswith(remote_prefix):
            name = refname[len(remote_prefix) :]
            if name == "HEAD":
                return None
            return Branch(name=name, is_remote=True)
        return None


def _git_error(command: str, error: ProcessError) -> GitError:
    return GitError(
        command=command,
        message=error.stderr.strip() or error.stdout.strip() or f"git {command} failed",
        returncode=error.returncode,
    )
