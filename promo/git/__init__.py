"""Git adapter for the promotion ports.

Usage:
    from promo.git import Repository

    repo = Repository(Path("."), console=console)
    branch = repo.current_branch_name()
"""

from promo.git.repository import GitError, Repository

__all__ = [
    "GitError",
    "Repository",
]
