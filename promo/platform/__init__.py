"""Platform helpers: subprocesses, user paths, file copies."""

from .files import atomic_write_text, replace_tree
from .paths import clone_dir, repository_basename, work_dir
from .process import ProcessError, run

__all__ = [
    "ProcessError",
    "atomic_write_text",
    "clone_dir",
    "replace_tree",
    "repository_basename",
    "run",
    "work_dir",
]
