"""Filesystem helpers."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "replace_tree"]

_PRESERVED = frozenset({".git"})


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def replace_tree(src: Path, dest: Path) -> int:
    """Make ``dest`` an exact copy of ``src``.

    Everything already in ``dest`` is removed first so files deleted from the
    artifact disappear downstream too. A ``.git`` entry in ``dest`` is kept.

    Returns:
        Number of files copied.

    Raises:
        OSError: On any filesystem failure.
    """
    if dest.exists():
        for child in dest.iterdir():
            if child.name in _PRESERVED:
                continue
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
    dest.mkdir(parents=True, exist_ok=True)

    copied = 0
    for item in src.iterdir():
        target = dest / item.name
        if item.is_dir() and not item.is_symlink():
            shutil.copytree(item, target, symlinks=True)
            copied += sum(1 for p in target.rglob("*") if not p.is_dir())
        else:
            shutil.copy2(item, target, follow_symlinks=False)
            copied += 1
    return copied
