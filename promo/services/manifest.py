"""Project manifest: application name and version.

The manifest is ``pyproject.toml`` (``[project]`` table) or, for JavaScript
front-ends, ``package.json``. ``pyproject.toml`` wins when both exist.
"""

from __future__ import annotations

import json
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from promo.core.result import Err, Ok, Result
from promo.core.structured import as_str_dict, get_str, get_table
from promo.platform.files import atomic_write_text
from promo.promotion.errors import PromotionError

ManifestKind = Literal["pyproject", "package_json"]

_PROJECT_VERSION_RE = re.compile(r'(?m)^version\s*=\s*"([^"]+)"\s*$')
_NEXT_TABLE_RE = re.compile(r"(?m)^\[")


@dataclass(frozen=True, slots=True)
class Manifest:
    path: Path
    kind: ManifestKind
    name: str
    version: str


def find_manifest(project_root: Path) -> Path | None:
    for candidate in ("pyproject.toml", "package.json"):
        path = project_root / candidate
        if path.is_file():
            return path
    return None


def read_manifest(project_root: Path) -> Result[Manifest, PromotionError]:
    path = find_manifest(project_root)
    if path is None:
        return Err(
            PromotionError(
                kind="config_invalid",
                message=f"no pyproject.toml or package.json in {project_root}",
                hint="run promo from the project root",
            )
        )
    if path.name == "package.json":
        return _read_package_json(path)
    return _read_pyproject(path)


def write_version(manifest: Manifest, version: str) -> Result[bool, PromotionError]:
    """Write ``version`` into the manifest; Ok(False) if it was already set."""
    if manifest.version == version:
        return Ok(False)
    if manifest.kind == "package_json":
        return _write_package_json_version(manifest.path, version)
    return _write_pyproject_version(manifest.path, version)


def _read_text(path: Path) -> Result[str, PromotionError]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except OSError as e:
        return _invalid(path, f"failed to read {path.name}: {e}")
    except UnicodeDecodeError as e:
        return _invalid(path, f"{path.name} is not valid UTF-8: {e}")


def _write_text(path: Path, text: str) -> Result[bool, PromotionError]:
    try:
        atomic_write_text(path, text, encoding="utf-8")
    except OSError as e:
        return Err(
            PromotionError(
                kind="write_failed",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(True)


def _invalid(path: Path, message: str) -> Err[PromotionError]:
    return Err(PromotionError(kind="config_invalid", message=message, hint=str(path)))


def _read_package_json(path: Path) -> Result[Manifest, PromotionError]:
    text = _read_text(path)
    if isinstance(text, Err):
        return text

    try:
        obj: object = json.loads(text.value)
    except json.JSONDecodeError as e:
        return _invalid(path, f"invalid JSON in {path.name}: {e}")

    data = as_str_dict(obj)
    if data is None:
        return _invalid(path, f"invalid JSON root in {path.name}")

    name = get_str(data, "name")
    version = get_str(data, "version")
    if name is None or version is None:
        return _invalid(path, f"{path.name} must define name and version")
    return Ok(Manifest(path=path, kind="package_json", name=name, version=version))


def _write_package_json_version(path: Path, version: str) -> Result[bool, PromotionError]:
    text = _read_text(path)
    if isinstance(text, Err):
        return text

    try:
        obj: object = json.loads(text.value)
    except json.JSONDecodeError as e:
        return _invalid(path, f"invalid JSON in {path.name}: {e}")

    data = as_str_dict(obj)
    if data is None:
        return _invalid(path, f"invalid JSON root in {path.name}")

    data["version"] = version
    return _write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def _read_pyproject(path: Path) -> Result[Manifest, PromotionError]:
    text = _read_text(path)
    if isinstance(text, Err):
        return text

    try:
        data = tomllib.loads(text.value)
    except tomllib.TOMLDecodeError as e:
        return _invalid(path, f"invalid TOML in {path.name}: {e}")

    project = get_table(data, "project")
    if project is None:
        return _invalid(path, f"missing [project] table in {path.name}")

    name = get_str(project, "name")
    version = get_str(project, "version")
    if name is None or version is None:
        return _invalid(path, f"[project] in {path.name} must define name and a static version")
    return Ok(Manifest(path=path, kind="pyproject", name=name, version=version))


def _project_section(text: str) -> tuple[int, int] | None:
    """Span of the ``[project]`` table body, up to the next table header."""
    start = text.find("[project]")
    if start < 0:
        return None
    body = start + len("[project]")
    m = _NEXT_TABLE_RE.search(text, body)
    return (body, m.start() if m else len(text))


def _write_pyproject_version(path: Path, version: str) -> Result[bool, PromotionError]:
    text = _read_text(path)
    if isinstance(text, Err):
        return text

    section = _project_section(text.value)
    if section is None:
        return _invalid(path, f"missing [project] table in {path.name}")

    start, end = section
    sub = text.value[start:end]
    m = _PROJECT_VERSION_RE.search(sub)
    if m is None:
        return _invalid(path, f"missing static version in [project] of {path.name}")

    replaced = sub[: m.start()] + f'version = "{version}"' + sub[m.end() :]
    return _write_text(path, text.value[:start] + replaced + text.value[end:])
