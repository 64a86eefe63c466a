"""Typed loading of the project's promo.toml.

promo.toml lives at the project root, next to the manifest (pyproject.toml or
package.json), and describes where the built artifact is promoted to:

    remote = "git@example.com:team/deploy.git"
    dist = "dist"
    target = "web"
    trunk = "master"
    remote_name = "origin"
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str

__all__ = [
    "CONFIG_FILE",
    "Config",
    "ConfigError",
    "DEFAULT_DIST",
    "DEFAULT_REMOTE_NAME",
    "DEFAULT_TRUNK",
    "config_path",
    "load_config",
    "render_config",
    "resolve_dist",
]

CONFIG_FILE = "promo.toml"

DEFAULT_DIST = "dist"
DEFAULT_TRUNK = "master"
DEFAULT_REMOTE_NAME = "origin"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class Config:
    """Project promotion settings.

    Attributes:
        remote: URL of the downstream repository receiving the artifact.
        dist: Artifact directory, relative to the project root.
        target: Directory inside the downstream repository; defaults to the
            application name so several applications can share one repository.
        trunk: Default branch of the downstream repository.
        remote_name: Name of the downstream remote.
        name: Application name override (otherwise read from the manifest).
    """

    remote: str
    dist: str = DEFAULT_DIST
    target: str | None = None
    trunk: str = DEFAULT_TRUNK
    remote_name: str = DEFAULT_REMOTE_NAME
    name: str | None = None

    def target_dir(self, application: str) -> str:
        return self.target or application

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from parsed TOML.

        Raises:
            ValueError: If ``remote`` is missing or empty.
        """
        remote = get_str(data, "remote")
        if remote is None:
            raise ValueError("'remote' is required")

        return cls(
            remote=remote,
            dist=get_str(data, "dist") or DEFAULT_DIST,
            target=get_str(data, "target"),
            trunk=get_str(data, "trunk") or DEFAULT_TRUNK,
            remote_name=get_str(data, "remote_name") or DEFAULT_REMOTE_NAME,
            name=get_str(data, "name"),
        )


def config_path(project_root: Path) -> Path:
    return project_root / CONFIG_FILE


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data = as_str_dict(tomllib.loads(content.decode("utf-8")))
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(
            ConfigError(
                f"Config file not found: {path}",
                path=path,
                hint="run `promo init` at the project root first",
            )
        )
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate promo.toml.

    Args:
        path: Path to promo.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def resolve_dist(config: Config, project_root: Path) -> Result[Path, ConfigError]:
    """Return the artifact directory, which must exist before a deploy."""
    dist = (project_root / config.dist).resolve()
    if not dist.is_dir():
        return Err(
            ConfigError(
                f"{config.dist} is not found",
                path=dist,
                hint="build the project before deploying",
            )
        )
    return Ok(dist)


def _toml_str(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_config(config: Config) -> str:
    """Render promo.toml content, leaving out values equal to their defaults."""
    lines = [f"remote = {_toml_str(config.remote)}"]
    if config.dist != DEFAULT_DIST:
        lines.append(f"dist = {_toml_str(config.dist)}")
    if config.target:
        lines.append(f"target = {_toml_str(config.target)}")
    if config.trunk != DEFAULT_TRUNK:
        lines.append(f"trunk = {_toml_str(config.trunk)}")
    if config.remote_name != DEFAULT_REMOTE_NAME:
        lines.append(f"remote_name = {_toml_str(config.remote_name)}")
    if config.name:
        lines.append(f"name = {_toml_str(config.name)}")
    return "\n".join(lines) + "\n"
