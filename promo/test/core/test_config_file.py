"""Tests for promo.core.config."""

from __future__ import annotations

import tomllib
from pathlib import Path

from promo.core.config import (
    Config,
    config_path,
    load_config,
    render_config,
    resolve_dist,
)
from promo.core.result import Err, Ok


class TestLoadConfig:
    def test_minimal(self, tmp_path: Path) -> None:
        path = config_path(tmp_path)
        path.write_text('remote = "git@example.com:team/deploy.git"\n', encoding="utf-8")

        result = load_config(path)

        assert result == Ok(Config(remote="git@example.com:team/deploy.git"))
        config = result.unwrap()
        assert config.dist == "dist"
        assert config.trunk == "master"
        assert config.remote_name == "origin"
        assert config.target_dir("web") == "web"

    def test_all_keys(self, tmp_path: Path) -> None:
        path = config_path(tmp_path)
        path.write_text(
            "\n".join(
                [
                    'remote = "https://example.com/deploy.git"',
                    'dist = "build"',
                    'target = "apps/web"',
                    'trunk = "main"',
                    'remote_name = "upstream"',
                    'name = "storefront"',
                ]
            ),
            encoding="utf-8",
        )

        config = load_config(path).unwrap()

        assert config is not None
        assert config.target_dir("ignored") == "apps/web"
        assert (config.dist, config.trunk, config.remote_name, config.name) == (
            "build",
            "main",
            "upstream",
            "storefront",
        )

    def test_missing_file_has_hint(self, tmp_path: Path) -> None:
        result = load_config(config_path(tmp_path))
        assert isinstance(result, Err)
        assert result.error.hint is not None
        assert "promo init" in result.error.hint

    def test_remote_required(self, tmp_path: Path) -> None:
        path = config_path(tmp_path)
        path.write_text('dist = "dist"\n', encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "remote" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = config_path(tmp_path)
        path.write_text("remote = \n", encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message


class TestRenderConfig:
    def test_defaults_omitted(self) -> None:
        text = render_config(Config(remote="git@example.com:team/deploy.git"))
        assert text == 'remote = "git@example.com:team/deploy.git"\n'

    def test_round_trip(self) -> None:
        config = Config(
            remote='C:\\repos\\"deploy"',
            dist="build",
            target="apps/web",
            trunk="main",
            remote_name="upstream",
            name="web",
        )
        parsed = tomllib.loads(render_config(config))
        assert Config.from_dict(parsed) == config


class TestResolveDist:
    def test_existing(self, tmp_path: Path) -> None:
        (tmp_path / "dist").mkdir()
        result = resolve_dist(Config(remote="r"), tmp_path)
        assert result == Ok((tmp_path / "dist").resolve())

    def test_missing(self, tmp_path: Path) -> None:
        result = resolve_dist(Config(remote="r", dist="out"), tmp_path)
        assert isinstance(result, Err)
        assert result.error.message == "out is not found"
