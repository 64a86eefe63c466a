"""Tests for promo.services.manifest."""

from __future__ import annotations

import json
from pathlib import Path

from promo.core.result import Err, Ok
from promo.services.manifest import find_manifest, read_manifest, write_version


class TestReadManifest:
    def test_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "web"\nversion = "0.3.0"\n', encoding="utf-8"
        )
        result = read_manifest(tmp_path)
        assert isinstance(result, Ok)
        assert (result.value.kind, result.value.name, result.value.version) == (
            "pyproject",
            "web",
            "0.3.0",
        )

    def test_package_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(
            json.dumps({"name": "@team/admin", "version": "2.0.0-beta.1"}), encoding="utf-8"
        )
        result = read_manifest(tmp_path)
        assert isinstance(result, Ok)
        assert result.value.kind == "package_json"
        assert result.value.name == "@team/admin"

    def test_pyproject_wins(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[project]\n", encoding="utf-8")
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        assert find_manifest(tmp_path) == tmp_path / "pyproject.toml"

    def test_missing(self, tmp_path: Path) -> None:
        result = read_manifest(tmp_path)
        assert isinstance(result, Err)
        assert result.error.kind == "config_invalid"

    def test_dynamic_version_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "web"\ndynamic = ["version"]\n', encoding="utf-8"
        )
        result = read_manifest(tmp_path)
        assert isinstance(result, Err)
        assert "static version" in result.error.message

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{", encoding="utf-8")
        result = read_manifest(tmp_path)
        assert isinstance(result, Err)
        assert "invalid JSON" in result.error.message

    def test_non_utf8_manifest(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_bytes(b'{"name": "web", "version": "\xff1.0.0"}')
        result = read_manifest(tmp_path)
        assert isinstance(result, Err)
        assert result.error.kind == "config_invalid"
        assert "not valid UTF-8" in result.error.message

    def test_non_utf8_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_bytes(b'[project]\nname = "\xe9"\n')
        result = read_manifest(tmp_path)
        assert isinstance(result, Err)
        assert result.error.kind == "config_invalid"


class TestWriteVersion:
    def test_package_json_keeps_other_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text(
            json.dumps({"name": "web", "version": "1.0.0", "private": True}), encoding="utf-8"
        )
        manifest = read_manifest(tmp_path).unwrap()

        assert write_version(manifest, "1.1.0") == Ok(True)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"name": "web", "version": "1.1.0", "private": True}

    def test_pyproject_only_touches_project_table(self, tmp_path: Path) -> None:
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[tool.x]\nversion = "7.0.0"\n\n[project]\nname = "web"\nversion = "1.0.0"\n',
            encoding="utf-8",
        )
        manifest = read_manifest(tmp_path).unwrap()

        assert write_version(manifest, "1.0.1") == Ok(True)

        text = path.read_text(encoding="utf-8")
        assert 'version = "7.0.0"' in text
        assert 'version = "1.0.1"' in text
        assert read_manifest(tmp_path).unwrap().version == "1.0.1"

    def test_unchanged_version(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(
            json.dumps({"name": "web", "version": "1.0.0"}), encoding="utf-8"
        )
        manifest = read_manifest(tmp_path).unwrap()
        assert write_version(manifest, "1.0.0") == Ok(False)
