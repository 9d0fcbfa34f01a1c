"""Tests for project root discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from fluencectl.config.discovery import PROJECT_DIR_ENV_VAR, find_project_root


class TestFindProjectRoot:
    def test_in_root(self, tmp_path: Path) -> None:
        (tmp_path / "fluence.yaml").write_text("version: 1\n")
        assert find_project_root(tmp_path) == tmp_path.resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "fluence.yaml").write_text("version: 1\n")
        deep = tmp_path / "a" / "b" / "c"
        deep.mkdir(parents=True)
        assert find_project_root(deep) == tmp_path.resolve()

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_project_root(tmp_path) is None

    def test_directory_named_like_manifest_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "fluence.yaml").mkdir()
        assert find_project_root(tmp_path) is None

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        project = tmp_path / "proj"
        project.mkdir()
        (project / "fluence.yaml").write_text("version: 1\n")
        monkeypatch.setenv(PROJECT_DIR_ENV_VAR, str(project))
        assert find_project_root(tmp_path) == project.resolve()

    def test_env_var_without_manifest(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "fluence.yaml").write_text("version: 1\n")
        monkeypatch.setenv(PROJECT_DIR_ENV_VAR, str(tmp_path / "empty"))
        assert find_project_root(tmp_path) is None
