"""Tests for atomic writes and project path helpers."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from fluencectl.domain.manifests import ALL_KINDS, PROJECT
from fluencectl.infrastructure.filesystem import (
    atomic_write_text,
    create_exclusive,
    is_empty_dir,
    resolve_project_path,
)
from fluencectl.infrastructure.schemas import schema_file_name, write_schemas


class TestAtomicWrite:
    def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "file.yaml"
        atomic_write_text(target, "x: 1\n")
        assert target.read_text() == "x: 1\n"

    def test_replaces_content(self, tmp_path: Path) -> None:
        target = tmp_path / "file.yaml"
        target.write_text("old")
        atomic_write_text(target, "new")
        assert target.read_text() == "new"

    def test_failure_leaves_no_temp_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        target = tmp_path / "file.yaml"
        target.write_text("old")

        def failing_replace(src: str, dst: str) -> None:
            raise OSError("rename failed")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(OSError, match="rename failed"):
            atomic_write_text(target, "new")
        assert target.read_text() == "old"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["file.yaml"]


class TestCreateExclusive:
    def test_creates(self, tmp_path: Path) -> None:
        target = tmp_path / "dir" / "file.yaml"
        create_exclusive(target, "a")
        assert target.read_text() == "a"

    def test_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "file.yaml"
        target.write_text("first")
        with pytest.raises(FileExistsError):
            create_exclusive(target, "second")
        assert target.read_text() == "first"


class TestPaths:
    def test_inside_root(self, tmp_path: Path) -> None:
        assert resolve_project_path(tmp_path, "src/aqua") == tmp_path / "src/aqua"

    def test_escape(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="escapes"):
            resolve_project_path(tmp_path, "../outside")

    def test_is_empty_dir(self, tmp_path: Path) -> None:
        assert is_empty_dir(tmp_path / "missing")
        assert is_empty_dir(tmp_path)
        (tmp_path / "f").write_text("")
        assert not is_empty_dir(tmp_path)
        assert not is_empty_dir(tmp_path / "f")


class TestSchemas:
    def test_schema_file_name(self) -> None:
        assert schema_file_name(PROJECT) == "fluence.json"

    def test_write_schemas(self, tmp_path: Path) -> None:
        written = write_schemas(tmp_path, ALL_KINDS)
        assert len(written) == len(ALL_KINDS)
        document = json.loads((tmp_path / ".fluence/schemas/fluence.json").read_text())
        assert document["$id"] == PROJECT.schema_id(PROJECT.latest_version)
        assert "defaultKeyPairName" in document["properties"]
        assert "aquaOutputTSPath" in document["properties"]
