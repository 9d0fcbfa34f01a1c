"""Shared pytest fixtures and test helpers for fluencectl tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from fluencectl.infrastructure.project import Project
from fluencectl.plugins import PluginManager, hookimpl
from fluencectl.services.chain import WorkerSpec

# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------


class FakeChainClient:
    """Records chain calls; deal addresses are derived from a counter."""

    def __init__(self) -> None:
        self.created: list[dict[str, Any]] = []
        self.updated: list[dict[str, Any]] = []
        self.collateral: list[list[str]] = []
        self.rewards: list[list[str]] = []
        self.fail_with: Exception | None = None

    def create_deal(self, *, app_cid: str, min_workers: int, target_workers: int) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.created.append(
            {"app_cid": app_cid, "min_workers": min_workers, "target_workers": target_workers}
        )
        return f"0x{len(self.created):040x}"

    def update_deal(self, *, deal_address: str, app_cid: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.updated.append({"deal_address": deal_address, "app_cid": app_cid})

    def withdraw_collateral(self, commitment_ids: Sequence[str]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.collateral.append(list(commitment_ids))

    def withdraw_rewards(self, commitment_ids: Sequence[str]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.rewards.append(list(commitment_ids))


class FakeUploader:
    """Returns a fake definition CID per worker and remembers what it saw."""

    def __init__(self) -> None:
        self.uploads: list[list[WorkerSpec]] = []

    def upload(self, workers: Sequence[WorkerSpec]) -> Mapping[str, str]:
        self.uploads.append(list(workers))
        return {w.name: f"bafy{w.name.lower()}{len(self.uploads)}" for w in workers}


class FakeChainPlugin:
    """Plugin offering the fake chain client and uploader for every network."""

    def __init__(self, chain: FakeChainClient, uploader: FakeUploader) -> None:
        self.chain = chain
        self.uploader = uploader
        self.networks: list[str] = []

    @hookimpl
    def fluencectl_chain_client(self, network: str) -> FakeChainClient:
        self.networks.append(network)
        return self.chain

    @hookimpl
    def fluencectl_worker_uploader(self, network: str) -> FakeUploader:
        return self.uploader


# Local plugin dropped into .fluence/plugins/ for CLI tests.
LOCAL_CHAIN_PLUGIN_SRC = """\
import hashlib

import pluggy

hookimpl = pluggy.HookimplMarker("fluencectl")


class _Chain:
    def create_deal(self, *, app_cid, min_workers, target_workers):
        return "0x" + hashlib.sha1(app_cid.encode()).hexdigest()

    def update_deal(self, *, deal_address, app_cid):
        pass

    def withdraw_collateral(self, commitment_ids):
        pass

    def withdraw_rewards(self, commitment_ids):
        pass


class _Uploader:
    def upload(self, workers):
        return {w.name: "bafy" + w.name.lower() for w in workers}


class LocalChainPlugin:
    @hookimpl
    def fluencectl_chain_client(self, network):
        return _Chain()

    @hookimpl
    def fluencectl_worker_uploader(self, network):
        return _Uploader()
"""


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's FLUENCE_* variables out of every test."""
    for var in ("FLUENCE_ENV", "FLUENCE_PROJECT_DIR", "FLUENCE_PROJECT_ROOT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """CLI invocations reconfigure logging; restore root logger state."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    fl = logging.getLogger("fluencectl")
    fl_level = fl.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    fl.setLevel(fl_level)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def chain_client() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def chain_plugin(chain_client: FakeChainClient, uploader: FakeUploader) -> FakeChainPlugin:
    return FakeChainPlugin(chain_client, uploader)


@pytest.fixture
def plugins(chain_plugin: FakeChainPlugin) -> PluginManager:
    """Plugin manager with only the fake chain plugin registered."""
    pm = PluginManager()
    pm.register_plugin(chain_plugin, name="fake-chain")
    return pm


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Freshly initialized minimal project.

    This is the single source of truth for the project layout used by
    service and command tests.
    """
    from fluencectl.services.project import InitService

    root = tmp_path / "proj"
    result = InitService.init_project(root, template="minimal", network="local")
    assert result.ok, result.error
    return root


@pytest.fixture
def project(project_root: Path, plugins: PluginManager) -> Project:
    """Project bound to the ``local`` network with the fake chain plugin."""
    return Project(root=project_root.resolve(), network="local", plugins=plugins)


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD into an initialized project with the local chain plugin.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    plugin_dir = project_root / ".fluence" / "plugins"
    plugin_dir.mkdir(parents=True, exist_ok=True)
    (plugin_dir / "local_chain.py").write_text(LOCAL_CHAIN_PLUGIN_SRC)
    monkeypatch.chdir(project_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def _write_service(
    directory: Path,
    name: str,
    *,
    modules: Mapping[str, str] | None = None,
    version: int = 0,
) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    lines = [f"version: {version}", f"name: {name}", "modules:", "  facade:", "    get: facade"]
    for module, get in (modules or {}).items():
        lines += [f"  {module}:", f"    get: {get}"]
    path = directory / "service.yaml"
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def write_service() -> Callable[..., Path]:
    """Factory writing a minimal valid ``service.yaml``; returns its path."""
    return _write_service
