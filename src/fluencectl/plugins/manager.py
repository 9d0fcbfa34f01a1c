"""Plugin discovery, loading and hook dispatch.

Two sources feed one pluggy manager:

- distributions exposing a ``fluencectl.plugins`` entry point;
- single-file plugins in the project's ``.fluence/plugins/`` directory.

A broken plugin is logged and skipped; it never stops a command.
"""

from __future__ import annotations

import importlib.metadata
import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any

import pluggy

from fluencectl.plugins.hookspecs import FluencectlHookSpec

if TYPE_CHECKING:
    from fluencectl.services.chain import ChainClient, WorkerUploader

PROJECT_NAME = "fluencectl"
ENTRY_POINT_GROUP = "fluencectl.plugins"
LOCAL_MODULE_PREFIX = "fluencectl_local_plugin_"

logger = logging.getLogger(__name__)


def _is_plugin_class(obj: Any) -> bool:
    """A class with at least one public ``@hookimpl`` method."""
    if not inspect.isclass(obj):
        return False
    marker = f"{PROJECT_NAME}_impl"
    return any(
        getattr(getattr(obj, attr, None), marker, None) is not None
        for attr in dir(obj)
        if not attr.startswith("_")
    )


def _import_file(path: Path) -> ModuleType | None:
    """Import *path* as ``fluencectl_local_plugin_<stem>``; None on failure."""
    module_name = f"{LOCAL_MODULE_PREFIX}{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        logger.warning("Not a loadable plugin file: %s", path)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("Skipping plugin %s: import failed", path, exc_info=True)
        return None
    return module


def _declared_classes(module: ModuleType) -> Iterator[type]:
    """Plugin classes defined (not merely imported) in *module*."""
    for _name, obj in inspect.getmembers(module, _is_plugin_class):
        if obj.__module__ == module.__name__:
            yield obj


class PluginManager:
    """Wraps a pluggy manager with fluencectl's hook specs and providers."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FluencectlHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then project-local ones from *local_dir*.

        Returns the names of every registered plugin.
        """
        self._load_entry_points()
        if local_dir is not None and local_dir.is_dir():
            self._load_directory(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (tests, embedding)."""
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Plugin registered: %s", plugin_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def implements(self, hook_name: str) -> bool:
        """Whether any registered plugin implements *hook_name*."""
        return bool(getattr(self._pm.hook, hook_name).get_hookimpls())

    def list_plugin_names(self) -> list[str]:
        names = (self._pm.get_name(p) for p in self._pm.get_plugins())
        return [n for n in names if n]

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def chain_client(self, network: str) -> ChainClient | None:
        """First chain client offered for *network*, or None."""
        return self._pm.hook.fluencectl_chain_client(network=network)

    def worker_uploader(self, network: str) -> WorkerUploader | None:
        """First worker uploader offered for *network*, or None."""
        return self._pm.hook.fluencectl_worker_uploader(network=network)

    def download(self, url: str, dest_dir: Path) -> Path | None:
        """Ask plugins to fetch *url* into *dest_dir*."""
        return self._pm.hook.fluencectl_download(url=url, dest_dir=dest_dir)

    # ------------------------------------------------------------------
    # Lifecycle notification
    # ------------------------------------------------------------------

    def notify(self, hook_name: str, warnings: list[str], **payload: Any) -> None:
        """Call a lifecycle hook.

        INVARIANT: Plugin failures are warnings, never errors.  A failure is
        appended to *warnings* so the command result reports it.
        """
        caller = getattr(self._pm.hook, hook_name)
        try:
            caller(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_entry_points(self) -> None:
        for entry_point in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            if self._pm.get_plugin(entry_point.name) is not None:
                continue
            try:
                plugin = entry_point.load()
                # Entry points may name a class; hooks need a bound instance.
                if inspect.isclass(plugin):
                    plugin = plugin()
                self.register_plugin(plugin, name=entry_point.name)
            except Exception:
                logger.warning("Skipping plugin entry point %s", entry_point.name, exc_info=True)

    def _load_directory(self, local_dir: Path) -> None:
        """Register every plugin class found in ``*.py`` files of *local_dir*.

        Files whose name starts with ``_`` are helpers and are not imported.
        """
        for path in sorted(local_dir.glob("*.py")):
            if path.name.startswith("_"):
                continue
            module = _import_file(path)
            if module is None:
                continue
            for cls in _declared_classes(module):
                name = f"{module.__name__}.{cls.__name__}"
                try:
                    self.register_plugin(cls(), name=name)
                except Exception:
                    logger.warning("Skipping plugin %s from %s", cls.__name__, path, exc_info=True)
