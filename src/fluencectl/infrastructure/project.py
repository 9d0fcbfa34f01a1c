"""Project: the single dependency injected into every project service.

Binds a project root to the selected network and the plugin manager, and
opens config files relative to that root.  It holds no config state: every
``open`` goes back to disk.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from fluencectl.infrastructure.config_store import (
    MutableConfig,
    ReadonlyConfig,
    open_config,
    open_readonly_config,
)
from fluencectl.infrastructure.filesystem import resolve_project_path
from fluencectl.infrastructure.locator import LocationResolver

if TYPE_CHECKING:
    from fluencectl.domain.kinds import ConfigKind
    from fluencectl.domain.names import Network
    from fluencectl.plugins.manager import PluginManager

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class Project:
    """A Fluence project on disk.

    Attributes:
        root: Directory holding ``fluence.yaml``.
        network: Network selected for this invocation.
        plugins: Loaded plugin manager, or None when plugins are disabled.
    """

    root: Path
    network: Network
    plugins: PluginManager | None = None

    def path(self, relative: str | Path) -> Path:
        return resolve_project_path(self.root, relative)

    def open(
        self,
        kind: ConfigKind[ModelT],
        *,
        base: Path | None = None,
        create: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> MutableConfig[ModelT]:
        """Open *kind* for editing; *base* defaults to the project root."""
        return open_config(
            kind,
            base if base is not None else self.root,
            create=create,
            context=context,
            project_root=self.root,
        )

    def open_readonly(
        self,
        kind: ConfigKind[ModelT],
        *,
        base: Path | None = None,
        create: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> ReadonlyConfig[ModelT]:
        return open_readonly_config(
            kind,
            base if base is not None else self.root,
            create=create,
            context=context,
            project_root=self.root,
        )

    def exists(self, kind: ConfigKind[Any]) -> bool:
        """Whether a well-known config file is present."""
        return kind.location is not None and (self.root / kind.location).is_file()

    def resolver(self) -> LocationResolver:
        """Locator resolver using the plugins' downloader, if any."""
        downloader = None
        if self.plugins is not None and self.plugins.implements("fluencectl_download"):
            downloader = self.plugins.download
        return LocationResolver(self.root, downloader=downloader)
