"""UpgradeService: bring project config files to their latest schema version.

Pipeline: SCAN → MIGRATE (open + commit) → SCHEMAS → REPORT

Loading already migrates in memory; upgrading only makes that permanent by
committing, which also keeps the user's comments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fluencectl.domain.errors import ConfigError
from fluencectl.domain.kinds import ConfigKind, schema_for
from fluencectl.domain.manifests import ALL_KINDS, PROJECT, PROJECT_KINDS, SERVICE
from fluencectl.infrastructure.config_store import read_declared_version, resolve_config_path
from fluencectl.infrastructure.locator import is_url
from fluencectl.infrastructure.schemas import write_schemas
from fluencectl.services.base import BaseService
from fluencectl.services.result import ServiceResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Target:
    kind: ConfigKind[Any]
    base: Path
    path: Path
    current: int

    def describe(self, root: Path) -> dict[str, Any]:
        try:
            file = self.path.relative_to(root).as_posix()
        except ValueError:
            file = str(self.path)
        return {
            "file": file,
            "kind": self.kind.name,
            "current": self.current,
            "latest": self.kind.latest_version,
        }


class UpgradeService(BaseService):
    """Migrates project configs and local service manifests."""

    def _scan(self) -> list[_Target]:
        """Every config file of the project with its declared version.

        Raises:
            ConfigError: A file cannot be read, or declares an unknown version.
        """
        root = self._project.root
        targets: list[_Target] = []
        for kind in PROJECT_KINDS:
            if not self._project.exists(kind):
                continue
            targets.append(self._target(kind, root))

        project = self._project.open_readonly(PROJECT)
        for reference in (project.data.services or {}).values():
            if is_url(reference.get):
                continue
            base = root / reference.get
            if resolve_config_path(SERVICE, base).is_file():
                targets.append(self._target(SERVICE, base))
        return targets

    @staticmethod
    def _target(kind: ConfigKind[Any], base: Path) -> _Target:
        current = read_declared_version(kind, base)
        path = resolve_config_path(kind, base)
        try:
            schema_for(kind, current)
        except ConfigError as exc:
            exc.path = path
            raise
        return _Target(kind=kind, base=base, path=path, current=current)

    def check_pending(self) -> ServiceResult:
        """List config files below their latest version without changing them."""
        op = "upgrade"
        try:
            targets = self._scan()
        except ConfigError as exc:
            return ServiceResult.from_config_error(op, exc)

        root = self._project.root
        pending = [t.describe(root) for t in targets if t.current < t.kind.latest_version]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "checked": [t.describe(root)["file"] for t in targets],
            },
        )

    def apply(self) -> ServiceResult:
        """SCAN → MIGRATE → SCHEMAS → REPORT pipeline."""
        op = "upgrade"
        root = self._project.root
        applied: list[dict[str, Any]] = []
        try:
            targets = self._scan()
            for target in targets:
                if target.current >= target.kind.latest_version:
                    continue
                handle = self._project.open(target.kind, base=target.base)
                handle.commit()
                applied.append(target.describe(root))
                logger.debug(
                    "Upgraded %s from v%d to v%d",
                    target.path,
                    target.current,
                    target.kind.latest_version,
                )
        except ConfigError as exc:
            return ServiceResult.from_config_error(op, exc)

        try:
            schemas = write_schemas(root, ALL_KINDS)
        except OSError as exc:
            return ServiceResult.failure(
                op,
                "WRITE_FAILED",
                f"Configs upgraded but schema files could not be written: {exc}",
                detail={"applied": applied},
            )
        data: dict[str, Any] = {
            "applied_count": len(applied),
            "applied": applied,
            "schemas": [p.relative_to(root).as_posix() for p in schemas],
        }
        if not applied:
            data["message"] = "All config files are up to date"
        return ServiceResult(ok=True, op=op, data=data)
