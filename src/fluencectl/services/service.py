"""ServiceManifestService: create and register Marine services.

``new`` writes a fresh ``service.yaml`` from the default template; ``add``
reads an existing one (local or downloaded) without modifying it.  Both
register the service in ``fluence.yaml`` and on the default worker.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from fluencectl.domain.errors import ConfigError
from fluencectl.domain.manifests import PROJECT, SERVICE, WORKERS
from fluencectl.domain.manifests.project import ServiceReference
from fluencectl.domain.manifests.service import SERVICE_FILE_NAME
from fluencectl.domain.manifests.workers import DEFAULT_WORKER_NAME, WorkerDefinition
from fluencectl.domain.names import validate_aqua_name
from fluencectl.infrastructure.filesystem import SERVICES_DIR
from fluencectl.infrastructure.locator import is_url
from fluencectl.services.base import BaseService
from fluencectl.services.result import ServiceResult

logger = logging.getLogger(__name__)

DEFAULT_FACADE_PATH = "modules/facade"


class ServiceManifestService(BaseService):
    """Registers services in a project."""

    def new(self, name: str, *, path: Path | None = None) -> ServiceResult:
        """Create ``service.yaml`` for *name* and register it."""
        op = "service_new"
        verdict = validate_aqua_name(name)
        if verdict is not True:
            return ServiceResult.failure(
                op, "INVALID_NAME", f"Invalid service name {name!r}: {verdict}"
            )

        service_dir = path if path is not None else self._project.path(f"{SERVICES_DIR}/{name}")
        if (service_dir / SERVICE_FILE_NAME).exists():
            return ServiceResult.failure(
                op,
                "SERVICE_EXISTS",
                f"{service_dir / SERVICE_FILE_NAME} already exists",
                detail={"path": str(service_dir / SERVICE_FILE_NAME)},
            )

        try:
            if self._is_registered(name):
                return _already_registered(op, name)
            handle = self._project.open_readonly(
                SERVICE,
                base=service_dir,
                create=True,
                context={"name": name, "facade_path": DEFAULT_FACADE_PATH},
            )
            workers = self._register(name, self._reference_for(service_dir))
        except ConfigError as exc:
            return ServiceResult.from_config_error(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": name,
                "path": str(handle.path),
                "modules": handle.data.module_names(),
                "workers": workers,
            },
        )

    def add(self, locator: str, *, name: str | None = None) -> ServiceResult:
        """Register the service found at *locator* (path or URL)."""
        op = "service_add"
        try:
            local = self._project.resolver().resolve(locator)
            manifest = self._project.open_readonly(SERVICE, base=local)
            service_name = name or manifest.data.name
            verdict = validate_aqua_name(service_name)
            if verdict is not True:
                return ServiceResult.failure(
                    op, "INVALID_NAME", f"Invalid service name {service_name!r}: {verdict}"
                )
            if self._is_registered(service_name):
                return _already_registered(op, service_name)
            get = locator if is_url(locator) else self._reference_for(manifest.path.parent)
            workers = self._register(service_name, get)
        except ConfigError as exc:
            return ServiceResult.from_config_error(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": service_name,
                "get": get,
                "path": str(manifest.path),
                "modules": manifest.data.module_names(),
                "workers": workers,
            },
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reference_for(self, service_dir: Path) -> str:
        """Path stored in ``fluence.yaml``: relative to the project root."""
        return Path(os.path.relpath(service_dir.resolve(), self._project.root)).as_posix()

    def _is_registered(self, name: str) -> bool:
        project = self._project.open_readonly(PROJECT)
        return name in (project.data.services or {})

    def _register(self, name: str, get: str) -> list[str]:
        """Add *name* to fluence.yaml and the default worker; returns worker names."""
        project = self._project.open(PROJECT)
        services = dict(project.data.services or {})
        services[name] = ServiceReference(get=get)
        project.update(services=services)
        project.commit()
        logger.debug("Registered service %s -> %s", name, get)

        if not self._project.exists(WORKERS):
            return []
        workers_config = self._project.open(WORKERS)
        workers = dict(workers_config.data.workers)
        default = workers.get(DEFAULT_WORKER_NAME)
        if default is None:
            return []
        if name not in default.services:
            workers[DEFAULT_WORKER_NAME] = WorkerDefinition(services=[*default.services, name])
            workers_config.update(workers=workers)
            workers_config.commit()
        return [DEFAULT_WORKER_NAME]


def _already_registered(op: str, name: str) -> ServiceResult:
    return ServiceResult.failure(
        op,
        "SERVICE_EXISTS",
        f"Service {name!r} is already registered in fluence.yaml",
        detail={"field": f"services.{name}"},
    )
