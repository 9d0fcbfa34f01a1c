"""CheckService: validate every config file of a project.

Each file is loaded through the normal pipeline (so migration and both
validation stages run), then cross-file references are checked:
workers name registered services, and deals name defined workers.
Nothing is written.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fluencectl.domain.errors import ConfigError, FieldError
from fluencectl.domain.manifests import DEALS, PROJECT, PROJECT_KINDS, SERVICE, WORKERS
from fluencectl.infrastructure.config_store import read_declared_version
from fluencectl.infrastructure.locator import is_url
from fluencectl.services.base import BaseService
from fluencectl.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _issue(
    category: str,
    severity: str,
    file: str,
    message: str,
    *,
    field: str | None = None,
) -> dict[str, Any]:
    issue: dict[str, Any] = {
        "category": category,
        "severity": severity,
        "file": file,
        "message": message,
    }
    if field:
        issue["field"] = field
    return issue


class CheckService(BaseService):
    """Read-only integrity check of a project's config files."""

    def _relative(self, path: Path | None) -> str:
        if path is None:
            return ""
        try:
            return path.relative_to(self._project.root).as_posix()
        except ValueError:
            return str(path)

    def _error_issue(self, category: str, exc: ConfigError) -> dict[str, Any]:
        field = exc.field_path if isinstance(exc, FieldError) else None
        message = exc.message
        if field:
            message = f"{field}: {message}"
        return _issue(category, "error", self._relative(exc.path), message, field=field)

    def check(self) -> ServiceResult:
        """Validate configs and references; fails when any error is found."""
        op = "check"
        issues: list[dict[str, Any]] = []
        loaded: dict[str, Any] = {}
        checked: list[str] = []

        # CONFIGS
        for kind in PROJECT_KINDS:
            if not self._project.exists(kind):
                if kind is PROJECT:
                    issues.append(
                        _issue("config", "error", kind.file_name, "Project manifest is missing")
                    )
                continue
            checked.append(kind.location or kind.file_name)
            try:
                handle = self._project.open_readonly(kind)
                declared = read_declared_version(kind, self._project.root)
            except ConfigError as exc:
                issues.append(self._error_issue("config", exc))
                continue
            loaded[kind.name] = handle.data
            if declared < kind.latest_version:
                issues.append(
                    _issue(
                        "version",
                        "warning",
                        self._relative(handle.path),
                        f"Declares version {declared}, latest is {kind.latest_version}; "
                        "run `fluencectl upgrade`",
                        field="version",
                    )
                )

        # SERVICES
        project = loaded.get(PROJECT.name)
        registered = set((project.services or {}) if project is not None else ())
        if project is not None:
            for name, reference in (project.services or {}).items():
                if is_url(reference.get):
                    continue
                base = self._project.root / reference.get
                try:
                    service = self._project.open_readonly(SERVICE, base=base)
                except ConfigError as exc:
                    issues.append(self._error_issue("service", exc))
                    continue
                checked.append(self._relative(service.path))
                if service.data.name != name:
                    issues.append(
                        _issue(
                            "service",
                            "warning",
                            self._relative(service.path),
                            f"Registered as {name!r} but named {service.data.name!r}",
                            field="name",
                        )
                    )

        # REFERENCES
        workers = loaded.get(WORKERS.name)
        if workers is not None and project is not None:
            for worker_name, definition in workers.workers.items():
                for service_name in definition.services:
                    if service_name not in registered:
                        issues.append(
                            _issue(
                                "reference",
                                "error",
                                WORKERS.file_name,
                                f"Worker {worker_name!r} uses unregistered service "
                                f"{service_name!r}",
                                field=f"workers.{worker_name}.services",
                            )
                        )
        deals = loaded.get(DEALS.name)
        if deals is not None:
            defined = set(workers.workers) if workers is not None else set()
            for index, deal in enumerate(deals.deals):
                if deal.worker_name not in defined:
                    issues.append(
                        _issue(
                            "reference",
                            "error",
                            DEALS.file_name,
                            f"Deal references unknown worker {deal.worker_name!r}",
                            field=f"deals[{index}].workerName",
                        )
                    )

        errors = sum(1 for i in issues if i["severity"] == "error")
        logger.debug("Checked %d file(s): %d issue(s)", len(checked), len(issues))
        if errors:
            return ServiceResult.failure(
                op,
                "CHECK_FAILED",
                f"{errors} error(s) found in project configs",
                detail={"issues": issues, "count": len(issues)},
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"issues": issues, "count": len(issues), "checked": checked},
        )
