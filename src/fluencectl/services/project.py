"""InitService: scaffold a new Fluence project.

Pipeline: CHECK EMPTY → CONFIGS → SOURCES → FRONTEND (ts/js) → SCHEMAS → NOTIFY
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from fluencectl.domain.errors import ConfigError
from fluencectl.domain.manifests import ALL_KINDS, DEALS, DEPLOYED_DEALS, PROJECT, WORKERS
from fluencectl.domain.manifests.workers import DEFAULT_WORKER_NAME
from fluencectl.infrastructure.filesystem import (
    AQUA_DIR,
    FRONTEND_DIR,
    is_empty_dir,
    write_text_file,
)
from fluencectl.infrastructure.project import Project
from fluencectl.infrastructure.schemas import write_schemas
from fluencectl.infrastructure.templates import render_project_file
from fluencectl.services.result import ServiceResult

if TYPE_CHECKING:
    from fluencectl.domain.names import Network
    from fluencectl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

Template = Literal["minimal", "ts", "js"]
TEMPLATES: tuple[str, ...] = ("minimal", "ts", "js")

COMPILED_AQUA_DIR = f"{FRONTEND_DIR}/src/compiled-aqua"
VSCODE_RECOMMENDATIONS = ["redhat.vscode-yaml", "FluenceLabs.aqua"]

# Export names in @fluencelabs/fluence-network-environment.
_RELAY_EXPORTS: dict[str, str] = {
    "kras": "kras",
    "testnet": "testNet",
    "stage": "stage",
    "local": "local",
}

_JS_DEPENDENCIES: dict[str, str] = {
    "@fluencelabs/js-client": "0.5.4",
    "@fluencelabs/fluence-network-environment": "1.1.2",
}
_TS_DEV_DEPENDENCIES: dict[str, str] = {
    "ts-node": "10.9.1",
    "typescript": "5.0.2",
}
_TS_CONFIG: dict[str, Any] = {
    "compilerOptions": {
        "target": "es2022",
        "module": "es2022",
        "strict": True,
        "skipLibCheck": True,
        "moduleResolution": "nodenext",
    },
    "ts-node": {"esm": True},
}


def _dump_json(data: Any) -> str:
    return json.dumps(data, indent=2) + "\n"


class InitService:
    """Creates the project layout and its initial config files."""

    @staticmethod
    def init_project(
        path: Path,
        *,
        template: str = "minimal",
        network: Network = "kras",
        plugins: PluginManager | None = None,
    ) -> ServiceResult:
        """Initialize a project at *path*.

        Every config file is created from its default template and then
        committed, so it lands on disk at the latest version.
        """
        op = "init_project"
        warnings: list[str] = []

        if template not in TEMPLATES:
            return ServiceResult.failure(
                op,
                "UNKNOWN_TEMPLATE",
                f"Unknown template {template!r}. Available templates: {', '.join(TEMPLATES)}",
            )
        if not is_empty_dir(path):
            return ServiceResult.failure(
                op,
                "PROJECT_NOT_EMPTY",
                f"Directory {path} is not empty. Please, init in an empty directory.",
                detail={"path": str(path)},
            )

        path.mkdir(parents=True, exist_ok=True)
        project = Project(root=path.resolve(), network=network, plugins=plugins)
        try:
            files = _scaffold(project, template)
        except ConfigError as exc:
            return ServiceResult.from_config_error(op, exc)
        except OSError as exc:
            return ServiceResult.failure(
                op,
                "WRITE_FAILED",
                f"Could not write project files: {exc}",
                detail={"path": str(project.root)},
            )

        logger.debug("Initialized %s project at %s", template, project.root)
        if plugins is not None:
            plugins.notify(
                "post_init", warnings, project_path=str(project.root), template=template
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "project_path": str(project.root),
                "template": template,
                "network": network,
                "files_created": sorted(
                    str(f.relative_to(project.root).as_posix()) for f in files
                ),
            },
            warnings=warnings,
        )


def _scaffold(project: Project, template: str) -> list[Path]:
    """CONFIGS → SOURCES → FRONTEND → SCHEMAS; returns the files written."""
    files: list[Path] = []

    # CONFIGS
    worker_context = {"worker_name": DEFAULT_WORKER_NAME}
    for kind, context in (
        (PROJECT, None),
        (WORKERS, worker_context),
        (DEALS, worker_context),
        (DEPLOYED_DEALS, None),
    ):
        handle = project.open(kind, create=True, context=context)
        handle.commit()
        files.append(handle.path)

    # SOURCES
    files.append(
        _write(
            project.path(f"{AQUA_DIR}/main.aqua"),
            render_project_file(
                "main.aqua.j2", {"project_name": project.root.name}, project_root=project.root
            ),
        )
    )
    files.append(
        _write(
            project.path(".gitignore"),
            render_project_file("gitignore.j2", project_root=project.root),
        )
    )
    files.append(
        _write(
            project.path(".vscode/extensions.json"),
            _dump_json({"recommendations": VSCODE_RECOMMENDATIONS}),
        )
    )

    # FRONTEND
    if template != "minimal":
        files.extend(_init_frontend(project, is_js=template == "js"))

    # SCHEMAS
    files.extend(write_schemas(project.root, ALL_KINDS))
    return files


def _write(path: Path, text: str) -> Path:
    write_text_file(path, text)
    return path


def _init_frontend(project: Project, *, is_js: bool) -> list[Path]:
    """Write the JS/TS client skeleton and point Aqua output at it."""
    extension = "js" if is_js else "ts"
    index_name = f"index.{extension}"
    dependencies = dict(_JS_DEPENDENCIES)
    if not is_js:
        dependencies.update(_TS_DEV_DEPENDENCIES)

    package_json = {
        "type": "module",
        "version": "1.0.0",
        "description": "",
        "main": index_name,
        "scripts": {"start": f"{'node' if is_js else 'ts-node'} src/{index_name}"},
        "keywords": ["fluence"],
        "author": "",
        "license": "ISC",
        "dependencies": dependencies,
    }
    files = [
        _write(project.path(f"{FRONTEND_DIR}/package.json"), _dump_json(package_json)),
        _write(
            project.path(f"{FRONTEND_DIR}/src/{index_name}"),
            render_project_file(
                "index.js.j2",
                {"extension": extension, "network": _RELAY_EXPORTS[project.network]},
                project_root=project.root,
            ),
        ),
    ]
    if not is_js:
        files.append(
            _write(project.path(f"{FRONTEND_DIR}/src/tsconfig.json"), _dump_json(_TS_CONFIG))
        )

    fluence_config = project.open(PROJECT)
    if is_js:
        fluence_config.update(aqua_output_js_path=COMPILED_AQUA_DIR)
    else:
        fluence_config.update(aqua_output_ts_path=COMPILED_AQUA_DIR)
    fluence_config.commit()
    return files
