"""workers.yaml: which services each worker runs."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from fluencectl.domain.errors import SemanticValidationError
from fluencectl.domain.kinds import ConfigKind
from fluencectl.domain.manifests.common import ManifestModel
from fluencectl.domain.names import validate_aqua_name

WORKERS_FILE_NAME = "workers.yaml"
DEFAULT_WORKER_NAME = "defaultWorker"


class WorkerDefinition(ManifestModel):
    services: list[str] = Field(
        default_factory=list, description="Names of services from fluence.yaml"
    )


class WorkersConfigV0(ManifestModel):
    version: Literal[0]
    workers: dict[str, WorkerDefinition] = Field(default_factory=dict)


WorkersConfig = WorkersConfigV0


def check_workers(config: WorkersConfig) -> None:
    for name in config.workers:
        verdict = validate_aqua_name(name)
        if verdict is not True:
            raise SemanticValidationError(
                f"Invalid worker name {name!r}: {verdict}", field_path=f"workers.{name}"
            )


WORKERS = ConfigKind[WorkersConfig](
    name="workers",
    file_name=WORKERS_FILE_NAME,
    schemas=(WorkersConfigV0,),
    semantic_check=check_workers,
    template="workers.yaml.j2",
    location=WORKERS_FILE_NAME,
    description="Defines workers and the services deployed on each of them",
)
