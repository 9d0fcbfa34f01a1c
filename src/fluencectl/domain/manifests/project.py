"""fluence.yaml: the project manifest.

Version history:

- v0: initial layout with ``keyPairName``.
- v1: ``keyPairName`` renamed to ``defaultKeyPairName``; ``aquaInputPath``
  introduced with a default of ``src/aqua/main.aqua``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from fluencectl.domain.errors import SemanticValidationError
from fluencectl.domain.kinds import ConfigKind
from fluencectl.domain.manifests.common import ManifestModel, ModuleOverrides
from fluencectl.domain.names import validate_aqua_name

PROJECT_FILE_NAME = "fluence.yaml"
DEFAULT_AQUA_INPUT_PATH = "src/aqua/main.aqua"


class ServiceReference(ManifestModel):
    """A service registered in the project."""

    get: str = Field(description="Path to the service directory or URL to its archive")
    override_modules: dict[str, ModuleOverrides] | None = Field(
        default=None, description="Per-module overrides applied on top of service.yaml"
    )


class ProjectConfigV0(ManifestModel):
    version: Literal[0]
    services: dict[str, ServiceReference] | None = None
    relays: str | list[str] | None = Field(
        default=None, description="Network name or list of relay multiaddrs"
    )
    key_pair_name: str | None = None
    aqua_output_ts_path: str | None = Field(default=None, alias="aquaOutputTSPath")
    aqua_output_js_path: str | None = Field(default=None, alias="aquaOutputJSPath")


class ProjectConfigV1(ManifestModel):
    version: Literal[1]
    services: dict[str, ServiceReference] | None = None
    relays: str | list[str] | None = Field(
        default=None, description="Network name or list of relay multiaddrs"
    )
    default_key_pair_name: str | None = Field(
        default=None, description="Key pair used by default for all commands"
    )
    aqua_input_path: str = Field(
        default=DEFAULT_AQUA_INPUT_PATH, description="Path to the main Aqua file or directory"
    )
    aqua_output_ts_path: str | None = Field(default=None, alias="aquaOutputTSPath")
    aqua_output_js_path: str | None = Field(default=None, alias="aquaOutputJSPath")


ProjectConfig = ProjectConfigV1


def migrate_project_v0_to_v1(document: dict[str, Any]) -> dict[str, Any]:
    if "keyPairName" in document:
        document["defaultKeyPairName"] = document.pop("keyPairName")
    document.setdefault("aquaInputPath", DEFAULT_AQUA_INPUT_PATH)
    return document


def check_project(config: ProjectConfig) -> None:
    for name in config.services or {}:
        verdict = validate_aqua_name(name)
        if verdict is not True:
            raise SemanticValidationError(
                f"Invalid service name {name!r}: {verdict}", field_path=f"services.{name}"
            )


PROJECT = ConfigKind[ProjectConfig](
    name="project",
    file_name=PROJECT_FILE_NAME,
    schemas=(ProjectConfigV0, ProjectConfigV1),
    migrations=(migrate_project_v0_to_v1,),
    semantic_check=check_project,
    template="fluence.yaml.j2",
    location=PROJECT_FILE_NAME,
    description="Defines a Fluence project, the services it uses and where Aqua is compiled to",
)
