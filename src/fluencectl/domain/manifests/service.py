"""service.yaml: a Marine service and the modules it consists of."""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field

from fluencectl.domain.errors import SemanticValidationError
from fluencectl.domain.kinds import ConfigKind
from fluencectl.domain.manifests.common import ManifestModel, ModuleOverrides
from fluencectl.domain.names import BYTES_FORMAT, BYTES_PATTERN, validate_aqua_name

SERVICE_FILE_NAME = "service.yaml"
FACADE_MODULE_NAME = "facade"


class ServiceModule(ModuleOverrides):
    """One module of a service."""

    get: str = Field(
        description=(
            "Either path to the module directory or URL to the tar.gz archive "
            "which contains the content of the module directory"
        )
    )


class ServiceModules(ManifestModel):
    """Module map; ``facade`` is mandatory, any other names are allowed."""

    model_config = ConfigDict(extra="allow")

    __pydantic_extra__: dict[str, ServiceModule] = Field(init=False)

    facade: ServiceModule


class ServiceConfigV0(ManifestModel):
    version: Literal[0]
    name: str = Field(description="Service name")
    modules: ServiceModules = Field(
        description="Service must have a facade module; other modules are optional"
    )
    total_memory_limit: str | None = Field(
        default=None,
        pattern=BYTES_PATTERN,
        description=f"Memory limit for all service modules. Format: {BYTES_FORMAT}",
    )

    def module_names(self) -> list[str]:
        """Facade first, then the other modules in file order."""
        return [FACADE_MODULE_NAME, *(self.modules.model_extra or {})]


ServiceConfig = ServiceConfigV0


def check_service(config: ServiceConfig) -> None:
    verdict = validate_aqua_name(config.name)
    if verdict is not True:
        raise SemanticValidationError(
            f"Invalid service name {config.name!r}: {verdict}", field_path="name"
        )


SERVICE = ConfigKind[ServiceConfig](
    name="service",
    file_name=SERVICE_FILE_NAME,
    schemas=(ServiceConfigV0,),
    semantic_check=check_service,
    template="service.yaml.j2",
    description=(
        "Defines a Marine service, most importantly the modules that the service consists of"
    ),
)
