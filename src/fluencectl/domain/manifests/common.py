"""Shared base model and module properties for manifest schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from fluencectl.domain.names import BYTES_FORMAT, BYTES_PATTERN


class ManifestModel(BaseModel):
    """Base for every manifest schema.

    Frozen, closed (unknown keys are errors) and camelCase on disk.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ModuleOverrides(ManifestModel):
    """Module properties a service (or project) may override."""

    envs: dict[str, str] | None = Field(
        default=None,
        description="Environment variables accessible by the module via std::env::var",
    )
    logger_enabled: bool | None = Field(
        default=None, description="Set true to allow the module to use the Marine SDK logger"
    )
    logging_mask: int | None = Field(default=None, description="Logging targets mask")
    max_heap_size: str | None = Field(
        default=None,
        pattern=BYTES_PATTERN,
        description=(
            f"Max size of the heap that a module can allocate. Format: {BYTES_FORMAT}"
        ),
    )
    mounted_binaries: dict[str, str] | None = Field(
        default=None, description="Binary executables the module is allowed to call"
    )
    volumes: dict[str, str] | None = Field(
        default=None, description="Accessible files and directories with their aliases"
    )
