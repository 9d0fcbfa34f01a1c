"""Config kind descriptors, schema registry and migration chain.

A :class:`ConfigKind` is a plain value describing one family of config files:
its canonical file name, the ordered tuple of schema versions, the migrations
between them, an optional semantic validator, an optional default template,
and where the file lives.  The engine functions in this module and in
:mod:`fluencectl.infrastructure.config_store` are kind-agnostic.

INVARIANT: ``schemas[k]`` declares ``version: Literal[k]`` and
``migrations[k]`` turns a version-``k`` document into version ``k + 1``.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, get_args

from pydantic import BaseModel

from fluencectl.domain.errors import SchemaValidationError, VersionMismatch

logger = logging.getLogger(__name__)

SCHEMA_BASE_URL = "https://fluence.dev/schemas"

ModelT = TypeVar("ModelT", bound=BaseModel)

# A pure transform over the on-disk (camelCase) shape of one version.
Migration = Callable[[dict[str, Any]], dict[str, Any]]
SemanticCheck = Callable[[Any], None]


@dataclass(frozen=True)
class ConfigKind(Generic[ModelT]):
    """Descriptor for one config kind.

    Attributes:
        name: Short identifier (``"service"``, ``"deals"`` ...).
        file_name: Canonical file name, used when the caller passes a directory.
        schemas: Schema models ordered by version, index == version.
        migrations: ``len(schemas) - 1`` pure migration functions.
        semantic_check: Optional domain rule check run after structural
            validation. Raises :class:`SemanticValidationError` naming the
            offending field.
        template: Name of the default Jinja2 template, or None when the kind
            cannot be created from scratch.
        location: Project-relative path for well-known files; None when the
            caller supplies the path (or a directory containing ``file_name``).
        description: One-line summary used in schema documents.
    """

    name: str
    file_name: str
    schemas: tuple[type[BaseModel], ...]
    migrations: tuple[Migration, ...] = ()
    semantic_check: SemanticCheck | None = None
    template: str | None = None
    location: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.schemas:
            msg = f"Config kind {self.name!r} declares no schemas"
            raise ValueError(msg)
        if len(self.migrations) != len(self.schemas) - 1:
            msg = (
                f"Config kind {self.name!r} has {len(self.schemas)} schemas "
                f"but {len(self.migrations)} migrations"
            )
            raise ValueError(msg)
        for expected, schema in enumerate(self.schemas):
            field = schema.model_fields.get("version")
            if field is None or get_args(field.annotation) != (expected,):
                msg = f"{schema.__name__} must declare version: Literal[{expected}]"
                raise ValueError(msg)

    @property
    def latest_version(self) -> int:
        return len(self.schemas) - 1

    @property
    def latest(self) -> type[ModelT]:
        """Schema model of the latest version."""
        return self.schemas[-1]  # type: ignore[return-value]

    def schema_id(self, version: int) -> str:
        """Stable identifier of the schema document for *version*."""
        return f"{SCHEMA_BASE_URL}/{self.file_name}/v{version}"

    def schema_document(self, version: int | None = None) -> dict[str, Any]:
        """JSON Schema document for *version* (default: latest)."""
        if version is None:
            version = self.latest_version
        schema = schema_for(self, version)
        document = schema.model_json_schema(by_alias=True)
        document["$id"] = self.schema_id(version)
        document["title"] = self.file_name
        if self.description:
            document["description"] = self.description
        return document


# ---------------------------------------------------------------------------
# Schema registry
# ---------------------------------------------------------------------------


def schema_for(kind: ConfigKind[Any], version: int) -> type[BaseModel]:
    """Return the schema model for *version*.

    Raises:
        VersionMismatch: If *kind* has no schema for *version*.
    """
    if not 0 <= version <= kind.latest_version:
        if version > kind.latest_version:
            hint = "it was written by a newer version of fluencectl"
        else:
            hint = "versions below 0 do not exist"
        msg = (
            f"Unsupported {kind.file_name} version {version} "
            f"(supported: 0..{kind.latest_version}); {hint}"
        )
        raise VersionMismatch(msg, declared=version, latest=kind.latest_version)
    return kind.schemas[version]


def declared_version(document: Mapping[str, Any]) -> int:
    """Read the embedded ``version`` field of a parsed document.

    The embedded field is the only authority for schema selection.
    """
    if "version" not in document:
        raise SchemaValidationError("missing required property 'version'")
    version = document["version"]
    # bool is an int subclass; `version: true` is malformed, not version 1.
    if isinstance(version, bool) or not isinstance(version, int):
        raise SchemaValidationError(
            f"must be an integer, got {version!r}", field_path="version"
        )
    return version


# ---------------------------------------------------------------------------
# Migration chain
# ---------------------------------------------------------------------------


def migrate(
    kind: ConfigKind[Any], document: Mapping[str, Any], from_version: int
) -> dict[str, Any]:
    """Apply the single migration step ``from_version -> from_version + 1``.

    The migration function receives a deep copy so the input is never
    mutated; the result is stamped with the new version by the engine.
    """
    schema_for(kind, from_version)
    if from_version == kind.latest_version:
        msg = f"{kind.file_name} version {from_version} is already the latest"
        raise ValueError(msg)
    step = kind.migrations[from_version]
    migrated = step(copy.deepcopy(dict(document)))
    migrated["version"] = from_version + 1
    return migrated


def migrate_to_latest(kind: ConfigKind[Any], document: Mapping[str, Any]) -> dict[str, Any]:
    """Run the chain from the document's declared version up to latest.

    An already-latest document is returned unchanged.
    """
    version = declared_version(document)
    schema_for(kind, version)
    current = dict(document)
    while version < kind.latest_version:
        current = migrate(kind, current, version)
        logger.debug("Migrated %s from v%d to v%d", kind.file_name, version, version + 1)
        version += 1
    return current
