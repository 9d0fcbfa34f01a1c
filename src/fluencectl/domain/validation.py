"""Structural and semantic validation of config documents.

Structural checks run the pydantic schema model for a version; the first
error is translated into a :class:`SchemaValidationError` whose
``field_path`` uses the on-disk keys (``modules.facade.get``,
``deals[0].minWorkers``).  The per-kind semantic check runs only once the
structure is known to be sound.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import ErrorDetails

from fluencectl.domain.errors import ConfigError, SchemaValidationError
from fluencectl.domain.kinds import ConfigKind, declared_version, schema_for

ModelT = TypeVar("ModelT", bound=BaseModel)


def format_location(loc: Sequence[int | str]) -> str:
    """Render a pydantic ``loc`` tuple as a dotted path with list indices.

    Examples:
        >>> format_location(("deals", 0, "minWorkers"))
        'deals[0].minWorkers'
        >>> format_location(())
        ''
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def schema_error_from(exc: ValidationError) -> SchemaValidationError:
    """Convert the first pydantic error into a :class:`SchemaValidationError`.

    A missing property is reported at its parent, the way JSON Schema
    validators report ``required`` violations.
    """
    first: ErrorDetails = exc.errors(include_url=False)[0]
    loc = tuple(first["loc"])
    if first["type"] == "missing" and loc:
        return SchemaValidationError(
            f"missing required property {loc[-1]!r}",
            field_path=format_location(loc[:-1]),
        )
    if first["type"] == "extra_forbidden" and loc:
        return SchemaValidationError(
            f"unknown property {loc[-1]!r}",
            field_path=format_location(loc[:-1]),
        )
    return SchemaValidationError(first["msg"], field_path=format_location(loc))


def validate_structure(schema: type[ModelT], document: Any) -> ModelT:
    """Validate *document* against one schema model.

    Raises:
        SchemaValidationError: On the first structural violation.
    """
    if not isinstance(document, Mapping):
        raise SchemaValidationError(
            f"expected a mapping at the top level, got {type(document).__name__}"
        )
    try:
        return schema.model_validate(dict(document))
    except ValidationError as exc:
        raise schema_error_from(exc) from exc


def check_semantics(kind: ConfigKind[ModelT], value: ModelT) -> None:
    """Run the kind's semantic check on a structurally valid value.

    Raises:
        SemanticValidationError: Raised by the check, with ``field_path`` set.
    """
    if kind.semantic_check is not None:
        kind.semantic_check(value)


def check_document(kind: ConfigKind[ModelT], document: Any) -> ModelT:
    """Validate a latest-version document structurally, then semantically.

    Returns the typed latest-version value.
    """
    if not isinstance(document, Mapping):
        raise SchemaValidationError(
            f"expected a mapping at the top level, got {type(document).__name__}"
        )
    version = declared_version(document)
    schema_for(kind, version)
    if version != kind.latest_version:
        raise SchemaValidationError(
            f"expected version {kind.latest_version}, got {version}; migrate the document first",
            field_path="version",
        )
    value: ModelT = validate_structure(kind.latest, document)
    check_semantics(kind, value)
    return value


def validate_document(kind: ConfigKind[Any], document: Any) -> Literal[True] | str:
    """Validate *document*; return True or a human-readable failure message.

    Never raises for invalid content; the caller decides what to do.
    """
    try:
        check_document(kind, document)
    except ConfigError as exc:
        return str(exc)
    return True
