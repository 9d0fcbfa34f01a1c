"""Config loader and committer.

Pipeline for every open: RESOLVE → (CREATE) → PARSE → VERSION → VALIDATE
(declared version) → MIGRATE → VALIDATE (latest + semantic) → HANDLE.

Two handle shapes come out of the same pipeline:

- :class:`ReadonlyConfig`: field reads only.
- :class:`MutableConfig`: adds :meth:`~MutableConfig.update`, a ``data``
  setter and :meth:`~MutableConfig.commit`, the only write path.

There is no cache: every open reads the file again and yields an
independent copy.  Two mutable handles on the same file race, and the last
commit wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from ruamel.yaml.comments import CommentedMap

from fluencectl.domain.errors import (
    ConfigError,
    NotFound,
    ParseError,
    ReadError,
    SchemaValidationError,
    WriteError,
)
from fluencectl.domain.kinds import (
    ConfigKind,
    declared_version,
    migrate_to_latest,
    schema_for,
)
from fluencectl.domain.validation import check_document, check_semantics, validate_structure
from fluencectl.infrastructure.filesystem import atomic_write_text, create_exclusive
from fluencectl.infrastructure.templates import render_default_config
from fluencectl.infrastructure.yaml_io import dump_yaml, merge_into, parse_yaml, to_plain

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_YAML_SUFFIXES = (".yaml", ".yml")


# ---------------------------------------------------------------------------
# Handles
# ---------------------------------------------------------------------------


class ReadonlyConfig(Generic[ModelT]):
    """Validated, latest-version view of a config file.

    The wrapped model is frozen; this handle has no way to write it back.
    """

    def __init__(
        self,
        kind: ConfigKind[ModelT],
        path: Path,
        data: ModelT,
        document: CommentedMap,
    ) -> None:
        self._kind = kind
        self._path = path
        self._data = data
        self._document = document

    @property
    def kind(self) -> ConfigKind[ModelT]:
        return self._kind

    @property
    def path(self) -> Path:
        return self._path

    @property
    def data(self) -> ModelT:
        return self._data

    def as_dict(self) -> dict[str, Any]:
        """On-disk (camelCase) shape of the current value."""
        return _serialize(self._kind, self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._kind.name!r}, {str(self._path)!r})"


class MutableConfig(ReadonlyConfig[ModelT]):
    """Config handle that can be edited and committed back to its file."""

    @property
    def data(self) -> ModelT:
        return self._data

    @data.setter
    def data(self, value: ModelT) -> None:
        self._data = _revalidate(self._kind, value)

    def update(self, **changes: Any) -> ModelT:
        """Replace top-level fields (by attribute name) and re-validate.

        Returns the new value.

        Raises:
            SchemaValidationError: If the result no longer fits the schema.
        """
        payload = self._data.model_dump(mode="python")
        payload.update(changes)
        self._data = validate_structure(self._kind.latest, payload)
        return self._data

    def commit(self) -> None:
        """Write the current value to :attr:`path`, version forced to latest.

        The value is re-validated (structure and semantics) first; an invalid
        value is never written.

        Raises:
            SchemaValidationError: Structure is invalid.
            SemanticValidationError: A domain rule is violated.
            WriteError: The file could not be replaced.
        """
        payload = _serialize(self._kind, self._data)
        try:
            check_document(self._kind, payload)
        except ConfigError as exc:
            exc.path = self._path
            raise
        merge_into(self._document, payload)
        text = dump_yaml(self._document)
        try:
            atomic_write_text(self._path, text)
        except OSError as exc:
            raise WriteError(f"Could not write config: {exc}", path=self._path) from exc
        logger.debug("Committed %s", self._path)


def _serialize(kind: ConfigKind[Any], value: BaseModel) -> dict[str, Any]:
    payload = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    payload["version"] = kind.latest_version
    return payload


def _revalidate(kind: ConfigKind[ModelT], value: BaseModel) -> ModelT:
    return validate_structure(kind.latest, value.model_dump(mode="python"))


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_config_path(kind: ConfigKind[Any], base: Path) -> Path:
    """Resolve the concrete file path for *kind*.

    For well-known kinds *base* is the project root.  Otherwise *base* is
    either the config file itself or a directory containing ``file_name``.
    """
    if kind.location is not None:
        return base / kind.location
    if base.is_dir() or base.suffix not in _YAML_SUFFIXES:
        return base / kind.file_name
    return base


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _ensure_exists(
    kind: ConfigKind[Any],
    path: Path,
    *,
    create: bool,
    context: Mapping[str, Any] | None,
    project_root: Path | None,
) -> None:
    if path.is_file():
        return
    if not create or kind.template is None:
        raise NotFound(f"No {kind.file_name} found", path=path)
    text = render_default_config(kind, context, project_root=project_root)
    try:
        create_exclusive(path, text)
    except FileExistsError as exc:
        raise WriteError(
            "File was created by another process while initializing it", path=path
        ) from exc
    except OSError as exc:
        raise WriteError(f"Could not create config: {exc}", path=path) from exc
    logger.debug("Created %s from default template", path)


def _read_tree(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFound("Config file disappeared while reading", path=path) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"Invalid UTF-8: {exc}", path=path) from exc
    except OSError as exc:
        raise ReadError(f"Could not read config: {exc}", path=path) from exc
    return parse_yaml(text)


def _load(
    kind: ConfigKind[ModelT],
    base: Path,
    *,
    create: bool,
    context: Mapping[str, Any] | None,
    project_root: Path | None,
) -> tuple[Path, ModelT, CommentedMap]:
    path = resolve_config_path(kind, base)
    try:
        _ensure_exists(kind, path, create=create, context=context, project_root=project_root)
        tree = _read_tree(path)
        if tree is None:
            tree = CommentedMap()
        plain = to_plain(tree)
        # Structural check at the declared version before any migration runs.
        validate_structure(schema_for(kind, declared_version(_as_mapping(plain))), plain)
        latest = migrate_to_latest(kind, plain)
        value = validate_structure(kind.latest, latest)
        check_semantics(kind, value)
    except ConfigError as exc:
        exc.path = path
        raise
    if not isinstance(tree, CommentedMap):
        tree = CommentedMap()
    return path, value, tree


def _as_mapping(document: Any) -> Mapping[str, Any]:
    if not isinstance(document, Mapping):
        raise SchemaValidationError(
            f"expected a mapping at the top level, got {type(document).__name__}"
        )
    return document


def open_config(
    kind: ConfigKind[ModelT],
    base: Path,
    *,
    create: bool = False,
    context: Mapping[str, Any] | None = None,
    project_root: Path | None = None,
) -> MutableConfig[ModelT]:
    """Open a config file for reading and writing.

    Args:
        kind: Config kind descriptor.
        base: Project root for well-known kinds, else file path or directory.
        create: Write the kind's default template if the file is absent.
        context: Parameters for the default template.
        project_root: Project whose ``.fluence/templates`` overrides apply.

    Raises:
        NotFound, ParseError, VersionMismatch, SchemaValidationError,
        SemanticValidationError, WriteError.
    """
    path, value, tree = _load(
        kind, base, create=create, context=context, project_root=project_root
    )
    return MutableConfig(kind, path, value, tree)


def open_readonly_config(
    kind: ConfigKind[ModelT],
    base: Path,
    *,
    create: bool = False,
    context: Mapping[str, Any] | None = None,
    project_root: Path | None = None,
) -> ReadonlyConfig[ModelT]:
    """Open a config file for reading only. Same pipeline as :func:`open_config`."""
    path, value, tree = _load(
        kind, base, create=create, context=context, project_root=project_root
    )
    return ReadonlyConfig(kind, path, value, tree)


def read_declared_version(kind: ConfigKind[Any], base: Path) -> int:
    """Parse a config file and return its embedded version without migrating."""
    path = resolve_config_path(kind, base)
    try:
        if not path.is_file():
            raise NotFound(f"No {kind.file_name} found", path=path)
        return declared_version(_as_mapping(to_plain(_read_tree(path) or {})))
    except ConfigError as exc:
        exc.path = path
        raise
