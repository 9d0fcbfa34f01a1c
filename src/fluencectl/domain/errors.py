"""Config engine error hierarchy.

Every failure of the load/validate/commit pipeline surfaces as one of the
:class:`ConfigError` subclasses below.  Each carries a stable ``code`` used
by the service layer when converting to :class:`ServiceError`, plus the file
path (filled in by the loader) and, where applicable, the offending field.
"""

from __future__ import annotations

from pathlib import Path


class ConfigError(Exception):
    """Base class for all config engine errors."""

    code = "CONFIG_ERROR"

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class NotFound(ConfigError):
    """Config file is absent and creating it was not allowed."""

    code = "NOT_FOUND"


class ParseError(ConfigError):
    """Content is not well-formed YAML."""

    code = "PARSE_ERROR"


class VersionMismatch(ConfigError):
    """Declared version has no schema in the registry."""

    code = "VERSION_MISMATCH"

    def __init__(
        self,
        message: str,
        *,
        declared: int,
        latest: int,
        path: Path | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.declared = declared
        self.latest = latest


class ReadError(ConfigError):
    """Config file exists but could not be read (permissions, I/O)."""

    code = "READ_FAILED"


class FieldError(ConfigError):
    """Validation failure tied to a location; ``field_path`` names it."""

    def __init__(self, message: str, *, field_path: str = "", path: Path | None = None) -> None:
        super().__init__(message, path=path)
        self.field_path = field_path

    def __str__(self) -> str:
        location = self.field_path or "(root)"
        detail = f"{location}: {self.message}"
        if self.path is None:
            return detail
        return f"{self.path}: {detail}"


class SchemaValidationError(FieldError):
    """Structural non-conformance against the version's schema model."""

    code = "SCHEMA_INVALID"


class SemanticValidationError(FieldError):
    """Domain rule violation, raised by a kind's semantic check."""

    code = "SEMANTIC_INVALID"


class WriteError(ConfigError):
    """Persisting a config file failed; previous content is untouched."""

    code = "WRITE_FAILED"
