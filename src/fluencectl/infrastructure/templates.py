"""Jinja2 template loading and default config generation.

Packaged templates live in ``fluencectl/templates/<group>/``.  A project may
override any of them by dropping a file with the same name into
``.fluence/templates/<group>/`` (or ``.fluence/templates/``).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
)

from fluencectl.domain.kinds import ConfigKind


def _yaml_quote(value: Any) -> str:
    """Render *value* as a double-quoted YAML scalar."""
    return json.dumps(str(value), ensure_ascii=False)


def build_template_environment(group: str, *, project_root: Path | None = None) -> Environment:
    """Build a Jinja2 environment with project overrides before packaged defaults.

    Undefined variables are errors: the generator only ever receives fully
    resolved parameters and must never emit a half-filled file.
    """
    loaders: list[BaseLoader] = []
    if project_root is not None:
        template_root = project_root / ".fluence" / "templates"
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("fluencectl", f"templates/{group}"))
    env = Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        undefined=StrictUndefined,
        autoescape=False,
    )
    env.filters["yaml_quote"] = _yaml_quote
    return env


def render_default_config(
    kind: ConfigKind[Any],
    context: Mapping[str, Any] | None = None,
    *,
    project_root: Path | None = None,
) -> str:
    """Render the default file content for *kind*.

    Raises:
        ValueError: If *kind* has no default template.
    """
    if kind.template is None:
        msg = f"{kind.file_name} has no default template"
        raise ValueError(msg)
    env = build_template_environment("configs", project_root=project_root)
    return env.get_template(kind.template).render(**dict(context or {}))


def render_project_file(
    name: str,
    context: Mapping[str, Any] | None = None,
    *,
    project_root: Path | None = None,
) -> str:
    """Render a non-config scaffolding file (``.gitignore``, ``main.aqua`` ...)."""
    env = build_template_environment("project", project_root=project_root)
    return env.get_template(name).render(**dict(context or {}))
