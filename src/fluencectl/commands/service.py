"""Command group: service manifests (new, add)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from fluencectl.commands._base import FluenceGroup

if TYPE_CHECKING:
    from fluencectl.commands._context import AppContext


@click.group(
    cls=FluenceGroup,
    examples="""\
  fluencectl service new myService
  fluencectl service add ./vendor/otherService
  fluencectl service add https://example.com/service.tar.gz --name remote""",
)
def service() -> None:
    """Create and register services."""


@service.command(
    examples="""\
  fluencectl service new myService
  fluencectl service new myService --path services/custom
  fluencectl --json service new myService"""
)
@click.argument("name")
@click.option(
    "--path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Service directory (default: src/services/<name>).",
)
@click.pass_obj
def new(app: AppContext, name: str, path: Path | None) -> None:
    """Create a service manifest and add it to the project."""
    from fluencectl.services.service import ServiceManifestService

    project = app.project
    if path is not None and not path.is_absolute():
        path = app.settings.cwd / path
    app.emit(ServiceManifestService(project).new(name, path=path))


@service.command(
    examples="""\
  fluencectl service add ./vendor/otherService
  fluencectl service add ./vendor/otherService/service.yaml --name renamed
  fluencectl service add https://example.com/service.tar.gz"""
)
@click.argument("locator")
@click.option("--name", default=None, help="Name to register the service under.")
@click.pass_obj
def add(app: AppContext, locator: str, name: str | None) -> None:
    """Add an existing service (path or URL) to the project."""
    from fluencectl.infrastructure.locator import is_url
    from fluencectl.services.service import ServiceManifestService

    project = app.project
    if not is_url(locator) and not Path(locator).is_absolute():
        locator = str(app.settings.cwd / locator)
    app.emit(ServiceManifestService(project).add(locator, name=name))
