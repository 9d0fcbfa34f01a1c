"""Command: project initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from fluencectl.commands._base import FluenceCommand
from fluencectl.services.project import TEMPLATES

if TYPE_CHECKING:
    from fluencectl.commands._context import AppContext

_INIT_EXAMPLES = """\
  fluencectl init
  fluencectl init my-project --template ts
  fluencectl --env testnet init . --template minimal
  fluencectl --no-interact --json init /tmp/project"""


@click.command("init", cls=FluenceCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=None)
@click.option(
    "-t",
    "--template",
    type=click.Choice(TEMPLATES, case_sensitive=False),
    default=None,
    help="Project template.",
)
@click.pass_obj
def init_cmd(app: AppContext, path: str | None, template: str | None) -> None:
    """Initialize a new Fluence project."""
    interactive = app.settings.interactive

    if path is None:
        path = (
            click.prompt(
                "Project path (press enter to init in the current directory)",
                default=".",
                err=True,
            )
            if interactive
            else "."
        )

    if template is None:
        template = (
            click.prompt(
                "Template",
                type=click.Choice(TEMPLATES, case_sensitive=False),
                default="minimal",
                err=True,
            )
            if interactive
            else "minimal"
        )

    from fluencectl.services.project import InitService

    project_path = Path(path)
    if not project_path.is_absolute():
        project_path = app.settings.cwd / project_path

    app.emit(
        InitService.init_project(
            project_path.resolve(),
            template=template.lower(),
            network=app.settings.env,
            plugins=app.plugins,
        )
    )
